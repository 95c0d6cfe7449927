"""
Report generation and output functions for stepspack_cleaner.

Handles the JSON report and the human-readable summary of a cleaning run.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from .reconciler import OUTCOME_DELETED, OUTCOME_FAILED, OUTCOME_MISSING, extract_step_id

if TYPE_CHECKING:
    from stepspack_cleaner.cleaner import CleanReport
    from stepspack_cleaner.reconciler import ReconcileResult

OUTCOME_PLANNED = "planned"


def _row(path: Path, outcome: str, error: Exception | None = None) -> dict[str, str | None]:
    return {
        "path": str(path),
        "step_id": extract_step_id(path.name, path.suffix.lstrip(".")),
        "outcome": outcome,
        "error": str(error) if error else None,
    }


def result_rows(result: ReconcileResult) -> list[dict[str, str | None]]:
    """Return one report row per orphan path in ``result``."""
    rows = [_row(path, OUTCOME_DELETED) for path in result.deleted]
    rows.extend(_row(path, OUTCOME_MISSING) for path in result.missing)
    rows.extend(_row(path, OUTCOME_FAILED, exc) for path, exc in result.failed)
    return rows


def planned_rows(paths: Iterable[Path]) -> list[dict[str, str | None]]:
    """Return report rows for a dry run."""
    return [_row(path, OUTCOME_PLANNED) for path in paths]


def write_report(rows: list[dict[str, str | None]], *, json_path: Path | None) -> None:
    """Write report rows to a JSON file."""
    if json_path:
        json_path.parent.mkdir(parents=True, exist_ok=True)
        json_path.write_text(json.dumps(rows, indent=2))


def print_summary(report: CleanReport) -> None:
    """Print what a cleaning run did."""
    if not report.ran or report.orphans is None:
        print(f"Nothing to clean for steps pack {report.steps_pack}.")
        return

    result = report.orphans
    if result.listing_error is not None:
        print(f"Could not read {result.directory}: {result.listing_error}")
    counts = result.summary()
    print(
        f"Steps pack {report.steps_pack}: deleted={counts['deleted']} "
        f"missing={counts['missing']} failed={counts['failed']} kept={counts['kept']}"
    )
    for path, exc in result.failed:
        print(f"  failed {path}: {exc}")


def print_plan(steps_pack: str, paths: list[Path]) -> None:
    """Print the orphans a dry run found."""
    print(f"Identified {len(paths)} orphan step file(s) in steps pack {steps_pack}:")
    for path in paths:
        print(f"- {path}")
