"""
Orphan reconciliation for generated step files.

Lists a generated directory, keeps only ``step-<id>.<ext>`` files, diffs the
embedded ids against the valid step ids, and deletes the leftovers best-effort.
Listing and deletion failures are logged and collected, never raised.
"""

from __future__ import annotations

import logging
import os
import re
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from .config import DEFAULT_EXTENSION

OUTCOME_DELETED = "deleted"
OUTCOME_MISSING = "missing"
OUTCOME_FAILED = "failed"


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation pass over a generated directory."""

    directory: Path
    deleted: list[Path] = field(default_factory=list)
    missing: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, OSError]] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    listing_error: OSError | None = None

    @property
    def orphans(self) -> list[Path]:
        """Every orphan path that was acted upon, whatever the outcome."""
        return [*self.deleted, *self.missing, *(path for path, _ in self.failed)]

    @property
    def ok(self) -> bool:
        return not self.failed and self.listing_error is None

    def summary(self) -> dict[str, int]:
        return {
            "deleted": len(self.deleted),
            "missing": len(self.missing),
            "failed": len(self.failed),
            "kept": len(self.kept),
        }


def step_filename_pattern(extension: str = DEFAULT_EXTENSION) -> re.Pattern[str]:
    """Return the anchored, case-insensitive ``step-<id>.<ext>`` pattern."""
    return re.compile(rf"^step-([a-z0-9]+)\.{re.escape(extension)}$", re.IGNORECASE)


def extract_step_id(filename: str, extension: str = DEFAULT_EXTENSION) -> str | None:
    """Return the id embedded in a generated filename, or None if it does not match."""
    match = step_filename_pattern(extension).match(filename)
    if not match:
        return None
    return match.group(1)


def list_step_files(
    directory: Path, extension: str = DEFAULT_EXTENSION
) -> tuple[list[str], OSError | None]:
    """List generated step filenames in ``directory``.

    An unreadable or vanished directory yields no candidates, so nothing is deleted
    when the directory state cannot be observed.
    """
    try:
        names = os.listdir(directory)
    except OSError as exc:
        logging.error("Failed to read directory %s: %s", directory, exc)
        return [], exc
    pattern = step_filename_pattern(extension)
    return [name for name in names if pattern.match(name)], None


def find_orphans(
    filenames: Iterable[str],
    valid_ids: Iterable[str],
    *,
    extension: str = DEFAULT_EXTENSION,
    ignore_case: bool = False,
) -> tuple[list[str], list[str]]:
    """Split candidate filenames into orphan filenames and ids that still have a step.

    Ids are compared literally against ``valid_ids`` unless ``ignore_case`` is set.
    """
    if ignore_case:
        valid = {step_id.casefold() for step_id in valid_ids}
    else:
        valid = set(valid_ids)

    orphans: list[str] = []
    kept: list[str] = []
    for filename in filenames:
        step_id = extract_step_id(filename, extension)
        if step_id is None:
            continue
        key = step_id.casefold() if ignore_case else step_id
        if key in valid:
            kept.append(step_id)
        else:
            orphans.append(filename)
    return orphans, kept


def delete_orphan(path: Path) -> tuple[str, OSError | None]:
    """Delete a single orphan file, returning its outcome and any error."""
    try:
        path.unlink()
    except FileNotFoundError as exc:
        logging.warning("File already missing: %s", path)
        return OUTCOME_MISSING, exc
    except OSError as exc:
        logging.error("Failed to delete %s: %s", path, exc)
        return OUTCOME_FAILED, exc
    logging.info("Deleted orphan step file: %s", path)
    return OUTCOME_DELETED, None


def _record(result: ReconcileResult, path: Path, outcome: str, error: OSError | None) -> None:
    if outcome == OUTCOME_DELETED:
        result.deleted.append(path)
    elif outcome == OUTCOME_MISSING:
        result.missing.append(path)
    elif error is not None:
        result.failed.append((path, error))


def delete_orphans(
    paths: Sequence[Path], result: ReconcileResult, *, max_workers: int = 1
) -> ReconcileResult:
    """Delete every path, recording each outcome on ``result`` independently."""
    if max_workers <= 1 or len(paths) <= 1:
        for path in paths:
            outcome, error = delete_orphan(path)
            _record(result, path, outcome, error)
        return result

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(delete_orphan, path): path for path in paths}
        for future in as_completed(futures):
            outcome, error = future.result()
            _record(result, futures[future], outcome, error)
    return result


def plan_orphans(
    directory_path: Path | str,
    valid_ids: Iterable[str],
    *,
    extension: str = DEFAULT_EXTENSION,
    ignore_case: bool = False,
) -> tuple[list[Path], OSError | None]:
    """Return the paths ``reconcile`` would delete and any listing error, without deleting."""
    directory = Path(directory_path)
    filenames, listing_error = list_step_files(directory, extension)
    orphans, _ = find_orphans(filenames, valid_ids, extension=extension, ignore_case=ignore_case)
    return [directory / name for name in orphans], listing_error


def reconcile(
    directory_path: Path | str,
    valid_ids: Iterable[str],
    *,
    extension: str = DEFAULT_EXTENSION,
    ignore_case: bool = False,
    max_workers: int = 1,
) -> ReconcileResult:
    """Delete generated step files whose id is not among ``valid_ids``.

    Running it twice with the same inputs deletes nothing the second time.
    """
    directory = Path(directory_path)
    result = ReconcileResult(directory=directory)

    filenames, listing_error = list_step_files(directory, extension)
    result.listing_error = listing_error
    if not filenames:
        return result

    orphans, kept = find_orphans(filenames, valid_ids, extension=extension, ignore_case=ignore_case)
    result.kept.extend(kept)
    logging.debug(
        "Found %d orphan(s) and %d valid step file(s) in %s", len(orphans), len(kept), directory
    )
    return delete_orphans([directory / name for name in orphans], result, max_workers=max_workers)
