"""
Command-line interface and main entry point for stepspack_cleaner.

Loads the pack's valid steps, runs the cleaner, and reports the outcome.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .args_parser import parse_args
from .cleaner import Cleaner
from .config import ConfigurationError
from .reports import planned_rows, print_plan, print_summary, result_rows, write_report


class StepsFileError(RuntimeError):
    """Raised when the steps manifest cannot be read."""


def load_steps_file(path: Path) -> list[Any]:
    """Return the steps listed in a JSON manifest.

    The manifest is either a list of step objects or an object with a ``steps`` list.

    Raises:
        StepsFileError: If the file cannot be read or has an unexpected shape.
    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as exc:
        raise StepsFileError(f"Cannot read steps file {path}: {exc}") from exc
    if isinstance(data, dict):
        data = data.get("steps")
    if not isinstance(data, list):
        raise StepsFileError(f"Steps file {path} must contain a list of steps")
    return data


def _collect_steps(args: argparse.Namespace) -> list[Any]:
    steps: list[Any] = []
    if args.steps_file:
        steps.extend(load_steps_file(args.steps_file))
    steps.extend({"id": step_id} for step_id in args.step_ids)
    return steps


def _build_cleaner(args: argparse.Namespace) -> Cleaner | int:
    """Build the cleaner from CLI arguments. Returns the cleaner or an error code."""
    try:
        steps = _collect_steps(args)
        return Cleaner.from_options(
            args.steps_pack,
            to_clean=args.to_clean,
            steps=steps,
            base_path=args.base_path,
            extension=args.extension,
            ignore_case=args.ignore_case,
            max_workers=args.workers,
        )
    except (StepsFileError, ConfigurationError) as exc:
        logging.error("%s", exc)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for stepspack_cleaner CLI."""
    args = parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    cleaner = _build_cleaner(args)
    if isinstance(cleaner, int):
        return cleaner

    if args.dry_run:
        planned, listing_error = cleaner.plan()
        print_plan(args.steps_pack, planned)
        write_report(planned_rows(planned), json_path=args.report_json)
        if listing_error is not None:
            print(f"Could not read {cleaner.path}: {listing_error}")
            return 2
        return 0

    report = cleaner.clean()
    print_summary(report)
    if report.orphans is not None:
        write_report(result_rows(report.orphans), json_path=args.report_json)
    if not report.ok:
        return 2
    return 0
