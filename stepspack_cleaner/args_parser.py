"""
Argument parsing for stepspack_cleaner CLI.

Handles command-line argument definition, parsing, and validation.
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .config import CLEAN_ORPHANS, DEFAULT_EXTENSION


def add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add arguments selecting the steps pack and its valid steps."""
    parser.add_argument("steps_pack", help="Name of the steps pack to clean.")
    parser.add_argument(
        "--steps-file",
        type=Path,
        help="JSON file listing the pack's steps (objects with an 'id').",
    )
    parser.add_argument(
        "--step-id",
        dest="step_ids",
        action="append",
        default=[],
        metavar="ID",
        help="Valid step id (repeatable). Combined with --steps-file.",
    )
    parser.add_argument(
        "--base-path",
        type=Path,
        help="Root holding every steps pack (default: $STEPSPACKS_ROOT or ./stepspacks).",
    )


def add_action_arguments(parser: argparse.ArgumentParser) -> None:
    """Add action and behavior arguments."""
    parser.add_argument(
        "--clean",
        dest="to_clean",
        action="append",
        metavar="TARGET",
        help=f"Cleaning behavior to run (repeatable, default: {CLEAN_ORPHANS}).",
    )
    parser.add_argument(
        "--extension",
        default=DEFAULT_EXTENSION,
        help="Extension of generated step files (default: %(default)s).",
    )
    parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match step ids against filenames case-insensitively.",
    )
    parser.add_argument("--workers", type=int, help="Number of parallel deletions.")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List orphan files without deleting them.",
    )


def add_output_arguments(parser: argparse.ArgumentParser) -> None:
    """Add output and reporting arguments."""
    parser.add_argument("--report-json", type=Path, help="Optional path to write the outcome as JSON.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the stepspack_cleaner CLI."""
    parser = argparse.ArgumentParser(
        description="Delete generated step files that no longer belong to a step in the pack."
    )
    add_source_arguments(parser)
    add_action_arguments(parser)
    add_output_arguments(parser)
    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse and validate command-line arguments for stepspack_cleaner."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.workers is not None and args.workers <= 0:
        parser.error("--workers must be positive.")
    if not args.to_clean:
        args.to_clean = [CLEAN_ORPHANS]
    return args
