"""
Steps pack cleaner entry point.

Gates each cleaning behavior on the configured clean targets and on the
generated directory existing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from .config import CleanerConfig, StepLike, build_config
from .reconciler import ReconcileResult, plan_orphans, reconcile


@dataclass
class CleanReport:
    """What a call to Cleaner.clean() did."""

    steps_pack: str
    ran: bool = False
    orphans: ReconcileResult | None = None

    @property
    def ok(self) -> bool:
        return self.orphans is None or self.orphans.ok


class Cleaner:
    """Remove stale generated artifacts for one steps pack."""

    def __init__(self, config: CleanerConfig):
        self.config = config

    @classmethod
    def from_options(
        cls,
        steps_pack: str,
        to_clean: Iterable[str] = (),
        steps: Iterable[StepLike] = (),
        **kwargs: Any,
    ) -> "Cleaner":
        """Build a cleaner from loose options (see build_config for the keywords)."""
        return cls(build_config(steps_pack, to_clean=to_clean, steps=steps, **kwargs))

    @property
    def path(self) -> Path:
        return self.config.generated_dir

    def _should_clean_orphans(self) -> bool:
        if not self.config.cleans_orphans:
            logging.debug("Orphan cleaning not requested for %s", self.config.steps_pack)
            return False
        if not self.path.is_dir():
            logging.debug("Generated directory %s does not exist; nothing to clean", self.path)
            return False
        return True

    def clean(self) -> CleanReport:
        """Run every requested cleaning behavior. Filesystem failures are logged, not raised."""
        report = CleanReport(steps_pack=self.config.steps_pack)
        if self._should_clean_orphans():
            report.ran = True
            report.orphans = reconcile(
                self.path,
                self.config.valid_ids,
                extension=self.config.extension,
                ignore_case=self.config.ignore_case,
                max_workers=self.config.max_workers,
            )
        return report

    def plan(self) -> tuple[list[Path], OSError | None]:
        """Return what clean() would delete plus any listing error, under the same gating."""
        if not self._should_clean_orphans():
            return [], None
        return plan_orphans(
            self.path,
            self.config.valid_ids,
            extension=self.config.extension,
            ignore_case=self.config.ignore_case,
        )
