"""
Steps pack cleaner package.

Remove generated step files whose step no longer exists in the pack.
"""

from . import args_parser, cleaner, config, reconciler, reports
from .cleaner import Cleaner, CleanReport
from .config import CleanerConfig, ConfigurationError, Step, build_config
from .reconciler import ReconcileResult, plan_orphans, reconcile

__all__ = [
    "CleanReport",
    "Cleaner",
    "CleanerConfig",
    "ConfigurationError",
    "ReconcileResult",
    "Step",
    "args_parser",
    "build_config",
    "cleaner",
    "config",
    "plan_orphans",
    "reconcile",
    "reconciler",
    "reports",
]
