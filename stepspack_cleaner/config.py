"""
Configuration and path resolution for stepspack_cleaner.

Builds the immutable cleaner configuration and resolves defaults from the
environment (optionally seeded from a .env file).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Protocol, Union

from dotenv import load_dotenv

CLEAN_ORPHANS = "orphans"
KNOWN_CLEAN_TARGETS = frozenset({CLEAN_ORPHANS})

DEFAULT_BASE_PATH = Path("./stepspacks")
DEFAULT_EXTENSION = "js"
DEFAULT_MAX_WORKERS = 1
GENERATED_DIRNAME = "generated"


class ConfigurationError(ValueError):
    """Raised when cleaner configuration is invalid."""


class Step(Protocol):
    """A step record; only its id is read."""

    id: str


StepLike = Union[Step, Mapping[str, Any]]


def _resolve_env_path(env_path: str | None = None) -> str:
    """
    Determine which .env file should seed the environment.

    Priority order:
      1. Explicit parameter
      2. STEPSPACKS_ENV_FILE environment variable
      3. ./.env
    """
    if env_path:
        return env_path
    env_file = os.environ.get("STEPSPACKS_ENV_FILE")
    if env_file:
        return env_file
    return str(Path.cwd() / ".env")


def load_env(env_path: str | None = None) -> str:
    """Load the dotenv file without overriding variables already set."""
    resolved_path = _resolve_env_path(env_path)
    load_dotenv(resolved_path, override=False)
    return resolved_path


def determine_default_base_path() -> Path:
    """Return the root holding every steps pack."""
    load_env()
    env_val = os.environ.get("STEPSPACKS_ROOT")
    if env_val:
        return Path(env_val).expanduser()
    return DEFAULT_BASE_PATH


def determine_default_max_workers() -> int:
    """Return the number of parallel deletion workers."""
    load_env()
    env_val = os.environ.get("STEPSPACKS_CLEAN_WORKERS")
    if not env_val:
        return DEFAULT_MAX_WORKERS
    try:
        workers = int(env_val)
    except ValueError:
        logging.warning("Ignoring non-integer STEPSPACKS_CLEAN_WORKERS=%r", env_val)
        return DEFAULT_MAX_WORKERS
    if workers <= 0:
        logging.warning("Ignoring non-positive STEPSPACKS_CLEAN_WORKERS=%r", env_val)
        return DEFAULT_MAX_WORKERS
    return workers


def validate_steps_pack(name: str) -> str:
    """Reject pack names that could escape the steps pack root.

    Raises:
        ConfigurationError: If the name is empty, a dot entry, or contains a path separator.
    """
    if not isinstance(name, str) or not name:
        raise ConfigurationError("Steps pack name must be a non-empty string")
    if name in {".", ".."}:
        raise ConfigurationError(f"Steps pack name {name!r} is not allowed")
    separators = {"/", "\\", "\0", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise ConfigurationError(f"Steps pack name {name!r} must not contain path separators")
    return name


def validate_extension(extension: str) -> str:
    """Normalise a generated-code extension (``.js`` -> ``js``)."""
    ext = extension.lstrip(".") if isinstance(extension, str) else ""
    if not ext or not ext.isalnum():
        raise ConfigurationError(f"Invalid generated file extension {extension!r}")
    return ext


def _step_id(step: StepLike) -> Any:
    if isinstance(step, Mapping):
        return step.get("id")
    return getattr(step, "id", None)


def collect_step_ids(steps: Iterable[StepLike]) -> tuple[str, ...]:
    """Return the ``id`` of every step, in order.

    Steps may be objects exposing an ``id`` attribute or mappings with an ``"id"`` key.

    Raises:
        ConfigurationError: If a step carries no id.
    """
    ids: list[str] = []
    for idx, step in enumerate(steps):
        step_id = _step_id(step)
        if step_id is None:
            raise ConfigurationError(f"Step #{idx} has no id")
        ids.append(str(step_id))
    return tuple(ids)


@dataclass(frozen=True)
class CleanerConfig:
    """Immutable settings for one cleaning run over a steps pack."""

    steps_pack: str
    to_clean: frozenset[str]
    valid_ids: tuple[str, ...]
    base_path: Path = DEFAULT_BASE_PATH
    extension: str = DEFAULT_EXTENSION
    ignore_case: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS

    @property
    def generated_dir(self) -> Path:
        """Directory holding the pack's generated step files."""
        return self.base_path / self.steps_pack / GENERATED_DIRNAME

    @property
    def cleans_orphans(self) -> bool:
        return CLEAN_ORPHANS in self.to_clean


def build_config(
    steps_pack: str,
    *,
    to_clean: Iterable[str] = (),
    steps: Iterable[StepLike] = (),
    base_path: Path | str | None = None,
    extension: str | None = None,
    ignore_case: bool = False,
    max_workers: int | None = None,
) -> CleanerConfig:
    """Validate caller options and freeze them into a CleanerConfig.

    Raises:
        ConfigurationError: If the pack name, extension, steps or worker count are invalid.
    """
    # a bare string is one target, not a set of characters
    flags = frozenset((to_clean,) if isinstance(to_clean, str) else to_clean)
    for flag in sorted(flags - KNOWN_CLEAN_TARGETS):
        logging.debug("Clean target %r is reserved and currently does nothing", flag)

    workers = determine_default_max_workers() if max_workers is None else max_workers
    if workers <= 0:
        raise ConfigurationError("max_workers must be positive")

    return CleanerConfig(
        steps_pack=validate_steps_pack(steps_pack),
        to_clean=flags,
        valid_ids=collect_step_ids(steps),
        base_path=Path(base_path).expanduser() if base_path else determine_default_base_path(),
        extension=validate_extension(extension or DEFAULT_EXTENSION),
        ignore_case=ignore_case,
        max_workers=workers,
    )
