"""Pytest configuration and shared fixtures for the steps pack cleaner."""

# pylint: disable=wrong-import-position

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest


@pytest.fixture(autouse=True)
def isolated_stepspacks_env(tmp_path, monkeypatch):
    """Auto-use fixture that keeps the developer's environment out of the tests.

    Points STEPSPACKS_ENV_FILE at an empty .env file and clears the variables the
    cleaner reads, so defaults come from the code rather than the shell.
    """
    env_file = tmp_path / ".env"
    env_file.write_text("")
    monkeypatch.setenv("STEPSPACKS_ENV_FILE", str(env_file))
    # setenv first so monkeypatch restores the variables even when a .env load sets them
    for name in ("STEPSPACKS_ROOT", "STEPSPACKS_CLEAN_WORKERS"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    yield str(env_file)
