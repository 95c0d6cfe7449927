"""Shared pytest fixtures for test files."""

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest


@pytest.fixture(name="stepspacks_root")
def fixture_stepspacks_root(tmp_path) -> Path:
    """Return an empty root directory for steps packs."""
    root = tmp_path / "stepspacks"
    root.mkdir()
    return root


@pytest.fixture(name="make_generated_dir")
def fixture_make_generated_dir(stepspacks_root):
    """Factory creating ``<root>/<pack>/generated`` populated with the given filenames."""

    def _make(filenames, pack="demo"):
        generated = stepspacks_root / pack / "generated"
        generated.mkdir(parents=True, exist_ok=True)
        for name in filenames:
            (generated / name).write_text(f"// {name}\n")
        return generated

    return _make


@pytest.fixture(name="make_steps")
def fixture_make_steps():
    """Factory returning step records exposing an ``id`` attribute."""

    def _make(*ids):
        return [SimpleNamespace(id=step_id, name=f"Step {step_id}") for step_id in ids]

    return _make
