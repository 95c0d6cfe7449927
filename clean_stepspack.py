#!/usr/bin/env python3
"""
Delete generated step files that no longer belong to a step in their steps pack.

Generated files live under ./stepspacks/<pack>/generated/ and are named
step-<id>.js. Files whose id is not among the pack's steps are removed.

This is a thin wrapper around the stepspack_cleaner package.
"""
from __future__ import annotations

from stepspack_cleaner.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
