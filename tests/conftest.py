"""Pytest configuration and fixtures for shapecheck tests."""

import os
import sys

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

SHAPECHECK_ENV_VARS = (
    "SHAPECHECK_SCHEMA",
    "SHAPECHECK_INPUT_FORMAT",
    "SHAPECHECK_PARALLEL",
    "SHAPECHECK_MAX_WORKERS",
)


@pytest.fixture(autouse=True)
def clean_shapecheck_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep SHAPECHECK_* variables from the outer environment out of tests."""
    for name in SHAPECHECK_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_sys_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Undo sys.path entries added by load_schema."""
    monkeypatch.setattr(sys, "path", list(sys.path))
