"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog


def pytest_sessionstart() -> None:
    """Add src and project root to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Drop structlog config bound to a per-test captured stderr stream."""
    yield
    structlog.reset_defaults()
