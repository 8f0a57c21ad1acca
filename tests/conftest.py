"""Shared pytest fixtures and configuration for the revman-cli test suite.

Guidelines
----------
* No network access in any test.
* Real files only under ``tmp_path`` or ``tests/fixtures``.
* Core tests must be pure — no side effects.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from revman_cli.cli.console import console

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_console_color() -> None:
    console.configure(color=True)


@pytest.fixture
def sample_path() -> Path:
    """Path to a small but complete RevMan 5 file."""
    return FIXTURES / "sample.rm5"


@pytest.fixture
def sample_text(sample_path: Path) -> str:
    return sample_path.read_text(encoding="utf-8")

