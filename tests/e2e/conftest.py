"""E2E test fixtures and utilities.

These tests exercise complete CLI workflows as a user would experience them.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from typer.testing import CliRunner

if TYPE_CHECKING:
    from collections.abc import Callable

    DocumentFactory = Callable[[str], Path]


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def keyrace_env(tmp_path: Path) -> dict[str, str]:
    """Environment pointing keyrace at throwaway data and config directories."""
    return {
        "COLUMNS": "200",
        "KEYRACE_DATA_DIR": str(tmp_path / "data"),
        "KEYRACE_CONFIG_DIR": str(tmp_path / "config"),
    }


@pytest.fixture
def sessions_dir(tmp_path: Path) -> Path:
    return tmp_path / "data" / "sessions"


@pytest.fixture
def yaml_file(tmp_path: Path) -> DocumentFactory:
    """Factory for creating corpus or layout YAML files."""

    def _create(content: str, name: str = "document.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content.strip(), encoding="utf-8")
        return path

    return _create
