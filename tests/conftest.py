"""Pytest fixtures for covrun tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Provide a temporary project directory (symlinks resolved)."""
    project = tmp_path.resolve() / "project"
    project.mkdir()
    return project


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove COVRUN_* environment variables."""
    for var in list(os.environ):
        if var.upper().startswith("COVRUN_"):
            monkeypatch.delenv(var, raising=False)


@pytest.fixture
def write_config(project_dir: Path) -> Callable[[str, str], Path]:
    """Write a config file into the project directory and return its path."""

    def _write(content: str, filename: str = "covrun.toml") -> Path:
        config = project_dir / filename
        config.write_text(content)
        return config

    return _write
