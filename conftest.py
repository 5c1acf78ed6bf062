"""Pytest configuration — ensures the project root is importable."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture
def write_env(tmp_path):
    """Write a file under tmp_path and return its path as a string."""

    def _write(name: str, content: str) -> str:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture(autouse=True)
def _clean_settings_env(monkeypatch):
    """Keep ENVSURE_* variables from the developer's shell out of tests."""
    for name in ("ENVSURE_ENV_FILE", "ENVSURE_EXAMPLE_FILE", "ENVSURE_STRICT",
                 "ENVSURE_COLOR", "ENVSURE_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    yield
