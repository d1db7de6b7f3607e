"""Global pytest fixtures: sample WIT packages and a fake validator."""

from __future__ import annotations

import pytest

from tests.helpers import WORLD_WIT, write_fake_validator


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's shell configuration out of the tests."""
    monkeypatch.delenv("WIT_LSP_VALIDATOR", raising=False)
    monkeypatch.delenv("WIT_LSP_LOG_LEVEL", raising=False)


@pytest.fixture
def wit_package(tmp_path):
    """A package directory holding a single ``world.wit``."""
    package = tmp_path / "pkg"
    package.mkdir()
    (package / "world.wit").write_text(WORLD_WIT, encoding="utf-8")
    return package


@pytest.fixture
def fake_validator(tmp_path):
    """Return a factory building Settings whose validator prints a canned report."""

    def _make(report: str | bytes = "", exit_code: int = 1):
        return write_fake_validator(tmp_path, report, exit_code)

    return _make
