"""Shared fixtures for the polyrender tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from polyrender.core.models import ContextDocument
from polyrender.settings import get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Temporary directory that is also the current working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_json():
    def _write(path: Path, value) -> Path:
        path.write_text(json.dumps(value), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def world(tmp_path: Path) -> ContextDocument:
    return ContextDocument(value={"name": "World"}, source_path=tmp_path / "ctx.json")
