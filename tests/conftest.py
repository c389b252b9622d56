"""Shared pytest fixtures for TMX review tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tmxreview import config
from tmxreview.models import TmxDocument
from tmxreview.tmx_io import load_tmx_text, read_tmx_file

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SCENARIO_A = (
    "<tmx><body><tu><tuv><seg>Hello</seg></tuv>"
    "<tuv><seg>Bonjour</seg></tuv></tu></body></tmx>"
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point settings at a throwaway directory for every test."""
    monkeypatch.setenv("TMXREVIEW_CONFIG_DIR", str(tmp_path / "config"))
    config.reload()
    yield
    config.reload()


@pytest.fixture
def small_tmx_path() -> Path:
    return FIXTURES_DIR / "small.tmx"


@pytest.fixture
def malformed_tmx_path() -> Path:
    return FIXTURES_DIR / "malformed.tmx"


@pytest.fixture
def bom_tmx_path() -> Path:
    return FIXTURES_DIR / "bom.tmx"


@pytest.fixture
def small_doc(small_tmx_path: Path) -> TmxDocument:
    return read_tmx_file(small_tmx_path)


@pytest.fixture
def scenario_doc() -> TmxDocument:
    """A single-unit document built from inline text (no file I/O)."""
    return load_tmx_text(SCENARIO_A)
