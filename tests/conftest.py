from __future__ import annotations

from datetime import datetime

import pytest
import pytz

from txt2ics.models import ParserState


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    for var in ("TXT2ICS_CONFIG", "TXT2ICS_PRODID", "TXT2ICS_CALNAME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def now():
    return pytz.utc.localize(datetime(2012, 6, 1, 12, 0, 0))


@pytest.fixture
def state():
    return ParserState(default_year=2012)


@pytest.fixture
def write_input(tmp_path):
    def _write(name: str, text: str) -> str:
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return str(p)
    return _write
