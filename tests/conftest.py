"""
tests/conftest.py
"""
from __future__ import annotations

import itertools
from pathlib import Path
from typing import Generator

import pytest
from flask.testing import FlaskClient
from pytest import MonkeyPatch

# The single-file app lives here:
from guestbook import book  # noqa: WPS433 (importing from a module)
from guestbook.book import app

BASE_MS = 4_070_908_800_000  # 2099-01-01T00:00:00Z


class MemoryBackend:
    """Backend double that remembers every save."""

    name = "memory"

    def __init__(self, entries=()):
        self.entries = list(entries)
        self.saved: list[list] = []

    def load(self):
        return list(self.entries)

    def save(self, entries):
        self.saved.append(list(entries))
        self.entries = list(entries)


@pytest.fixture(autouse=True, scope="session")
def _fast_clock():
    """
    Patch guestbook.book.now_ms for the whole test session so every call
    returns an ever-increasing timestamp (one second apart).
    """
    counter = itertools.count()

    def _fake_now():
        return BASE_MS + 1000 * next(counter)

    mp = MonkeyPatch()
    mp.setattr(book, "now_ms", _fake_now)

    yield                               # tests run here

    mp.undo()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    return tmp_path / "guestbook.json"


@pytest.fixture(autouse=True)
def store(data_file: Path, monkeypatch: MonkeyPatch) -> book.EntryStore:
    """A brand-new, file-backed store for every test."""
    monkeypatch.setitem(app.config, "TESTING", True)
    monkeypatch.setitem(app.config, "DATA_FILE", str(data_file))
    monkeypatch.setitem(app.config, "KV_ENABLED", False)
    return book.init_store(background=False)


@pytest.fixture
def memory_store(monkeypatch: MonkeyPatch) -> book.EntryStore:
    """Store wired to a MemoryBackend; also installed as the app's store."""
    s = book.EntryStore(MemoryBackend())
    monkeypatch.setitem(app.extensions, "guestbook", s)
    return s


@pytest.fixture
def client() -> Generator[FlaskClient, None, None]:
    # Not entered as a context manager: a preserved request context would keep
    # its app context (and ``g``) active for other clients' requests.
    yield app.test_client()
