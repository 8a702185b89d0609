"""Shared fixtures for tests."""

from __future__ import annotations

import itertools
import os
import tempfile
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Generator

import pytest

# Set up test database before importing storage
_test_db_fd, _test_db_path = tempfile.mkstemp(suffix=".db")
os.environ["TIMESHEET_DB"] = _test_db_path


@pytest.fixture(scope="session", autouse=True)
def setup_test_db() -> Generator[Path, None, None]:
    """Set up a test database for the entire test session."""
    import storage

    storage.DB_PATH = Path(_test_db_path)
    storage.init_db()

    yield Path(_test_db_path)

    os.close(_test_db_fd)
    os.unlink(_test_db_path)


@pytest.fixture
def temp_database(tmp_path, monkeypatch):
    """Point storage at a fresh, initialised database for one test."""
    import storage

    monkeypatch.setattr(storage, "DB_PATH", tmp_path / "test_timesheet.db")
    storage.init_db()
    return storage


@pytest.fixture
def clock():
    """A clock that advances one minute per call, starting 2024-01-15 17:05."""
    start = datetime(2024, 1, 15, 17, 5, 0, 123456)
    ticks = itertools.count()
    return lambda: start + timedelta(minutes=next(ticks))


@pytest.fixture
def memory_store(clock):
    """An EntryStore with no persistence behind it."""
    from store import EntryStore

    return EntryStore(clock=clock)


@pytest.fixture
def db_store(temp_database, clock):
    """An EntryStore writing through to a temporary SQLite database."""
    from store import EntryStore

    store = EntryStore(sink=temp_database, clock=clock)
    store.load()
    return store


class RecordingSink:
    """In-memory sink that records calls and can be told to fail."""

    def __init__(self, fail_on: set[str] | None = None):
        self.calls: list[tuple[str, str]] = []
        self.rows: dict = {}
        self.fail_on = fail_on or set()

    def _check(self, op: str, entry_id: str) -> None:
        from errors import PersistenceError

        self.calls.append((op, entry_id))
        if op in self.fail_on:
            raise PersistenceError(f"{op} failed for {entry_id}")

    def insert_entry(self, entry):
        self._check("insert", entry.id)
        self.rows[entry.id] = entry

    def replace_entry(self, entry_id, entry):
        self._check("replace", entry_id)
        self.rows[entry_id] = entry

    def remove_entry(self, entry_id):
        self._check("remove", entry_id)
        del self.rows[entry_id]

    def get_all_entries(self, order_by=None):
        return list(self.rows.values())


@pytest.fixture
def recording_sink():
    return RecordingSink()


@pytest.fixture
def make_sink():
    """Factory for sinks that fail on the given operations."""
    return lambda *ops: RecordingSink(fail_on=set(ops))


@pytest.fixture
def sample_raw():
    """A standard 09:00-17:00 session with one break."""
    from models import RawSession

    return RawSession(
        week="Week 3",
        date=date(2024, 1, 15),
        sign_in="09:00",
        sign_out="17:00",
        number_of_breaks="1",
    )


@pytest.fixture
def sample_entry():
    """A stored entry for the standard session."""
    from models import TimesheetEntry

    return TimesheetEntry(
        id="abc123",
        week="Week 3",
        date=date(2024, 1, 15),
        sign_in="09:00",
        sign_out="17:00",
        number_of_breaks=2,
        hours_worked=7.5,
        paid_break_hours=0.5,
        unpaid_break_hours=0.5,
        submitted_at=datetime(2024, 1, 15, 17, 5),
    )
