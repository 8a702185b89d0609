from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator

from errors import PersistenceError
from models import Config, TimesheetEntry

logger = logging.getLogger(__name__)


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("TIMESHEET_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "timesheet.db"


DB_PATH = _get_db_path()

# Columns exchanged with the database, in insert order.
ENTRY_COLUMNS = (
    "id",
    "week",
    "date",
    "sign_in",
    "sign_out",
    "number_of_breaks",
    "hours_worked",
    "paid_break_hours",
    "unpaid_break_hours",
    "submitted_at",
)

_ORDER_CLAUSES = {
    None: "ORDER BY seq",
    "date": "ORDER BY date, seq",
    "week": "ORDER BY week, seq",
}


def get_connection() -> sqlite3.Connection:
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def _connection(action: str) -> Iterator[sqlite3.Connection]:
    """Open a connection, commit on success and report failures as PersistenceError."""
    conn = None
    try:
        conn = get_connection()
        yield conn
        conn.commit()
    except (sqlite3.Error, OSError, OverflowError) as exc:
        logger.error("Database error while trying to %s: %s", action, exc)
        raise PersistenceError(f"Could not {action}: {exc}") from exc
    finally:
        if conn is not None:
            conn.close()


def init_db():
    """Create tables if they don't exist."""
    with _connection("initialise the database") as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS timesheet_entries (
                seq INTEGER PRIMARY KEY AUTOINCREMENT,
                id TEXT NOT NULL UNIQUE,
                week TEXT NOT NULL,
                date TEXT NOT NULL,
                sign_in TEXT NOT NULL,
                sign_out TEXT NOT NULL,
                number_of_breaks INTEGER NOT NULL,
                hours_worked REAL NOT NULL,
                paid_break_hours REAL NOT NULL,
                unpaid_break_hours REAL NOT NULL,
                submitted_at TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_entries_date ON timesheet_entries(date);
            CREATE INDEX IF NOT EXISTS idx_entries_week ON timesheet_entries(week);
        """)


def _entry_values(entry: TimesheetEntry) -> tuple:
    return (
        entry.id,
        entry.week,
        entry.date.isoformat(),
        entry.sign_in,
        entry.sign_out,
        entry.number_of_breaks,
        entry.hours_worked,
        entry.paid_break_hours,
        entry.unpaid_break_hours,
        entry.submitted_at.isoformat(),
    )


def _row_to_entry(row: sqlite3.Row) -> TimesheetEntry:
    return TimesheetEntry(
        id=row["id"],
        week=row["week"],
        date=date.fromisoformat(row["date"]),
        sign_in=row["sign_in"],
        sign_out=row["sign_out"],
        number_of_breaks=int(row["number_of_breaks"]),
        hours_worked=float(row["hours_worked"]),
        paid_break_hours=float(row["paid_break_hours"]),
        unpaid_break_hours=float(row["unpaid_break_hours"]),
        submitted_at=datetime.fromisoformat(row["submitted_at"]),
    )


def insert_entry(entry: TimesheetEntry) -> None:
    """Insert a new entry. Fails if the id is already stored."""
    placeholders = ", ".join("?" for _ in ENTRY_COLUMNS)
    with _connection(f"insert entry {entry.id}") as conn:
        conn.execute(
            f"INSERT INTO timesheet_entries ({', '.join(ENTRY_COLUMNS)}) VALUES ({placeholders})",
            _entry_values(entry),
        )


def replace_entry(entry_id: str, entry: TimesheetEntry) -> None:
    """Overwrite every stored field of an entry, keeping its position."""
    assignments = ", ".join(f"{col} = ?" for col in ENTRY_COLUMNS[1:])
    with _connection(f"replace entry {entry_id}") as conn:
        cursor = conn.execute(
            f"UPDATE timesheet_entries SET {assignments} WHERE id = ?",
            _entry_values(entry)[1:] + (entry_id,),
        )
        if cursor.rowcount == 0:
            raise PersistenceError(f"Entry {entry_id} is missing from the database")


def remove_entry(entry_id: str) -> None:
    with _connection(f"remove entry {entry_id}") as conn:
        cursor = conn.execute("DELETE FROM timesheet_entries WHERE id = ?", (entry_id,))
        if cursor.rowcount == 0:
            raise PersistenceError(f"Entry {entry_id} is missing from the database")


def get_entry(entry_id: str) -> TimesheetEntry | None:
    """Get a single entry by id."""
    with _connection(f"read entry {entry_id}") as conn:
        row = conn.execute(
            "SELECT * FROM timesheet_entries WHERE id = ?", (entry_id,)
        ).fetchone()
    return _row_to_entry(row) if row else None


def get_all_entries(order_by: str | None = None) -> list[TimesheetEntry]:
    """Get every entry, in insertion order or ascending by date/week."""
    if order_by not in _ORDER_CLAUSES:
        raise ValueError(f"Cannot order entries by {order_by!r}")
    with _connection("list entries") as conn:
        rows = conn.execute(
            f"SELECT * FROM timesheet_entries {_ORDER_CLAUSES[order_by]}"
        ).fetchall()
    return [_row_to_entry(row) for row in rows]


def get_config() -> Config:
    """Load config from database."""
    with _connection("load config") as conn:
        rows = conn.execute("SELECT key, value FROM config").fetchall()

    config = Config()
    for row in rows:
        if row["key"] == "hourly_rate":
            config.hourly_rate = float(row["value"])
        elif row["key"] == "currency_symbol":
            config.currency_symbol = row["value"]
        elif row["key"] == "export_filename":
            config.export_filename = row["value"]

    return config


def save_config(config: Config):
    """Save config to database."""
    with _connection("save config") as conn:
        conn.executemany(
            "INSERT OR REPLACE INTO config (key, value) VALUES (?, ?)",
            [
                ("hourly_rate", repr(config.hourly_rate)),
                ("currency_symbol", config.currency_symbol),
                ("export_filename", config.export_filename),
            ],
        )
