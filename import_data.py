#!/usr/bin/env python3
"""Import timesheet entries from an exported or template Excel workbook."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import date, datetime, time
from pathlib import Path

from openpyxl import load_workbook

import storage
from errors import ValidationError
from export import PAY_LABEL, TOTALS_LABEL
from models import RawSession, TimesheetEntry
from store import EntryStore

logger = logging.getLogger(__name__)

# Header text -> RawSession field
HEADER_FIELDS = {
    "week": "week",
    "date": "date",
    "sign in": "sign_in",
    "sign out": "sign_out",
    "breaks": "number_of_breaks",
}


@dataclass
class ImportResult:
    created: list[TimesheetEntry] = field(default_factory=list)
    skipped: int = 0


def cell_text(val) -> str:
    """Render a cell value as form text."""
    if val is None:
        return ""
    if isinstance(val, datetime):
        if val.time() == time(0, 0):
            return val.date().isoformat()
        return val.strftime("%H:%M")
    if isinstance(val, date):
        return val.isoformat()
    if isinstance(val, time):
        return val.strftime("%H:%M")
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val).strip()


def map_headers(header_row) -> dict[str, int]:
    """Column index for each RawSession field found in the header row."""
    columns = {}
    for idx, val in enumerate(header_row):
        name = cell_text(val).lower()
        if name in HEADER_FIELDS:
            columns[HEADER_FIELDS[name]] = idx
    return columns


def row_to_session(row, columns: dict[str, int]) -> RawSession | None:
    """Build a RawSession from a sheet row, or None for blank and summary rows."""
    values = {name: cell_text(row[idx]) if idx < len(row) else "" for name, idx in columns.items()}
    if values.get("sign_out") in (TOTALS_LABEL, PAY_LABEL):
        return None
    if not any(values.values()):
        return None

    return RawSession(
        week=values.get("week", ""),
        date=values.get("date", ""),
        sign_in=values.get("sign_in", ""),
        sign_out=values.get("sign_out", ""),
        number_of_breaks=values.get("number_of_breaks") or "1",
    )


def import_workbook(path: Path | str, store: EntryStore) -> ImportResult:
    """Create an entry for every data row of the workbook's first sheet."""
    wb = load_workbook(path, data_only=True, read_only=True)
    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if header is None or not any(cell_text(val) for val in header):
            return ImportResult()

        columns = map_headers(header)
        missing = [name for name in ("week", "date", "sign_in", "sign_out") if name not in columns]
        if missing:
            raise ValidationError(missing[0], f"Column not found in {Path(path).name}")

        result = ImportResult()
        for row_num, row in enumerate(rows, start=2):
            raw = row_to_session(row, columns)
            if raw is None:
                continue
            try:
                result.created.append(store.create(raw))
            except ValidationError as exc:
                logger.warning("Skipping row %d of %s: %s", row_num, path, exc)
                result.skipped += 1
    finally:
        wb.close()

    logger.info("Imported %d entries from %s (%d skipped)", len(result.created), path, result.skipped)
    return result


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: import_data.py WORKBOOK.xlsx")
        return 2

    storage.init_db()
    store = EntryStore(sink=storage, rate=storage.get_config().hourly_rate)
    store.load()

    result = import_workbook(Path(args[0]), store)
    print(f"Imported {len(result.created)} entries")
    if result.skipped:
        print(f"Skipped {result.skipped} invalid rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
