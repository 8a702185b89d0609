"""Excel export of timesheet entries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from errors import ExportError
from models import Summary, TimesheetEntry
from utils import format_money, format_timestamp, format_us_date

logger = logging.getLogger(__name__)

SHEET_TITLE = "Timesheet Records"
TEMPLATE_SHEET_TITLE = "Timesheet Template"
TEMPLATE_FILENAME = "Timesheet_Template.xlsx"

# (header, column width)
COLUMNS = [
    ("Entry #", 10),
    ("Week", 15),
    ("Date", 12),
    ("Sign In", 10),
    ("Sign Out", 10),
    ("Breaks", 8),
    ("Paid Break (min)", 12),
    ("Unpaid Break (min)", 12),
    ("Hours Worked", 12),
    ("Submitted At", 18),
]

TEMPLATE_COLUMNS = [
    ("Week", 15),
    ("Date", 12),
    ("Sign In", 10),
    ("Sign Out", 10),
    ("Breaks", 8),
    ("Hours Worked", 12),
    ("Submitted At", 18),
]

TOTALS_LABEL = "TOTALS:"
PAY_LABEL = "WEEKLY PAY:"

LABEL_COL = 5
HOURS_COL = 9

_THIN = Side(style="thin", color="000000")
_THICK = Side(style="thick", color="000000")


def _row(label: str, value) -> list:
    row: list = [None] * len(COLUMNS)
    row[LABEL_COL - 1] = label
    row[HOURS_COL - 1] = value
    return row


def entry_row(seq: int, entry: TimesheetEntry) -> list:
    return [
        seq,
        entry.week,
        format_us_date(entry.date),
        entry.sign_in,
        entry.sign_out,
        entry.number_of_breaks,
        entry.paid_break_minutes,
        entry.unpaid_break_minutes,
        round(entry.hours_worked, 2),
        format_timestamp(entry.submitted_at),
    ]


def build_rows(
    entries: Sequence[TimesheetEntry], summary: Summary, currency_symbol: str = "$"
) -> list[list]:
    """Header, one row per entry, then the totals and pay rows."""
    rows = [[header for header, _ in COLUMNS]]
    rows.extend(entry_row(seq, entry) for seq, entry in enumerate(entries, start=1))
    rows.append(_row(TOTALS_LABEL, round(summary.total_hours, 2)))
    rows.append(_row(PAY_LABEL, format_money(summary.total_pay, currency_symbol)))
    return rows


def _style_header(ws, width: int) -> None:
    for col in range(1, width + 1):
        cell = ws.cell(row=1, column=col)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(fill_type="solid", fgColor="2563EB")
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = Border(top=_THIN, bottom=_THIN, left=_THIN, right=_THIN)


def _style_summary_row(ws, row: int, fill: str, top: Side, bottom: Side) -> None:
    for col in range(1, len(COLUMNS) + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(fill_type="solid", fgColor=fill)
        cell.alignment = Alignment(horizontal="right" if col >= 6 else "center")
        cell.border = Border(top=top, bottom=bottom, left=_THIN, right=_THIN)


def _set_widths(ws, columns: list[tuple[str, int]]) -> None:
    for idx, (_, width) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def export_to_excel(
    entries: Sequence[TimesheetEntry],
    summary: Summary,
    path: Path | str,
    currency_symbol: str = "$",
) -> Path:
    """Write entries to an .xlsx workbook, overwriting any existing file."""
    if not entries:
        raise ExportError("Please submit at least one timesheet entry before exporting.")

    path = Path(path)
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    for row in build_rows(entries, summary, currency_symbol):
        ws.append(row)

    _set_widths(ws, COLUMNS)
    _style_header(ws, len(COLUMNS))
    totals_row = ws.max_row - 1
    _style_summary_row(ws, totals_row, "F3F4F6", top=_THICK, bottom=_THIN)
    _style_summary_row(ws, ws.max_row, "22C55E", top=_THIN, bottom=_THICK)

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info("Exported %d entries to %s", len(entries), path)
    return path


def write_template(path: Path | str) -> Path:
    """Write a one-row example workbook showing the import layout."""
    path = Path(path)
    wb = Workbook()
    ws = wb.active
    ws.title = TEMPLATE_SHEET_TITLE
    ws.append([header for header, _ in TEMPLATE_COLUMNS])
    ws.append(["Week 1", "01/15/2024", "09:00", "17:00", 1, "8.00", "01/15/2024 17:05"])
    _set_widths(ws, TEMPLATE_COLUMNS)
    _style_header(ws, len(TEMPLATE_COLUMNS))

    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    return path
