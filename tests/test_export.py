"""Tests for export.py - Excel workbook output."""

from dataclasses import replace
from datetime import date, datetime

import pytest
from openpyxl import load_workbook

from errors import ExportError
from export import (
    COLUMNS,
    PAY_LABEL,
    SHEET_TITLE,
    TEMPLATE_SHEET_TITLE,
    TOTALS_LABEL,
    build_rows,
    entry_row,
    export_to_excel,
    write_template,
)
from models import Summary


@pytest.fixture
def entries(sample_entry):
    return [
        sample_entry,
        replace(
            sample_entry,
            id="def456",
            week="Week 4",
            date=date(2024, 1, 22),
            sign_in="22:00",
            sign_out="02:00",
            number_of_breaks=1,
            hours_worked=4.0,
            unpaid_break_hours=0.0,
            submitted_at=datetime(2024, 1, 23, 2, 10),
        ),
    ]


@pytest.fixture
def summary():
    return Summary(total_hours=11.5, total_pay=201.25, entry_count=2)


class TestBuildRows:
    """Tests for build_rows."""

    def test_header(self, entries, summary):
        rows = build_rows(entries, summary)
        assert rows[0] == [header for header, _ in COLUMNS]
        assert rows[0][0] == "Entry #"
        assert rows[0][-1] == "Submitted At"

    def test_entry_row(self, sample_entry):
        assert entry_row(1, sample_entry) == [
            1,
            "Week 3",
            "01/15/2024",
            "09:00",
            "17:00",
            2,
            30,
            30,
            7.5,
            "01/15/2024 17:05",
        ]

    def test_hours_rounded_for_display(self, sample_entry):
        row = entry_row(1, replace(sample_entry, hours_worked=1 / 3))
        assert row[8] == 0.33

    def test_sequence_numbers(self, entries, summary):
        rows = build_rows(entries, summary)
        assert [row[0] for row in rows[1:-2]] == [1, 2]

    def test_totals_and_pay_rows(self, entries, summary):
        totals, pay = build_rows(entries, summary)[-2:]
        assert totals[4] == TOTALS_LABEL
        assert totals[8] == 11.5
        assert pay[4] == PAY_LABEL
        assert pay[8] == "$201.25"
        assert totals[0] is None and pay[0] is None

    def test_currency_symbol(self, entries, summary):
        pay = build_rows(entries, summary, currency_symbol="£")[-1]
        assert pay[8] == "£201.25"


class TestExportToExcel:
    """Tests for export_to_excel."""

    def test_writes_workbook(self, tmp_path, entries, summary):
        path = export_to_excel(entries, summary, tmp_path / "My_Timesheet.xlsx")

        wb = load_workbook(path)
        ws = wb[SHEET_TITLE]
        assert ws.max_row == 1 + len(entries) + 2
        assert ws["A1"].value == "Entry #"
        assert ws["B2"].value == "Week 3"
        assert ws["C3"].value == "01/22/2024"
        assert ws["E4"].value == TOTALS_LABEL
        assert ws["I4"].value == 11.5
        assert ws["I5"].value == "$201.25"

    def test_styling(self, tmp_path, entries, summary):
        path = export_to_excel(entries, summary, tmp_path / "out.xlsx")
        ws = load_workbook(path)[SHEET_TITLE]

        assert ws["A1"].font.bold
        assert ws["A1"].fill.fgColor.rgb.endswith("2563EB")
        assert ws["E4"].border.top.style == "thick"
        assert ws["I5"].fill.fgColor.rgb.endswith("22C55E")
        assert ws.column_dimensions["J"].width == 18

    def test_overwrites_existing_file(self, tmp_path, entries, summary):
        path = tmp_path / "out.xlsx"
        export_to_excel(entries, summary, path)
        export_to_excel(entries[:1], Summary(7.5, 131.25, 1), path)
        assert load_workbook(path)[SHEET_TITLE].max_row == 4

    def test_creates_parent_directory(self, tmp_path, entries, summary):
        path = export_to_excel(entries, summary, tmp_path / "exports" / "out.xlsx")
        assert path.exists()

    def test_nothing_to_export(self, tmp_path):
        with pytest.raises(ExportError):
            export_to_excel([], Summary(), tmp_path / "out.xlsx")
        assert not (tmp_path / "out.xlsx").exists()


class TestWriteTemplate:
    """Tests for write_template."""

    def test_template_layout(self, tmp_path):
        path = write_template(tmp_path / "Timesheet_Template.xlsx")
        ws = load_workbook(path)[TEMPLATE_SHEET_TITLE]

        headers = [cell.value for cell in ws[1]]
        assert headers == ["Week", "Date", "Sign In", "Sign Out", "Breaks", "Hours Worked", "Submitted At"]
        assert ws["A2"].value == "Week 1"
        assert ws["B2"].value == "01/15/2024"
