#!/usr/bin/env python3
"""Timesheet TUI application."""

from __future__ import annotations

import logging
import math
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.coordinate import Coordinate
from textual.widgets import DataTable, Footer
from rich.text import Text

import storage
from errors import TimesheetError, ValidationError
from export import TEMPLATE_FILENAME, export_to_excel, write_template
from models import Config, RawSession, TimesheetEntry
from screens import ConfirmScreen, EntryFormScreen
from store import EntryStore
from utils import ORDER_KEYS, format_breaks, format_hours
from widgets import EntriesHeader, TotalsSummary

logger = logging.getLogger(__name__)

USAGE = """usage: timesheet [--db-info | --export [PATH] | --template [PATH]
                  | --set-rate RATE | --set-currency SYMBOL | --set-filename NAME]"""


def open_store() -> tuple[Config, EntryStore]:
    """Initialise the database and load every entry into a store."""
    storage.init_db()
    config = storage.get_config()
    store = EntryStore(sink=storage, rate=config.hourly_rate)
    store.load()
    return config, store


class TimesheetApp(App):
    """Main timesheet application."""

    CSS = """
    Screen {
        background: $surface;
    }

    #entries-header {
        height: auto;
        background: $primary;
        color: $text;
        padding: 0 1;
    }

    #entries-table {
        height: 1fr;
        margin: 1 2;
    }

    #totals-summary {
        height: auto;
        padding: 1 2;
        color: $text;
    }

    DataTable {
        height: 100%;
    }

    DataTable > .datatable--cursor {
        background: $secondary;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "new_entry", "New"),
        Binding("e", "edit_entry", "Edit"),
        Binding("d", "delete_entry", "Delete"),
        Binding("o", "toggle_order", "Order"),
        Binding("x", "export", "Export"),
    ]

    def __init__(self, export_dir: Path | None = None):
        super().__init__()
        self.config, self.store = open_store()

        # "date" or "week"
        self.order_by = "date"
        self.export_dir = export_dir or Path.cwd()

    def compose(self) -> ComposeResult:
        yield EntriesHeader(id="entries-header")
        yield Container(DataTable(id="entries-table"), id="entries-table-container")
        yield TotalsSummary(id="totals-summary")
        yield Footer()

    def on_mount(self):
        self._setup_table()
        self._refresh_display()
        self.query_one("#entries-table", DataTable).focus()

    def _setup_table(self):
        table = self.query_one("#entries-table", DataTable)
        table.cursor_type = "row"
        table.add_column("Week", width=16)
        table.add_column("Date", width=12)
        table.add_column("In", width=6)
        table.add_column("Out", width=6)
        table.add_column("Breaks", width=24)
        table.add_column("Hours", width=7)
        table.add_column("Submitted", width=9)

    def _entry_cells(self, entry: TimesheetEntry) -> tuple:
        breaks = Text(format_breaks(entry.number_of_breaks))
        if entry.paid_break_hours:
            breaks.append(f"  paid {entry.paid_break_minutes}m", style="green")
        if entry.unpaid_break_hours:
            breaks.append(f"  unpaid {entry.unpaid_break_minutes}m", style="red")

        return (
            entry.week,
            entry.date.strftime("%b %d, %Y"),
            entry.sign_in,
            entry.sign_out,
            breaks,
            Text(f"{format_hours(entry.hours_worked)}h", style="bold"),
            Text(entry.submitted_at.strftime("%H:%M"), style="dim"),
        )

    def _refresh_display(self, select_id: str | None = None):
        entries = self.store.list(self.order_by)

        table = self.query_one("#entries-table", DataTable)
        if select_id is None:
            select_id = self._get_selected_id()
        table.clear()
        for entry in entries:
            table.add_row(*self._entry_cells(entry), key=entry.id)

        if select_id is not None:
            for row, entry in enumerate(entries):
                if entry.id == select_id:
                    table.move_cursor(row=row)
                    break

        self.query_one("#entries-header", EntriesHeader).update_display(
            self.order_by, self.store.rate, self.config.currency_symbol
        )
        self.query_one("#totals-summary", TotalsSummary).update_display(
            self.store.summarize(entries), self.config.currency_symbol
        )

    def _get_selected_id(self) -> str | None:
        """Get the id of the entry under the table cursor."""
        table = self.query_one("#entries-table", DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(Coordinate(table.cursor_row, 0)).row_key
        return str(row_key.value) if row_key and row_key.value is not None else None

    def _report(self, exc: TimesheetError, title: str) -> None:
        logger.warning("%s: %s", title, exc)
        self.notify(str(exc), title=title, severity="error")

    def action_new_entry(self):
        self.push_screen(EntryFormScreen(store=self.store), self._on_create_complete)

    def _on_create_complete(self, result: RawSession | None) -> None:
        if not result:
            return
        try:
            entry = self.store.create(result)
        except TimesheetError as exc:
            self._report(exc, "Submit Failed")
            return
        self._refresh_display(select_id=entry.id)
        self.notify(f"Recorded {format_hours(entry.hours_worked)} hours for {entry.week}")

    def action_edit_entry(self):
        entry_id = self._get_selected_id()
        if entry_id is None:
            self.notify("No entry selected", severity="warning")
            return
        try:
            entry = self.store.get(entry_id)
        except TimesheetError as exc:
            self._report(exc, "Edit Failed")
            self._refresh_display()
            return

        def on_complete(result: RawSession | None) -> None:
            self._on_edit_complete(entry_id, result)

        self.push_screen(EntryFormScreen(entry, store=self.store), on_complete)

    def _on_edit_complete(self, entry_id: str, result: RawSession | None) -> None:
        if not result:
            return
        try:
            entry = self.store.update(entry_id, result)
        except TimesheetError as exc:
            self._report(exc, "Update Failed")
            self._refresh_display()
            return
        self._refresh_display(select_id=entry.id)
        self.notify(f"Updated {format_hours(entry.hours_worked)} hours for {entry.week}")

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        self.action_edit_entry()

    def action_delete_entry(self):
        entry_id = self._get_selected_id()
        if entry_id is None:
            self.notify("No entry selected", severity="warning")
            return
        try:
            entry = self.store.get(entry_id)
        except TimesheetError as exc:
            self._report(exc, "Delete Failed")
            self._refresh_display()
            return

        def do_delete(confirmed: bool | None) -> None:
            if confirmed:
                self._delete(entry_id)

        self.push_screen(
            ConfirmScreen(f"Delete the entry for {entry.week} on {entry.date.strftime('%b %d')}?", "Delete"),
            do_delete,
        )

    def _delete(self, entry_id: str) -> None:
        try:
            self.store.delete(entry_id)
        except TimesheetError as exc:
            # Already gone (or the database refused): show it and resync
            self._report(exc, "Delete Failed")
        else:
            self.notify("Timesheet entry has been removed")
        self._refresh_display()

    def action_toggle_order(self):
        idx = ORDER_KEYS.index(self.order_by)
        self.order_by = ORDER_KEYS[(idx + 1) % len(ORDER_KEYS)]
        self._refresh_display()

    def action_export(self):
        path = self.export_dir / self.config.export_filename
        entries = self.store.list(self.order_by)
        try:
            export_to_excel(entries, self.store.summarize(entries), path, self.config.currency_symbol)
        except TimesheetError as exc:
            self._report(exc, "Nothing to Export")
            return
        except OSError as exc:
            logger.error("Export to %s failed: %s", path, exc)
            self.notify(f"Could not write {path}: {exc}", title="Export Failed", severity="error")
            return
        self.notify(f"Timesheet data exported to {path}", title="Excel Export Successful")


def set_config(option: str, value: str) -> Config:
    """Change one configuration value and save it."""
    storage.init_db()
    config = storage.get_config()
    if option == "--set-rate":
        try:
            rate = float(value)
        except ValueError:
            raise ValidationError("hourly_rate", f"Not a number: {value!r}") from None
        if not math.isfinite(rate) or rate < 0:
            raise ValidationError("hourly_rate", "Hourly rate must be a non-negative number")
        config.hourly_rate = rate
    elif option == "--set-currency":
        config.currency_symbol = value
    elif option == "--set-filename":
        if not value.strip():
            raise ValidationError("export_filename", "Export filename cannot be empty")
        config.export_filename = value.strip()
    storage.save_config(config)
    logger.info("Configuration changed with %s %s", option, value)
    return config


def _print_db_info():
    from datetime import datetime

    db_path = storage.DB_PATH
    print(f"Database: {db_path}")
    if db_path.exists():
        mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
        size = db_path.stat().st_size
        print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
        print(f"Size: {size:,} bytes")
    else:
        print("Status: Does not exist (will be created on first run)")


def main():
    import sys

    from logging_config import setup_logging

    setup_logging()

    args = sys.argv[1:]
    command = args[0] if args else None

    try:
        if command == "--db-info":
            _print_db_info()
            return

        if command == "--template":
            target = Path(args[1]) if len(args) > 1 else Path.cwd() / TEMPLATE_FILENAME
            write_template(target)
            print(f"Template written to {target}")
            return

        if command in ("--set-rate", "--set-currency", "--set-filename"):
            if len(args) < 2:
                print(USAGE, file=sys.stderr)
                sys.exit(2)
            config = set_config(command, args[1])
            print(
                f"Hourly rate {config.hourly_rate:.2f}, currency {config.currency_symbol!r}, "
                f"export filename {config.export_filename!r}"
            )
            return

        if command == "--export":
            config, store = open_store()
            target = Path(args[1]) if len(args) > 1 else Path.cwd() / config.export_filename
            entries = store.list("date")
            export_to_excel(entries, store.summarize(entries), target, config.currency_symbol)
            print(f"Exported {len(entries)} entries to {target}")
            return

        if command is not None:
            print(USAGE, file=sys.stderr)
            sys.exit(2)

        app = TimesheetApp()
    except (TimesheetError, OSError) as exc:
        logger.error("timesheet %s failed: %s", command or "app", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    app.run()


if __name__ == "__main__":
    main()
