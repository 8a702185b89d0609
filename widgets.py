"""Custom widgets for the timesheet application."""

from __future__ import annotations

from textual.widgets import Static
from rich.text import Text

from models import Breakdown, Summary
from utils import format_hours, format_money

BREAK_POLICY = "Break policy: first break (30 min) is paid, additional breaks are unpaid"


class EntriesHeader(Static):
    """Title bar showing the current ordering."""

    def update_display(self, order_by: str, rate: float, currency_symbol: str = "$"):
        text = Text()
        text.append("TIMESHEET RECORDS", style="bold")
        text.append(f"   sorted by {order_by}", style="dim")
        text.append(f"   rate {format_money(rate, currency_symbol)}/hour")
        self.update(text)


class TotalsSummary(Static):
    """Entry count, total hours and pay for the listed entries."""

    def update_display(self, summary: Summary, currency_symbol: str = "$"):
        if not summary.entry_count:
            self.update(Text("No timesheet entries yet. Press n to add your first entry.", style="dim"))
            return

        text = Text()
        text.append(f"Total entries: {summary.entry_count}")
        text.append(f"      Total Hours: {format_hours(summary.total_hours)}", style="bold")
        text.append(f"      Weekly Pay: {format_money(summary.total_pay, currency_symbol)}", style="bold green")
        self.update(text)


class BreakdownPreview(Static):
    """Live hours/break calculation shown while filling in the entry form."""

    def update_display(self, breakdown: Breakdown | None, breaks: int = 1):
        if breakdown is None:
            self.update(Text("Enter sign in and sign out times to see hours worked", style="dim"))
            return

        text = Text()
        text.append("Hours Worked: ")
        text.append(f"{format_hours(breakdown.hours_worked)} hours\n", style="bold")
        text.append(f"Number of Breaks: {breaks}    Paid Break: {round(breakdown.paid_break_hours * 60)} min")
        if breakdown.unpaid_break_hours:
            text.append(f"    Unpaid Breaks: {round(breakdown.unpaid_break_hours * 60)} min", style="red")
        text.append(f"\n{BREAK_POLICY}", style="dim")
        self.update(text)
