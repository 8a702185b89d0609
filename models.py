from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

# Pay per hour worked, in the configured currency.
HOURLY_RATE = 17.50


@dataclass
class RawSession:
    """Form input for one work session, before validation."""

    week: str
    date: date | str | None
    sign_in: str
    sign_out: str
    number_of_breaks: str | int = "1"


@dataclass(frozen=True)
class Breakdown:
    hours_worked: float = 0.0
    paid_break_hours: float = 0.0
    unpaid_break_hours: float = 0.0
    pay: float = 0.0


ZERO_BREAKDOWN = Breakdown()


@dataclass
class TimesheetEntry:
    id: str
    week: str
    date: date
    sign_in: str
    sign_out: str
    number_of_breaks: int
    hours_worked: float
    paid_break_hours: float
    unpaid_break_hours: float
    submitted_at: datetime

    @property
    def paid_break_minutes(self) -> int:
        """Paid break time in whole minutes, for display."""
        return round(self.paid_break_hours * 60)

    @property
    def unpaid_break_minutes(self) -> int:
        """Unpaid break time in whole minutes, for display."""
        return round(self.unpaid_break_hours * 60)

    def to_raw(self) -> RawSession:
        """Raw form fields that reproduce this entry."""
        return RawSession(
            week=self.week,
            date=self.date,
            sign_in=self.sign_in,
            sign_out=self.sign_out,
            number_of_breaks=str(self.number_of_breaks),
        )


@dataclass(frozen=True)
class Summary:
    total_hours: float = 0.0
    total_pay: float = 0.0
    entry_count: int = 0


@dataclass
class Config:
    hourly_rate: float = HOURLY_RATE
    currency_symbol: str = "$"
    export_filename: str = "My_Timesheet.xlsx"
