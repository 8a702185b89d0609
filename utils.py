"""Input validation and display formatting for timesheet fields."""

from __future__ import annotations

import re
from datetime import date, datetime

from errors import ValidationError
from models import RawSession

TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")
BREAKS_PATTERN = re.compile(r"^[0-9]+$")

# Upper bound offered by the entry form.
MAX_BREAKS = 10
# Largest count the store accepts; fits a 32-bit database integer.
MAX_BREAK_COUNT = 2**31 - 1

ORDER_KEYS = ("date", "week")

US_DATE_FORMAT = "%m/%d/%Y"
TIMESTAMP_FORMAT = "%m/%d/%Y %H:%M"


def parse_date(val: date | str | None) -> date | None:
    """Parse a date from a date object, ISO text or MM/DD/YYYY text."""
    if val is None:
        return None
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val

    text = val.strip()
    if not text:
        return None
    for parser in (date.fromisoformat, lambda s: datetime.strptime(s, US_DATE_FORMAT).date()):
        try:
            return parser(text)
        except ValueError:
            continue
    return None


def is_valid_time(val: str | None) -> bool:
    return bool(val) and TIME_PATTERN.match(val.strip()) is not None


def validate_session(raw: RawSession) -> RawSession:
    """Check every field of a raw session.

    Returns a normalised copy (stripped text, ``date`` as a date object,
    ``number_of_breaks`` as an int). Raises ValidationError naming the first
    offending field.
    """
    week = (raw.week or "").strip()
    if not week:
        raise ValidationError("week", "Week is required")

    entry_date = parse_date(raw.date)
    if entry_date is None:
        raise ValidationError("date", "Date is required (YYYY-MM-DD)")

    if not is_valid_time(raw.sign_in):
        raise ValidationError("sign_in", "Use HH:MM format")
    if not is_valid_time(raw.sign_out):
        raise ValidationError("sign_out", "Use HH:MM format")

    breaks = raw.number_of_breaks
    breaks_text = str(breaks).strip() if breaks is not None else ""
    if isinstance(breaks, bool) or not BREAKS_PATTERN.match(breaks_text):
        raise ValidationError("number_of_breaks", "Enter number of breaks (whole numbers only)")
    digits = breaks_text.lstrip("0") or "0"
    if len(digits) > len(str(MAX_BREAK_COUNT)) or int(digits) > MAX_BREAK_COUNT:
        raise ValidationError("number_of_breaks", f"At most {MAX_BREAK_COUNT} breaks")

    return RawSession(
        week=week,
        date=entry_date,
        sign_in=raw.sign_in.strip(),
        sign_out=raw.sign_out.strip(),
        number_of_breaks=int(digits),
    )


def format_hours(hours: float) -> str:
    return f"{hours:.2f}"


def format_money(amount: float, symbol: str = "$") -> str:
    return f"{symbol}{amount:,.2f}"


def format_us_date(d: date) -> str:
    return d.strftime(US_DATE_FORMAT)


def format_timestamp(ts: datetime) -> str:
    return ts.strftime(TIMESTAMP_FORMAT)


def format_breaks(count: int) -> str:
    """'1 break', '3 breaks'."""
    return f"{count} break" if count == 1 else f"{count} breaks"
