"""Worked hours and pay for a single work session.

Break policy: the first break is 30 minutes and paid, so it stays inside the
worked hours. Every further break is 30 minutes and unpaid, and is deducted.
A sign-out earlier than the sign-in is taken to fall on the following day.
"""

from __future__ import annotations

from datetime import time

from models import HOURLY_RATE, ZERO_BREAKDOWN, Breakdown
from utils import MAX_BREAK_COUNT, TIME_PATTERN

BREAK_HOURS = 0.5
MINUTES_PER_DAY = 24 * 60


def parse_minutes(val: str | time | None) -> int | None:
    """Minutes since midnight for an 'HH:MM' string, or None if unparseable."""
    if val is None:
        return None
    if isinstance(val, time):
        return val.hour * 60 + val.minute

    match = TIME_PATTERN.match(val.strip())
    if not match:
        return None
    return int(match.group(1)) * 60 + int(match.group(2))


def effective_breaks(val: str | int | None) -> int:
    """Break count used by the policy.

    A count that does not parse, or parses below 1, is treated as a single
    break: an empty or zero count still earns the paid 30 minutes. Counts
    above MAX_BREAK_COUNT are capped there.
    """
    try:
        count = int(str(val).strip())
    except ValueError:
        return 1
    return min(count, MAX_BREAK_COUNT) if count >= 1 else 1


def session_hours(in_minutes: int, out_minutes: int) -> float:
    total = out_minutes - in_minutes
    if total < 0:
        total += MINUTES_PER_DAY
    return total / 60


class PayCalculator:
    """Applies the break policy and an hourly rate to session times."""

    def __init__(self, rate: float = HOURLY_RATE):
        self.rate = rate

    def compute(
        self,
        sign_in: str | time | None,
        sign_out: str | time | None,
        number_of_breaks: str | int | None = "1",
    ) -> Breakdown:
        in_minutes = parse_minutes(sign_in)
        out_minutes = parse_minutes(sign_out)
        if in_minutes is None or out_minutes is None:
            return ZERO_BREAKDOWN

        total_hours = session_hours(in_minutes, out_minutes)
        breaks = effective_breaks(number_of_breaks)

        paid = BREAK_HOURS if breaks >= 1 else 0.0
        unpaid = (breaks - 1) * BREAK_HOURS if breaks > 1 else 0.0
        worked = max(0.0, total_hours - unpaid)

        return Breakdown(
            hours_worked=worked,
            paid_break_hours=paid,
            unpaid_break_hours=unpaid,
            pay=worked * self.rate,
        )

    def pay_for(self, hours: float) -> float:
        return hours * self.rate


_default = PayCalculator()


def compute(
    sign_in: str | time | None,
    sign_out: str | time | None,
    number_of_breaks: str | int | None = "1",
) -> Breakdown:
    """Compute a session breakdown at the standard hourly rate."""
    return _default.compute(sign_in, sign_out, number_of_breaks)
