"""The authoritative collection of timesheet entries.

``EntryStore`` keeps an in-memory index of entries keyed by id, in insertion
order. An optional sink (normally the ``storage`` module) mirrors every
change: each mutation is written to the sink first and only applied to the
index once the write has returned, so a failed write leaves the store as it
was. Sink errors propagate unchanged.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Protocol

from calculator import PayCalculator
from errors import NotFoundError, TimesheetError
from models import HOURLY_RATE, Breakdown, RawSession, Summary, TimesheetEntry
from utils import ORDER_KEYS, validate_session

logger = logging.getLogger(__name__)

# Fresh ids drawn before giving up on a colliding id factory
ID_ATTEMPTS = 5


class EntrySink(Protocol):
    def insert_entry(self, entry: TimesheetEntry) -> None: ...

    def replace_entry(self, entry_id: str, entry: TimesheetEntry) -> None: ...

    def remove_entry(self, entry_id: str) -> None: ...

    def get_all_entries(self, order_by: str | None = None) -> list[TimesheetEntry]: ...


def _new_id() -> str:
    return uuid.uuid4().hex


class EntryStore:
    def __init__(
        self,
        sink: EntrySink | None = None,
        rate: float = HOURLY_RATE,
        calculator: PayCalculator | None = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.sink = sink
        self.calculator = calculator or PayCalculator(rate)
        self._clock = clock
        self._id_factory = id_factory
        self._entries: dict[str, TimesheetEntry] = {}

    @property
    def rate(self) -> float:
        return self.calculator.rate

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries

    def load(self) -> int:
        """Replace the index with the sink's contents. Returns the entry count."""
        if self.sink is None:
            return len(self._entries)
        entries = self.sink.get_all_entries()
        self._entries = {entry.id: entry for entry in entries}
        logger.info("Loaded %d timesheet entries", len(self._entries))
        return len(self._entries)

    def _build(self, entry_id: str, raw: RawSession, submitted_at: datetime) -> TimesheetEntry:
        clean = validate_session(raw)
        breakdown = self.calculator.compute(clean.sign_in, clean.sign_out, clean.number_of_breaks)
        return TimesheetEntry(
            id=entry_id,
            week=clean.week,
            date=clean.date,  # type: ignore[arg-type]
            sign_in=clean.sign_in,
            sign_out=clean.sign_out,
            number_of_breaks=clean.number_of_breaks,  # type: ignore[arg-type]
            hours_worked=breakdown.hours_worked,
            paid_break_hours=breakdown.paid_break_hours,
            unpaid_break_hours=breakdown.unpaid_break_hours,
            submitted_at=submitted_at,
        )

    def _next_id(self) -> str:
        for _ in range(ID_ATTEMPTS):
            entry_id = self._id_factory()
            if entry_id not in self._entries:
                return entry_id
            logger.warning("Entry id %s already in use, drawing another", entry_id)
        raise TimesheetError(f"Could not allocate an unused entry id after {ID_ATTEMPTS} attempts")

    def create(self, raw: RawSession) -> TimesheetEntry:
        """Validate, compute and add a new entry under an unused id."""
        entry = self._build(self._next_id(), raw, self._clock())
        if self.sink is not None:
            self.sink.insert_entry(entry)
        self._entries[entry.id] = entry
        logger.info("Created entry %s (%s, %.2fh)", entry.id, entry.date, entry.hours_worked)
        return replace(entry)

    def update(self, entry_id: str, raw: RawSession) -> TimesheetEntry:
        """Replace every field of an entry except its id and submission time."""
        existing = self._entries.get(entry_id)
        if existing is None:
            raise NotFoundError(entry_id)

        entry = self._build(entry_id, raw, existing.submitted_at)
        if self.sink is not None:
            self.sink.replace_entry(entry_id, entry)
        self._entries[entry_id] = entry
        logger.info("Updated entry %s (%s, %.2fh)", entry_id, entry.date, entry.hours_worked)
        return replace(entry)

    def delete(self, entry_id: str) -> None:
        if entry_id not in self._entries:
            raise NotFoundError(entry_id)
        if self.sink is not None:
            self.sink.remove_entry(entry_id)
        del self._entries[entry_id]
        logger.info("Deleted entry %s", entry_id)

    def get(self, entry_id: str) -> TimesheetEntry:
        try:
            return replace(self._entries[entry_id])
        except KeyError:
            raise NotFoundError(entry_id) from None

    def list(self, order_by: str = "date") -> list[TimesheetEntry]:
        """Entries ascending by date or week; equal keys keep insertion order."""
        if order_by not in ORDER_KEYS:
            raise ValueError(f"Cannot order entries by {order_by!r}")
        # sorted() is stable and the index is insertion ordered
        return sorted(
            (replace(entry) for entry in self._entries.values()),
            key=lambda entry: getattr(entry, order_by),
        )

    def summarize(self, entries: Iterable[TimesheetEntry] | None = None) -> Summary:
        """Total hours across entries, with pay derived from the total."""
        if entries is None:
            entries = self._entries.values()
        total_hours = 0.0
        count = 0
        for entry in entries:
            total_hours += entry.hours_worked
            count += 1
        return Summary(
            total_hours=total_hours,
            total_pay=self.calculator.pay_for(total_hours),
            entry_count=count,
        )

    def preview(self, raw: RawSession) -> Breakdown:
        """Breakdown for a possibly incomplete form. Never raises."""
        return self.calculator.compute(raw.sign_in, raw.sign_out, raw.number_of_breaks)
