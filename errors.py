"""Exceptions raised by the timesheet store and its collaborators."""

from __future__ import annotations


class TimesheetError(Exception):
    """Base class for all timesheet errors."""


class ValidationError(TimesheetError):
    """A raw session field is missing or malformed."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFoundError(TimesheetError):
    """No entry exists with the given id."""

    def __init__(self, entry_id: str):
        super().__init__(f"No timesheet entry with id {entry_id!r}")
        self.entry_id = entry_id


class PersistenceError(TimesheetError):
    """The backing database failed to apply an operation."""


class ExportError(TimesheetError):
    """The export could not be produced."""
