"""Modal screens for the timesheet application."""

from __future__ import annotations

from datetime import date

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label
from textual.screen import ModalScreen

from calculator import effective_breaks, parse_minutes
from errors import ValidationError
from models import RawSession, TimesheetEntry
from store import EntryStore
from utils import BREAKS_PATTERN, MAX_BREAK_COUNT, MAX_BREAKS, validate_session
from widgets import BreakdownPreview

# Input id -> RawSession field
FIELD_IDS = {
    "week": "week",
    "date": "date",
    "sign-in": "sign_in",
    "sign-out": "sign_out",
    "breaks": "number_of_breaks",
}
FIELD_INPUTS = {name: input_id for input_id, name in FIELD_IDS.items()}


class ConfirmScreen(ModalScreen[bool]):
    """Yes/no dialog, used before destructive actions."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $error;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str, confirm_label: str = "Yes"):
        super().__init__()
        self.message = message
        self.confirm_label = confirm_label

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button(f"{self.confirm_label} (Y)", variant="error", id="yes")
                yield Button("Cancel (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class EntryFormScreen(ModalScreen[RawSession | None]):
    """Modal form for submitting a new entry or editing an existing one."""

    CSS = """
    EntryFormScreen {
        align: center middle;
    }

    #entry-dialog {
        width: 76;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #entry-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    .field-row Input {
        width: 100%;
    }

    #preview {
        height: auto;
        padding: 0 1;
        background: $boost;
    }

    #entry-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #entry-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # Field order for Enter key navigation
    FIELD_ORDER = ["week", "date", "sign-in", "sign-out", "breaks"]

    def __init__(self, entry: TimesheetEntry | None = None, store: EntryStore | None = None):
        super().__init__()
        self.entry = entry
        self.store = store or EntryStore()

    @property
    def is_edit(self) -> bool:
        return self.entry is not None

    def initial_values(self) -> dict[str, str]:
        """Input values keyed by input id."""
        if self.entry is None:
            return {
                "week": "",
                "date": date.today().isoformat(),
                "sign-in": "",
                "sign-out": "",
                "breaks": "1",
            }
        return {
            "week": self.entry.week,
            "date": self.entry.date.isoformat(),
            "sign-in": self.entry.sign_in,
            "sign-out": self.entry.sign_out,
            "breaks": str(self.entry.number_of_breaks),
        }

    def compose(self) -> ComposeResult:
        values = self.initial_values()
        title = "Edit Timesheet Entry" if self.is_edit else "Timesheet Entry"

        with Vertical(id="entry-dialog"):
            yield Label(title, id="entry-title")

            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Week", classes="field-label")
                    yield Input(value=values["week"], placeholder="e.g., Week 1, Jan 1-7", id="week")
                with Vertical(classes="field-group"):
                    yield Label("Date (YYYY-MM-DD)", classes="field-label")
                    yield Input(value=values["date"], placeholder="2024-01-15", id="date")

            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Sign In (HH:MM)", classes="field-label")
                    yield Input(value=values["sign-in"], placeholder="09:00", id="sign-in")
                with Vertical(classes="field-group"):
                    yield Label("Sign Out (HH:MM)", classes="field-label")
                    yield Input(value=values["sign-out"], placeholder="17:00", id="sign-out")
                with Vertical(classes="field-group"):
                    yield Label(f"Breaks (0-{MAX_BREAKS})", classes="field-label")
                    yield Input(value=values["breaks"], placeholder="1", id="breaks", type="integer")

            yield BreakdownPreview(id="preview")

            with Horizontal(id="entry-buttons"):
                yield Button("Update Entry" if self.is_edit else "Submit", variant="primary", id="save")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self._update_preview()
        self.query_one("#week", Input).focus()

    def _value(self, input_id: str) -> str:
        return self.query_one(f"#{input_id}", Input).value

    def read_session(self) -> RawSession:
        return RawSession(
            week=self._value("week"),
            date=self._value("date"),
            sign_in=self._value("sign-in"),
            sign_out=self._value("sign-out"),
            number_of_breaks=self._value("breaks"),
        )

    def _update_preview(self) -> None:
        raw = self.read_session()
        preview = self.query_one("#preview", BreakdownPreview)
        if parse_minutes(raw.sign_in) is None or parse_minutes(raw.sign_out) is None:
            preview.update_display(None)
            return
        preview.update_display(self.store.preview(raw), self.displayed_breaks(raw.number_of_breaks))

    @staticmethod
    def displayed_breaks(val: str) -> int:
        """The count as typed, or the policy default while it is not a number."""
        text = (val or "").strip()
        if BREAKS_PATTERN.match(text) and len(text.lstrip("0")) <= len(str(MAX_BREAK_COUNT)):
            return int(text)
        return effective_breaks(text)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id in ("sign-in", "sign-out", "breaks"):
            self._update_preview()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or save if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._save_entry()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "save":
            self._save_entry()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def check_session(self, raw: RawSession) -> RawSession:
        """Validate as the store does, plus the form's break limit."""
        clean = validate_session(raw)
        if int(clean.number_of_breaks) > MAX_BREAKS:
            raise ValidationError("number_of_breaks", f"At most {MAX_BREAKS} breaks")
        return clean

    def _save_entry(self) -> None:
        raw = self.read_session()
        try:
            self.check_session(raw)
        except ValidationError as exc:
            self.app.notify(exc.message, title=exc.field.replace("_", " ").title(), severity="error")
            self.query_one(f"#{FIELD_INPUTS[exc.field]}", Input).focus()
            return
        self.dismiss(raw)
