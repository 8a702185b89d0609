"""Tests for utils.py - validation and formatting."""

from datetime import date, datetime

import pytest

from errors import ValidationError
from models import RawSession
from utils import (
    format_breaks,
    format_hours,
    format_money,
    format_timestamp,
    format_us_date,
    is_valid_time,
    parse_date,
    validate_session,
)


def _raw(**overrides) -> RawSession:
    fields = dict(week="Week 1", date="2024-01-15", sign_in="09:00", sign_out="17:00", number_of_breaks="1")
    fields.update(overrides)
    return RawSession(**fields)


class TestParseDate:
    """Tests for parse_date."""

    def test_date_object(self):
        assert parse_date(date(2024, 1, 15)) == date(2024, 1, 15)

    def test_datetime_object(self):
        assert parse_date(datetime(2024, 1, 15, 9, 30)) == date(2024, 1, 15)

    def test_iso_text(self):
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_us_text(self):
        assert parse_date("01/15/2024") == date(2024, 1, 15)

    @pytest.mark.parametrize("val", [None, "", "  ", "2024-02-30", "15/01/2024", "yesterday"])
    def test_invalid(self, val):
        assert parse_date(val) is None


class TestIsValidTime:
    """Tests for is_valid_time."""

    @pytest.mark.parametrize("val", ["00:00", "9:00", "09:00", "23:59", "19:05"])
    def test_valid(self, val):
        assert is_valid_time(val)

    @pytest.mark.parametrize("val", [None, "", "24:00", "9", "09:0", "09:60", "9.00", "0900"])
    def test_invalid(self, val):
        assert not is_valid_time(val)


class TestValidateSession:
    """Tests for validate_session."""

    def test_normalises_fields(self):
        clean = validate_session(_raw(week="  Week 1 ", sign_in=" 9:00", number_of_breaks=" 2 "))
        assert clean.week == "Week 1"
        assert clean.date == date(2024, 1, 15)
        assert clean.sign_in == "9:00"
        assert clean.number_of_breaks == 2

    def test_int_breaks_accepted(self):
        assert validate_session(_raw(number_of_breaks=0)).number_of_breaks == 0

    def test_largest_break_count_accepted(self):
        assert validate_session(_raw(number_of_breaks="2147483647")).number_of_breaks == 2**31 - 1

    def test_leading_zeros_accepted(self):
        assert validate_session(_raw(number_of_breaks="0003")).number_of_breaks == 3

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"week": ""}, "week"),
            ({"week": "   "}, "week"),
            ({"date": None}, "date"),
            ({"date": "not a date"}, "date"),
            ({"sign_in": ""}, "sign_in"),
            ({"sign_in": "25:00"}, "sign_in"),
            ({"sign_out": "17"}, "sign_out"),
            ({"number_of_breaks": ""}, "number_of_breaks"),
            ({"number_of_breaks": "-1"}, "number_of_breaks"),
            ({"number_of_breaks": "2x"}, "number_of_breaks"),
            ({"number_of_breaks": "1.5"}, "number_of_breaks"),
            ({"number_of_breaks": "2147483648"}, "number_of_breaks"),
            ({"number_of_breaks": "1" + "0" * 400}, "number_of_breaks"),
        ],
    )
    def test_names_offending_field(self, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            validate_session(_raw(**overrides))
        assert exc_info.value.field == field

    def test_first_bad_field_reported(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_session(_raw(week="", sign_in="bad"))
        assert exc_info.value.field == "week"


class TestFormatting:
    """Tests for display formatting helpers."""

    def test_format_hours(self):
        assert format_hours(7.5) == "7.50"
        assert format_hours(1 / 3) == "0.33"

    def test_format_money(self):
        assert format_money(183.75) == "$183.75"
        assert format_money(1234.5, "£") == "£1,234.50"

    def test_format_us_date(self):
        assert format_us_date(date(2024, 1, 5)) == "01/05/2024"

    def test_format_timestamp(self):
        assert format_timestamp(datetime(2024, 1, 15, 17, 5, 42)) == "01/15/2024 17:05"

    def test_format_breaks(self):
        assert format_breaks(1) == "1 break"
        assert format_breaks(0) == "0 breaks"
        assert format_breaks(3) == "3 breaks"
