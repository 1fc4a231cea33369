from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from followuply.validation.fields import (
    is_amount_in_range, is_email, is_text_length_in_range, is_uuid,
    is_valid_date, is_valid_time, parse_amount, parse_date, parse_datetime
)


def test_is_uuid():
    assert is_uuid("3f2b8c1e-9d4a-4c6b-8e2f-1a2b3c4d5e6f")
    assert not is_uuid("3f2b8c1e-9d4a-4c6b-8e2f")
    assert not is_uuid("not-a-uuid")
    assert not is_uuid(None)


def test_is_email():
    assert is_email("jane@x.com")
    assert not is_email("jane@x")
    assert not is_email("a" * 250 + "@x.com")


@pytest.mark.parametrize("value,expected", [
    ("09:30", True),
    ("23:59", True),
    ("24:00", False),
    ("9:5", False),
    ("", False),
])
def test_is_valid_time(value, expected):
    assert is_valid_time(value) is expected


def test_parse_date_accepts_iso_strings_and_objects():
    assert parse_date("2025-03-01") == date(2025, 3, 1)
    assert parse_date("2025-03-01T10:00:00Z") == date(2025, 3, 1)
    assert parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
    assert parse_date("2025-02-30") is None
    assert not is_valid_date("soon")


def test_parse_datetime():
    assert parse_datetime("2025-03-01T10:15") == datetime(2025, 3, 1, 10, 15)
    assert parse_datetime("garbage") is None


def test_parse_datetime_converts_offsets_to_naive_utc():
    assert parse_datetime("2030-06-20T08:00+02:00") == datetime(2030, 6, 20, 6, 0)
    assert parse_datetime("2030-06-20T08:00:00Z") == datetime(2030, 6, 20, 8, 0)
    aware = datetime(2030, 6, 20, 8, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert parse_datetime(aware) == datetime(2030, 6, 20, 13, 0)


@pytest.mark.parametrize("value,expected", [
    ("12.50", Decimal("12.50")),
    (12, Decimal("12")),
    ("  7 ", Decimal("7")),
    ("abc", None),
    ("", None),
    (True, None),
    ("NaN", None),
    ("Infinity", None),
])
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


def test_amount_range():
    assert is_amount_in_range("999999999.99")
    assert not is_amount_in_range("1000000000")
    assert not is_amount_in_range("-1")


def test_text_length_range():
    assert is_text_length_in_range("abc", 1, 3)
    assert not is_text_length_in_range("", 1, 3)
    assert not is_text_length_in_range(None)
