# tests/test_dates.py
import re
from datetime import date, datetime, timedelta, timezone

from utils import dates


def test_format_date():
    assert dates.format_date(date(2024, 9, 3)) == "2024-09-03"
    assert dates.format_date(None) == ""


def test_format_timestamp():
    assert dates.format_timestamp(datetime(2024, 9, 3, 4, 5, 6)) == "2024-09-03 04:05:06"
    assert dates.format_timestamp(None) == ""


def test_parse_timestamp_keeps_offset():
    ts = dates.parse_timestamp("2024-09-03T14:05:09-04:00")
    assert ts.utcoffset() == timedelta(hours=-4)
    assert dates.format_timestamp(ts) == "2024-09-03 14:05:09"


def test_parse_timestamp_z_and_naive():
    assert dates.parse_timestamp("2024-09-03T14:05:09Z").tzinfo == timezone.utc
    assert dates.parse_timestamp("2024-09-03T14:05:09").tzinfo == timezone.utc
    assert dates.parse_timestamp(None) is None
    assert dates.parse_timestamp("") is None


def test_parse_date_accepts_date_or_timestamp():
    assert dates.parse_date("2024-10-15") == date(2024, 10, 15)
    assert dates.parse_date("2024-10-15T23:59:00Z") == date(2024, 10, 15)
    assert dates.parse_date(None) is None
