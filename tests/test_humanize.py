"""Tests for relative time rendering."""

from datetime import datetime, timedelta, timezone

import pytest

from blame_lens.core.humanize import format_datetime, humanize_time

NOW = datetime(2024, 6, 15, 12, 0, 0)


def ago(**delta):
    moment = NOW - timedelta(**delta)
    return moment.strftime("%Y-%m-%d"), moment.strftime("%H:%M:%S")


@pytest.mark.parametrize(
    "delta,expected",
    [
        ({"seconds": 0}, "Now"),
        ({"seconds": 30}, "Now"),
        ({"seconds": 125}, "2 minutes ago"),
        ({"minutes": 59}, "59 minutes ago"),
        ({"seconds": 3600}, "Hour ago"),
        ({"seconds": 3659}, "Hour ago"),
        ({"seconds": 3660}, "1 hours ago"),
        ({"hours": 5}, "5 hours ago"),
        ({"seconds": 90000}, "Yesterday"),
        ({"days": 3}, "3 days ago"),
        ({"days": 7}, "Last week"),
        ({"days": 10}, "Last week"),
        ({"days": 15}, "2 weeks ago"),
        ({"days": 34}, "4 weeks ago"),
        ({"days": 35}, "Previous month"),
        ({"days": 95}, "3 months ago"),
        ({"days": 400}, "Previous year"),
        ({"days": 800}, "2 years ago"),
    ],
)
def test_humanize_buckets(delta, expected):
    date, time = ago(**delta)
    assert humanize_time(date, time, now=NOW) == expected


def test_future_timestamp_is_now():
    date, time = ago(hours=-2)
    assert humanize_time(date, time, now=NOW) == "Now"


def test_very_old_commits_show_absolute_time():
    assert humanize_time("2010-03-01", "09:15:42", now=NOW) == "2010-03-01 09:15"


def test_prettify_disabled():
    date, time = ago(seconds=30)
    assert humanize_time(date, time, now=NOW, prettify=False) == "2024-06-15 11:59"


def test_format_datetime_drops_seconds():
    assert format_datetime("2024-01-02", "03:04:05") == "2024-01-02 03:04"


def test_zone_offset_is_applied():
    """A commit made 30 minutes ago in +0900 is not "Now" when viewed from UTC."""
    now = datetime(2024, 6, 15, 13, 0, 0, tzinfo=timezone.utc)
    humanized = humanize_time("2024-06-15", "21:30:00", now=now, zone="+0900")
    assert humanized == "30 minutes ago"


def test_negative_zone_offset():
    now = datetime(2024, 6, 15, 13, 0, 0, tzinfo=timezone.utc)
    assert humanize_time("2024-06-15", "06:00:00", now=now, zone="-0500") == "2 hours ago"


def test_zone_with_naive_now_uses_local_time():
    now = datetime(2024, 6, 15, 13, 0, 0)
    local = now.astimezone()
    offset = local.utcoffset()
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    zone = f"{sign}{minutes // 60:02d}{minutes % 60:02d}"
    assert humanize_time("2024-06-15", "12:00:00", now=now, zone=zone) == "Hour ago"


def test_prettify_disabled_keeps_printed_time():
    now = datetime(2024, 6, 15, 13, 0, 0, tzinfo=timezone.utc)
    assert (
        humanize_time("2024-06-15", "21:30:00", now=now, prettify=False, zone="+0900")
        == "2024-06-15 21:30"
    )
