"""Relative, human friendly rendering of commit times."""

from datetime import datetime, timezone
from typing import Optional

from blame_lens.models.record import parse_timestamp

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR


def format_datetime(date: str, time: str) -> str:
    """Render the absolute form ``YYYY-MM-DD HH:MM``."""
    return f"{date} {time[:5]}"


def humanize_time(
    date: str,
    time: str,
    now: Optional[datetime] = None,
    prettify: bool = True,
    zone: Optional[str] = None,
) -> str:
    """Describe how long ago ``date`` + ``time`` was.

    With a ``zone`` such as ``+0900`` the commit time is compared as an
    absolute instant; a naive ``now`` is then taken as local time. Without
    one both sides are treated as local wall-clock times.

    Buckets are approximate: a month is 30 days and a year is 12 of those
    months.
    """
    if not prettify:
        return format_datetime(date, time)

    timestamp = parse_timestamp(date, time, zone)
    now = now or datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        if now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
    elif now.tzinfo is None:
        now = now.astimezone()
    seconds = int((now - timestamp).total_seconds())

    minutes = seconds // MINUTE
    hours = seconds // HOUR
    days = seconds // DAY
    weeks = days // 7
    months = days // 30
    years = months // 12

    if seconds < MINUTE:
        return "Now"
    if seconds < HOUR:
        return f"{minutes} minutes ago"
    if minutes == 60:
        return "Hour ago"
    if seconds < DAY:
        return f"{hours} hours ago"
    if days == 1:
        return "Yesterday"
    if days < 7:
        return f"{days} days ago"
    if weeks == 1:
        return "Last week"
    if weeks <= 4:
        return f"{weeks} weeks ago"
    if months == 1:
        return "Previous month"
    if months < 12:
        return f"{months} months ago"
    if years == 1:
        return "Previous year"
    if years < 10:
        return f"{years} years ago"
    return format_datetime(date, time)
