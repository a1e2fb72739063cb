"""Attribution record model for blamed lines."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel

UNCOMMITTED_AUTHOR = "Not Committed Yet"
LOCAL_AUTHOR_PLACEHOLDER = "You"


def parse_timestamp(date: str, time: str, zone: Optional[str] = None) -> datetime:
    """Parse blame's date and time, aware when a ``+HHMM`` offset is given."""
    timestamp = datetime.strptime(f"{date} {time}", "%Y-%m-%d %H:%M:%S")
    if not zone:
        return timestamp
    sign = -1 if zone.startswith("-") else 1
    offset = timedelta(hours=int(zone[1:3]), minutes=int(zone[3:5]))
    return timestamp.replace(tzinfo=timezone(sign * offset))


class AttributionRecord(BaseModel):
    """Represents the revision that last touched a single source line."""

    commit_id: str
    author: str
    date: str
    time: str
    line_number: int
    zone: Optional[str] = None
    commit_message: Optional[str] = None
    uncommitted: bool = False

    model_config = {"frozen": True}

    @property
    def is_uncommitted(self) -> bool:
        """Check if the line only exists in the working tree.

        git prints an all-zero hash for lines that are not committed yet.
        """
        return self.uncommitted or (
            bool(self.commit_id) and set(self.commit_id) == {"0"}
        )

    @property
    def timestamp(self) -> datetime:
        """Get the commit date and time, aware when git printed the zone."""
        return parse_timestamp(self.date, self.time, self.zone)


class CommitInfo(BaseModel):
    """Full commit details for a single blamed line."""

    commit_id: str
    author: str
    date: str
    time: str
    humanized_time: str
    message: Optional[str] = None
    uncommitted: bool = False
