"""Parse ``git blame`` output into attribution records.

Each attributed source line is printed by git as::

    <hash> [<path>] (<author> <date> <time> [<zone>] <line>)<content>

``<hash>`` carries a leading ``^`` for boundary commits and is all zeros for
lines that are not committed yet (author ``Not Committed Yet``). ``<path>``
only appears when the line was attributed to a file under a different name.
Any line git could not attribute is reported as ``fatal: ...`` text instead.
"""

import logging
import re
from typing import List, Optional

from blame_lens.core.git_client import FATAL_PREFIX
from blame_lens.errors import AttributionParseFailure
from blame_lens.models.record import (
    LOCAL_AUTHOR_PLACEHOLDER,
    UNCOMMITTED_AUTHOR,
    AttributionRecord,
)

logger = logging.getLogger(__name__)

BLAME_LINE_PATTERN = re.compile(
    r"""
    ^\^?(?P<hash>[0-9a-fA-F]+)
    \s+(?:(?P<path>[^\s(][^(]*?)\s+)?
    \((?P<author>.*?)\s+
    (?P<date>\d{4}-\d{2}-\d{2})\s+
    (?P<time>\d{2}:\d{2}:\d{2})
    (?:\s+(?P<zone>[+-]\d{4}))?
    \s+(?P<line>\d+)\)
    (?P<content>.*)$
    """,
    re.VERBOSE,
)


class AttributionParser:
    """Turns raw blame text into AttributionRecord objects."""

    def __init__(
        self,
        local_identity: Optional[str] = None,
        uncommitted_message: str = "Uncommitted changes",
    ):
        self.local_identity = local_identity
        self.uncommitted_message = uncommitted_message

    def parse(self, text: str) -> List[Optional[AttributionRecord]]:
        """Parse every block in ``text``.

        Returns one entry per non-empty block, ``None`` for blocks that do not
        describe a line, so one bad line never hides the others.
        """
        records = []
        for block in text.splitlines():
            if not block.strip():
                continue
            try:
                records.append(self.parse_line(block))
            except AttributionParseFailure as e:
                logger.debug("Skipping blame line: %s", e)
                records.append(None)
        return records

    def parse_line(self, block: str) -> AttributionRecord:
        """Parse a single blame line.

        Raises:
            AttributionParseFailure: For ``fatal:`` blocks and blocks that do
                not match the blame line format.
        """
        if block.lstrip().startswith(FATAL_PREFIX):
            raise AttributionParseFailure(block, "git reported an error")

        match = BLAME_LINE_PATTERN.match(block)
        if match is None:
            raise AttributionParseFailure(block, "unrecognized blame line")

        author = match.group("author").strip()
        fields = {
            "commit_id": match.group("hash"),
            "author": author,
            "date": match.group("date"),
            "time": match.group("time"),
            "zone": match.group("zone"),
            "line_number": int(match.group("line")),
        }

        if author == UNCOMMITTED_AUTHOR:
            fields["author"] = LOCAL_AUTHOR_PLACEHOLDER
            fields["commit_message"] = self.uncommitted_message
            fields["uncommitted"] = True
        elif self.local_identity and author == self.local_identity:
            fields["author"] = LOCAL_AUTHOR_PLACEHOLDER

        return AttributionRecord(**fields)
