"""Commit message lookup for annotated lines."""

import logging
import re
from typing import Dict, Optional

from blame_lens.core.git_client import FATAL_PREFIX, GitClient
from blame_lens.errors import CommitLookupFailure

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
_BLANK_LINE = re.compile(r"\n[ \t]*\n")


def extract_message(show_output: str) -> Optional[str]:
    """Get the first message paragraph from ``git show -s`` output.

    The headers (commit, Author, Date, ...) end at the first blank line; the
    message follows, indented. Line breaks inside the paragraph are collapsed
    to single spaces.
    """
    if not show_output or show_output.lstrip().startswith(FATAL_PREFIX):
        return None

    parts = _BLANK_LINE.split(show_output.strip("\n"), maxsplit=1)
    if len(parts) < 2:
        return None

    body = parts[1].strip()
    if not body:
        return None

    paragraph = _BLANK_LINE.split(body, maxsplit=1)[0]
    message = " ".join(line.strip() for line in paragraph.splitlines())
    return message.strip() or None


def truncate(message: str, max_length: Optional[int]) -> str:
    """Cut ``message`` to ``max_length`` characters plus an ellipsis."""
    if not max_length or len(message) <= max_length:
        return message
    return message[:max_length] + ELLIPSIS


class CommitMessageResolver:
    """Resolves single-line commit summaries for blamed revisions.

    Lookups are memoized per resolver so annotating a selection that touches
    the same commit many times only runs ``git show`` once.
    """

    def __init__(self, git_client: GitClient, max_length: Optional[int] = None):
        self.git_client = git_client
        self.max_length = max_length
        self._messages: Dict[str, Optional[str]] = {}

    def resolve(self, commit_id: str) -> Optional[str]:
        """Get the (possibly truncated) message, or None if unavailable."""
        message = self.full_message(commit_id)
        if message is None:
            return None
        return truncate(message, self.max_length)

    def full_message(self, commit_id: str) -> Optional[str]:
        """Get the untruncated first paragraph of the commit message."""
        if commit_id not in self._messages:
            try:
                self._messages[commit_id] = self._lookup(commit_id)
            except CommitLookupFailure as e:
                logger.debug("%s", e)
                return None
        return self._messages[commit_id]

    def _lookup(self, commit_id: str) -> Optional[str]:
        output = self.git_client.show_commit(commit_id)
        if output.lstrip().startswith(FATAL_PREFIX):
            raise CommitLookupFailure(commit_id, output.strip())
        return extract_message(output)

    def clear(self) -> None:
        self._messages.clear()
