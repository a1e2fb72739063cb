"""Error types raised by the blame annotation engine."""


class BlameLensError(Exception):
    """Base class for blame-lens errors."""


class ToolUnavailable(BlameLensError):
    """The file is not inside a git work tree, or git cannot be run."""


class AttributionParseFailure(BlameLensError):
    """A blame output block could not be turned into a record."""

    def __init__(self, block: str, reason: str):
        self.block = block
        self.reason = reason
        super().__init__(f"{reason}: {block!r}")


class CommitLookupFailure(BlameLensError):
    """The commit message for a revision could not be retrieved."""

    def __init__(self, commit_id: str, reason: str):
        self.commit_id = commit_id
        self.reason = reason
        super().__init__(f"Commit lookup failed for {commit_id}: {reason}")


class ConfigurationInvalid(BlameLensError):
    """The configuration cannot produce annotations or failed validation."""
