"""Tests for commit message resolution."""

from blame_lens.core.commit_message import (
    CommitMessageResolver,
    extract_message,
    truncate,
)

SHOW_OUTPUT = """commit 1a2b3c4d5e6f
Merge: 111111 222222
Author: Jane Doe <jane@example.com>
Date:   Fri Apr 5 12:34:56 2024 +0200

    Fix the frobnicator when the
    widget is empty

    The widget could be empty after a reset, which made the
    frobnicator divide by zero.
"""


def test_extract_first_paragraph():
    """Test that line breaks inside the summary collapse to spaces."""
    assert extract_message(SHOW_OUTPUT) == (
        "Fix the frobnicator when the widget is empty"
    )


def test_extract_fatal_output():
    assert extract_message("fatal: bad object deadbeef\n") is None


def test_extract_without_body():
    assert extract_message("commit abc\nAuthor: Jane <j@x>\n") is None


def test_truncate_long_message():
    message = "a" * 40
    assert truncate(message, 30) == "a" * 30 + "..."


def test_truncate_leaves_short_messages():
    assert truncate("a" * 30, 30) == "a" * 30
    assert truncate("short", 30) == "short"


def test_truncate_disabled():
    message = "a" * 100
    assert truncate(message, 0) == message
    assert truncate(message, None) == message


def test_resolver_truncates(fake_git):
    resolver = CommitMessageResolver(fake_git, max_length=8)
    assert resolver.resolve("1a2b3c4d") == "Fix the ..."


def test_resolver_returns_none_on_lookup_failure(fake_git):
    resolver = CommitMessageResolver(fake_git, max_length=30)
    assert resolver.resolve("deadbeef") is None


def test_resolver_memoizes_lookups(fake_git):
    """Test that each commit is shown at most once."""
    resolver = CommitMessageResolver(fake_git, max_length=30)

    resolver.resolve("1a2b3c4d")
    resolver.resolve("1a2b3c4d")
    assert resolver.full_message("1a2b3c4d") == "Fix the frobnicator"

    assert fake_git.show_calls == ["1a2b3c4d"]
