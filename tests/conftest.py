"""Shared fixtures and fakes for blame-lens tests."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

from blame_lens.core.git_client import GitClient
from blame_lens.editor.buffer import EditorBuffer


class FakeGitClient(GitClient):
    """GitClient returning canned blame and show output."""

    def __init__(self, blame_lines=None, messages=None, identity="Test User"):
        super().__init__(Path("/fake/repo/file.py"))
        self.blame_lines = blame_lines or {}
        self.messages = messages or {}
        self.identity = identity
        self.blame_calls = []
        self.show_calls = []

    def require_work_tree(self) -> Path:
        return Path("/fake/repo")

    def is_inside_work_tree(self) -> bool:
        return True

    def get_local_identity(self):
        return self.identity

    def blame_range(self, start_line, end_line, file_path):
        self.blame_calls.append((start_line, end_line))
        lines = []
        for number in range(start_line, end_line + 1):
            lines.append(
                self.blame_lines.get(number, f"fatal: no blame for line {number}")
            )
        return "\n".join(lines) + "\n"

    def show_commit(self, commit_id):
        self.show_calls.append(commit_id)
        if commit_id not in self.messages:
            return f"fatal: bad object {commit_id}\n"
        return (
            f"commit {commit_id}\n"
            "Author: Jane Doe <jane@example.com>\n"
            "Date:   Fri Apr 5 12:34:56 2024 +0200\n"
            "\n"
            f"    {self.messages[commit_id]}\n"
        )


class FakeTimer:
    """Timer that only fires when the test says so."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.fired = True
        self.callback()


class FakeTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, callback):
        timer = FakeTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self):
        return self.timers[-1]

    @property
    def armed(self):
        return [t for t in self.timers if not (t.cancelled or t.fired)]


class FakeBuffer(EditorBuffer):
    """In-memory buffer; each line ends one position after its text."""

    def __init__(self, lines, path=Path("/fake/repo/file.py")):
        super().__init__()
        self.lines = list(lines)
        self.path = path
        self.highlight = None
        self.region = None
        self.at_point = None

    @property
    def file_path(self):
        return self.path

    def line_text(self, line_number):
        return self.lines[line_number - 1]

    def line_end_position(self, line_number):
        return sum(len(line) + 1 for line in self.lines[:line_number]) - 1

    def line_count(self):
        return len(self.lines)

    def selection_background(self):
        return self.region

    def line_highlight_background(self):
        return self.highlight

    def point_background(self):
        return self.at_point


def blame_line(line_number, author="Jane Doe", commit="1a2b3c4d", date="2024-04-05"):
    return (
        f"{commit} ({author} {date} 12:34:56 +0200 {line_number:>2}) "
        f"code line {line_number}"
    )


@pytest.fixture
def fake_git():
    return FakeGitClient(
        blame_lines={n: blame_line(n) for n in range(1, 61)},
        messages={"1a2b3c4d": "Fix the frobnicator"},
    )


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def temp_git_project():
    """Create a temporary git project with one committed file."""
    with tempfile.TemporaryDirectory() as temp_dir:
        project_path = Path(temp_dir).resolve()

        repo = Repo.init(project_path)
        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        (project_path / "main.py").write_text("def main():\n    print('Hello')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Initial commit\n\nLonger description of the commit.")

        yield project_path


@pytest.fixture
def latin1_file(temp_git_project):
    """Commit a file whose second line is Latin-1, not UTF-8."""
    repo = Repo(temp_git_project)
    file_path = temp_git_project / "latin.py"
    file_path.write_bytes(b"a = 1\nname = 'Jos\xe9'\nb = 2\n")
    repo.index.add(["latin.py"])
    repo.index.commit("Add Latin-1 names")
    return file_path
