"""Git access for blame annotations."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional

import git
from git import Repo

from blame_lens.errors import ToolUnavailable

logger = logging.getLogger(__name__)

FATAL_PREFIX = "fatal:"


class GitClient:
    """Thin wrapper around the git commands the annotation engine needs.

    Repository discovery and config lookups go through GitPython. The blame
    and show commands are run as subprocesses with stderr folded into the
    returned text, so a failing command comes back as ``fatal: ...`` output
    instead of an exception.
    """

    def __init__(self, path: Path):
        self.path = Path(path).resolve()
        self._repo: Optional[Repo] = None

    @property
    def repo(self) -> Repo:
        """Get the repository containing ``path``."""
        if self._repo is None:
            start = self.path if self.path.is_dir() else self.path.parent
            try:
                self._repo = Repo(start, search_parent_directories=True)
            except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
                raise ToolUnavailable(f"Not a git repository: {start}") from e
        return self._repo

    @property
    def work_tree(self) -> Path:
        working_dir = self.repo.working_tree_dir
        if working_dir is None:
            raise ToolUnavailable(f"Repository has no work tree: {self.repo.git_dir}")
        return Path(working_dir)

    def is_inside_work_tree(self) -> bool:
        """Check if ``path`` lives inside a git work tree."""
        try:
            self.work_tree
        except ToolUnavailable:
            return False
        return True

    def require_work_tree(self) -> Path:
        """Return the work tree root or raise ToolUnavailable."""
        return self.work_tree

    def get_local_identity(self) -> Optional[str]:
        """Get the configured ``user.name`` for this repository."""
        try:
            with self.repo.config_reader() as config:
                name = config.get_value("user", "name", default="")
        except ToolUnavailable:
            return None
        name = str(name).strip()
        return name or None

    def blame_range(self, start_line: int, end_line: int, file_path: Path) -> str:
        """Run ``git blame`` over an inclusive line range.

        Returns one attribution line per source line, or the error text
        (``fatal: ...``) when git cannot attribute the range.
        """
        return self._run(
            ["blame", "-L", f"{start_line},{end_line}", "--", str(file_path)]
        )

    def show_commit(self, commit_id: str) -> str:
        """Get the log entry (headers and message) for one commit."""
        return self._run(["show", "-s", "--no-color", commit_id])

    def _run(self, git_args: List[str]) -> str:
        try:
            cwd = self.work_tree
        except ToolUnavailable as e:
            return f"{FATAL_PREFIX} {e}"

        cmd = ["git", "-C", str(cwd)] + git_args
        logger.debug("Running %s", " ".join(cmd))
        # Blamed lines carry the file's own bytes, which need not be UTF-8.
        result = subprocess.run(  # noqa: S603
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
        if result.returncode != 0:
            return result.stderr or f"{FATAL_PREFIX} git {git_args[0]} failed"
        return result.stdout
