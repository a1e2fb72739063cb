"""Editor buffer interface used by the annotation engine."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional

from blame_lens.models.context import CursorContext

ChangeListener = Callable[[CursorContext], None]


class EditorBuffer(ABC):
    """What the engine needs from a host editor buffer.

    Hosts subclass this and call ``notify_change`` after every command that
    may have moved the cursor or changed the selection.

    Renders triggered by the default ``start_idle_timer`` read the buffer from
    the timer's worker thread. Hosts that only allow access from their UI
    thread must marshal those reads, or give the mode a ``timer_factory`` that
    schedules the callback on the UI thread.
    """

    def __init__(self):
        self._listeners: List[ChangeListener] = []

    @property
    @abstractmethod
    def file_path(self) -> Optional[Path]:
        """Path of the file visited by the buffer, None for scratch buffers."""

    @abstractmethod
    def line_text(self, line_number: int) -> str:
        """Text of a 1-based line without its trailing newline."""

    @abstractmethod
    def line_end_position(self, line_number: int) -> int:
        """Buffer position just after the last character of a line."""

    @abstractmethod
    def line_count(self) -> int:
        """Number of lines in the buffer."""

    # Background colors beneath the cursor. Hosts without such styling
    # facilities leave these returning None.
    def selection_background(self) -> Optional[str]:
        return None

    def line_highlight_background(self) -> Optional[str]:
        return None

    def point_background(self) -> Optional[str]:
        return None

    def add_change_listener(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def change_listeners(self) -> List[ChangeListener]:
        return list(self._listeners)

    def notify_change(self, context: CursorContext) -> None:
        """Deliver a cursor/selection change to every listener."""
        for listener in self.change_listeners:
            listener(context)

    def context_at(self, line_number: int, selection=None) -> CursorContext:
        """Build a CursorContext for ``line_number``."""
        return CursorContext(
            line_number=line_number,
            line_text=self.line_text(line_number),
            selection=selection,
        )


class FileBuffer(EditorBuffer):
    """Read-only buffer over a file on disk, used by the command line."""

    def __init__(self, path: Path):
        super().__init__()
        self._path = Path(path).resolve()
        self._lines = self._path.read_text(errors="replace").splitlines()
        self._line_ends = []
        position = 0
        for line in self._lines:
            position += len(line)
            self._line_ends.append(position)
            position += 1  # newline

    @property
    def file_path(self) -> Path:
        return self._path

    def line_text(self, line_number: int) -> str:
        if 1 <= line_number <= len(self._lines):
            return self._lines[line_number - 1]
        return ""

    def line_end_position(self, line_number: int) -> int:
        if not self._line_ends:
            return 0
        index = min(max(line_number, 1), len(self._line_ends)) - 1
        return self._line_ends[index]

    def line_count(self) -> int:
        return len(self._lines)
