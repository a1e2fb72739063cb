"""Snapshots of editor cursor state passed to the scheduler."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Selection:
    """An active selection spanning whole lines (1-based, inclusive)."""

    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return abs(self.end_line - self.start_line) + 1

    @property
    def first_line(self) -> int:
        return min(self.start_line, self.end_line)

    @property
    def last_line(self) -> int:
        return max(self.start_line, self.end_line)


@dataclass(frozen=True)
class CursorContext:
    """Cursor position and selection at the time of a change notification."""

    line_number: int
    line_text: str = ""
    selection: Optional[Selection] = None

    @property
    def selection_active(self) -> bool:
        return self.selection is not None

    @property
    def line_length(self) -> int:
        return len(self.line_text)

    def line_range(self):
        """Return the (start, end) lines an annotation pass should cover."""
        if self.selection is None:
            return self.line_number, self.line_number
        return self.selection.first_line, self.selection.last_line
