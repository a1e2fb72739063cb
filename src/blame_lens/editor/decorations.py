"""Decoration sinks: where rendered annotations end up."""

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional


class DecorationSink(ABC):
    """Host facility for drawing and removing line-end decorations.

    With the default ``start_idle_timer`` these methods are called from a
    worker thread. Hosts whose UI toolkit is single-threaded must marshal the
    calls onto their UI thread, or pass a ``timer_factory`` that fires on it.
    """

    @abstractmethod
    def install(self, position: int, text: str, style: Optional[str] = None) -> object:
        """Draw ``text`` at ``position`` and return a handle for removal."""

    @abstractmethod
    def remove(self, handle: object) -> None:
        """Remove a previously installed decoration."""


@dataclass(frozen=True)
class Decoration:
    """A decoration held by InMemoryDecorationSink."""

    handle: int
    position: int
    text: str
    style: Optional[str] = None


class InMemoryDecorationSink(DecorationSink):
    """Keeps decorations in a dict; used by the command line and tests."""

    def __init__(self):
        self._decorations: Dict[int, Decoration] = {}
        self._handles = itertools.count(1)

    def install(self, position: int, text: str, style: Optional[str] = None) -> int:
        handle = next(self._handles)
        self._decorations[handle] = Decoration(handle, position, text, style)
        return handle

    def remove(self, handle: object) -> None:
        self._decorations.pop(handle, None)

    @property
    def decorations(self) -> List[Decoration]:
        return sorted(self._decorations.values(), key=lambda d: d.position)

    def at(self, position: int) -> Optional[Decoration]:
        for decoration in self._decorations.values():
            if decoration.position == position:
                return decoration
        return None

    def __len__(self) -> int:
        return len(self._decorations)
