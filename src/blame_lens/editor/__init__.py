"""Host editor collaborators."""

from .buffer import EditorBuffer, FileBuffer
from .decorations import DecorationSink, InMemoryDecorationSink
from .styling import StyleResolver

__all__ = [
    "DecorationSink",
    "EditorBuffer",
    "FileBuffer",
    "InMemoryDecorationSink",
    "StyleResolver",
]
