"""Data models for blame-lens."""

from .config import BlameConfig, RenderType, load_config
from .context import CursorContext, Selection
from .record import AttributionRecord, CommitInfo

__all__ = [
    "AttributionRecord",
    "BlameConfig",
    "CommitInfo",
    "CursorContext",
    "RenderType",
    "Selection",
    "load_config",
]
