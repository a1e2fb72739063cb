"""Configuration for blame-lens."""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from blame_lens.errors import ConfigurationInvalid

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".blame-lens.json"


class RenderType(str, Enum):
    """Which selection states annotations are rendered for."""

    VISUAL = "visual"  # only without a selection
    SELECTED = "selected"  # only with a selection
    BOTH = "both"

    def permits(self, selection_active: bool) -> bool:
        if self is RenderType.VISUAL:
            return not selection_active
        if self is RenderType.SELECTED:
            return selection_active
        return True


class BlameConfig(BaseModel):
    """Recognized options for inline blame annotations."""

    author_format: Optional[str] = Field(
        default="   %s, ", description="Template for the author segment"
    )
    datetime_format: Optional[str] = Field(
        default="%s", description="Template for the date/time segment"
    )
    commit_message_format: Optional[str] = Field(
        default=" ◉ %s", description="Template for the commit message segment"
    )
    entire_format: Optional[str] = Field(
        default=None, description="Template wrapping the whole annotation"
    )
    idle_time: float = Field(
        default=0.5, ge=0, description="Seconds without input before rendering"
    )
    min_offset: int = Field(
        default=60, ge=0, description="Column the annotation is pushed towards"
    )
    prettify_time: bool = Field(
        default=True, description="Show relative times like '2 hours ago'"
    )
    render_type: RenderType = Field(
        default=RenderType.BOTH, description="visual, selected or both"
    )
    max_lines: int = Field(
        default=30, ge=1, description="Selected lines above which nothing renders"
    )
    uncommitted_changes_message: str = Field(
        default="Uncommitted changes", description="Message for uncommitted lines"
    )
    max_commit_message_length: Optional[int] = Field(
        default=30, ge=0, description="Truncate commit messages; 0 or null disables"
    )
    smart_background: bool = Field(
        default=True, description="Match the background under the annotation"
    )

    model_config = {"extra": "forbid"}

    @field_validator(
        "author_format", "datetime_format", "commit_message_format", "entire_format"
    )
    @classmethod
    def validate_template(cls, v: Optional[str]) -> Optional[str]:
        """Templates take exactly one %s substitution."""
        if v is None:
            return v
        if v.replace("%%", "").count("%s") != 1:
            raise ValueError(f"template must contain exactly one %s: {v!r}")
        try:
            v % "x"
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid template {v!r}: {e}") from e
        return v

    @property
    def all_templates_disabled(self) -> bool:
        return (
            self.author_format is None
            and self.datetime_format is None
            and self.commit_message_format is None
        )


def load_config(
    path: Optional[Path] = None, project_root: Optional[Path] = None, **overrides
) -> BlameConfig:
    """Load configuration from JSON.

    Args:
        path: Explicit config file. Must exist when given.
        project_root: Directory searched for ``.blame-lens.json`` when no path
            is given.
        **overrides: Values taking precedence over the file (None is ignored).

    Raises:
        ConfigurationInvalid: If the file is unreadable or fails validation.
    """
    data = {}
    if path is None and project_root is not None:
        candidate = Path(project_root) / CONFIG_FILE_NAME
        if candidate.exists():
            path = candidate

    if path is not None:
        try:
            data = json.loads(Path(path).read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationInvalid(f"Cannot read config {path}: {e}") from e
        logger.debug("Loaded config from %s", path)

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return BlameConfig(**data)
    except ValidationError as e:
        raise ConfigurationInvalid(str(e)) from e
