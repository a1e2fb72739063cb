"""Compose attribution records into annotation text."""

import logging
from typing import Optional

from blame_lens.models.config import BlameConfig
from blame_lens.models.record import AttributionRecord

logger = logging.getLogger(__name__)


def _apply(template: Optional[str], value: str) -> str:
    if template is None:
        return ""
    return template % value


class AnnotationFormatter:
    """Builds the display string for one annotated line."""

    def __init__(self, config: BlameConfig):
        self.config = config

    def check_config(self) -> bool:
        """Warn when no template is enabled, since nothing could ever render."""
        if self.config.all_templates_disabled:
            logger.warning(
                "author_format, datetime_format and commit_message_format are "
                "all disabled; no blame annotations will be shown"
            )
            return False
        return True

    def format(
        self, record: AttributionRecord, humanized_time: str, offset: int = 0
    ) -> str:
        """Render ``record`` as ``<padding><author><datetime> <message>``.

        Args:
            record: The line's attribution.
            humanized_time: Already formatted commit time.
            offset: Number of spaces placed before the annotation.
        """
        config = self.config
        if config.all_templates_disabled:
            return ""

        author = _apply(config.author_format, record.author)

        datetime_part = ""
        if config.datetime_format is not None and not record.is_uncommitted:
            datetime_part = _apply(config.datetime_format, humanized_time) + " "

        message = ""
        if record.commit_message is not None:
            message = _apply(config.commit_message_format, record.commit_message)

        text = author + datetime_part + message
        if config.entire_format is not None:
            text = config.entire_format % text
        return " " * max(offset, 0) + text
