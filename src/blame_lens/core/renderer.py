"""The parse, resolve, format and display pipeline."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from blame_lens.core.commit_message import CommitMessageResolver
from blame_lens.core.formatter import AnnotationFormatter
from blame_lens.core.git_client import GitClient
from blame_lens.core.humanize import humanize_time
from blame_lens.core.parser import AttributionParser
from blame_lens.editor.buffer import EditorBuffer
from blame_lens.editor.decorations import DecorationSink
from blame_lens.editor.styling import StyleResolver
from blame_lens.models.config import BlameConfig
from blame_lens.models.context import CursorContext
from blame_lens.models.record import AttributionRecord, CommitInfo

logger = logging.getLogger(__name__)


class AnnotationRenderer:
    """Runs one annotation pass over the cursor line or the selection."""

    def __init__(
        self,
        config: BlameConfig,
        git_client: GitClient,
        sink: DecorationSink,
        parser: Optional[AttributionParser] = None,
        resolver: Optional[CommitMessageResolver] = None,
        style_resolver: Optional[StyleResolver] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config
        self.git_client = git_client
        self.sink = sink
        self.parser = parser or AttributionParser(
            uncommitted_message=config.uncommitted_changes_message
        )
        self.resolver = resolver or CommitMessageResolver(
            git_client, config.max_commit_message_length
        )
        self.formatter = AnnotationFormatter(config)
        self.style_resolver = style_resolver or StyleResolver()
        self.clock = clock

    def render(
        self,
        buffer: EditorBuffer,
        context: CursorContext,
        handles: Optional[List[object]] = None,
    ) -> List[object]:
        """Annotate every line in the context's range.

        Returns the handles of the installed decorations. When ``handles`` is
        given each handle is appended to it as soon as it is installed, so the
        caller still owns them if a later line raises. Lines git cannot
        attribute are skipped without affecting the rest.
        """
        if handles is None:
            handles = []
        if buffer.file_path is None:
            return handles

        start, end = context.line_range()
        output = self.git_client.blame_range(start, end, buffer.file_path)
        records = self.parser.parse(output)

        installed = 0
        for record in records:
            if record is None:
                continue
            text = self.annotation_text(buffer, record)
            if not text:
                continue
            style = None
            if self.config.smart_background:
                style = self.style_resolver.resolve(buffer, context.selection_active)
            position = buffer.line_end_position(record.line_number)
            handles.append(self.sink.install(position, text, style))
            installed += 1

        logger.debug(
            "Rendered %d of %d lines for %s:%d-%d",
            installed,
            end - start + 1,
            buffer.file_path,
            start,
            end,
        )
        return handles

    def annotation_text(self, buffer: EditorBuffer, record: AttributionRecord) -> str:
        """Resolve the message for ``record`` and format its annotation."""
        record = self.with_message(record)
        humanized = humanize_time(
            record.date,
            record.time,
            now=self.clock(),
            prettify=self.config.prettify_time,
            zone=record.zone,
        )
        line_length = len(buffer.line_text(record.line_number))
        offset = max(self.config.min_offset - line_length, 0)
        return self.formatter.format(record, humanized, offset)

    def with_message(self, record: AttributionRecord) -> AttributionRecord:
        """Attach the commit message when a message template is configured."""
        if self.config.commit_message_format is None or record.is_uncommitted:
            return record
        message = self.resolver.resolve(record.commit_id)
        if message is None:
            return record
        return record.model_copy(update={"commit_message": message})

    def describe(self, buffer: EditorBuffer, line_number: int) -> Optional[CommitInfo]:
        """Collect full commit details for one line."""
        if buffer.file_path is None:
            return None

        output = self.git_client.blame_range(line_number, line_number, buffer.file_path)
        records = [r for r in self.parser.parse(output) if r is not None]
        if not records:
            return None

        record = records[0]
        if record.is_uncommitted:
            message = record.commit_message
        else:
            message = self.resolver.full_message(record.commit_id)

        return CommitInfo(
            commit_id=record.commit_id,
            author=record.author,
            date=record.date,
            time=record.time,
            humanized_time=humanize_time(
                record.date, record.time, now=self.clock(), zone=record.zone
            ),
            message=message,
            uncommitted=record.is_uncommitted,
        )
