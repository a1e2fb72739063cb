"""Per-buffer blame mode: activation, change handling and teardown."""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from blame_lens.core.commit_message import CommitMessageResolver
from blame_lens.core.git_client import GitClient
from blame_lens.core.parser import AttributionParser
from blame_lens.core.renderer import AnnotationRenderer
from blame_lens.core.scheduler import RenderScheduler, TimerFactory, start_idle_timer
from blame_lens.editor.buffer import EditorBuffer
from blame_lens.editor.decorations import DecorationSink
from blame_lens.editor.styling import StyleResolver
from blame_lens.errors import ConfigurationInvalid, ToolUnavailable
from blame_lens.models.config import BlameConfig
from blame_lens.models.context import CursorContext
from blame_lens.models.record import CommitInfo

logger = logging.getLogger(__name__)


class IdentityCache:
    """Caches the local git author name per buffer file."""

    def __init__(self):
        self._identities: Dict[Path, Optional[str]] = {}

    def get(self, file_path: Path, git_client: GitClient) -> Optional[str]:
        if file_path not in self._identities:
            self._identities[file_path] = git_client.get_local_identity()
        return self._identities[file_path]

    def forget(self, file_path: Path) -> None:
        self._identities.pop(file_path, None)

    def __contains__(self, file_path: Path) -> bool:
        return file_path in self._identities


class BlameMode:
    """Inline blame annotations for a single editor buffer.

    ``enable`` is the activation hook; once enabled, every change
    notification from the buffer goes to ``on_change``. ``disable`` tears
    everything down again.
    """

    def __init__(
        self,
        buffer: EditorBuffer,
        sink: DecorationSink,
        config: Optional[BlameConfig] = None,
        identity_cache: Optional[IdentityCache] = None,
        git_client_factory: Callable[[Path], GitClient] = GitClient,
        style_resolver: Optional[StyleResolver] = None,
        timer_factory: TimerFactory = start_idle_timer,
    ):
        self.buffer = buffer
        self.sink = sink
        self.config = config or BlameConfig()
        self.identity_cache = identity_cache or IdentityCache()
        self.git_client_factory = git_client_factory
        self.style_resolver = style_resolver
        self.timer_factory = timer_factory
        self.git_client: Optional[GitClient] = None
        self.renderer: Optional[AnnotationRenderer] = None
        self.scheduler: Optional[RenderScheduler] = None
        self.config_warning: Optional[ConfigurationInvalid] = None

    @property
    def enabled(self) -> bool:
        return self.scheduler is not None and self.scheduler.active

    def enable(self) -> bool:
        """Activate the mode for the buffer.

        Returns False, without attaching the change hook, when the buffer's
        file is not inside a git work tree.
        """
        if self.enabled:
            return True

        file_path = self.buffer.file_path
        try:
            if file_path is None:
                raise ToolUnavailable("Buffer is not visiting a file")
            git_client = self.git_client_factory(file_path)
            git_client.require_work_tree()
        except ToolUnavailable as e:
            logger.warning("Blame mode not enabled: %s", e)
            return False

        identity = self.identity_cache.get(file_path, git_client)

        renderer = AnnotationRenderer(
            self.config,
            git_client,
            self.sink,
            parser=AttributionParser(
                local_identity=identity,
                uncommitted_message=self.config.uncommitted_changes_message,
            ),
            resolver=CommitMessageResolver(
                git_client, self.config.max_commit_message_length
            ),
            style_resolver=self.style_resolver,
        )
        if not renderer.formatter.check_config():
            self.config_warning = ConfigurationInvalid(
                "All annotation templates are disabled"
            )

        self.git_client = git_client
        self.renderer = renderer
        self.scheduler = RenderScheduler(
            self.buffer, renderer, self.config, timer_factory=self.timer_factory
        )
        self.buffer.add_change_listener(self.on_change)
        return True

    def on_change(self, context: CursorContext) -> None:
        """Change hook, called after every editor command."""
        if self.scheduler is not None:
            self.scheduler.notify(context)

    def disable(self) -> None:
        """Cancel pending renders, clear annotations and detach from the buffer."""
        self.buffer.remove_change_listener(self.on_change)
        if self.scheduler is not None:
            self.scheduler.shutdown()
        self.scheduler = None
        if self.buffer.file_path is not None:
            self.identity_cache.forget(self.buffer.file_path)

    def show_commit_info(self, line_number: int) -> Optional[CommitInfo]:
        """Full commit details for a line, or None if it cannot be attributed."""
        if self.renderer is None:
            return None
        return self.renderer.describe(self.buffer, line_number)
