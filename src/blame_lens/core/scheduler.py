"""Idle-debounced render scheduling for blame annotations.

Every cursor or selection change is fed to ``RenderScheduler.notify``. The
scheduler decides whether the annotations on screen are still valid, clears
them when they are not, and arms a single idle timer whose firing runs the
annotation pipeline for the buffer.
"""

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional

from blame_lens.core.renderer import AnnotationRenderer
from blame_lens.editor.buffer import EditorBuffer
from blame_lens.errors import BlameLensError
from blame_lens.models.config import BlameConfig
from blame_lens.models.context import CursorContext

logger = logging.getLogger(__name__)

TimerFactory = Callable[[float, Callable[[], None]], object]


def start_idle_timer(interval: float, callback: Callable[[], None]) -> threading.Timer:
    """Start a daemon timer calling ``callback`` after ``interval`` seconds.

    The callback runs on the timer's own thread, and so do the buffer and
    sink calls made by the render it triggers.
    """
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    timer.start()
    return timer


class SchedulerState(str, Enum):
    """Observable state of a RenderScheduler."""

    IDLE = "idle"
    PENDING_RENDER = "pending_render"
    RENDERING = "rendering"
    DISPLAYED = "displayed"


class RenderState:
    """Per-buffer memory of the last rendered cursor context."""

    def __init__(self):
        self.previous_line_number: Optional[int] = None
        self.previous_line_length: Optional[int] = None
        self.previous_selection_active = False
        self.active_decorations: List[object] = []
        self.pending_timer: Optional[object] = None

    @property
    def has_rendered(self) -> bool:
        return self.previous_line_number is not None

    def remember(self, context: CursorContext) -> None:
        self.previous_line_number = context.line_number
        self.previous_line_length = context.line_length
        self.previous_selection_active = context.selection_active

    def forget_line(self) -> None:
        self.previous_line_number = None
        self.previous_line_length = None

    def line_changed(self, context: CursorContext) -> bool:
        return (
            not self.has_rendered
            or context.line_number != self.previous_line_number
            or context.line_length != self.previous_line_length
        )

    def reset(self) -> None:
        self.forget_line()
        self.previous_selection_active = False
        self.active_decorations = []
        self.pending_timer = None


class RenderScheduler:
    """Decides when annotations for one buffer are cleared and redrawn.

    At most one timer is armed at a time; arming cancels its predecessor, so
    at most one pipeline run is in flight per buffer. The default timer fires
    on its own thread, hence the lock around every state mutation.
    """

    def __init__(
        self,
        buffer: EditorBuffer,
        renderer: AnnotationRenderer,
        config: BlameConfig,
        timer_factory: TimerFactory = start_idle_timer,
    ):
        self.buffer = buffer
        self.renderer = renderer
        self.config = config
        self.timer_factory = timer_factory
        self.render_state = RenderState()
        self.active = True
        self._latest_context: Optional[CursorContext] = None
        self._generation = 0
        self._rendering = False
        self._lock = threading.RLock()

    @property
    def state(self) -> SchedulerState:
        if self._rendering:
            return SchedulerState.RENDERING
        if self.render_state.pending_timer is not None:
            return SchedulerState.PENDING_RENDER
        if self.render_state.active_decorations:
            return SchedulerState.DISPLAYED
        return SchedulerState.IDLE

    def notify(self, context: CursorContext) -> bool:
        """Handle a cursor/selection change.

        Returns True if a render was scheduled.
        """
        with self._lock:
            if not self.active:
                return False
            self._latest_context = context
            state = self.render_state

            long_line_p = (
                context.selection is not None
                and context.selection.line_count > self.config.max_lines
            )
            region_deselected_p = (
                state.previous_selection_active and not context.selection_active
            )

            if long_line_p:
                # Never shell out for oversized selections.
                self._cancel_timer()
                self.clear()
                state.forget_line()
                return False

            if region_deselected_p:
                self.clear()
                state.forget_line()
                state.previous_selection_active = False

            if not self.config.render_type.permits(context.selection_active):
                return False
            if not state.line_changed(context):
                return False

            self.clear()
            state.remember(context)
            self._arm_timer()
            return True

    def clear(self) -> None:
        """Remove every decoration installed by this scheduler."""
        with self._lock:
            for handle in self.render_state.active_decorations:
                self.renderer.sink.remove(handle)
            self.render_state.active_decorations = []

    def shutdown(self) -> None:
        """Cancel pending work, clear decorations and forget all context."""
        with self._lock:
            self.active = False
            self._cancel_timer()
            self.clear()
            self.render_state.reset()
            self._latest_context = None

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self.render_state.pending_timer = self.timer_factory(
            self.config.idle_time, lambda: self._fire(generation)
        )

    def _cancel_timer(self) -> None:
        timer = self.render_state.pending_timer
        if timer is not None:
            timer.cancel()
            self.render_state.pending_timer = None
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            # Stale firing: cancelled, superseded, or the mode was disabled.
            if not self.active or generation != self._generation:
                return
            self.render_state.pending_timer = None

            context = self._latest_context
            if context is None or not self.config.render_type.permits(
                context.selection_active
            ):
                return

            self.clear()
            self._rendering = True
            try:
                self.renderer.render(
                    self.buffer, context, self.render_state.active_decorations
                )
            except (BlameLensError, OSError) as e:
                logger.warning(
                    "Blame render failed for %s: %s", self.buffer.file_path, e
                )
            finally:
                self._rendering = False
