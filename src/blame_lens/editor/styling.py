"""Background style resolution for annotations."""

from typing import Optional

from blame_lens.editor.buffer import EditorBuffer


class StyleResolver:
    """Picks the background an annotation should blend into.

    Inside an active selection the selection color wins, then the current
    line highlight, then whatever styling sits at point.
    """

    def resolve(self, buffer: EditorBuffer, selection_active: bool) -> Optional[str]:
        if selection_active:
            background = buffer.selection_background()
            if background:
                return background
        return buffer.line_highlight_background() or buffer.point_background()
