"""Live preview highlighting with cursor restore on cancel.

The controller owns at most one highlight marker. Every exit path (confirm,
cancel or an external picker close) runs ``clear``, which is idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass

from .interfaces import EditorSurface, RangeRefiner
from .symbol_types import Entry, Position, Range

logger = logging.getLogger(__name__)

DEFAULT_HIGHLIGHT_STYLE = "SymjumpPreview"


@dataclass(frozen=True)
class NavigationState:
    """Where the user was when navigation started."""

    origin_window: Hashable
    origin_buffer: Hashable
    origin_cursor: Position


def first_non_blank_column(line: str) -> int | None:
    """Return the zero-based column of the first non-whitespace character."""
    stripped = line.lstrip()
    if not stripped:
        return None
    return len(line) - len(stripped)


class PreviewController:
    """Draws, moves and clears the preview marker for one navigation."""

    def __init__(
        self,
        editor: EditorSurface,
        state: NavigationState,
        refiner: RangeRefiner | None = None,
        style: str = DEFAULT_HIGHLIGHT_STYLE,
    ) -> None:
        self.editor = editor
        self.state = state
        self.refiner = refiner
        self.style = style
        self._marker: Hashable | None = None
        self._marker_buffer: Hashable | None = None
        self.jump_target: Position | None = None

    @property
    def marker(self) -> Hashable | None:
        return self._marker

    def _origin_window_valid(self) -> bool:
        try:
            return bool(self.editor.is_window_valid(self.state.origin_window))
        except Exception:
            logger.debug("window validity check failed", exc_info=True)
            return False

    def preview_extent(self, entry: Entry) -> Range | None:
        """Compute the highlighted extent for ``entry``.

        Starts from the first non-blank column of the entry's start line and
        asks the refiner for a syntax-aware range, falling back to the raw
        entry range.
        """
        if not entry.has_bounds:
            return None
        start_row = entry.start_line - 1
        lines = self.editor.get_lines(self.state.origin_buffer, start_row, start_row + 1)
        if not lines:
            return None
        column = first_non_blank_column(lines[0])
        if column is None:
            return None

        refined: Range | None = None
        if self.refiner is not None:
            try:
                refined = self.refiner.refine(self.state.origin_buffer, Position(start_row, column))
            except Exception:
                logger.debug("range refinement failed for %s", entry.name, exc_info=True)
                refined = None
        return refined if refined is not None else entry.to_range()

    def on_move(self, entry: Entry | None) -> None:
        """Replace the marker with one covering ``entry`` and center on it."""
        self.clear()
        if entry is None or not self._origin_window_valid():
            return
        extent = self.preview_extent(entry)
        if extent is None:
            return

        buffer = self.state.origin_buffer
        self._marker = self.editor.draw_highlight(buffer, extent, self.style)
        self._marker_buffer = buffer
        self.editor.set_cursor(self.state.origin_window, extent.start)
        self.editor.center_viewport(self.state.origin_window)

    def on_confirm(self, entries: Sequence[Entry]) -> None:
        """Clear the marker and jump once to the first selected entry."""
        self.clear()
        if not entries:
            return
        target = entries[0].start_position()
        if target is None or not self._origin_window_valid():
            return
        self.editor.set_cursor(self.state.origin_window, target)
        self.jump_target = target

    def on_cancel(self) -> None:
        """Clear the marker and put the cursor back where navigation started."""
        self.clear()
        if self._origin_window_valid():
            self.editor.set_cursor(self.state.origin_window, self.state.origin_cursor)

    def clear(self) -> None:
        """Remove the marker if one is drawn; safe to call repeatedly."""
        marker, buffer = self._marker, self._marker_buffer
        self._marker = None
        self._marker_buffer = None
        if marker is None:
            return
        try:
            self.editor.clear_highlight(buffer, marker)
        except Exception:
            logger.warning("failed to clear preview highlight", exc_info=True)

    def teardown(self) -> None:
        """Must-run cleanup when the picker goes away by any route."""
        self.clear()
