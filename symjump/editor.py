"""In-memory editor surface.

Buffers hold text lines, a filetype and a change counter; windows show a
buffer with a cursor and a viewport top line. Highlight markers are kept
per buffer so a host can render them.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from pathlib import Path

from .symbol_types import Position, Range
from .syntax import language_for_path, read_text


@dataclass
class MemoryBuffer:
    """One open document."""

    name: str
    lines: list[str]
    filetype: str = ""
    change_counter: int = 0
    markers: dict[int, tuple[Range, str]] = field(default_factory=dict)


@dataclass
class MemoryWindow:
    """Viewport onto a buffer."""

    buffer: str
    cursor: Position = Position(0, 0)
    top_line: int = 0
    height: int = 24
    valid: bool = True


class MemoryEditor:
    """``EditorSurface`` implementation backed by plain Python objects."""

    def __init__(self) -> None:
        self.buffers: dict[str, MemoryBuffer] = {}
        self.windows: dict[int, MemoryWindow] = {}
        self._current_window: int | None = None
        self._window_ids = itertools.count(1)
        self._marker_ids = itertools.count(1)

    def open_text(self, name: str, text: str, filetype: str = "", height: int = 24) -> int:
        """Create (or replace) buffer ``name`` and show it in a new current window."""
        self.buffers[name] = MemoryBuffer(name=name, lines=text.splitlines(), filetype=filetype)
        window = next(self._window_ids)
        self.windows[window] = MemoryWindow(buffer=name, height=max(1, height))
        self._current_window = window
        return window

    def open_file(self, path: Path, filetype: str | None = None, height: int = 24) -> int:
        """Load ``path`` into a buffer named after its resolved path."""
        target = path.resolve()
        detected = filetype if filetype is not None else (language_for_path(target) or "")
        return self.open_text(str(target), read_text(target), detected, height=height)

    def set_text(self, buffer: str, text: str) -> None:
        """Replace buffer contents and bump its change counter."""
        record = self.buffers[buffer]
        record.lines = text.splitlines()
        record.change_counter += 1

    def text(self, buffer: str) -> str:
        return "\n".join(self.buffers[buffer].lines)

    def close_window(self, window: int) -> None:
        self.windows[window].valid = False
        if self._current_window == window:
            self._current_window = None

    def current_window(self) -> int:
        if self._current_window is None:
            raise LookupError("no current window")
        return self._current_window

    def window_buffer(self, window: int) -> str:
        return self.windows[window].buffer

    def is_window_valid(self, window: int) -> bool:
        record = self.windows.get(window)
        return record is not None and record.valid

    def change_counter(self, buffer: str) -> int:
        return self.buffers[buffer].change_counter

    def filetype(self, buffer: str) -> str:
        return self.buffers[buffer].filetype

    def get_cursor(self, window: int) -> Position:
        return self.windows[window].cursor

    def set_cursor(self, window: int, position: Position) -> None:
        record = self.windows[window]
        lines = self.buffers[record.buffer].lines
        line = max(0, min(position.line, max(0, len(lines) - 1)))
        character = max(0, position.character)
        record.cursor = Position(line, character)

    def get_lines(self, buffer: str, start: int, end: int) -> list[str]:
        lines = self.buffers[buffer].lines
        return list(lines[max(0, start) : max(0, end)])

    def draw_highlight(self, buffer: str, span: Range, style: str) -> int:
        marker = next(self._marker_ids)
        self.buffers[buffer].markers[marker] = (span, style)
        return marker

    def clear_highlight(self, buffer: str, marker: int) -> None:
        self.buffers[buffer].markers.pop(marker, None)

    def center_viewport(self, window: int) -> None:
        record = self.windows[window]
        record.top_line = max(0, record.cursor.line - record.height // 2)
