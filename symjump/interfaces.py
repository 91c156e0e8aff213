"""Collaborator interfaces consumed by the navigation engine.

The engine only talks to editors, symbol backends, pickers and range
refiners through these narrow surfaces. Reference implementations live in
``editor``, ``providers``, ``picker`` and ``refine``.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Sequence
from concurrent.futures import Future
from typing import Protocol

from .symbol_types import Entry, Position, Range, SymbolNode

Notifier = Callable[[str, int], None]
MoveCallback = Callable[[Entry], None]
ConfirmCallback = Callable[[Sequence[Entry]], None]


class SymbolProvider(Protocol):
    """Backend able to produce a document's symbol tree asynchronously."""

    def supports_document_symbols(self, document_id: Hashable) -> bool: ...

    def document_symbols(self, document_id: Hashable) -> Future[Sequence[SymbolNode]]:
        """Start a lookup; ``Future.cancel()`` is the cancellation handle."""
        ...


class EditorSurface(Protocol):
    """Buffer, window and marker operations of the host editor."""

    def current_window(self) -> Hashable: ...

    def window_buffer(self, window: Hashable) -> Hashable: ...

    def is_window_valid(self, window: Hashable) -> bool: ...

    def change_counter(self, buffer: Hashable) -> int: ...

    def filetype(self, buffer: Hashable) -> str: ...

    def get_cursor(self, window: Hashable) -> Position: ...

    def set_cursor(self, window: Hashable, position: Position) -> None: ...

    def get_lines(self, buffer: Hashable, start: int, end: int) -> list[str]:
        """Return zero-based lines ``[start, end)``."""
        ...

    def draw_highlight(self, buffer: Hashable, span: Range, style: str) -> Hashable: ...

    def clear_highlight(self, buffer: Hashable, marker: Hashable) -> None: ...

    def center_viewport(self, window: Hashable) -> None: ...


class RangeRefiner(Protocol):
    """Optional syntax-aware widening of a preview extent."""

    def refine(self, buffer: Hashable, position: Position) -> Range | None: ...


class PickerUI(Protocol):
    """Interactive list presenting entries and reporting user actions."""

    def show(
        self,
        entries: Sequence[Entry],
        *,
        initial_index: int | None,
        auto_select: bool,
        on_move: MoveCallback,
        on_confirm: ConfirmCallback,
        on_cancel: Callable[[], None],
        on_close: Callable[[], None],
    ) -> None: ...
