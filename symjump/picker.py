"""Headless symbol picker.

Keeps the query, the filtered match list, the highlighted row and a
multi-select set. Hosts drive it with ``set_query``/``move``/``toggle``/
``confirm``/``cancel`` and render ``visible_entries()`` however they like.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .fuzzy import filter_labels
from .interfaces import ConfirmCallback, MoveCallback
from .symbol_types import Entry

PICKER_RESULT_LIMIT = 2000


def _noop(*_args) -> None:
    return None


class SymbolPicker:
    """``PickerUI`` implementation without any rendering."""

    def __init__(self, limit: int = PICKER_RESULT_LIMIT) -> None:
        self.limit = limit
        self.entries: tuple[Entry, ...] = ()
        self.query = ""
        self.matches: list[int] = []
        self.selected = 0
        self.chosen: set[int] = set()
        self.active = False
        self.auto_select = False
        self._on_move: MoveCallback = _noop
        self._on_confirm: ConfirmCallback = _noop
        self._on_cancel: Callable[[], None] = _noop
        self._on_close: Callable[[], None] = _noop

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
    ) -> None:
        """Open with ``entries`` and focus ``initial_index`` when it is valid."""
        if self.active:
            self.close()
        self.entries = tuple(entries)
        self.query = ""
        self.chosen = set()
        self.auto_select = auto_select
        self._on_move = on_move
        self._on_confirm = on_confirm
        self._on_cancel = on_cancel
        self._on_close = on_close
        self.active = True

        self._refresh_matches()
        if initial_index is not None and initial_index in self.matches:
            self.selected = self.matches.index(initial_index)
        if self._auto_confirm():
            return
        self._emit_move()

    def current(self) -> Entry | None:
        """Entry under the highlight, if any match is visible."""
        if not self.matches:
            return None
        return self.entries[self.matches[self.selected]]

    def visible_entries(self) -> list[Entry]:
        return [self.entries[idx] for idx in self.matches]

    def _refresh_matches(self) -> None:
        labels = [entry.name for entry in self.entries]
        self.matches = filter_labels(self.query, labels, limit=self.limit)
        self.selected = 0

    def _emit_move(self) -> None:
        entry = self.current()
        if entry is not None:
            self._on_move(entry)

    def _auto_confirm(self) -> bool:
        if self.auto_select and len(self.matches) == 1:
            self.confirm()
            return True
        return False

    def set_query(self, query: str) -> None:
        """Filter by ``query``; the highlight resets to the first match."""
        if not self.active:
            return
        self.query = query
        self._refresh_matches()
        if self._auto_confirm():
            return
        self._emit_move()

    def move(self, delta: int) -> None:
        """Move the highlight by ``delta`` rows, clamped to the match list."""
        if not self.active or not self.matches:
            return
        target = max(0, min(len(self.matches) - 1, self.selected + delta))
        if target == self.selected:
            return
        self.selected = target
        self._emit_move()

    def toggle(self) -> None:
        """Add or remove the highlighted entry from the multi-selection."""
        if not self.active or not self.matches:
            return
        idx = self.matches[self.selected]
        if idx in self.chosen:
            self.chosen.remove(idx)
        else:
            self.chosen.add(idx)

    def selection(self) -> list[Entry]:
        """Multi-selected entries in list order, else the highlighted one."""
        if self.chosen:
            return [self.entries[idx] for idx in sorted(self.chosen)]
        entry = self.current()
        return [entry] if entry is not None else []

    def confirm(self) -> None:
        if not self.active:
            return
        selected = self.selection()
        if not selected:
            return
        self._on_confirm(selected)
        self.close()

    def cancel(self) -> None:
        if not self.active:
            return
        self._on_cancel()
        self.close()

    def close(self) -> None:
        """Close by any route; ``on_close`` runs once per ``show``."""
        if not self.active:
            return
        self.active = False
        on_close = self._on_close
        self._on_close = _noop
        on_close()
