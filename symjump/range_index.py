"""Containing-symbol lookup over flattened entries.

Entries arrive in document order, so they are already sorted by start line.
A binary search lands near the cursor line and a fixed window around the
landing index is scanned for the smallest enclosing range.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .symbol_types import Entry

logger = logging.getLogger(__name__)

SEARCH_WINDOW = 10
# Exceeds any realistic column width so line span dominates the score.
LINE_SPAN_WEIGHT = 1000


def contains(entry: Entry, line: int, col: int) -> bool:
    """Return whether 1-based ``(line, col)`` lies inside ``entry``'s range."""
    if not entry.has_bounds:
        return False
    after_start = line > entry.start_line or (line == entry.start_line and col >= entry.start_col)
    before_end = line < entry.end_line or (line == entry.end_line and col <= entry.end_col)
    return after_start and before_end


def range_score(entry: Entry) -> int:
    """Scalar size of an entry's range; smaller means more specific."""
    return (entry.end_line - entry.start_line + 1) * LINE_SPAN_WEIGHT + (entry.end_col - entry.start_col)


class RangeIndex:
    """Sorted view over entries that carry complete range bounds."""

    def __init__(self, entries: Sequence[Entry]) -> None:
        bounded = [entry for entry in entries if entry.has_bounds]
        if len(bounded) < len(entries):
            logger.debug("range index skipped %d entries without bounds", len(entries) - len(bounded))
        bounded.sort(key=lambda entry: entry.start_line)
        self._entries: tuple[Entry, ...] = tuple(bounded)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    def _landing_index(self, line: int) -> int:
        left, right = 0, len(self._entries) - 1
        while left <= right:
            mid = (left + right) // 2
            entry = self._entries[mid]
            if entry.start_line <= line <= entry.end_line:
                return mid
            if entry.start_line > line:
                right = mid - 1
            else:
                left = mid + 1
        return left

    def locate(self, line: int, col: int) -> Entry | None:
        """Return the innermost entry containing 1-based ``(line, col)``.

        Equal scores keep the first entry found, which is the outer one in
        document order.
        """
        if not self._entries:
            return None

        landing = self._landing_index(line)
        first = max(0, landing - SEARCH_WINDOW)
        last = min(len(self._entries) - 1, landing + SEARCH_WINDOW)

        best: Entry | None = None
        best_score = 0
        for idx in range(first, last + 1):
            entry = self._entries[idx]
            if line < entry.start_line or line > entry.end_line:
                continue
            if not contains(entry, line, col):
                continue
            score = range_score(entry)
            if best is None or score < best_score:
                best = entry
                best_score = score
        return best


def locate(entries: Sequence[Entry], line: int, col: int) -> Entry | None:
    """Return the most specific entry containing 1-based ``(line, col)``, if any."""
    return RangeIndex(entries).locate(line, col)


def index_of(entries: Sequence[Entry], target: Entry) -> int | None:
    """Return the display index of ``target`` matched by start position and name."""
    for idx, entry in enumerate(entries):
        if (
            entry.start_line == target.start_line
            and entry.start_col == target.start_col
            and entry.name == target.name
        ):
            return idx
    return None
