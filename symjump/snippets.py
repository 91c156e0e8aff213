"""Source text extraction for a multi-symbol selection."""

from __future__ import annotations

from collections.abc import Sequence

from .symbol_types import Entry


def collect_symbol_source(entries: Sequence[Entry], lines: Sequence[str]) -> str:
    """Join the source of ``entries`` in line order, skipping overlaps.

    An entry whose start line falls inside an already collected section is
    dropped, so selecting a class and one of its methods yields the class
    once. ``lines`` holds the whole document, zero-based.
    """
    bounded = sorted(
        (entry for entry in entries if entry.start_line is not None and entry.end_line is not None),
        key=lambda entry: entry.start_line,
    )
    sections: list[str] = []
    last_end_line = 0
    for entry in bounded:
        if entry.start_line <= last_end_line:
            continue
        sections.append("\n".join(lines[entry.start_line - 1 : entry.end_line]))
        last_end_line = entry.end_line
    return "\n\n".join(sections)
