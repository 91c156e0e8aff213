"""Shared symbol datatypes."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass

from .kinds import SymbolKind


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based ``(line, character)`` location in a document."""

    line: int
    character: int


@dataclass(frozen=True)
class Range:
    """Half-open span between two positions as reported by providers."""

    start: Position
    end: Position


@dataclass(frozen=True)
class SymbolNode:
    """One node of a provider's hierarchical symbol tree."""

    name: str
    kind: SymbolKind
    range: Range | None
    children: tuple[SymbolNode, ...] = ()


@dataclass(frozen=True)
class Entry:
    """Flattened, display-ready symbol.

    Line and column fields are 1-based. They are ``None`` when the provider
    did not report a usable range for the symbol.
    """

    display_text: str
    name: str
    kind: SymbolKind
    start_line: int | None
    start_col: int | None
    end_line: int | None
    end_col: int | None
    depth: int = 0

    @property
    def has_bounds(self) -> bool:
        """Whether every range field is present."""
        return None not in (self.start_line, self.start_col, self.end_line, self.end_col)

    def start_position(self) -> Position | None:
        """Return the zero-based start position used for cursor moves."""
        if self.start_line is None or self.start_col is None:
            return None
        return Position(self.start_line - 1, self.start_col - 1)

    def to_range(self) -> Range | None:
        """Return the zero-based range covered by this entry."""
        if not self.has_bounds:
            return None
        return Range(
            Position(self.start_line - 1, self.start_col - 1),
            Position(self.end_line - 1, self.end_col - 1),
        )


@dataclass(frozen=True)
class VersionKey:
    """Identity of one document revision; equality is the only cache-hit test."""

    document_id: Hashable
    change_counter: int
