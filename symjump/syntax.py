"""Source loading and Tree-sitter parser access."""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from pathlib import Path

from tree_sitter_language_pack import get_parser

from .symbol_types import Position
from .syntax_config import LANGUAGE_BY_SUFFIX


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def language_for_path(path: Path) -> str | None:
    """Map file suffix to configured Tree-sitter language key."""
    return LANGUAGE_BY_SUFFIX.get(path.suffix.lower())


@lru_cache(maxsize=32)
def load_parser(language_name: str):
    """Load a Tree-sitter parser for ``language_name``.

    Returns ``(parser, error_message)``; grammars missing from the language
    pack report an error instead of raising.
    """
    try:
        return get_parser(language_name), None
    except Exception as exc:
        return None, f"Failed to load Tree-sitter parser for {language_name}: {exc}"


def parse_source(source: str, language_name: str):
    """Parse ``source``; returns ``(tree, source_bytes, error_message)``."""
    parser, error = load_parser(language_name)
    source_bytes = source.encode("utf-8", errors="replace")
    if parser is None:
        return None, source_bytes, error
    try:
        return parser.parse(source_bytes), source_bytes, None
    except Exception as exc:
        return None, source_bytes, f"Tree-sitter parse failed: {exc}"


def source_lines(source_bytes: bytes) -> list[bytes]:
    """Split parsed source into rows as Tree-sitter counts them."""
    return source_bytes.split(b"\n")


def position_from_point(lines: Sequence[bytes], point) -> Position:
    """Convert a Tree-sitter ``(row, byte column)`` point to a character position."""
    row, byte_column = int(point[0]), int(point[1])
    if row >= len(lines):
        return Position(row, byte_column)
    return Position(row, len(lines[row][:byte_column].decode("utf-8", errors="replace")))


def point_from_position(lines: Sequence[bytes], position: Position) -> tuple[int, int]:
    """Convert a character position to the ``(row, byte column)`` Tree-sitter expects."""
    if position.line >= len(lines):
        return position.line, position.character
    text = lines[position.line].decode("utf-8", errors="replace")
    return position.line, len(text[: position.character].encode("utf-8"))
