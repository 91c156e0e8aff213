"""Hierarchical symbol tree to ordered, depth-annotated entry list.

Filtered nodes are transparent: their children are still visited, at the
depth the filtered node itself would have occupied, so the indentation of
retained entries only reflects retained ancestors.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable, Sequence

from .kinds import SymbolKind
from .symbol_types import Entry, SymbolNode

logger = logging.getLogger(__name__)

INDENT_STYLES = ("spaces", "dots", "arrow")
_CLEAN_NAME_RE = re.compile(r"^[^\s(]+")


def clean_symbol_name(name: str) -> str:
    """Strip everything from the first whitespace or ``(`` onward."""
    match = _CLEAN_NAME_RE.match(name)
    return match.group(0) if match is not None else name


def indent_prefix(depth: int, style: str = "dots") -> str:
    """Return the display prefix for an entry at ``depth``."""
    if depth <= 0:
        return ""
    if style == "dots":
        return "  " * (depth - 1) + ".."
    if style == "arrow":
        return "  " * (depth - 1) + " →"
    return "  " * depth


def should_include(node: SymbolNode, include_kinds: Collection[SymbolKind], block_patterns: Sequence[re.Pattern[str]]) -> bool:
    """Return whether ``node`` passes the kind filter and the blocklist."""
    if node.kind not in include_kinds:
        return False
    return not any(pattern.search(node.name) is not None for pattern in block_patterns)


def _entry_for(node: SymbolNode, depth: int, indent_style: str) -> Entry:
    name = clean_symbol_name(node.name)
    if node.range is None:
        start_line = start_col = end_line = end_col = None
    else:
        start_line = node.range.start.line + 1
        start_col = node.range.start.character + 1
        end_line = node.range.end.line + 1
        end_col = node.range.end.character + 1
    return Entry(
        display_text=indent_prefix(depth, indent_style) + name,
        name=name,
        kind=node.kind,
        start_line=start_line,
        start_col=start_col,
        end_line=end_line,
        end_col=end_col,
        depth=depth,
    )


def flatten(
    tree: Iterable[SymbolNode],
    include_kinds: Collection[SymbolKind],
    block_patterns: Sequence[re.Pattern[str]] = (),
    indent_style: str = "dots",
) -> list[Entry]:
    """Flatten ``tree`` in pre-order, keeping only included nodes.

    ``depth`` of each entry counts included ancestors only. Nodes without a
    name are treated as invalid and skipped along with their subtree.
    """
    entries: list[Entry] = []
    missing_bounds = 0

    # Explicit stack keeps deep trees off the recursion limit.
    stack: list[tuple[SymbolNode, int]] = [(node, 0) for node in reversed(list(tree))]
    while stack:
        node, depth = stack.pop()
        if node is None or not node.name:
            continue

        child_depth = depth
        if should_include(node, include_kinds, block_patterns):
            entry = _entry_for(node, depth, indent_style)
            if not entry.has_bounds:
                missing_bounds += 1
            entries.append(entry)
            child_depth = depth + 1

        for child in reversed(node.children):
            stack.append((child, child_depth))

    if missing_bounds:
        logger.debug("%d flattened symbols have no usable range", missing_bounds)
    return entries
