"""Syntax-aware preview extents.

Given the first non-blank position of a symbol's start line, widen to the
largest syntax node that still starts on that line. This covers decorators,
assignments of anonymous functions and similar forms whose provider range
is narrower than what a reader would call "the symbol".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable

from .symbol_types import Position, Range
from .syntax import parse_source, point_from_position, position_from_point, source_lines

logger = logging.getLogger(__name__)


def widest_node_on_line(node, row: int):
    """Climb from ``node`` while the parent starts on ``row``, stopping below the root."""
    target = node
    current = node
    while current is not None and current.start_point[0] == row:
        parent = current.parent
        if parent is None:
            break
        target = current
        current = parent
    return target


class TreeSitterRangeRefiner:
    """Refines preview ranges by parsing the buffer text on demand.

    Parsed trees are cached per buffer and change counter, so moving through
    the picker parses each revision once.
    """

    def __init__(
        self,
        text_for: Callable[[Hashable], str],
        language_for: Callable[[Hashable], str | None],
        change_counter: Callable[[Hashable], int],
    ) -> None:
        self._text_for = text_for
        self._language_for = language_for
        self._change_counter = change_counter
        self._trees: dict[Hashable, tuple[int, object, list[bytes]]] = {}

    def _tree_for(self, buffer: Hashable):
        """Return ``(tree, source lines)`` for the buffer's current revision."""
        counter = self._change_counter(buffer)
        cached = self._trees.get(buffer)
        if cached is not None and cached[0] == counter:
            return cached[1], cached[2]

        language = self._language_for(buffer)
        if not language:
            return None, []
        tree, source_bytes, error = parse_source(self._text_for(buffer), language)
        if tree is None:
            logger.debug("range refinement unavailable for %r: %s", buffer, error)
            return None, []
        lines = source_lines(source_bytes)
        self._trees[buffer] = (counter, tree, lines)
        return tree, lines

    def refine(self, buffer: Hashable, position: Position) -> Range | None:
        tree, lines = self._tree_for(buffer)
        if tree is None:
            return None
        point = point_from_position(lines, position)
        node = tree.root_node.named_descendant_for_point_range(point, point)
        if node is None or node.parent is None:
            return None
        target = widest_node_on_line(node, position.line)
        return Range(position_from_point(lines, target.start_point), position_from_point(lines, target.end_point))
