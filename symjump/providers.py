"""Tree-sitter backed symbol provider.

Builds a hierarchical symbol tree from document text. Grammars come from
``tree-sitter-language-pack``; when a grammar cannot be loaded or parsing
fails, indentation-aware regex fallbacks produce the tree instead.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Hashable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from .kinds import SymbolKind
from .symbol_types import Position, Range, SymbolNode
from .syntax import parse_source, position_from_point, source_lines
from .syntax_config import (
    CLASS_LIKE_KINDS,
    DECORATED_NODE_TYPES,
    FALLBACK_PATTERNS_BY_LANGUAGE,
    GENERIC_FALLBACK_PATTERNS,
    IDENTIFIER_NODE_TYPES,
    SYMBOL_KIND_BY_NODE_TYPE,
    SYMBOL_TREE_MAX,
)


def _normalize_whitespace(text: str) -> str:
    """Collapse internal whitespace to single spaces for stable labels."""
    return re.sub(r"\s+", " ", text).strip()


def _node_text(source_bytes: bytes, node) -> str:
    """Decode source slice covered by a Tree-sitter node."""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _name_from_node(source_bytes: bytes, node) -> str:
    """Extract display name for a symbol node."""
    for field_name in ("name", "declarator"):
        child = node.child_by_field_name(field_name)
        if child is None:
            continue
        nested = child.child_by_field_name("name")
        if nested is not None:
            return _normalize_whitespace(_node_text(source_bytes, nested))
        return _normalize_whitespace(_node_text(source_bytes, child))

    for child in node.named_children:
        if child.type in IDENTIFIER_NODE_TYPES:
            return _normalize_whitespace(_node_text(source_bytes, child))
    return ""


def _node_range(node, lines: list[bytes]) -> Range:
    """Node span in character columns; Tree-sitter points count bytes."""
    return Range(position_from_point(lines, node.start_point), position_from_point(lines, node.end_point))


def _symbol_kind(node_type: str, inside_class: bool) -> SymbolKind | None:
    """Map Tree-sitter node type to a kind; functions inside classes are methods."""
    kind = SYMBOL_KIND_BY_NODE_TYPE.get(node_type)
    if kind is SymbolKind.Function and inside_class:
        return SymbolKind.Method
    return kind


def collect_tree_sitter_symbols(root, source_bytes: bytes, max_symbols: int = SYMBOL_TREE_MAX) -> tuple[SymbolNode, ...]:
    """Walk a parsed tree and return its top-level symbol nodes."""
    budget = [max_symbols]
    lines = source_lines(source_bytes)

    def walk(node, inside_class: bool) -> list[SymbolNode]:
        """Return symbol nodes found in ``node``'s subtree, outermost first."""
        if budget[0] <= 0:
            return []

        if node.type in DECORATED_NODE_TYPES:
            definition = node.child_by_field_name("definition")
            if definition is not None:
                return walk(definition, inside_class)

        kind = _symbol_kind(node.type, inside_class)
        if kind is None:
            found: list[SymbolNode] = []
            for child in node.named_children:
                found.extend(walk(child, inside_class))
            return found

        budget[0] -= 1
        children: list[SymbolNode] = []
        for child in node.named_children:
            children.extend(walk(child, kind in CLASS_LIKE_KINDS))
        name = _name_from_node(source_bytes, node) or node.type
        return [SymbolNode(name=name, kind=kind, range=_node_range(node, lines), children=tuple(children))]

    return tuple(walk(root, False))


def _leading_indent_columns(text: str) -> int:
    """Return leading indentation width where tabs count as four columns."""
    count = 0
    for ch in text:
        if ch == " ":
            count += 1
            continue
        if ch == "\t":
            count += 4
            continue
        break
    return count


class _FallbackSymbol:
    """Mutable node used while the indentation stack is being built."""

    def __init__(self, name: str, kind: SymbolKind, line: int, column: int, indent: int) -> None:
        self.name = name
        self.kind = kind
        self.line = line
        self.column = column
        self.indent = indent
        self.end_line = line
        self.end_col = 0
        self.children: list[_FallbackSymbol] = []

    def freeze(self) -> SymbolNode:
        return SymbolNode(
            name=self.name,
            kind=self.kind,
            range=Range(Position(self.line, self.column), Position(self.end_line, self.end_col)),
            children=tuple(child.freeze() for child in self.children),
        )


def collect_fallback_symbols(source: str, language_name: str | None, max_symbols: int = SYMBOL_TREE_MAX) -> tuple[SymbolNode, ...]:
    """Collect a symbol tree via regex patterns and indentation.

    A symbol ends on the last non-blank line before the next symbol at the
    same or shallower indentation, or at the last non-blank line of the file.
    """
    patterns = FALLBACK_PATTERNS_BY_LANGUAGE.get(language_name or "", GENERIC_FALLBACK_PATTERNS)
    lines = source.splitlines()

    found: list[_FallbackSymbol] = []
    for line_idx, line in enumerate(lines):
        for kind, pattern in patterns:
            match = pattern.match(line)
            if match is None:
                continue
            name = _normalize_whitespace(match.group("name"))
            if name:
                column = len(line) - len(line.lstrip())
                found.append(_FallbackSymbol(name, kind, line_idx, column, _leading_indent_columns(line)))
            break
        if len(found) >= max_symbols:
            break

    def last_non_blank(before: int) -> int:
        idx = before - 1
        while idx > 0 and not lines[idx].strip():
            idx -= 1
        return max(0, idx)

    for idx, symbol in enumerate(found):
        end_line = last_non_blank(len(lines))
        for later in found[idx + 1 :]:
            if later.indent <= symbol.indent:
                end_line = last_non_blank(later.line)
                break
        symbol.end_line = max(symbol.line, end_line)
        symbol.end_col = len(lines[symbol.end_line]) if symbol.end_line < len(lines) else 0

    roots: list[_FallbackSymbol] = []
    stack: list[_FallbackSymbol] = []
    for symbol in found:
        while stack and symbol.indent <= stack[-1].indent:
            stack.pop()
        if stack:
            parent = stack[-1]
            if symbol.kind is SymbolKind.Function and parent.kind in CLASS_LIKE_KINDS:
                symbol.kind = SymbolKind.Method
            parent.children.append(symbol)
        else:
            roots.append(symbol)
        stack.append(symbol)

    return tuple(symbol.freeze() for symbol in roots)


def collect_symbol_tree(source: str, language_name: str | None, max_symbols: int = SYMBOL_TREE_MAX) -> tuple[SymbolNode, ...]:
    """Return the symbol tree for ``source``.

    Uses Tree-sitter when a grammar is available, regex fallbacks otherwise.
    """
    if language_name is not None:
        tree, source_bytes, _error = parse_source(source, language_name)
        if tree is not None:
            return collect_tree_sitter_symbols(tree.root_node, source_bytes, max_symbols=max_symbols)
    return collect_fallback_symbols(source, language_name, max_symbols=max_symbols)


class TreeSitterSymbolProvider:
    """Answers document-symbol requests on a single background worker.

    Document text is read on the calling thread so the worker never touches
    editor state.
    """

    def __init__(
        self,
        text_for: Callable[[Hashable], str],
        language_for: Callable[[Hashable], str | None],
        max_symbols: int = SYMBOL_TREE_MAX,
    ) -> None:
        self._text_for = text_for
        self._language_for = language_for
        self._max_symbols = max_symbols
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="symjump-symbols")

    def supports_document_symbols(self, document_id: Hashable) -> bool:
        language = self._language_for(document_id)
        return bool(language)

    def document_symbols(self, document_id: Hashable) -> Future[Sequence[SymbolNode]]:
        source = self._text_for(document_id)
        language = self._language_for(document_id)
        return self._executor.submit(collect_symbol_tree, source, language, self._max_symbols)

    def close(self) -> None:
        """Stop the worker, dropping queued lookups."""
        self._executor.shutdown(wait=False, cancel_futures=True)
