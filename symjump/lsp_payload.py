"""Conversion of LSP ``textDocument/documentSymbol`` responses.

Accepts both hierarchical ``DocumentSymbol`` items and flat
``SymbolInformation`` items (whose range sits under ``location``).
"""

from __future__ import annotations

import json
from collections.abc import Hashable, Sequence
from concurrent.futures import Future
from pathlib import Path

from .kinds import kind_from_lsp
from .symbol_types import Position, Range, SymbolNode


def _position_from_lsp(value: object) -> Position | None:
    if not isinstance(value, dict):
        return None
    line = value.get("line")
    character = value.get("character")
    for item in (line, character):
        if isinstance(item, bool) or not isinstance(item, int) or item < 0:
            return None
    return Position(line, character)


def range_from_lsp(value: object) -> Range | None:
    """Parse an LSP range, returning ``None`` when any bound is unusable."""
    if not isinstance(value, dict):
        return None
    start = _position_from_lsp(value.get("start"))
    end = _position_from_lsp(value.get("end"))
    if start is None or end is None or end < start:
        return None
    return Range(start, end)


def symbol_node_from_lsp(item: object) -> SymbolNode | None:
    """Convert one payload item; items without a string name are dropped."""
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if not isinstance(name, str):
        return None

    raw_range = item.get("range")
    if raw_range is None:
        location = item.get("location")
        if isinstance(location, dict):
            raw_range = location.get("range")

    children = item.get("children")
    return SymbolNode(
        name=name,
        kind=kind_from_lsp(item.get("kind")),
        range=range_from_lsp(raw_range),
        children=symbol_nodes_from_lsp(children) if isinstance(children, list) else (),
    )


def symbol_nodes_from_lsp(payload: object) -> tuple[SymbolNode, ...]:
    """Convert a whole response; anything but a list yields no symbols."""
    if not isinstance(payload, list):
        return ()
    nodes = (symbol_node_from_lsp(item) for item in payload)
    return tuple(node for node in nodes if node is not None)


def load_lsp_payload(path: Path) -> tuple[SymbolNode, ...]:
    """Read a JSON dump of a documentSymbol response.

    A full JSON-RPC envelope is accepted as well; its ``result`` is used.
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "result" in data:
        data = data["result"]
    return symbol_nodes_from_lsp(data)


class LspPayloadProvider:
    """Provider serving an already decoded symbol tree for one document."""

    def __init__(self, document_id: Hashable, nodes: Sequence[SymbolNode]) -> None:
        self.document_id = document_id
        self.nodes = tuple(nodes)

    def supports_document_symbols(self, document_id: Hashable) -> bool:
        return document_id == self.document_id

    def document_symbols(self, document_id: Hashable) -> Future[Sequence[SymbolNode]]:
        future: Future[Sequence[SymbolNode]] = Future()
        future.set_result(self.nodes)
        return future
