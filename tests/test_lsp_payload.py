from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from symjump.kinds import SymbolKind
from symjump.lsp_payload import LspPayloadProvider, load_lsp_payload, range_from_lsp, symbol_nodes_from_lsp
from symjump.symbol_types import Position, Range


def lsp_range(start_line: int, end_line: int) -> dict:
    return {"start": {"line": start_line, "character": 0}, "end": {"line": end_line, "character": 1}}


DOCUMENT_SYMBOLS = [
    {
        "name": "Foo",
        "kind": 5,
        "range": lsp_range(0, 9),
        "selectionRange": lsp_range(0, 0),
        "children": [
            {"name": "bar", "kind": 6, "range": lsp_range(2, 4)},
            {"kind": 6, "range": lsp_range(5, 7)},
        ],
    },
    {"name": "odd", "kind": 99, "range": {"start": {"line": 3}}},
]


class LspPayloadTests(unittest.TestCase):
    def test_document_symbols_convert_recursively(self) -> None:
        foo, odd = symbol_nodes_from_lsp(DOCUMENT_SYMBOLS)

        self.assertEqual((foo.name, foo.kind), ("Foo", SymbolKind.Class))
        self.assertEqual(foo.range, Range(Position(0, 0), Position(9, 1)))
        self.assertEqual([child.name for child in foo.children], ["bar"])
        self.assertEqual(odd.kind, SymbolKind.Unknown)
        self.assertIsNone(odd.range)

    def test_symbol_information_uses_location_range(self) -> None:
        (node,) = symbol_nodes_from_lsp(
            [{"name": "helper", "kind": 12, "location": {"uri": "file:///x.py", "range": lsp_range(4, 6)}}]
        )

        self.assertEqual(node.range, Range(Position(4, 0), Position(6, 1)))
        self.assertEqual(node.children, ())

    def test_invalid_ranges_are_rejected(self) -> None:
        self.assertIsNone(range_from_lsp({"start": {"line": 5, "character": 0}, "end": {"line": 2, "character": 0}}))
        self.assertIsNone(range_from_lsp({"start": {"line": -1, "character": 0}, "end": {"line": 2, "character": 0}}))
        self.assertIsNone(range_from_lsp({"start": {"line": True, "character": 0}, "end": {"line": 2, "character": 0}}))
        self.assertEqual(symbol_nodes_from_lsp(None), ())

    def test_load_accepts_json_rpc_envelope(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "symbols.json"
            path.write_text(json.dumps({"jsonrpc": "2.0", "id": 1, "result": DOCUMENT_SYMBOLS}), encoding="utf-8")

            nodes = load_lsp_payload(path)

        self.assertEqual([node.name for node in nodes], ["Foo", "odd"])

    def test_provider_serves_only_its_document(self) -> None:
        provider = LspPayloadProvider("doc", symbol_nodes_from_lsp(DOCUMENT_SYMBOLS))

        self.assertTrue(provider.supports_document_symbols("doc"))
        self.assertFalse(provider.supports_document_symbols("other"))
        self.assertEqual(len(provider.document_symbols("doc").result()), 2)
        self.assertIsNot(provider.document_symbols("doc"), provider.document_symbols("doc"))


if __name__ == "__main__":
    unittest.main()
