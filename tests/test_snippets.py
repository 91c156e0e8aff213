from __future__ import annotations

import unittest

from symjump.kinds import SymbolKind
from symjump.snippets import collect_symbol_source
from symjump.symbol_types import Entry

LINES = [
    "class Foo:",
    "    def bar(self):",
    "        return 1",
    "",
    "def top():",
    "    pass",
]


def entry(name: str, start_line: int | None, end_line: int | None) -> Entry:
    return Entry(name, name, SymbolKind.Function, start_line, 1, end_line, 1)


class CollectSymbolSourceTests(unittest.TestCase):
    def test_sections_are_joined_in_line_order(self) -> None:
        source = collect_symbol_source([entry("top", 5, 6), entry("bar", 2, 3)], LINES)

        self.assertEqual(source, "    def bar(self):\n        return 1\n\ndef top():\n    pass")

    def test_nested_selection_is_emitted_once(self) -> None:
        source = collect_symbol_source([entry("bar", 2, 3), entry("Foo", 1, 3)], LINES)

        self.assertEqual(source, "class Foo:\n    def bar(self):\n        return 1")

    def test_entries_without_lines_are_ignored(self) -> None:
        self.assertEqual(collect_symbol_source([entry("ghost", None, None)], LINES), "")


if __name__ == "__main__":
    unittest.main()
