from __future__ import annotations

import unittest

from symjump.cache import NavigationCache
from symjump.kinds import SymbolKind
from symjump.symbol_types import Entry, VersionKey


def entries(*names: str) -> list[Entry]:
    return [
        Entry(name, name, SymbolKind.Function, idx * 2 + 1, 1, idx * 2 + 2, 1)
        for idx, name in enumerate(names)
    ]


class NavigationCacheTests(unittest.TestCase):
    def test_get_returns_record_for_exact_version(self) -> None:
        cache = NavigationCache()
        key = VersionKey("doc", 3)
        stored = cache.put("doc", key, entries("a", "b"))

        self.assertIs(cache.get("doc", VersionKey("doc", 3)), stored)
        self.assertEqual([entry.name for entry in stored.entries], ["a", "b"])
        self.assertEqual(len(stored.range_index), 2)

    def test_changed_counter_misses(self) -> None:
        cache = NavigationCache()
        cache.put("doc", VersionKey("doc", 3), entries("a"))

        self.assertIsNone(cache.get("doc", VersionKey("doc", 4)))

    def test_new_document_replaces_the_single_slot(self) -> None:
        cache = NavigationCache()
        cache.put("one", VersionKey("one", 1), entries("a"))
        second = cache.put("two", VersionKey("two", 1), entries("b"))

        self.assertIsNone(cache.get("one", VersionKey("one", 1)))
        self.assertIs(cache.get("two", VersionKey("two", 1)), second)

    def test_put_replaces_record_instead_of_mutating(self) -> None:
        cache = NavigationCache()
        source = entries("a")
        first = cache.put("doc", VersionKey("doc", 1), source)
        source.append(entries("x")[0])
        second = cache.put("doc", VersionKey("doc", 2), entries("b"))

        self.assertEqual([entry.name for entry in first.entries], ["a"])
        self.assertIsNot(first, second)
        self.assertIs(cache.record, second)

    def test_put_rejects_key_for_other_document(self) -> None:
        cache = NavigationCache()

        with self.assertRaises(ValueError):
            cache.put("doc", VersionKey("other", 1), entries("a"))

    def test_clear_drops_record(self) -> None:
        cache = NavigationCache()
        cache.put("doc", VersionKey("doc", 1), entries("a"))
        cache.clear()

        self.assertIsNone(cache.get("doc", VersionKey("doc", 1)))


if __name__ == "__main__":
    unittest.main()
