"""End-to-end navigation over the in-memory editor and headless picker."""

from __future__ import annotations

import logging
import unittest
from concurrent.futures import Future

from symjump.config import NavigatorConfig
from symjump.editor import MemoryEditor
from symjump.kinds import SymbolKind
from symjump.navigator import (
    NO_MATCHING_KINDS_MESSAGE,
    NO_RESULTS_MESSAGE,
    EngineState,
    SymbolNavigator,
)
from symjump.picker import SymbolPicker
from symjump.symbol_types import Position, Range, SymbolNode

SOURCE = "\n".join(
    [
        "class Foo:",
        "    x = 1",
        "    def bar(self):",
        "        return 1",
        "        pass",
        "    def baz(self):",
        "        return 2",
        "        pass",
        "",
        "# end of Foo",
    ]
)


def node(name: str, kind: SymbolKind, start: int, end: int, *children: SymbolNode) -> SymbolNode:
    return SymbolNode(name, kind, Range(Position(start, 0), Position(end, 8)), tuple(children))


def foo_tree() -> list[SymbolNode]:
    return [
        node(
            "Foo",
            SymbolKind.Class,
            0,
            9,
            node("bar", SymbolKind.Method, 2, 4),
            node("baz", SymbolKind.Method, 5, 7),
        )
    ]


class CountingProvider:
    """Provider answering immediately, or leaving futures open when ``manual``."""

    def __init__(self, nodes=None, manual: bool = False) -> None:
        self.nodes = foo_tree() if nodes is None else nodes
        self.manual = manual
        self.calls = 0
        self.futures: list[Future] = []

    def supports_document_symbols(self, _document_id) -> bool:
        return True

    def document_symbols(self, _document_id) -> Future:
        self.calls += 1
        future: Future = Future()
        self.futures.append(future)
        if not self.manual:
            future.set_result(self.nodes)
        return future


class RecordingPicker(SymbolPicker):
    def __init__(self) -> None:
        super().__init__()
        self.shows: list[tuple[tuple, int | None]] = []

    def show(self, entries, **kwargs) -> None:
        self.shows.append((tuple(entries), kwargs["initial_index"]))
        super().show(entries, **kwargs)


class SymbolNavigatorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.editor = MemoryEditor()
        self.window = self.editor.open_text("foo.py", SOURCE, "python")
        self.editor.set_cursor(self.window, Position(3, 0))
        self.provider = CountingProvider()
        self.picker = RecordingPicker()
        self.notices: list[tuple[str, int]] = []
        self.config = NavigatorConfig(include_kinds={"default": frozenset({SymbolKind.Class, SymbolKind.Method})})
        self.navigator = SymbolNavigator(
            self.editor,
            [self.provider],
            self.picker,
            notify=lambda message, level: self.notices.append((message, level)),
            config=self.config,
        )

    def markers(self) -> list:
        return list(self.editor.buffers["foo.py"].markers.values())

    def test_navigate_shows_outline_focused_on_containing_symbol(self) -> None:
        self.navigator.navigate()
        self.assertTrue(self.navigator.busy)
        self.assertEqual(self.picker.shows, [])

        self.navigator.pump()

        entries, initial_index = self.picker.shows[0]
        self.assertEqual([entry.display_text for entry in entries], ["Foo", "..bar", "..baz"])
        self.assertEqual(initial_index, 1)
        self.assertEqual(self.picker.current().name, "bar")
        self.assertEqual(len(self.markers()), 1)

    def test_focus_disabled_leaves_initial_index_empty(self) -> None:
        config = NavigatorConfig(
            include_kinds=self.config.include_kinds,
            focus_current_symbol=False,
        )
        self.navigator.navigate(config=config)
        self.navigator.pump()

        self.assertIsNone(self.picker.shows[0][1])
        self.assertEqual(self.picker.current().name, "Foo")

    def test_cursor_outside_every_symbol_still_opens_picker(self) -> None:
        self.editor.set_text("foo.py", SOURCE + "\n\n\nprint('tail')")
        self.editor.set_cursor(self.window, Position(12, 0))

        self.navigator.navigate()
        self.navigator.pump()

        self.assertEqual(len(self.picker.shows), 1)
        self.assertIsNone(self.picker.shows[0][1])

    def test_unchanged_document_is_served_from_cache(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        self.picker.cancel()

        self.navigator.navigate()

        self.assertEqual(self.provider.calls, 1)
        self.assertEqual(len(self.picker.shows), 2)
        self.assertFalse(self.navigator.busy)

    def test_document_change_triggers_exactly_one_new_request(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        first_record = self.navigator.state.cache.record
        self.picker.cancel()

        self.editor.set_text("foo.py", SOURCE + "\n")
        self.navigator.navigate()
        self.navigator.pump()

        self.assertEqual(self.provider.calls, 2)
        self.assertIsNot(self.navigator.state.cache.record, first_record)
        self.assertEqual(self.navigator.state.cache.record.version_key.change_counter, 1)

    def test_superseded_navigation_never_reaches_picker(self) -> None:
        provider = CountingProvider(manual=True)
        navigator = SymbolNavigator(self.editor, [provider], self.picker, notify=lambda *_: None, config=self.config)

        navigator.navigate()
        navigator.navigate()
        first, second = provider.futures
        self.assertTrue(first.cancelled())
        second.set_result([node("Only", SymbolKind.Class, 0, 9)])
        navigator.pump()

        self.assertEqual(len(self.picker.shows), 1)
        self.assertEqual([entry.name for entry in self.picker.shows[0][0]], ["Only"])

    def test_cancel_restores_cursor_and_clears_marker(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        self.picker.move(1)
        self.assertEqual(self.editor.get_cursor(self.window), Position(5, 0))

        self.picker.cancel()

        self.assertEqual(self.markers(), [])
        self.assertEqual(self.editor.get_cursor(self.window), Position(3, 0))
        self.assertIsNone(self.navigator.state.navigation)

    def test_confirm_jumps_to_entry_start(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        self.picker.set_query("baz")

        self.picker.confirm()

        self.assertEqual(self.markers(), [])
        self.assertEqual(self.editor.get_cursor(self.window), Position(5, 0))

    def test_external_close_tears_down_preview(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        self.assertEqual(len(self.markers()), 1)

        self.picker.close()

        self.assertEqual(self.markers(), [])
        self.assertIsNone(self.navigator.state.preview)

    def test_auto_select_single_match_jumps_immediately(self) -> None:
        provider = CountingProvider(nodes=[node("Solo", SymbolKind.Class, 5, 7)])
        config = NavigatorConfig(
            include_kinds=self.config.include_kinds,
            auto_select_single_match=True,
        )
        navigator = SymbolNavigator(self.editor, [provider], self.picker, notify=lambda *_: None, config=config)

        navigator.navigate()
        navigator.pump()

        self.assertFalse(self.picker.active)
        self.assertEqual(self.editor.get_cursor(self.window), Position(5, 0))
        self.assertEqual(self.markers(), [])

    def test_provider_error_is_notified(self) -> None:
        provider = CountingProvider(manual=True)
        navigator = SymbolNavigator(
            self.editor,
            [provider],
            self.picker,
            notify=lambda message, level: self.notices.append((message, level)),
        )
        navigator.navigate()
        provider.futures[0].set_exception(RuntimeError("server exploded"))
        navigator.pump()

        self.assertEqual(self.notices, [("Error fetching symbols: server exploded", logging.ERROR)])
        self.assertEqual(self.picker.shows, [])
        self.assertIsNone(navigator.state.navigation)
        self.assertFalse(navigator.busy)

    def test_empty_result_is_a_warning(self) -> None:
        self.provider.nodes = []
        self.navigator.navigate()
        self.navigator.pump()

        self.assertEqual(self.notices, [(NO_RESULTS_MESSAGE, logging.WARNING)])
        self.assertEqual(self.picker.shows, [])

    def test_filter_matching_nothing_is_a_warning(self) -> None:
        self.provider.nodes = [node("CONST", SymbolKind.Constant, 0, 0)]
        self.navigator.navigate()
        self.navigator.pump()

        self.assertEqual(self.notices, [(NO_MATCHING_KINDS_MESSAGE, logging.WARNING)])
        self.assertEqual(self.picker.shows, [])

    def test_missing_provider_is_reported_synchronously(self) -> None:
        navigator = SymbolNavigator(
            self.editor,
            [],
            self.picker,
            notify=lambda message, level: self.notices.append((message, level)),
        )

        navigator.navigate()

        self.assertEqual(self.notices, [("No symbol provider attached to document", logging.ERROR)])
        self.assertFalse(navigator.busy)

    def test_raising_capability_check_is_reported_not_raised(self) -> None:
        class DetachedProvider(CountingProvider):
            def supports_document_symbols(self, _document_id) -> bool:
                raise RuntimeError("client detached")

        provider = DetachedProvider()
        navigator = SymbolNavigator(
            self.editor,
            [provider],
            self.picker,
            notify=lambda message, level: self.notices.append((message, level)),
        )

        navigator.navigate()

        self.assertEqual(self.notices, [("No symbol provider supports document symbols", logging.ERROR)])
        self.assertIsNone(navigator.state.navigation)
        self.assertFalse(navigator.busy)
        self.assertEqual(provider.calls, 0)

    def test_picker_failure_is_contained_and_notified(self) -> None:
        class BrokenPicker:
            def show(self, *_args, **_kwargs) -> None:
                raise RuntimeError("ui gone")

        navigator = SymbolNavigator(
            self.editor,
            [self.provider],
            BrokenPicker(),
            notify=lambda message, level: self.notices.append((message, level)),
            config=self.config,
        )
        navigator.navigate()
        with self.assertLogs("symjump.navigator", level="ERROR"):
            navigator.pump()

        self.assertEqual(len(self.notices), 1)
        self.assertEqual(self.notices[0][1], logging.ERROR)
        self.assertIsNone(navigator.state.navigation)

    def test_navigators_do_not_share_state(self) -> None:
        other_picker = RecordingPicker()
        other = SymbolNavigator(self.editor, [self.provider], other_picker, notify=lambda *_: None, config=self.config)

        self.navigator.navigate()
        self.navigator.pump()
        other.navigate()
        other.pump()

        self.assertEqual(self.provider.calls, 2)
        self.assertIsInstance(other.state, EngineState)
        self.assertIsNot(other.state.cache, self.navigator.state.cache)

    def test_selection_source_joins_non_overlapping_symbols(self) -> None:
        self.navigator.navigate()
        self.navigator.pump()
        entries = self.picker.visible_entries()

        source = self.navigator.selection_source([entries[2], entries[1]])

        self.assertEqual(
            source,
            "    def bar(self):\n        return 1\n        pass\n\n    def baz(self):\n        return 2\n        pass",
        )

    def test_run_until_idle_pumps_worker_results(self) -> None:
        self.navigator.navigate()

        self.assertTrue(self.navigator.run_until_idle(1.0))
        self.assertEqual(len(self.picker.shows), 1)


if __name__ == "__main__":
    unittest.main()
