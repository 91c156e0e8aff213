from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from symjump import config
from symjump.kinds import SymbolKind, kind_label


class ConfigBehaviorTests(unittest.TestCase):
    def test_missing_or_malformed_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            with mock.patch("symjump.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                loaded = config.load_navigator_config()

        self.assertEqual(loaded.kinds_for("python"), config.DEFAULT_INCLUDE_KINDS["default"])
        self.assertTrue(loaded.focus_current_symbol)

    def test_overrides_merge_per_category(self) -> None:
        payload = {
            "include_kinds": {"python": ["class", "Method", "bogus"]},
            "block_patterns": {"python": ["^_", "("]},
            "auto_select_single_match": True,
            "focus_current_symbol": "yes",
            "indent_style": "arrow",
            "display_mode": "neon",
        }
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps(payload), encoding="utf-8")
            with mock.patch("symjump.config.CONFIG_PATH", config_path):
                loaded = config.load_navigator_config()

        self.assertEqual(loaded.kinds_for("python"), frozenset({SymbolKind.Class, SymbolKind.Method}))
        self.assertEqual(loaded.kinds_for("yaml"), config.DEFAULT_INCLUDE_KINDS["yaml"])
        self.assertEqual([pattern.pattern for pattern in loaded.patterns_for("python")], ["^_"])
        self.assertEqual(len(loaded.patterns_for("lua")), 6)
        self.assertTrue(loaded.auto_select_single_match)
        self.assertTrue(loaded.focus_current_symbol)
        self.assertEqual(loaded.indent_style, "arrow")
        self.assertEqual(loaded.display_mode, "text")

    def test_unknown_category_falls_back_to_default(self) -> None:
        navigator_config = config.NavigatorConfig()

        self.assertEqual(navigator_config.kinds_for("cobol"), config.DEFAULT_INCLUDE_KINDS["default"])
        self.assertEqual(navigator_config.kinds_for(None), config.DEFAULT_INCLUDE_KINDS["default"])
        self.assertEqual(navigator_config.patterns_for("cobol"), ())

    def test_lua_block_patterns_drop_anonymous_callbacks(self) -> None:
        patterns = config.NavigatorConfig().patterns_for("lua")

        def blocked(name: str) -> bool:
            return any(pattern.search(name) for pattern in patterns)

        self.assertTrue(blocked("vim.keymap.set"))
        self.assertTrue(blocked("callback"))
        self.assertTrue(blocked("line:gsub"))
        self.assertFalse(blocked("setup"))
        self.assertFalse(blocked("callbacks"))

    def test_kind_labels(self) -> None:
        self.assertEqual(kind_label(SymbolKind.Method), "method")
        self.assertEqual(kind_label(SymbolKind.TypeParameter), "typeparameter")
        self.assertNotEqual(kind_label(SymbolKind.Unknown, "icon"), "")


if __name__ == "__main__":
    unittest.main()
