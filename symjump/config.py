"""Navigator configuration and persisted JSON overrides.

Defaults cover the common symbol kinds per document category. Overrides are
read from ``config.json`` in the user config directory. Malformed or missing
config falls back to the defaults.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from platformdirs import user_config_dir

from .flatten import INDENT_STYLES
from .kinds import SymbolKind, kind_from_name
from .preview import DEFAULT_HIGHLIGHT_STYLE

logger = logging.getLogger(__name__)

APP_NAME = "symjump"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_CATEGORY = "default"
DISPLAY_MODES = ("text", "icon")

_K = SymbolKind

DEFAULT_INCLUDE_KINDS: dict[str, frozenset[SymbolKind]] = {
    DEFAULT_CATEGORY: frozenset(
        {
            _K.Function,
            _K.Method,
            _K.Class,
            _K.Module,
            _K.Property,
            _K.Variable,
            _K.Constant,
            _K.Enum,
            _K.Interface,
            _K.Field,
        }
    ),
    "yaml": frozenset({_K.Object, _K.Array}),
    "json": frozenset({_K.Module}),
    "toml": frozenset({_K.Object}),
    "markdown": frozenset({_K.String}),
}

DEFAULT_BLOCK_PATTERNS: dict[str, tuple[str, ...]] = {
    DEFAULT_CATEGORY: (),
    # Anonymous callbacks that Lua servers report as symbols.
    "lua": (
        r"^vim\.",
        r"\.\.\. :",
        r":gsub",
        r"^callback$",
        r"^filter$",
        r"^map$",
    ),
}


def _compile_patterns(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    compiled: list[re.Pattern[str]] = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error:
            logger.warning("ignoring invalid block pattern %r", pattern)
    return tuple(compiled)


def _default_block_patterns() -> dict[str, tuple[re.Pattern[str], ...]]:
    return {category: _compile_patterns(patterns) for category, patterns in DEFAULT_BLOCK_PATTERNS.items()}


@dataclass(frozen=True)
class NavigatorConfig:
    """Per-invocation navigation settings."""

    include_kinds: Mapping[str, frozenset[SymbolKind]] = field(
        default_factory=lambda: dict(DEFAULT_INCLUDE_KINDS)
    )
    block_patterns: Mapping[str, tuple[re.Pattern[str], ...]] = field(default_factory=_default_block_patterns)
    focus_current_symbol: bool = True
    auto_select_single_match: bool = False
    highlight_style: str = DEFAULT_HIGHLIGHT_STYLE
    indent_style: str = "dots"
    display_mode: str = "text"

    def kinds_for(self, category: str | None) -> frozenset[SymbolKind]:
        """Kinds to keep for ``category``, falling back to the default set."""
        if category and category in self.include_kinds:
            return self.include_kinds[category]
        return self.include_kinds.get(DEFAULT_CATEGORY, frozenset())

    def patterns_for(self, category: str | None) -> tuple[re.Pattern[str], ...]:
        """Block patterns for ``category``, falling back to the default list."""
        if category and category in self.block_patterns:
            return self.block_patterns[category]
        return self.block_patterns.get(DEFAULT_CATEGORY, ())


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def _parse_include_kinds(value: object) -> dict[str, frozenset[SymbolKind]]:
    """Read ``{category: [kind name, ...]}``, dropping unknown kinds."""
    if not isinstance(value, dict):
        return {}
    parsed: dict[str, frozenset[SymbolKind]] = {}
    for category, names in value.items():
        if not isinstance(category, str) or not isinstance(names, list):
            continue
        kinds = set()
        for name in names:
            kind = kind_from_name(name) if isinstance(name, str) else None
            if kind is None:
                logger.debug("ignoring unknown symbol kind %r for %s", name, category)
                continue
            kinds.add(kind)
        parsed[category] = frozenset(kinds)
    return parsed


def _parse_block_patterns(value: object) -> dict[str, tuple[re.Pattern[str], ...]]:
    """Read ``{category: [regex, ...]}``, dropping patterns that fail to compile."""
    if not isinstance(value, dict):
        return {}
    parsed: dict[str, tuple[re.Pattern[str], ...]] = {}
    for category, patterns in value.items():
        if not isinstance(category, str) or not isinstance(patterns, list):
            continue
        parsed[category] = _compile_patterns(tuple(item for item in patterns if isinstance(item, str)))
    return parsed


def navigator_config_from_dict(data: Mapping[str, object], base: NavigatorConfig | None = None) -> NavigatorConfig:
    """Overlay validated values from ``data`` onto ``base``.

    Category maps merge per category: a category present in ``data``
    replaces that category's list, other categories keep their values.
    Values of the wrong type are ignored.
    """
    config = base if base is not None else NavigatorConfig()
    changes: dict[str, object] = {}

    include_kinds = _parse_include_kinds(data.get("include_kinds"))
    if include_kinds:
        changes["include_kinds"] = {**config.include_kinds, **include_kinds}

    block_patterns = _parse_block_patterns(data.get("block_patterns"))
    if block_patterns:
        changes["block_patterns"] = {**config.block_patterns, **block_patterns}

    for key in ("focus_current_symbol", "auto_select_single_match"):
        value = data.get(key)
        if isinstance(value, bool):
            changes[key] = value

    highlight_style = data.get("highlight_style")
    if isinstance(highlight_style, str) and highlight_style:
        changes["highlight_style"] = highlight_style

    indent_style = data.get("indent_style")
    if indent_style in INDENT_STYLES:
        changes["indent_style"] = indent_style

    display_mode = data.get("display_mode")
    if display_mode in DISPLAY_MODES:
        changes["display_mode"] = display_mode

    return replace(config, **changes) if changes else config


def load_navigator_config() -> NavigatorConfig:
    """Return defaults merged with the persisted overrides, if any."""
    return navigator_config_from_dict(load_config())
