"""Symbol kind enumeration and presentation tables.

Numbering follows the Language Server Protocol ``SymbolKind`` values so raw
provider payloads map without translation. ``Unknown`` absorbs any value a
newer provider may send.
"""

from __future__ import annotations

from enum import IntEnum


class SymbolKind(IntEnum):
    """Static set of symbol kinds understood by the navigator."""

    Unknown = 0
    File = 1
    Module = 2
    Namespace = 3
    Package = 4
    Class = 5
    Method = 6
    Property = 7
    Field = 8
    Constructor = 9
    Enum = 10
    Interface = 11
    Function = 12
    Variable = 13
    Constant = 14
    String = 15
    Number = 16
    Boolean = 17
    Array = 18
    Object = 19
    Key = 20
    Null = 21
    EnumMember = 22
    Struct = 23
    Event = 24
    Operator = 25
    TypeParameter = 26


_KINDS_BY_FOLDED_NAME: dict[str, SymbolKind] = {kind.name.casefold(): kind for kind in SymbolKind}

KIND_TEXT: dict[SymbolKind, str] = {
    SymbolKind.Function: "function",
    SymbolKind.Method: "method",
    SymbolKind.Class: "class",
    SymbolKind.Module: "module",
    SymbolKind.Constructor: "constructor",
    SymbolKind.Interface: "interface",
    SymbolKind.Property: "property",
    SymbolKind.Field: "field",
    SymbolKind.Enum: "enum",
    SymbolKind.Constant: "constant",
    SymbolKind.Variable: "variable",
}

KIND_ICONS: dict[SymbolKind, str] = {
    SymbolKind.File: "󰈙",
    SymbolKind.Module: "󰏗",
    SymbolKind.Namespace: "󰌗",
    SymbolKind.Package: "󰏖",
    SymbolKind.Class: "󰌗",
    SymbolKind.Method: "󰆧",
    SymbolKind.Property: "󰜢",
    SymbolKind.Field: "󰜢",
    SymbolKind.Constructor: "󰆧",
    SymbolKind.Enum: "󰒻",
    SymbolKind.Interface: "󰕘",
    SymbolKind.Function: "󰊕",
    SymbolKind.Variable: "󰀫",
    SymbolKind.Constant: "󰏿",
    SymbolKind.String: "󰀬",
    SymbolKind.Number: "󰎠",
    SymbolKind.Boolean: "󰨙",
    SymbolKind.Array: "󰅪",
    SymbolKind.Object: "󰅩",
    SymbolKind.Key: "󰌋",
    SymbolKind.Null: "󰟢",
    SymbolKind.EnumMember: "󰒻",
    SymbolKind.Struct: "󰌗",
    SymbolKind.Event: "󰉁",
    SymbolKind.Operator: "󰆕",
    SymbolKind.TypeParameter: "󰊄",
}

DEFAULT_ICON = "󱠦"


def kind_from_lsp(value: object) -> SymbolKind:
    """Map an LSP numeric kind to ``SymbolKind``; unknown values map to ``Unknown``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return SymbolKind.Unknown
    try:
        return SymbolKind(value)
    except ValueError:
        return SymbolKind.Unknown


def kind_from_name(name: str) -> SymbolKind | None:
    """Resolve a kind name case-insensitively, returning ``None`` when unknown."""
    return _KINDS_BY_FOLDED_NAME.get(name.strip().casefold())


def kind_label(kind: SymbolKind, mode: str = "text") -> str:
    """Return the short label shown next to an entry in ``text`` or ``icon`` mode."""
    if mode == "icon":
        return KIND_ICONS.get(kind, DEFAULT_ICON)
    return KIND_TEXT.get(kind, kind.name.lower())
