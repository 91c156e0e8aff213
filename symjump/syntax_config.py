"""Language/grammar configuration for symbol extraction."""

from __future__ import annotations

import re

from .kinds import SymbolKind

LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".py": "python",
    ".pyi": "python",
    ".pyw": "python",
    ".js": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".jsx": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".c": "c",
    ".h": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".hxx": "cpp",
    ".rb": "ruby",
    ".php": "php",
    ".swift": "swift",
    ".kt": "kotlin",
    ".scala": "scala",
    ".lua": "lua",
    ".sh": "bash",
    ".bash": "bash",
    ".zsh": "bash",
}

# Node types that open a symbol, mapped to the kind they produce.
SYMBOL_KIND_BY_NODE_TYPE: dict[str, SymbolKind] = {
    "function_definition": SymbolKind.Function,
    "function_declaration": SymbolKind.Function,
    "function_item": SymbolKind.Function,
    "method_definition": SymbolKind.Method,
    "method_declaration": SymbolKind.Method,
    "constructor_declaration": SymbolKind.Constructor,
    "class_definition": SymbolKind.Class,
    "class_declaration": SymbolKind.Class,
    "class_specifier": SymbolKind.Class,
    "struct_item": SymbolKind.Struct,
    "struct_specifier": SymbolKind.Struct,
    "interface_declaration": SymbolKind.Interface,
    "trait_item": SymbolKind.Interface,
    "enum_item": SymbolKind.Enum,
    "enum_declaration": SymbolKind.Enum,
    "enum_specifier": SymbolKind.Enum,
    "mod_item": SymbolKind.Module,
    "namespace_definition": SymbolKind.Namespace,
}
CLASS_LIKE_KINDS = frozenset(
    {SymbolKind.Class, SymbolKind.Struct, SymbolKind.Interface, SymbolKind.Enum}
)
DECORATED_NODE_TYPES = {"decorated_definition", "decorated_declaration"}
IDENTIFIER_NODE_TYPES = {
    "identifier",
    "type_identifier",
    "property_identifier",
    "field_identifier",
    "namespace_identifier",
}

SYMBOL_TREE_MAX = 4000

_CLASS = SymbolKind.Class
_FN = SymbolKind.Function

FALLBACK_PATTERNS_BY_LANGUAGE: dict[str, tuple[tuple[SymbolKind, re.Pattern[str]], ...]] = {
    "python": (
        (_CLASS, re.compile(r"^\s*class\s+(?P<name>[A-Za-z_][\w]*)")),
        (_FN, re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_][\w]*)")),
    ),
    "javascript": (
        (_CLASS, re.compile(r"^\s*(?:export\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)")),
        (_FN, re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+(?P<name>[A-Za-z_$][\w$]*)")),
        (
            _FN,
            re.compile(
                r"^\s*(?:export\s+)?(?:const|let|var)\s+(?P<name>[A-Za-z_$][\w$]*)\s*=\s*(?:async\s*)?\([^)]*\)\s*=>"
            ),
        ),
    ),
    "typescript": (
        (_CLASS, re.compile(r"^\s*(?:export\s+)?class\s+(?P<name>[A-Za-z_$][\w$]*)")),
        (SymbolKind.Interface, re.compile(r"^\s*(?:export\s+)?interface\s+(?P<name>[A-Za-z_$][\w$]*)")),
        (_FN, re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+(?P<name>[A-Za-z_$][\w$]*)")),
    ),
    "go": (
        (SymbolKind.Struct, re.compile(r"^\s*type\s+(?P<name>[A-Za-z_][\w]*)\s+struct\b")),
        (SymbolKind.Interface, re.compile(r"^\s*type\s+(?P<name>[A-Za-z_][\w]*)\s+interface\b")),
        (_FN, re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_][\w]*)\s*\(")),
    ),
    "rust": (
        (SymbolKind.Struct, re.compile(r"^\s*(?:pub\s+)?struct\s+(?P<name>[A-Za-z_][\w]*)\b")),
        (SymbolKind.Enum, re.compile(r"^\s*(?:pub\s+)?enum\s+(?P<name>[A-Za-z_][\w]*)\b")),
        (SymbolKind.Interface, re.compile(r"^\s*(?:pub\s+)?trait\s+(?P<name>[A-Za-z_][\w]*)\b")),
        (_FN, re.compile(r"^\s*(?:pub\s+)?(?:async\s+)?fn\s+(?P<name>[A-Za-z_][\w]*)\s*[<(]")),
    ),
    "ruby": (
        (_CLASS, re.compile(r"^\s*class\s+(?P<name>[A-Za-z_][\w:]*)")),
        (SymbolKind.Module, re.compile(r"^\s*module\s+(?P<name>[A-Za-z_][\w:]*)")),
        (_FN, re.compile(r"^\s*def\s+(?P<name>[A-Za-z_][\w!?=.]*)")),
    ),
    "lua": (
        (_FN, re.compile(r"^\s*(?:local\s+)?function\s+(?P<name>[A-Za-z_][\w\.:]*)")),
        (_FN, re.compile(r"^\s*(?:local\s+)?(?P<name>[A-Za-z_][\w\.:]*)\s*=\s*function\b")),
    ),
    "bash": (
        (_FN, re.compile(r"^\s*(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*\(\)\s*\{")),
        (_FN, re.compile(r"^\s*function\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)\b")),
    ),
}

GENERIC_FALLBACK_PATTERNS: tuple[tuple[SymbolKind, re.Pattern[str]], ...] = (
    (_CLASS, re.compile(r"^\s*(?:export\s+)?class\s+(?P<name>[A-Za-z_][\w$]*)")),
    (SymbolKind.Struct, re.compile(r"^\s*(?:pub\s+)?struct\s+(?P<name>[A-Za-z_][\w]*)\b")),
    (_FN, re.compile(r"^\s*(?:async\s+)?def\s+(?P<name>[A-Za-z_][\w]*)")),
    (_FN, re.compile(r"^\s*(?:export\s+)?(?:async\s+)?function\s+(?P<name>[A-Za-z_$][\w$]*)")),
    (_FN, re.compile(r"^\s*func\s+(?:\([^)]*\)\s*)?(?P<name>[A-Za-z_][\w]*)\s*\(")),
    (_FN, re.compile(r"^\s*(?:pub\s+)?(?:async\s+)?fn\s+(?P<name>[A-Za-z_][\w]*)\s*\(")),
)
