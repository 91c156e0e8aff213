"""Terminal rendering of preview extents with Pygments colors."""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .symbol_types import Range

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
DEFAULT_STYLE = "monokai"


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=16)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    """Return cached Pygments terminal formatter for style name."""
    return Terminal256Formatter(style=_normalize_style(style))


def _lexer_for(filename: str, filetype: str, source: str):
    if filetype:
        try:
            return get_lexer_by_name(filetype)
        except ClassNotFound:
            pass
    try:
        return get_lexer_for_filename(filename, source)
    except ClassNotFound:
        return TextLexer()


def colorize_source(source: str, filename: str, filetype: str = "", style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` for a terminal, choosing the lexer by filetype then filename."""
    source = sanitize_terminal_text(source)
    rendered = pygments_highlight(source, _lexer_for(filename, filetype, source), _formatter_for_style(style))
    # Pygments always terminates output with a newline.
    if not source.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


def render_extent(
    lines: list[str],
    span: Range,
    filename: str,
    filetype: str = "",
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Render the lines covered by ``span`` with a 1-based line-number gutter."""
    first = max(0, span.start.line)
    last = min(len(lines) - 1, span.end.line)
    if last < first:
        return ""

    excerpt = "\n".join(lines[first : last + 1])
    body = sanitize_terminal_text(excerpt) if no_color else colorize_source(excerpt, filename, filetype, style)
    width = len(str(last + 1))
    return "\n".join(
        f"{line_no:>{width}} │ {text}"
        for line_no, text in enumerate(body.split("\n"), start=first + 1)
    )
