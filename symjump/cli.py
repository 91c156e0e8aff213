"""Command-line front door for symjump.

Loads a file into an in-memory editor, runs one navigation and prints the
outline, the previewed extent of a picked symbol, or the source of every
matching symbol.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_navigator_config
from .editor import MemoryEditor
from .highlight import DEFAULT_STYLE, render_extent
from .kinds import kind_from_name, kind_label
from .lsp_payload import LspPayloadProvider, load_lsp_payload
from .navigator import SymbolNavigator
from .picker import SymbolPicker
from .providers import TreeSitterSymbolProvider
from .refine import TreeSitterRangeRefiner
from .symbol_types import Position

REQUEST_TIMEOUT_SECONDS = 10.0


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _kind_set(value: str):
    """argparse type for comma-separated symbol kind names."""
    kinds = set()
    for name in value.split(","):
        if not name.strip():
            continue
        kind = kind_from_name(name)
        if kind is None:
            raise argparse.ArgumentTypeError(f"unknown symbol kind: {name.strip()!r}")
        kinds.add(kind)
    if not kinds:
        raise argparse.ArgumentTypeError("at least one symbol kind is required")
    return frozenset(kinds)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Jump to symbols in a source file with live preview.")
    parser.add_argument("path", help="Source file to navigate.")
    parser.add_argument("--line", type=_positive_int, default=1, help="Cursor line (1-based).")
    parser.add_argument("--col", type=_positive_int, default=1, help="Cursor column (1-based).")
    parser.add_argument("--query", default="", help="Filter symbols by fuzzy query.")
    parser.add_argument("--select", action="store_true", help="Pick the highlighted symbol and print its extent.")
    parser.add_argument("--extract", action="store_true", help="Print the source of every matching symbol.")
    parser.add_argument("--symbols-json", metavar="FILE", help="Read symbols from an LSP documentSymbol JSON dump.")
    parser.add_argument("--kinds", type=_kind_set, default=None, help="Comma-separated symbol kinds to include.")
    parser.add_argument("--filetype", default=None, help="Override detected filetype.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log engine activity to stderr.")
    return parser


def _print_notification(message: str, level: int) -> None:
    sys.stderr.write(f"symjump: {logging.getLevelName(level).lower()}: {message}\n")


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run one symbol navigation on ``path``."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")

    editor = MemoryEditor()
    window = editor.open_file(path, filetype=args.filetype)
    buffer = editor.window_buffer(window)
    editor.set_cursor(window, Position(args.line - 1, args.col - 1))

    if args.symbols_json is not None:
        providers = [LspPayloadProvider(buffer, load_lsp_payload(Path(args.symbols_json)))]
    else:
        providers = [TreeSitterSymbolProvider(editor.text, editor.filetype)]
    refiner = TreeSitterRangeRefiner(editor.text, editor.filetype, editor.change_counter)

    config = load_navigator_config()
    if args.kinds is not None:
        category = editor.filetype(buffer) or "default"
        config = replace(config, include_kinds={**config.include_kinds, category: args.kinds})

    picker = SymbolPicker()
    navigator = SymbolNavigator(
        editor,
        providers,
        picker,
        refiner=refiner,
        notify=_print_notification,
        config=config,
    )
    try:
        navigator.navigate()
        if not navigator.run_until_idle(REQUEST_TIMEOUT_SECONDS):
            raise SystemExit("Timed out waiting for symbols.")
    finally:
        for provider in providers:
            close = getattr(provider, "close", None)
            if close is not None:
                close()

    if not picker.entries:
        raise SystemExit(1)
    if args.query and picker.active:
        picker.set_query(args.query)
    if not picker.active:
        return

    if args.extract:
        for _ in range(len(picker.matches)):
            picker.toggle()
            picker.move(1)
        selection = picker.selection()
        picker.confirm()
        sys.stdout.write(navigator.selection_source(selection) + "\n")
        return

    if args.select:
        entry = picker.current()
        if entry is None:
            picker.cancel()
            raise SystemExit("No matching symbols.")
        markers = list(editor.buffers[buffer].markers.values())
        picker.confirm()
        if markers:
            span, _style = markers[-1]
            sys.stdout.write(
                render_extent(
                    editor.buffers[buffer].lines,
                    span,
                    buffer,
                    editor.filetype(buffer),
                    style=args.style,
                    no_color=args.no_color,
                )
                + "\n"
            )
        cursor = editor.get_cursor(window)
        sys.stdout.write(f"{entry.name} -> {cursor.line + 1}:{cursor.character + 1}\n")
        return

    highlighted = picker.current()
    for entry in picker.visible_entries():
        pointer = ">" if entry is highlighted else " "
        line = "?" if entry.start_line is None else str(entry.start_line)
        sys.stdout.write(f"{pointer} {kind_label(entry.kind, config.display_mode):11} L{line:>5}  {entry.display_text}\n")
    picker.cancel()


if __name__ == "__main__":
    main()
