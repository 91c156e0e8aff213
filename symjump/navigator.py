"""Symbol navigation session: request, flatten, cache, pick and preview.

``SymbolNavigator`` owns an explicit ``EngineState`` (cache slot, request
manager, current navigation). Independent navigators never share state.
Provider completions are acted upon only inside ``pump``, which the host
event loop calls; nothing here blocks on a provider.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass

from .cache import CacheRecord, NavigationCache
from .config import NavigatorConfig
from .errors import NoProviderAvailable, ProviderRequestFailed, error_message
from .flatten import flatten
from .interfaces import EditorSurface, Notifier, PickerUI, RangeRefiner, SymbolProvider
from .preview import NavigationState, PreviewController
from .range_index import index_of
from .request_manager import ProviderLookup, RequestLifecycleManager
from .snippets import collect_symbol_source
from .symbol_types import Entry, SymbolNode, VersionKey

logger = logging.getLogger(__name__)
notify_logger = logging.getLogger("symjump.notify")

NO_RESULTS_MESSAGE = "No results."
NO_MATCHING_KINDS_MESSAGE = "Current kind filter doesn't match any symbols."
FAILURE_MESSAGE = "Symbol navigation failed; see log for details."


def log_notification(message: str, level: int) -> None:
    """Default notifier: route user-facing messages through logging."""
    notify_logger.log(level, message)


@dataclass
class EngineState:
    """Mutable state of one navigator; never shared between navigators."""

    cache: NavigationCache
    requests: RequestLifecycleManager
    navigation: NavigationState | None = None
    preview: PreviewController | None = None


class SymbolNavigator:
    """Fuzzy jump-to-symbol with live preview for one editor."""

    def __init__(
        self,
        editor: EditorSurface,
        providers: ProviderLookup | Sequence[SymbolProvider],
        picker: PickerUI,
        *,
        refiner: RangeRefiner | None = None,
        notify: Notifier | None = None,
        config: NavigatorConfig | None = None,
        state: EngineState | None = None,
    ) -> None:
        self.editor = editor
        self.picker = picker
        self.refiner = refiner
        self.notify = notify or log_notification
        self.config = config or NavigatorConfig()
        if state is None:
            if callable(providers):
                lookup = providers
            else:
                attached = tuple(providers)

                def lookup(_document_id: Hashable) -> Sequence[SymbolProvider]:
                    return attached

            state = EngineState(cache=NavigationCache(), requests=RequestLifecycleManager(lookup))
        self.state = state

    @property
    def busy(self) -> bool:
        """Whether a symbol request is still outstanding."""
        return not self.state.requests.is_idle

    def navigate(self, document_id: Hashable | None = None, config: NavigatorConfig | None = None) -> None:
        """Open the symbol picker for ``document_id`` (default: current window's buffer).

        A cached record for the unchanged document opens the picker
        immediately; otherwise a provider request is issued and the picker
        opens once ``pump`` delivers the result.
        """
        config = config or self.config
        self._end_session()

        window = self.editor.current_window()
        buffer = document_id if document_id is not None else self.editor.window_buffer(window)
        navigation = NavigationState(
            origin_window=window,
            origin_buffer=buffer,
            origin_cursor=self.editor.get_cursor(window),
        )
        self.state.navigation = navigation

        category = self.editor.filetype(buffer)
        version_key = VersionKey(buffer, self.editor.change_counter(buffer))
        record = self.state.cache.get(buffer, version_key)
        if record is not None:
            self.state.requests.cancel()
            self._run_guarded(lambda: self._show_picker(record, navigation, config))
            return

        def on_complete(error: ProviderRequestFailed | None, tree: list[SymbolNode]) -> None:
            self._run_guarded(lambda: self._on_symbols(error, tree, version_key, navigation, category, config))

        try:
            self.state.requests.request(buffer, on_complete)
        except NoProviderAvailable as exc:
            self.state.navigation = None
            self.notify(str(exc), logging.ERROR)

    def pump(self, block: bool = False, timeout: float | None = None) -> int:
        """Deliver finished provider requests; call from the host event loop."""
        return self.state.requests.dispatch_completions(block=block, timeout=timeout)

    def run_until_idle(self, timeout: float) -> bool:
        """Pump until no request is outstanding or ``timeout`` seconds pass."""
        deadline = time.monotonic() + timeout
        while self.busy:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            self.pump(block=True, timeout=remaining)
        return True

    def selection_source(self, entries: Sequence[Entry]) -> str:
        """Return the source text of ``entries`` from the navigated buffer."""
        navigation = self.state.navigation
        if navigation is not None:
            buffer = navigation.origin_buffer
        else:
            buffer = self.editor.window_buffer(self.editor.current_window())
        last_line = max((entry.end_line for entry in entries if entry.end_line is not None), default=0)
        if last_line <= 0:
            return ""
        return collect_symbol_source(entries, self.editor.get_lines(buffer, 0, last_line))

    def _on_symbols(
        self,
        error: ProviderRequestFailed | None,
        tree: list[SymbolNode],
        version_key: VersionKey,
        navigation: NavigationState,
        category: str,
        config: NavigatorConfig,
    ) -> None:
        if navigation is not self.state.navigation:
            logger.debug("ignoring symbols for a superseded navigation")
            return
        if error is not None:
            self.state.navigation = None
            self.notify(f"Error fetching symbols: {error_message(error)}", logging.ERROR)
            return
        if not tree:
            self.state.navigation = None
            self.notify(NO_RESULTS_MESSAGE, logging.WARNING)
            return

        entries = flatten(
            tree,
            config.kinds_for(category),
            config.patterns_for(category),
            indent_style=config.indent_style,
        )
        record = self.state.cache.put(version_key.document_id, version_key, entries)
        self._show_picker(record, navigation, config)

    def _show_picker(self, record: CacheRecord, navigation: NavigationState, config: NavigatorConfig) -> None:
        if not record.entries:
            self.state.navigation = None
            self.notify(NO_MATCHING_KINDS_MESSAGE, logging.WARNING)
            return

        initial_index: int | None = None
        if config.focus_current_symbol:
            cursor = navigation.origin_cursor
            current = record.range_index.locate(cursor.line + 1, cursor.character + 1)
            if current is not None:
                initial_index = index_of(record.entries, current)

        preview = PreviewController(self.editor, navigation, self.refiner, config.highlight_style)
        self.state.preview = preview
        self.picker.show(
            record.entries,
            initial_index=initial_index,
            auto_select=config.auto_select_single_match,
            on_move=self._guarded(preview.on_move),
            on_confirm=self._guarded(preview.on_confirm),
            on_cancel=self._guarded(preview.on_cancel),
            on_close=self._guarded(lambda: self._end_session(preview)),
        )

    def _end_session(self, preview: PreviewController | None = None) -> None:
        """Tear down the current preview (or only ``preview`` if still current)."""
        current = self.state.preview
        if preview is not None and preview is not current:
            preview.teardown()
            return
        if current is not None:
            current.teardown()
        self.state.preview = None
        self.state.navigation = None

    def _run_guarded(self, action: Callable[[], None]) -> None:
        try:
            action()
        except Exception:
            logger.exception("symbol navigation failed")
            self._end_session()
            self.notify(FAILURE_MESSAGE, logging.ERROR)

    def _guarded(self, callback: Callable[..., None]) -> Callable[..., None]:
        def run(*args) -> None:
            self._run_guarded(lambda: callback(*args))

        return run
