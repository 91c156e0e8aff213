"""Single outstanding symbol lookup with supersession and stale filtering.

Providers answer with ``concurrent.futures.Future`` objects that may finish
on any thread. Finished futures are queued and only acted upon when the
host loop calls ``dispatch_completions``, so completions always run on the
host thread and a superseded request can never reach its callback.
"""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Hashable, Sequence
from concurrent.futures import CancelledError, Future
from dataclasses import dataclass
from queue import Empty, Queue

from .errors import NoProviderAvailable, ProviderRequestFailed
from .interfaces import SymbolProvider
from .symbol_types import SymbolNode

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[ProviderRequestFailed | None, list[SymbolNode]], None]
ProviderLookup = Callable[[Hashable], Sequence[SymbolProvider]]


@dataclass(frozen=True)
class PendingRequest:
    """The one in-flight lookup owned by a manager."""

    request_id: int
    document_id: Hashable
    handle: Future
    on_complete: CompletionCallback


def _outcome(future: Future) -> tuple[ProviderRequestFailed | None, list[SymbolNode]]:
    """Translate a finished provider future into ``(error, tree)``."""
    try:
        result = future.result(timeout=0)
    except CancelledError as exc:
        return ProviderRequestFailed("Request was cancelled by the provider", cause=exc), []
    except ProviderRequestFailed as exc:
        return exc, []
    except Exception as exc:
        return ProviderRequestFailed(str(exc) or type(exc).__name__, cause=exc), []
    if result is None:
        return None, []
    return None, list(result)


class RequestLifecycleManager:
    """Issues symbol requests, keeping at most one pending at a time."""

    def __init__(self, providers: ProviderLookup) -> None:
        self._providers = providers
        self._pending: PendingRequest | None = None
        self._completions: Queue[tuple[int, Future]] = Queue()
        self._request_ids = itertools.count(1)

    @property
    def pending(self) -> PendingRequest | None:
        return self._pending

    @property
    def is_idle(self) -> bool:
        return self._pending is None

    def select_provider(self, document_id: Hashable) -> SymbolProvider:
        """Return the first attached provider that supports document symbols.

        A lookup or capability check that raises counts as no provider.
        """
        try:
            providers = list(self._providers(document_id) or ())
        except Exception:
            logger.debug("provider lookup failed for %r", document_id, exc_info=True)
            providers = []
        if not providers:
            raise NoProviderAvailable("No symbol provider attached to document")
        for provider in providers:
            if provider is None:
                continue
            try:
                supported = provider.supports_document_symbols(document_id)
            except Exception:
                logger.debug("capability check failed for %r", provider, exc_info=True)
                continue
            if supported:
                return provider
        raise NoProviderAvailable("No symbol provider supports document symbols")

    def cancel(self) -> bool:
        """Cancel the pending request, if any.

        Cancellation is best effort. The pending slot is cleared either way,
        so a late completion of the old request is discarded as stale.
        """
        pending = self._pending
        if pending is None:
            return False
        self._pending = None
        try:
            cancelled = pending.handle.cancel()
        except Exception:
            logger.warning("cancelling symbol request %d failed", pending.request_id, exc_info=True)
            return False
        if not cancelled:
            logger.debug("provider did not honour cancellation of request %d", pending.request_id)
        return cancelled

    def request(self, document_id: Hashable, on_complete: CompletionCallback) -> PendingRequest:
        """Start a lookup for ``document_id`` after cancelling any pending one.

        Raises ``NoProviderAvailable`` synchronously. Every other outcome,
        including a provider that raises while the call is issued, reaches
        ``on_complete`` exactly once through ``dispatch_completions``.
        """
        self.cancel()
        provider = self.select_provider(document_id)

        request_id = next(self._request_ids)
        try:
            handle = provider.document_symbols(document_id)
        except Exception as exc:
            handle = Future()
            handle.set_exception(ProviderRequestFailed(f"Request failed: {exc}", cause=exc))
        if not isinstance(handle, Future):
            failed: Future = Future()
            failed.set_exception(ProviderRequestFailed("Request failed or returned no handle"))
            handle = failed

        pending = PendingRequest(
            request_id=request_id,
            document_id=document_id,
            handle=handle,
            on_complete=on_complete,
        )
        self._pending = pending
        logger.debug("issued symbol request %d for %r", request_id, document_id)
        handle.add_done_callback(lambda future, rid=request_id: self._completions.put((rid, future)))
        return pending

    def dispatch_completions(self, block: bool = False, timeout: float | None = None) -> int:
        """Deliver queued completions on the calling thread.

        With ``block`` the first queue read waits up to ``timeout`` seconds.
        Returns the number of callbacks invoked; stale completions are
        dropped without invoking anything.
        """
        delivered = 0
        wait = block
        while True:
            try:
                if wait:
                    request_id, future = self._completions.get(timeout=timeout)
                else:
                    request_id, future = self._completions.get_nowait()
            except Empty:
                break
            wait = False

            pending = self._pending
            if pending is None or pending.request_id != request_id:
                logger.debug("discarding stale completion for symbol request %d", request_id)
                continue

            self._pending = None
            error, tree = _outcome(future)
            pending.on_complete(error, tree)
            delivered += 1
        return delivered
