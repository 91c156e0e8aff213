"""Exception types raised or delivered by the navigation engine."""

from __future__ import annotations


class SymbolNavigationError(Exception):
    """Base class for navigation failures surfaced to the user."""


class NoProviderAvailable(SymbolNavigationError):
    """No attached backend can answer document-symbol requests.

    Raised synchronously from ``RequestLifecycleManager.request``; never
    delivered through a completion callback.
    """


class ProviderRequestFailed(SymbolNavigationError):
    """A provider call failed, either when issued or with an error payload."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause


def error_message(error: object) -> str:
    """Return the user-facing text for an error delivered to a completion."""
    message = getattr(error, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(error, dict):
        raw = error.get("message")
        if isinstance(raw, str) and raw:
            return raw
    text = str(error)
    return text or type(error).__name__
