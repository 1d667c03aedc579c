from __future__ import annotations

from threading import Event


class OperationCancelledError(Exception):
    """Raised when a storage operation observes a cancelled token."""


class CancellationToken:
    """Cooperative cancellation signal threaded through remote-facing calls."""

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelledError("Operation was cancelled")


def raise_if_cancelled(cancellation: CancellationToken | None) -> None:
    if cancellation is not None:
        cancellation.raise_if_cancelled()
