"""Cooperative cancellation token shared by the orchestrator and its stages"""

import threading

from mdsite.core.errors import CancellationError


class CancelToken:
    """Thread-safe flag; may be fired from a signal handler or another thread."""

    def __init__(self):
        self._event = threading.Event()
        self.reason = ""

    def cancel(self, reason: str = "build canceled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        """Raise CancellationError once cancel() has been called."""
        if self._event.is_set():
            raise CancellationError(self.reason or "build canceled")
