"""Cancellation and deadline signal for write operations.

An OperationContext is handed to a writer when it is opened and consulted
when the writer is closed. Cancellation is cooperative: nothing interrupts a
filesystem call that is already running.
"""

from __future__ import annotations

import threading
import time

from fileblob.errors import DeadlineExceededError, OperationCancelledError


class OperationContext:
    """Thread-safe cancellation flag with an optional deadline.

    Args:
        timeout: Seconds from now after which the context is expired.
            None means no deadline.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self._cancelled = threading.Event()
        self._deadline = None if timeout is None else time.monotonic() + timeout

    @classmethod
    def background(cls) -> OperationContext:
        """Return a context that is never cancelled unless asked to be."""
        return cls()

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic()`` clock, or None."""
        return self._deadline

    def cancel(self) -> None:
        """Mark the context as cancelled."""
        self._cancelled.set()

    def cancelled(self) -> bool:
        """Return True once cancel() has been called."""
        return self._cancelled.is_set()

    def err(self) -> OperationCancelledError | None:
        """Return the error describing why the context is done, or None."""
        if self._cancelled.is_set():
            return OperationCancelledError()
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return DeadlineExceededError()
        return None
