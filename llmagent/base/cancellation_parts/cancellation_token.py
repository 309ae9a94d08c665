"""Cooperative cancellation token implementation.

Exposes the ``CancellationToken`` class threaded through every relay channel
to enable early termination of producing tasks via cooperative checks at each
suspension point.
"""

from __future__ import annotations

from threading import Lock
from typing import Optional

from .state import State
from .cancelled_error import CancelledError


class CancellationToken:
    """A cooperative cancellation token.

    Thread-safe for ``cancel`` + ``raise_if_cancelled`` + ``wait`` usage.
    """

    def __init__(self) -> None:
        self._state = State()
        self._lock = Lock()

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._state.cancelled

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cooperative cancellation; later calls keep the first reason."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            self._state.event.set()

    def raise_if_cancelled(self) -> None:
        """Raise ``CancelledError`` if token is cancelled."""
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def wait(self, timeout: Optional[float]) -> bool:
        """Block up to ``timeout`` seconds; return True if cancelled meanwhile.

        Used for simulated latency so that a delay never outlives abandonment.
        """
        if timeout is not None and timeout <= 0:
            return self._state.cancelled
        return self._state.event.wait(timeout)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"CancellationToken(cancelled={self._state.cancelled}, "
            f"reason={self._state.reason!r})"
        )


__all__ = ["CancellationToken"]
