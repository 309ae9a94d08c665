"""Relay channel: single-producer/single-consumer fragment queue.

Purpose
-------
Carry Fragments from one producing task to one consumer without a capacity
bound, with an explicit end-of-stream marker and a cancellation token the
consumer uses to abandon the stream.

Notes
-----
- The close marker travels through the same queue as Fragments, so the
  consumer observes it strictly after every Fragment written before ``close``.
- ``send`` never blocks. Once the token is cancelled sends are dropped and
  reported with ``False`` so the producer can stop early.
- A channel is created per request and never reused.
"""

from __future__ import annotations

import queue
from threading import Lock
from typing import Iterator, Optional

from ..cancellation import CancellationToken
from .fragment import Fragment

_CLOSED = object()


class RelayChannel:
    """Unbounded fragment queue with close sentinel and cancellation token."""

    def __init__(self, token: CancellationToken | None = None) -> None:
        self._queue: "queue.Queue[object]" = queue.Queue()
        self._token = token or CancellationToken()
        self._lock = Lock()
        self._closed = False

    @property
    def token(self) -> CancellationToken:
        """Cancellation token shared with the producing task."""
        return self._token

    @property
    def closed(self) -> bool:  # noqa: D401 - short property
        """Whether the producer has closed the channel."""
        return self._closed

    @property
    def abandoned(self) -> bool:  # noqa: D401 - short property
        """Whether the consumer has abandoned the stream."""
        return self._token.cancelled

    def send(self, fragment: Fragment) -> bool:
        """Enqueue ``fragment``; return False when the consumer has abandoned.

        Raises:
            RuntimeError: if the channel is already closed.
        """
        with self._lock:
            if self._closed:
                raise RuntimeError("send on closed relay channel")
            if self._token.cancelled:
                return False
            self._queue.put(fragment)
        return True

    def close(self) -> None:
        """Mark end of stream. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    def receive(self, timeout: Optional[float] = None) -> Optional[Fragment]:
        """Block for the next Fragment; ``None`` once the channel is closed.

        Raises:
            queue.Empty: if ``timeout`` elapses first.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # keep the marker so later receives also report closure
            self._queue.put(_CLOSED)
            return None
        return item  # type: ignore[return-value]

    def abandon(self, reason: str | None = None) -> None:
        """Signal the producer to stop; later sends are dropped."""
        self._token.cancel(reason or "consumer abandoned stream")

    def __iter__(self) -> Iterator[Fragment]:
        while (fragment := self.receive()) is not None:
            yield fragment

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"RelayChannel(closed={self._closed}, abandoned={self.abandoned}, pending={self._queue.qsize()})"


__all__ = ["RelayChannel"]
