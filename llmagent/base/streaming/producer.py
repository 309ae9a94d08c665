"""Producing task wrapper that owns one relay channel.

Purpose
-------
Run a provider's ``pump`` callable on a detached daemon thread and guarantee
that the channel reaches a terminal state on every code path: a terminal
Fragment, an error Fragment, or plain closure.

Lifecycle
---------
1. ``stream.start`` is logged and the thread is started.
2. ``pump(producer)`` writes Fragments through :meth:`Producer.emit`, checking
   ``producer.token`` before each blocking step.
3. ``CancelledError`` ends the task quietly; any other exception is classified
   and converted into a single error Fragment unless a terminal Fragment was
   already written.
4. ``cleanup`` runs, the channel is closed, and the outcome is logged with
   :class:`StreamMetrics`.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import suppress
from typing import Callable, Optional

from ..cancellation import CancellationToken, CancelledError
from ..errors import ErrorCode, ProviderError, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from .fragment import Fragment
from .relay_channel import RelayChannel
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics


class Producer:
    """Writes Fragments into a :class:`RelayChannel` from a daemon thread."""

    def __init__(
        self,
        channel: RelayChannel,
        pump: Callable[["Producer"], None],
        *,
        provider: str,
        model: Optional[str] = None,
        logger: Optional[logging.Logger] = None,
        cleanup: Optional[Callable[[], None]] = None,
    ) -> None:
        self.channel = channel
        self.provider = provider
        self.model = model
        self.metrics = StreamMetrics()
        self.ctx = LogContext(provider=provider, model=model)
        self._pump = pump
        self._logger = logger or get_logger("streaming.producer")
        self._cleanup = cleanup
        self._terminal = False
        self._error: Optional[ProviderError] = None
        self._t0 = 0.0

    @property
    def token(self) -> CancellationToken:
        return self.channel.token

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether a terminal Fragment has been written."""
        return self._terminal

    def emit(self, fragment: Fragment) -> bool:
        """Send ``fragment``; return False if it was dropped.

        Nothing is sent after a terminal Fragment.
        """
        if self._terminal:
            return False
        accepted = self.channel.send(fragment)
        if fragment.is_terminal or fragment.error is not None:
            self._terminal = True
            self._error = fragment.error
        if accepted and fragment.content:
            if self.metrics.time_to_first_fragment_ms is None:
                self.metrics.time_to_first_fragment_ms = (time.perf_counter() - self._t0) * 1000.0
            self.metrics.emitted += 1
            if self._logger.isEnabledFor(logging.DEBUG):
                normalized_log_event(
                    self._logger,
                    "stream.delta",
                    self.ctx,
                    phase="stream",
                    level=logging.DEBUG,
                    emitted=True,
                    chars=len(fragment.content),
                )
        return accepted

    def fail(self, exc: Exception) -> None:
        """Emit one error Fragment describing ``exc`` (no-op after terminal)."""
        if isinstance(exc, ProviderError):
            error = exc
        else:
            error = ProviderError(
                code=classify_exception(exc),
                message=str(exc) or exc.__class__.__name__,
                provider=self.provider,
                model=self.model,
                raw=exc,
            )
        self.emit(Fragment.failure(error))

    def run(self) -> None:
        """Thread body; never raises."""
        self._t0 = time.perf_counter()
        cancelled_reason: Optional[str] = None
        normalized_log_event(self._logger, "stream.start", self.ctx, phase="start", emitted=False)
        try:
            self.token.raise_if_cancelled()
            self._pump(self)
        except CancelledError as ce:
            cancelled_reason = str(ce)
        except Exception as exc:  # converted into an error Fragment
            self.fail(exc)
        finally:
            if self._cleanup is not None:
                with suppress(Exception):
                    self._cleanup()
            self.metrics.total_duration_ms = (time.perf_counter() - self._t0) * 1000.0
            self.channel.close()
        if cancelled_reason is None and self.token.cancelled:
            cancelled_reason = self.token.reason or "operation cancelled"
        finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            metrics=self.metrics,
            terminal=self._terminal,
            error=self._error,
            cancelled_reason=cancelled_reason if self._error is None else None,
        )

    def start(self) -> threading.Thread:
        """Start the daemon thread and return it."""
        thread = threading.Thread(
            target=self.run,
            name=f"llmagent-{self.provider}-producer",
            daemon=True,
        )
        thread.start()
        return thread


def start_producer(
    channel: RelayChannel,
    pump: Callable[[Producer], None],
    *,
    provider: str,
    model: Optional[str] = None,
    logger: Optional[logging.Logger] = None,
    cleanup: Optional[Callable[[], None]] = None,
) -> Producer:
    """Create and start a :class:`Producer`; return it for inspection."""
    producer = Producer(channel, pump, provider=provider, model=model, logger=logger, cleanup=cleanup)
    producer.start()
    return producer


def validation_error(provider: str, message: str, model: Optional[str] = None) -> ProviderError:
    """Build the setup error raised for unusable caller input."""
    return ProviderError(code=ErrorCode.VALIDATION, message=message, provider=provider, model=model)


__all__ = ["Producer", "start_producer", "validation_error"]
