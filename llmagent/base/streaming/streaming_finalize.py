"""Finalize stream helper.

Located within the streaming package to localize the consolidated outcome log
emitted once per producing task.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..errors import ProviderError
from ..logging import LogContext, normalized_log_event
from .streaming_metrics import StreamMetrics


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    metrics: StreamMetrics,
    terminal: bool,
    error: Optional[ProviderError] = None,
    cancelled_reason: Optional[str] = None,
) -> None:
    """Emit the ``stream.end`` / ``stream.error`` / ``stream.cancelled`` event."""
    if cancelled_reason is not None:
        event, level = "stream.cancelled", logging.INFO
    elif error is not None:
        event, level = "stream.error", logging.ERROR
    else:
        event, level = "stream.end", logging.INFO

    normalized_log_event(
        logger,
        event,
        ctx,
        phase="finalize",
        level=level,
        emitted=metrics.emitted > 0,
        error_code=error.code.value if error is not None else None,
        emitted_count=metrics.emitted,
        terminal=terminal,
        time_to_first_fragment_ms=metrics.time_to_first_fragment_ms,
        total_duration_ms=metrics.total_duration_ms,
        error=error.message if error is not None else None,
        reason=cancelled_reason,
    )


__all__ = ["finalize_stream"]
