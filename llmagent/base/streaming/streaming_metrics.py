"""Streaming metrics data structures.

Isolated within the streaming package to keep the producer small and cohesive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class StreamMetrics:
    """Collected metrics for a single producing task.

    Fields:
      emitted: number of Fragments with content accepted by the channel
      time_to_first_fragment_ms: delay between start and the first content Fragment
      total_duration_ms: wall time from start until the channel was closed
    """

    emitted: int = 0
    time_to_first_fragment_ms: Optional[float] = None
    total_duration_ms: Optional[float] = None


__all__ = ["StreamMetrics"]
