"""Streaming relay package.

Exposes the Fragment type, the relay channel, the producing task wrapper, the
drain loop and the buffered adapter under a single namespace.
"""

from .fragment import Fragment
from .relay_channel import RelayChannel
from .streaming_metrics import StreamMetrics
from .streaming_finalize import finalize_stream
from .producer import Producer, start_producer, validation_error
from .drain import Aggregate, Drainer, DrainState, drain

__all__ = [
    "Fragment",
    "RelayChannel",
    "StreamMetrics",
    "finalize_stream",
    "Producer",
    "start_producer",
    "validation_error",
    "Aggregate",
    "Drainer",
    "DrainState",
    "drain",
]
