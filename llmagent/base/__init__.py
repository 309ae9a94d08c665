"""
Relay Base Package

Exports provider-agnostic contracts, the relay primitives and the provider
factory for use by providers and consumers.

Layout:
- Interfaces: buffered and streaming provider boundaries
- Streaming: Fragment, RelayChannel, producing task, drain loop
- Errors & Cancellation: normalized error taxonomy and cooperative tokens
- Factory: lazy creation of providers by canonical name
"""

from .factory import ProviderFactory, UnknownProviderError, build_provider
from .interfaces import LLMProvider, SupportsStreaming
from .timeouts import TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError
from .errors import ErrorCode, ProviderError, classify_exception
from .streaming import (
    Aggregate,
    Drainer,
    DrainState,
    Fragment,
    Producer,
    RelayChannel,
    StreamMetrics,
    drain,
    start_producer,
)

__all__ = [
    # Interfaces
    "LLMProvider",
    "SupportsStreaming",
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    "build_provider",
    # Timeouts, Cancellation & Errors
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    # Streaming
    "Fragment",
    "RelayChannel",
    "Producer",
    "start_producer",
    "StreamMetrics",
    "Aggregate",
    "Drainer",
    "DrainState",
    "drain",
]
