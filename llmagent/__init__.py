"""llmagent package

Relays a language model's streamed response from a provider to a consumer
(one-shot console print, HTTP endpoint, interactive chat).

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`
    - Relay primitives: :class:`Fragment`, :class:`RelayChannel`, :func:`drain`
    - Providers: :class:`MockProvider`, :class:`OpenRouterProvider`
    - Factory: :class:`ProviderFactory`, :func:`build_provider`
"""

from .base.errors import ErrorCode, ProviderError
from .base.cancellation import CancellationToken, CancelledError
from .base.factory import ProviderFactory, build_provider
from .base.interfaces import LLMProvider, SupportsStreaming
from .base.streaming import Aggregate, DrainState, Fragment, RelayChannel, drain
from .mock import MockProvider
from .openrouter import OpenRouterProvider

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ProviderError",
    "ErrorCode",
    "CancellationToken",
    "CancelledError",
    "ProviderFactory",
    "build_provider",
    "LLMProvider",
    "SupportsStreaming",
    "Fragment",
    "RelayChannel",
    "Aggregate",
    "DrainState",
    "drain",
    "MockProvider",
    "OpenRouterProvider",
]
