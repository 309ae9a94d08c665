"""SupportsStreaming Protocol (single-class module).

Capability marker for providers that relay incremental Fragments.
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..cancellation import CancellationToken
from ..streaming.relay_channel import RelayChannel


@runtime_checkable
class SupportsStreaming(Protocol):
    """Capability marker for providers that can stream incremental Fragments.

    ``stream`` raises ``ProviderError`` synchronously for setup failures (empty
    prompt, missing credential, connection failure, non-success status) and
    otherwise returns a live channel fed by a detached producing task. Every
    stream ends with a terminal Fragment, an error Fragment, or closure.
    """

    def get_response(self, prompt: str) -> str:  # pragma: no cover - interface
        ...

    def stream(self, prompt: str, *, token: Optional[CancellationToken] = None) -> RelayChannel:  # pragma: no cover - interface
        """Start relaying the response to ``prompt``."""
        ...
