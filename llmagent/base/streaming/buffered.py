"""Buffered adapter presenting a ``get_response``-only provider as a stream.

The whole response is fetched inside the producing task and relayed as one
content Fragment followed by one terminal Fragment. Failures from
``get_response`` become a single error Fragment.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..cancellation import CancellationToken
from ..constants import EMPTY_PROMPT_ERROR
from ..interfaces import LLMProvider, SupportsStreaming
from ..logging import get_logger
from .fragment import Fragment
from .producer import Producer, start_producer, validation_error
from .relay_channel import RelayChannel


class BufferedStreamAdapter:
    """Wraps an :class:`LLMProvider` so consumers can call ``stream``."""

    def __init__(self, provider: LLMProvider, *, logger: Optional[logging.Logger] = None) -> None:
        self._provider = provider
        self._logger = logger or get_logger("streaming.buffered")

    @property
    def provider_name(self) -> str:
        return self._provider.provider_name

    @property
    def inner(self) -> LLMProvider:
        return self._provider

    def get_response(self, prompt: str) -> str:
        return self._provider.get_response(prompt)

    def stream(self, prompt: str, *, token: Optional[CancellationToken] = None) -> RelayChannel:
        if not prompt:
            raise validation_error(self.provider_name, EMPTY_PROMPT_ERROR)
        channel = RelayChannel(token)

        def _pump(producer: Producer) -> None:
            text = self._provider.get_response(prompt)
            producer.token.raise_if_cancelled()
            producer.emit(Fragment(content=text))
            producer.emit(Fragment.terminal())

        start_producer(channel, _pump, provider=self.provider_name, logger=self._logger)
        return channel


def as_streaming(provider: LLMProvider) -> SupportsStreaming:
    """Return ``provider`` itself if it streams, otherwise a buffered adapter."""
    if isinstance(provider, SupportsStreaming):
        return provider
    return BufferedStreamAdapter(provider)


__all__ = ["BufferedStreamAdapter", "as_streaming"]
