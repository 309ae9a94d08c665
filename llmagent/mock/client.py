"""Deterministic mock provider for offline runs and tests.

Purpose
-------
Implement the streaming provider contract without any network traffic. With
no configured sequence the provider relays a fixed three-part response whose
parts concatenate to the ``get_response`` text; tests can instead inject an
explicit Fragment sequence (including error Fragments) and a per-Fragment
delay.

External dependencies
---------------------
Standard library only.

Timeout and cancellation semantics
----------------------------------
The simulated delay waits on the channel's cancellation token, so abandoning a
channel wakes the producer immediately and it exits without sending further
Fragments.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ..base.cancellation import CancellationToken, CancelledError
from ..base.constants import EMPTY_PROMPT_ERROR
from ..base.logging import get_logger
from ..base.streaming import Fragment, Producer, RelayChannel, start_producer, validation_error

PROVIDER_NAME = "mock"


def canned_response(prompt: str) -> str:
    """Return the fixed buffered response for ``prompt``."""
    return f"Mock response for prompt: '{prompt}'"


def canned_fragments(prompt: str) -> List[Fragment]:
    """Return the three-part canned stream; the third part is terminal."""
    return [
        Fragment(content="Mock response "),
        Fragment(content="for prompt: "),
        Fragment(content=f"'{prompt}'", is_terminal=True),
    ]


class MockProvider:
    """Provider that replays canned or injected Fragments."""

    def __init__(self, responses: Optional[Sequence[Fragment]] = None, delay: float = 0.0) -> None:
        """Initialize the mock provider.

        Parameters
        ----------
        responses: Sequence[Fragment] | None
            Explicit Fragment sequence replayed by every ``stream`` call. When
            ``None`` the canned three-part response is used.
        delay: float, default ``0.0``
            Seconds to wait before each Fragment.
        """
        self._responses = list(responses) if responses is not None else None
        self._delay = max(0.0, float(delay))
        self._logger = get_logger(f"providers.{PROVIDER_NAME}")

    @property
    def provider_name(self) -> str:
        return PROVIDER_NAME

    @property
    def delay(self) -> float:
        return self._delay

    def get_response(self, prompt: str) -> str:
        """Return the whole response text.

        With an injected sequence the contents are concatenated and the first
        error Fragment is raised.
        """
        if not prompt:
            raise validation_error(PROVIDER_NAME, EMPTY_PROMPT_ERROR)
        if self._responses is None:
            return canned_response(prompt)
        parts: List[str] = []
        for fragment in self._responses:
            if fragment.error is not None:
                raise fragment.error
            parts.append(fragment.content)
        return "".join(parts)

    def stream(self, prompt: str, *, token: Optional[CancellationToken] = None) -> RelayChannel:
        """Relay the configured sequence through a new channel."""
        if not prompt:
            raise validation_error(PROVIDER_NAME, EMPTY_PROMPT_ERROR)
        fragments = list(self._responses) if self._responses is not None else canned_fragments(prompt)
        channel = RelayChannel(token)

        def _pump(producer: Producer) -> None:
            for fragment in fragments:
                if self._delay and producer.token.wait(self._delay):
                    raise CancelledError(producer.token.reason or "operation cancelled")
                producer.token.raise_if_cancelled()
                if not producer.emit(fragment) or producer.finished:
                    return

        start_producer(channel, _pump, provider=PROVIDER_NAME, logger=self._logger)
        return channel


__all__ = ["MockProvider", "canned_response", "canned_fragments"]
