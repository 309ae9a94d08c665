"""Drain loop shared by every consumer.

States move ``IDLE -> DRAINING -> {SUCCEEDED, FAILED}``:

- content of each Fragment is appended in arrival order;
- the first error Fragment moves the drain to FAILED (first error wins) and
  the loop stops at once, abandoning the channel so the producer exits;
- a terminal Fragment, or closure without a prior error, is SUCCEEDED;
  closure without a terminal Fragment is flagged ``abrupt`` and warned.

Terminal states are final: feeding a finished :class:`Drainer` raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from ..errors import ProviderError
from ..logging import LogContext, get_logger, normalized_log_event
from .fragment import Fragment
from .relay_channel import RelayChannel


class DrainState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


_FINAL_STATES = (DrainState.SUCCEEDED, DrainState.FAILED)


@dataclass
class Aggregate:
    """Ordered concatenation of received content plus the first error."""

    parts: List[str] = field(default_factory=list)
    error: Optional[ProviderError] = None
    abrupt: bool = False
    state: DrainState = DrainState.IDLE

    @property
    def text(self) -> str:
        return "".join(self.parts)

    @property
    def succeeded(self) -> bool:
        return self.state is DrainState.SUCCEEDED

    @property
    def incomplete(self) -> bool:
        """True when content was cut short by an error."""
        return self.error is not None


class Drainer:
    """Incremental drain state machine (usable without a channel)."""

    def __init__(self, *, logger: Optional[logging.Logger] = None, ctx: Optional[LogContext] = None) -> None:
        self.aggregate = Aggregate()
        self._logger = logger or get_logger("streaming.drain")
        self._ctx = ctx or LogContext()

    @property
    def state(self) -> DrainState:
        return self.aggregate.state

    @property
    def finished(self) -> bool:
        return self.aggregate.state in _FINAL_STATES

    def feed(self, fragment: Fragment) -> DrainState:
        """Apply one Fragment and return the resulting state."""
        if self.finished:
            raise RuntimeError(f"drain already {self.aggregate.state.value}")
        agg = self.aggregate
        agg.state = DrainState.DRAINING
        if fragment.content:
            agg.parts.append(fragment.content)
        if fragment.error is not None:
            if agg.error is None:
                agg.error = fragment.error
            agg.state = DrainState.FAILED
        elif fragment.is_terminal:
            agg.state = DrainState.SUCCEEDED
        return agg.state

    def on_close(self) -> DrainState:
        """Apply channel closure observed before any terminal Fragment."""
        if self.finished:
            raise RuntimeError(f"drain already {self.aggregate.state.value}")
        agg = self.aggregate
        agg.abrupt = True
        agg.state = DrainState.SUCCEEDED
        normalized_log_event(
            self._logger,
            "drain.abrupt_end",
            self._ctx,
            phase="drain",
            level=logging.WARNING,
            emitted=bool(agg.parts),
            chars=len(agg.text),
        )
        return agg.state


def drain(
    channel: RelayChannel,
    on_fragment: Optional[Callable[[Fragment], None]] = None,
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> Aggregate:
    """Drain ``channel`` to a final state and return the :class:`Aggregate`.

    Parameters
    ----------
    channel: RelayChannel
        Channel returned by a provider's ``stream``.
    on_fragment: Callable[[Fragment], None] | None
        Called with every received Fragment before it is applied, so callers
        can render content incrementally.
    """
    drainer = Drainer(logger=logger, ctx=ctx)
    while True:
        fragment = channel.receive()
        if fragment is None:
            drainer.on_close()
            break
        if on_fragment is not None:
            on_fragment(fragment)
        state = drainer.feed(fragment)
        if state is DrainState.FAILED:
            channel.abandon("drain stopped after stream error")
            break
        if state is DrainState.SUCCEEDED:
            break
    return drainer.aggregate


__all__ = ["DrainState", "Aggregate", "Drainer", "drain"]
