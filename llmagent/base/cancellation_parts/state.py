"""Internal state holder for cancellation tokens.

Dataclass used by ``CancellationToken`` to track cancellation status and
optional reason. The ``event`` lets waiters block until cancellation instead
of polling.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Event
from typing import Optional


@dataclass
class State:
    """Internal state for cooperative cancellation tokens."""

    cancelled: bool = False
    reason: Optional[str] = None
    event: Event = field(default_factory=Event)


__all__ = ["State"]
