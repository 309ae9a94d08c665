"""Fragment: the atomic unit of relayed output.

A provider's producing task writes Fragments into a relay channel in order; the
consumer drains them until a terminal Fragment arrives or the channel closes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import ProviderError


@dataclass(frozen=True)
class Fragment:
    """One piece of streamed output.

    Fields:
      content: text delta (may be empty for control fragments)
      is_terminal: True on the last fragment a producer writes
      error: optional failure descriptor; an error fragment ends the stream
    """

    content: str = ""
    is_terminal: bool = False
    error: Optional[ProviderError] = None

    @classmethod
    def terminal(cls, content: str = "") -> "Fragment":
        """Return a successful end-of-stream fragment."""
        return cls(content=content, is_terminal=True)

    @classmethod
    def failure(cls, error: ProviderError) -> "Fragment":
        """Return a terminal fragment carrying ``error``."""
        return cls(content="", is_terminal=True, error=error)


__all__ = ["Fragment"]
