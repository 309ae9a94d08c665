"""Cooperative cancellation primitives (public API facade).

Purpose
-------
Expose provider-agnostic cancellation constructs via the canonical
``llmagent.base.cancellation`` import path while the concrete implementations
live under ``cancellation_parts``.

Notes
-----
- ``CancellationToken`` travels alongside every relay channel so a consumer
  can signal abandonment and the producing task can exit instead of writing
  into a channel nobody reads.
- ``CancelledError`` is raised by operations that observe a cancellation request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
