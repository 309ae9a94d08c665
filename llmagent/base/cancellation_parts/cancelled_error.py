"""Cancellation error type.

Defines the public ``CancelledError`` used to signal cooperative cancellation
in producing tasks.
"""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when an operation is cancelled cooperatively.

    Distinguishes consumer abandonment from real failures so producing tasks
    can exit quietly instead of reporting an error nobody will read.
    """

__all__ = ["CancelledError"]
