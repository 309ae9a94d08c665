"""
Structured provider error exception type.

Wraps setup failures and mid-stream failures with a normalized `ErrorCode` so
that every consumer can map them to a printed line, an HTTP status, or a
rendered error line without inspecting transport-specific exceptions.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging and display.
        provider: Provider key where the error originated (e.g., ``"openrouter"``).
        model: Optional model name associated with the failure.
        status_code: Upstream HTTP status when the failure came from a response.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    status_code: Optional[int] = None
    raw: Optional[Exception] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    @property
    def is_validation(self) -> bool:
        """Whether this error was caused by caller input rather than the provider."""
        return self.code is ErrorCode.VALIDATION


__all__ = ["ProviderError"]
