"""LLMProvider Protocol (single-class module).

Defines the minimal buffered interface contract for provider adapters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMProvider(Protocol):
    """Minimal interface for Large Language Model providers.

    Implementations return the whole response text in one call. Setup and
    transport failures are raised as ``ProviderError``.
    """

    @property
    def provider_name(self) -> str:
        """Canonical provider identifier, e.g., ``"mock"`` or ``"openrouter"``."""
        ...

    def get_response(self, prompt: str) -> str:
        """Return the complete response text for ``prompt``."""
        ...
