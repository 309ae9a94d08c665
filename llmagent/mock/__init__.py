"""Mock provider package exposing a deterministic offline provider."""

from .client import MockProvider, canned_fragments, canned_response

__all__ = ["MockProvider", "canned_fragments", "canned_response"]
