"""
Provider-agnostic interfaces (Protocols) for the relay.

Re-exports Protocols split into single-class modules under
``llmagent.base.interfaces_parts`` while keeping imports stable.
"""

from __future__ import annotations

from .interfaces_parts import LLMProvider, SupportsStreaming

__all__ = [
    "LLMProvider",
    "SupportsStreaming",
]
