"""Single-class Protocol modules re-exported by ``base.interfaces``."""

from .llm_provider import LLMProvider
from .supports_streaming import SupportsStreaming

__all__ = ["LLMProvider", "SupportsStreaming"]
