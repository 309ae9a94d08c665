"""Common helpers for the OpenRouter provider.

Purpose:
    Provide small, focused helpers shared by the buffered and streaming paths
    to keep the main provider module compact.

Notes:
    ``OpenRouterCommonMixin`` assumes the consumer defines ``_api_key`` and
    ``_model`` attributes.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..base.constants import HTTP_REFERER


class OpenRouterCommonMixin:
    """Mixin offering shared payload/header builders for OpenRouter.

    Consumers must define ``_api_key`` and ``_model`` attributes.
    """

    def _build_messages(self, prompt: str) -> List[Dict[str, Any]]:
        """Return the single-turn OpenAI-style messages list for ``prompt``."""
        return [{"role": "user", "content": prompt}]

    def _build_payload(self, prompt: str, stream: bool = False) -> Dict[str, Any]:
        """Assemble the JSON payload for chat/completions.

        Parameters:
            prompt: User prompt relayed verbatim.
            stream: Whether server-sent streaming responses are requested.

        Returns:
            A mapping suitable for POST body serialization.
        """
        payload: Dict[str, Any] = {
            "model": getattr(self, "_model"),
            "messages": self._build_messages(prompt),
        }
        if stream:
            payload["stream"] = True
        return payload

    def _build_headers(self) -> Dict[str, str]:
        """Build HTTP headers including authorization when available.

        ``Content-Type`` is set explicitly even though ``httpx`` adds it for
        ``json=`` bodies, so the header set is visible in one place.
        """
        headers: Dict[str, str] = {
            "Content-Type": "application/json",
            "HTTP-Referer": HTTP_REFERER,
        }
        api_key: Optional[str] = getattr(self, "_api_key", None)
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers


def api_error_message(status: int, body: bytes) -> str:
    """Describe a non-success response using the API's ``error`` object when present."""
    text = body.decode("utf-8", errors="replace").strip()
    try:
        data = json.loads(text) if text else None
    except json.JSONDecodeError:
        data = None
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        err = data["error"]
        message = err.get("message") or "unknown error"
        err_type = err.get("type")
        suffix = f" (Type: {err_type})" if err_type else ""
        return f"OpenRouter API error (Status {status}): {message}{suffix}"
    return f"OpenRouter API request failed with status {status}: {text}"


def extract_message_text(data: Any) -> Optional[str]:
    """Return ``choices[0].message.content`` from a buffered response, if present."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content")
    return content if isinstance(content, str) else None


__all__ = ["OpenRouterCommonMixin", "api_error_message", "extract_message_text"]
