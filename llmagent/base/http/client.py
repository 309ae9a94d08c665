"""Dedicated HTTP clients for providers.

Purpose:
    Build one ``httpx.Client`` per outbound request. A streaming response is
    read by exactly one producing task and its connection is never shared, so
    clients are created per call and closed by their owner instead of being
    pooled. Timeouts derive exclusively from :func:`get_timeout_config`.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Lifecycle & cleanup:
    - The caller owns the returned client and must close it (the OpenRouter
      producer closes it in its cleanup hook; buffered calls use it as a
      context manager).
    - ``transport`` lets tests inject ``httpx.MockTransport``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..logging import get_logger, log_event
from ..timeouts import get_timeout_config

_logger = get_logger("http")


def open_httpx_client(
    base_url: Optional[str],
    purpose: str,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Return a new ``httpx.Client`` configured with relay timeouts.

    Parameters:
        base_url: Optional API base URL so callers can issue relative requests.
        purpose: Short label recorded in debug logs (e.g., "stream", "chat").
        transport: Optional transport override, mainly for tests.

    Returns:
        A fresh client owned by the caller.
    """
    cfg = get_timeout_config()
    kwargs: Dict[str, Any] = {"timeout": cfg.to_httpx()}
    if base_url:
        kwargs["base_url"] = base_url
    if transport is not None:
        kwargs["transport"] = transport
    log_event(_logger, "http.client.open", level=logging.DEBUG, base_url=base_url, purpose=purpose)
    return httpx.Client(**kwargs)


__all__ = ["open_httpx_client"]
