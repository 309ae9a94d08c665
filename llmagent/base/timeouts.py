"""Centralized timeout values for outbound HTTP.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values used to build every
    dedicated ``httpx.Client``.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use (and again whenever the relevant variables change, so tests may
    adjust them at runtime). Supported environment variables (all optional):
        LLMAGENT_TIMEOUT_CONNECT_SECONDS
        LLMAGENT_TIMEOUT_READ_SECONDS

Design Constraints
------------------
1. No hard-coded ad-hoc timeouts outside this module.
2. Avoid per-call env parsing (cache after first read).
3. The read timeout bounds a single body read, not the whole stream, so a
   long generation is never cut off while tokens keep arriving.
"""
from __future__ import annotations

from dataclasses import dataclass
import os

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Timeout for establishing the TCP/TLS
            connection (part of synchronous stream setup).
        read_timeout_seconds: Idle timeout while waiting for the next chunk of
            the response body.
    """

    connect_timeout_seconds: float = 10.0
    read_timeout_seconds: float = 120.0

    def to_httpx(self) -> httpx.Timeout:
        """Return the equivalent ``httpx.Timeout``."""
        return httpx.Timeout(
            self.read_timeout_seconds,
            connect=self.connect_timeout_seconds,
            read=self.read_timeout_seconds,
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from environment variable ``name``.

    Returns ``default`` when the variable is unset, not a number, or not
    positive.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:  # pragma: no cover - defensive
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - intentional, documented module cache
    cur_guard = "/".join(
        [
            os.getenv("LLMAGENT_TIMEOUT_CONNECT_SECONDS", ""),
            os.getenv("LLMAGENT_TIMEOUT_READ_SECONDS", ""),
        ]
    )
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(
            "LLMAGENT_TIMEOUT_CONNECT_SECONDS", defaults.connect_timeout_seconds
        ),
        read_timeout_seconds=_parse_env_float(
            "LLMAGENT_TIMEOUT_READ_SECONDS", defaults.read_timeout_seconds
        ),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
]
