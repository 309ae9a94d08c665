"""llmagent.config.env
===================

Environment variable names and small lookup helpers.

Purpose
-------
- Provide a single source of truth for the ``LLMAGENT_*`` variable names.
- Offer a lightweight ``.env`` loader so local runs pick up credentials
  without exporting them.

Design Notes
------------
- The OpenRouter key accepts the unprefixed ``OPENROUTER_API_KEY`` as an
  alias, listed after the canonical name in ``ENV_ALIASES`` to establish
  precedence.
- Helpers never raise on unset variables; :mod:`llmagent.config` decides what
  is fatal.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_PROVIDER_TYPE = "LLMAGENT_LLM_PROVIDER_TYPE"
ENV_OPENROUTER_API_KEY = "LLMAGENT_OPENROUTER_API_KEY"  # pragma: allowlist secret - env name, not a secret
ENV_OPENROUTER_MODEL = "LLMAGENT_OPENROUTER_MODEL"
ENV_OPENROUTER_BASE_URL = "LLMAGENT_OPENROUTER_BASE_URL"
ENV_MCP_SERVER_PORT = "LLMAGENT_MCP_SERVER_PORT"
ENV_MCP_SERVER_HOST = "LLMAGENT_MCP_SERVER_HOST"
ENV_MOCK_DELAY_MS = "LLMAGENT_MOCK_DELAY_MS"
ENV_LOG_LEVEL = "LLMAGENT_LOG_LEVEL"
ENV_LOG_FILE = "LLMAGENT_LOG_FILE"

# Variable → ordered tuple of acceptable names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    ENV_OPENROUTER_API_KEY: (ENV_OPENROUTER_API_KEY, "OPENROUTER_API_KEY"),
}

_DOTENV_LOADED = False


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder value.

    Heuristics: contains 'placeholder', 'changeme', or 'your_'. The check is
    case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or v.startswith("your_")


def env_candidates(name: str) -> Iterable[str]:
    """Yield ``name`` followed by any aliases."""
    yield name
    for alias in ENV_ALIASES.get(name, ()):  # pragma: no branch - small tuples
        if alias != name:
            yield alias


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    """Return the first non-empty value among ``name`` and its aliases."""
    for candidate in env_candidates(name):
        val = os.getenv(candidate)
        if val is not None and val.strip():
            return val.strip()
    return default


def load_dotenv_once(path: Optional[str] = None) -> None:
    """Lightweight .env loader (no external dependency).

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = path or os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if line.startswith("export "):
                    line = line[len("export "):]
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


__all__ = [
    "ENV_PROVIDER_TYPE",
    "ENV_OPENROUTER_API_KEY",
    "ENV_OPENROUTER_MODEL",
    "ENV_OPENROUTER_BASE_URL",
    "ENV_MCP_SERVER_PORT",
    "ENV_MCP_SERVER_HOST",
    "ENV_MOCK_DELAY_MS",
    "ENV_LOG_LEVEL",
    "ENV_LOG_FILE",
    "ENV_ALIASES",
    "is_placeholder",
    "env_candidates",
    "env_str",
    "load_dotenv_once",
]
