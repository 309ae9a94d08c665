"""Centralized defaults for the relay.

Values here are the fallbacks used when the corresponding ``LLMAGENT_*``
environment variable is unset or empty.
"""

from __future__ import annotations

PROVIDER_MOCK = "mock"
PROVIDER_OPENROUTER = "openrouter"
SUPPORTED_PROVIDERS = (PROVIDER_MOCK, PROVIDER_OPENROUTER)

DEFAULT_PROVIDER_TYPE = PROVIDER_MOCK

OPENROUTER_DEFAULT_MODEL = "gryphe/mythomax-l2-13b"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

MCP_DEFAULT_HOST = "0.0.0.0"  # nosec B104 - server is meant to be reachable
MCP_DEFAULT_PORT = 8080

MOCK_DEFAULT_DELAY_MS = 0

__all__ = [
    "PROVIDER_MOCK",
    "PROVIDER_OPENROUTER",
    "SUPPORTED_PROVIDERS",
    "DEFAULT_PROVIDER_TYPE",
    "OPENROUTER_DEFAULT_MODEL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "MCP_DEFAULT_HOST",
    "MCP_DEFAULT_PORT",
    "MOCK_DEFAULT_DELAY_MS",
]
