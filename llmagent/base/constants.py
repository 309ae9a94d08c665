"""Base shared constants for provider adapters.

Central location to avoid scattering magic strings and default numbers.

Security
--------
This module contains only generic sentinel strings. There are no credentials
or tokens embedded.

# pragma: allowlist secret
"""
from __future__ import annotations

# Missing credential sentinel
MISSING_API_KEY_ERROR = "API key is not configured"  # pragma: allowlist secret - message, not a secret

# Prompt validation message shared by every provider
EMPTY_PROMPT_ERROR = "prompt must not be empty"

# Referer header identifying this client to remote providers
HTTP_REFERER = "http://localhost/llmagent"

__all__ = [
    "MISSING_API_KEY_ERROR",
    "EMPTY_PROMPT_ERROR",
    "HTTP_REFERER",
]
