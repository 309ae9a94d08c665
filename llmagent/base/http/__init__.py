"""HTTP utilities package for providers.

Exposes the dedicated httpx client builder.
"""

from .client import open_httpx_client

__all__ = ["open_httpx_client"]
