"""FastAPI application exposing the relay over HTTP.

Endpoints
---------
- ``POST /mcp``: body ``{"problem_context": str}``; replies with
  ``{"potential_solution": str}`` or ``{"error": str}``.
- ``GET /health``: liveness check.

Non-POST methods on ``/mcp`` are rejected with 405 by the router.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from llmagent.base.factory import build_provider
from llmagent.base.logging import get_logger, log_event
from llmagent.base.streaming.buffered import as_streaming
from llmagent.config import get_config

from .app_parts.app_core import INVALID_BODY_ERROR, McpRequest, error_response, handle_mcp

_logger = get_logger("service.app")


def create_app(provider: Any) -> FastAPI:
    """Build the application around ``provider``.

    ``provider`` may implement only ``get_response``; it is then wrapped by the
    buffered adapter.
    """
    streaming_provider = as_streaming(provider)
    app = FastAPI(title="LLM Agent MCP Service", version="0.1.0")

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        log_event(_logger, "mcp.invalid_body", path=request.url.path, errors=len(exc.errors()))
        return error_response(400, INVALID_BODY_ERROR)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Return a simple liveness response."""
        return {"ok": True}

    @app.post("/mcp")
    def post_mcp(body: McpRequest) -> JSONResponse:
        """Relay a problem context to the configured provider."""
        return handle_mcp(streaming_provider, body)

    return app


def get_app(provider: Optional[Any] = None) -> FastAPI:
    """Return an application for ``provider`` or the one the environment selects.

    Also usable as a uvicorn factory:
    ``uvicorn --factory llmagent.service.app:get_app``.
    """
    if provider is None:
        provider = build_provider(get_config())
    return create_app(provider)


__all__ = ["create_app", "get_app"]
