"""Request models and handling for the ``/mcp`` endpoint.

The handler drains the provider's relay channel fully before replying, so the
HTTP client only ever sees a complete solution or a pure error body.
"""
from __future__ import annotations

import uuid
from typing import Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel

from llmagent.base.errors import ProviderError
from llmagent.base.interfaces import SupportsStreaming
from llmagent.base.logging import LogContext, get_logger, log_event
from llmagent.base.streaming import drain

EMPTY_PROBLEM_ERROR = "ProblemContext cannot be empty"
INVALID_BODY_ERROR = "Invalid request body"
LLM_ERROR_PREFIX = "Error getting response from LLM: "

_logger = get_logger("service.mcp")


class McpRequest(BaseModel):
    """Body of ``POST /mcp``."""

    problem_context: str = ""


class McpResponse(BaseModel):
    """Body returned by ``POST /mcp``; exactly one field is set."""

    potential_solution: Optional[str] = None
    error: Optional[str] = None


def error_response(status_code: int, message: str) -> JSONResponse:
    """Return ``{"error": message}`` with ``status_code``."""
    return JSONResponse(status_code=status_code, content=McpResponse(error=message).model_dump(exclude_none=True))


def _provider_error_response(err: ProviderError) -> JSONResponse:
    status = 400 if err.is_validation else 500
    return error_response(status, LLM_ERROR_PREFIX + err.message)


def handle_mcp(provider: SupportsStreaming, body: McpRequest) -> JSONResponse:
    """Relay ``body.problem_context`` to ``provider`` and build the reply.

    Status mapping:
        400 for an empty problem context (no channel is created) or a
        validation setup error; 500 for any other setup error or a stream
        that ended with an error Fragment; 200 otherwise.
    """
    ctx = LogContext(provider=getattr(provider, "provider_name", None), request_id=uuid.uuid4().hex)
    if not body.problem_context:
        log_event(_logger, "mcp.validation_error", ctx, reason="empty problem_context")
        return error_response(400, EMPTY_PROBLEM_ERROR)

    log_event(_logger, "mcp.request", ctx, chars=len(body.problem_context))
    try:
        channel = provider.stream(body.problem_context)
    except ProviderError as err:
        log_event(_logger, "mcp.setup_error", ctx, error_code=err.code.value, error=err.message)
        return _provider_error_response(err)

    result = drain(channel, ctx=ctx)
    if result.error is not None:
        log_event(
            _logger,
            "mcp.stream_error",
            ctx,
            error_code=result.error.code.value,
            error=result.error.message,
            partial_chars=len(result.text),
        )
        return error_response(500, LLM_ERROR_PREFIX + result.error.message)

    if not result.text:
        log_event(_logger, "mcp.empty_response", ctx, abrupt=result.abrupt)
    log_event(_logger, "mcp.response", ctx, chars=len(result.text), abrupt=result.abrupt)
    return JSONResponse(status_code=200, content={"potential_solution": result.text})


__all__ = [
    "McpRequest",
    "McpResponse",
    "EMPTY_PROBLEM_ERROR",
    "INVALID_BODY_ERROR",
    "LLM_ERROR_PREFIX",
    "error_response",
    "handle_mcp",
]
