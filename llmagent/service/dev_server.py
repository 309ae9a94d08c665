"""Uvicorn runner for the ``/mcp`` HTTP endpoint.

Used by ``llmagent --server``; the application itself is built in
:mod:`llmagent.service.app`.
"""
from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from llmagent.base.logging import get_logger, log_event

_logger = get_logger("service.server")


def serve(app: FastAPI, host: str, port: int, *, log_level: str = "info") -> None:
    """Run ``app`` with uvicorn until interrupted."""
    print(f"Starting MCP server on http://{host}:{port}/mcp")
    log_event(_logger, "server.start", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_level=log_level)


__all__ = ["serve"]
