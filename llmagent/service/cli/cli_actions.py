"""CLI action handlers.

Purpose
-------
Mode handlers for the ``llmagent`` command, keeping the entrypoint module
minimal (thin presentation layer). This module has no top-level side effects
and is safe to import in tests.

Output Contract
---------------
- ``handle_problem`` echoes content as it arrives, then prints the full
  aggregated response. A stream error is printed as soon as it is observed and
  any partial content is still shown. A successful stream with no content
  prints an explicit "empty" line.
- Structured console logs are detached while tokens are echoed so JSON lines
  do not interleave with the answer; file logging is unaffected.

Return Codes
------------
0 on success, 1 on setup or stream errors.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional, TextIO

from ...base.errors import ProviderError
from ...base.interfaces import SupportsStreaming
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.streaming import Fragment, drain
from ...config import AppConfig
from ...config.env import (
    ENV_MCP_SERVER_PORT,
    ENV_OPENROUTER_API_KEY,
    ENV_OPENROUTER_MODEL,
    ENV_PROVIDER_TYPE,
)
from .cli_utils import suppress_console_logs

_logger = get_logger("cli")

PROVIDER_BANNERS = {
    "mock": "Using Mock LLM provider.",
    "openrouter": "Using OpenRouter LLM provider.",
}


def _write(out: TextIO, text: str = "", end: str = "\n") -> None:
    out.write(text + end)
    out.flush()


def handle_problem(provider: SupportsStreaming, problem: str, *, out: Optional[TextIO] = None) -> int:
    """Stream a one-shot answer for ``problem`` to ``out`` (stdout by default).

    Parameters
    ----------
    provider: SupportsStreaming
        Provider (or buffered adapter) to relay from.
    problem: str
        Problem description sent as the prompt.
    out: TextIO | None
        Destination stream, mainly for tests.

    Returns
    -------
    int
        0 when the stream succeeded, 1 on setup or stream error.
    """
    out = out or sys.stdout
    ctx = LogContext(provider=getattr(provider, "provider_name", None))
    if not problem:
        _write(out, "Error: Problem description cannot be empty.")
        return 1

    _write(out, f"Processing problem: {problem}")
    normalized_log_event(_logger, "cli.problem.start", ctx, phase="start", emitted=False, chars=len(problem))
    try:
        channel = provider.stream(problem)
    except ProviderError as err:
        normalized_log_event(
            _logger, "cli.problem.error", ctx, phase="start", emitted=False, error_code=err.code.value
        )
        _write(out, f"\nError getting response from LLM: {err.message}")
        return 1

    def _echo(fragment: Fragment) -> None:
        if fragment.error is not None:
            _write(out, f"\nError during streaming: {fragment.error.message}")
        elif fragment.content:
            _write(out, fragment.content, end="")

    with suppress_console_logs():
        result = drain(channel, _echo, ctx=ctx)
    _write(out)

    if result.text:
        header = "LLM Response (partial, stream ended with an error):" if result.incomplete else "LLM Response (fully aggregated):"
        _write(out, f"\n{header}")
        _write(out, result.text)
    elif result.error is None:
        _write(out, "\nLLM response was empty.")

    normalized_log_event(
        _logger,
        "cli.problem.end",
        ctx,
        phase="finalize",
        emitted=bool(result.text),
        error_code=result.error.code.value if result.error is not None else None,
        abrupt=result.abrupt,
    )
    return 1 if result.error is not None else 0


def handle_server(provider: Any, config: AppConfig, port: Optional[int] = None) -> int:
    """Serve ``POST /mcp`` until interrupted."""
    from ..app import create_app
    from ..dev_server import serve

    serve(create_app(provider), config.server_host, port or config.server_port)
    return 0


def handle_chat(provider: SupportsStreaming) -> int:
    """Run the interactive chat UI."""
    from ..chat import run_chat

    with suppress_console_logs():
        return run_chat(provider)


def print_usage(parser: argparse.ArgumentParser, config: AppConfig, *, out: Optional[TextIO] = None) -> None:
    """Print usage plus the environment-driven configuration."""
    out = out or sys.stdout
    _write(out, parser.format_help().rstrip())
    _write(out, "\nConfiguration (via environment variables):")
    _write(out, f"  {ENV_PROVIDER_TYPE} (current: {config.provider_type}, options: 'mock', 'openrouter')")
    _write(out, f"  {ENV_OPENROUTER_API_KEY} (required if provider is 'openrouter')")
    _write(out, f"  {ENV_OPENROUTER_MODEL} (current: {config.openrouter_model}, used if provider is 'openrouter')")
    _write(out, f"  {ENV_MCP_SERVER_PORT} (current: {config.server_port})")


__all__ = [
    "PROVIDER_BANNERS",
    "handle_problem",
    "handle_server",
    "handle_chat",
    "print_usage",
]
