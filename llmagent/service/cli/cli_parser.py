"""CLI parser construction for ``llmagent``.

This module wires argument shapes but contains no execution logic. Handlers
live in ``cli_actions`` to keep files small and testable.
"""

from __future__ import annotations

import argparse


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser.

    Exactly one mode is selected per run; ``--chat`` wins over ``--server``,
    which wins over ``--problem``.
    """
    p = argparse.ArgumentParser(
        prog="llmagent",
        description="Relay a language model's streamed answer to the console, an HTTP endpoint, or a chat UI.",
    )
    p.add_argument("--problem", default="", help="Describe the problem for the LLM to solve.")
    p.add_argument("--chat", action="store_true", help="Enter interactive chat mode.")
    p.add_argument("--server", action="store_true", help="Start in MCP server mode.")
    p.add_argument("--port", type=int, default=None, help="Override LLMAGENT_MCP_SERVER_PORT in server mode.")
    p.add_argument(
        "--log-level",
        default=None,
        help="Logging verbosity (debug, info, warning, error, critical; overrides LLMAGENT_LOG_LEVEL).",
    )
    return p


__all__ = ["build_parser"]
