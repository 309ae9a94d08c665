"""``llmagent`` command-line entrypoint.

This package wires argument parsing to mode handlers kept in small, focused
modules. It performs no relay logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
"""

from __future__ import annotations

import sys
from typing import Optional

from ...base.factory import UnknownProviderError, build_provider
from ...base.logging import configure_logger
from ...base.streaming.buffered import as_streaming
from ...config import ConfigError, load_config
from .cli_actions import PROVIDER_BANNERS, handle_chat, handle_problem, handle_server, print_usage
from .cli_parser import build_parser
from .cli_utils import parse_verbosity


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entrypoint.

    Parameters
    ----------
    argv: Optional[list[str]]
        Argument vector; when ``None`` uses ``sys.argv[1:]``.

    Returns
    -------
    int
        Process exit code (0 success, non-zero on error or missing mode).
    """
    parser = build_parser()
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

    try:
        config = load_config()
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    level = parse_verbosity(args.log_level) if args.log_level else None
    if args.log_level and level is None:
        print(f"Error: invalid log level {args.log_level!r}", file=sys.stderr)
        return 2
    configure_logger(level=level or config.log_level, file_path=config.log_file)

    if not (args.chat or args.server or args.problem):
        print_usage(parser, config)
        return 1

    try:
        config.validate()
        provider = build_provider(config)
    except (ConfigError, UnknownProviderError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(PROVIDER_BANNERS.get(config.provider_type, f"Using {config.provider_type} LLM provider."))

    streaming_provider = as_streaming(provider)
    if args.chat:
        return handle_chat(streaming_provider)
    if args.server:
        return handle_server(provider, config, args.port)
    return handle_problem(streaming_provider, args.problem)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
