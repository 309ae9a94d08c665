# -*- coding: utf-8 -*-
"""Utility helpers shared by the CLI actions.

Functions
---------
- ``parse_verbosity(value)``: Map user strings and synonyms to a canonical
  logging level name.
- ``suppress_console_logs()``: Context manager to temporarily detach console
  handlers while preserving file handlers, avoiding interleaved JSON logs
  during streamed output.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Iterator, List, Optional, Tuple

from llmagent.base.logging import BASE_LOGGER_NAME, FILE_HANDLER_ATTR


def parse_verbosity(value: str) -> Optional[str]:
    """Parse a user-provided verbosity string into a canonical level.

    Accepted values (case-insensitive):
    - Canonical: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - Synonyms: verbose->DEBUG; warn->WARNING; quiet->ERROR; silent->CRITICAL

    Returns ``None`` for anything else.
    """
    v = value.strip().lower()
    mapping = {
        "debug": "DEBUG",
        "verbose": "DEBUG",
        "info": "INFO",
        "warning": "WARNING",
        "warn": "WARNING",
        "error": "ERROR",
        "quiet": "ERROR",
        "critical": "CRITICAL",
        "silent": "CRITICAL",
    }
    return mapping.get(v)


@contextlib.contextmanager
def suppress_console_logs() -> Iterator[None]:
    """Temporarily detach console handlers to keep streamed text readable.

    Behavior
    --------
    - Only console handlers (stderr/stdout) attached to the shared
      ``llmagent`` logger and its children are affected.
    - Managed file handlers (tagged by ``configure_logger``) are left
      untouched, so file logging continues.
    - Original handlers are restored on exit.
    """
    detached: List[Tuple[logging.Logger, logging.Handler]] = []
    try:
        loggers = [logging.getLogger(BASE_LOGGER_NAME)]
        for name, candidate in list(logging.Logger.manager.loggerDict.items()):
            if isinstance(candidate, logging.Logger) and name.startswith(f"{BASE_LOGGER_NAME}."):
                loggers.append(candidate)
        for lg in loggers:
            for handler in list(lg.handlers):
                if getattr(handler, FILE_HANDLER_ATTR, False):
                    continue
                if isinstance(handler, logging.StreamHandler):
                    with contextlib.suppress(Exception):
                        handler.flush()
                    detached.append((lg, handler))
                    lg.removeHandler(handler)
        yield
    finally:
        for lg, handler in detached:
            lg.addHandler(handler)


__all__ = ["parse_verbosity", "suppress_console_logs"]
