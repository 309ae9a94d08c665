"""Streaming helpers for the OpenRouter provider.

Purpose:
- Decode the line-oriented event stream into text deltas, a finish flag, or a
  payload error, keeping ``client.py`` focused on I/O.

Notes:
- These helpers do not perform I/O. Lines not starting with ``data:`` (SSE
  comments such as ``: OPENROUTER PROCESSING``, ``event:`` fields, blank
  keep-alives) are ignored. A ``data:`` line that is not valid JSON raises
  :class:`StreamDecodeError`; there is no resynchronization.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..base.errors import ErrorCode, ProviderError, code_for_status

DATA_PREFIX = "data:"
DONE_SENTINEL = "[DONE]"


class StreamDecodeError(ValueError):
    """Raised when a ``data:`` payload cannot be decoded."""


@dataclass
class StreamChunk:
    """Decoded content of one ``data:`` payload."""

    deltas: List[str] = field(default_factory=list)
    finished: bool = False
    error: Optional[Dict[str, Any]] = None


def parse_data_line(line: Union[str, bytes]) -> Optional[str]:
    """Return the payload of a ``data:`` line, or ``None`` for any other line.

    The single space after the colon is optional.
    """
    if isinstance(line, bytes):
        line = line.decode("utf-8")
    s = line.strip()
    if not s.startswith(DATA_PREFIX):
        return None
    return s[len(DATA_PREFIX):].strip()


def decode_payload(data: str) -> StreamChunk:
    """Decode one JSON payload into a :class:`StreamChunk`.

    Choices are processed in order; the first non-empty ``finish_reason``
    marks the chunk finished and later choices are ignored.
    """
    try:
        obj = json.loads(data)
    except json.JSONDecodeError as exc:
        raise StreamDecodeError(f"failed to decode stream data {data[:200]!r}: {exc}") from exc
    if not isinstance(obj, dict):
        raise StreamDecodeError(f"unexpected stream payload type {type(obj).__name__}")

    err = obj.get("error")
    if err:
        return StreamChunk(error=err if isinstance(err, dict) else {"message": str(err)})

    chunk = StreamChunk()
    for choice in obj.get("choices") or []:
        if not isinstance(choice, dict):
            continue
        content = (choice.get("delta") or {}).get("content")
        if content:
            chunk.deltas.append(str(content))
        if choice.get("finish_reason"):
            chunk.finished = True
            break
    return chunk


def payload_error(err: Dict[str, Any], *, provider: str, model: Optional[str]) -> ProviderError:
    """Convert a payload ``error`` object into a :class:`ProviderError`."""
    raw_code = err.get("code")
    code = code_for_status(raw_code) if isinstance(raw_code, int) else ErrorCode.SERVER_ERROR
    message = str(err.get("message") or "unknown error")
    err_type = err.get("type")
    if err_type:
        message = f"{message} (Type: {err_type})"
    return ProviderError(
        code=code,
        message=f"OpenRouter stream error: {message}",
        provider=provider,
        model=model,
        status_code=raw_code if isinstance(raw_code, int) else None,
    )


__all__ = [
    "DATA_PREFIX",
    "DONE_SENTINEL",
    "StreamDecodeError",
    "StreamChunk",
    "parse_data_line",
    "decode_payload",
    "payload_error",
]
