"""Drain state machine and aggregation tests.

The drain concatenates content in arrival order, stops at the first error
Fragment (abandoning the channel), and flags closure without a terminal
Fragment as an abrupt end.
"""
from __future__ import annotations

import io
import json
import logging

import pytest

from llmagent.base.errors import ErrorCode, ProviderError
from llmagent.base.logging import get_logger
from llmagent.base.streaming import DrainState, Drainer, Fragment, RelayChannel, drain

from utils import make_fragments


def _error(message: str = "boom") -> ProviderError:
    return ProviderError(code=ErrorCode.SERVER_ERROR, message=message, provider="mock")


def _filled(fragments, close: bool = True) -> RelayChannel:
    channel = RelayChannel()
    for fragment in fragments:
        channel.send(fragment)
    if close:
        channel.close()
    return channel


def test_drain_concatenates_in_order():
    seen = []
    result = drain(_filled(make_fragments("A", "B", "C")), seen.append)
    assert result.text == "ABC"  # nosec B101 - pytest assert in tests
    assert result.state is DrainState.SUCCEEDED and result.succeeded  # nosec B101 - pytest assert in tests
    assert result.error is None and not result.abrupt  # nosec B101 - pytest assert in tests
    assert [f.content for f in seen] == ["A", "B", "C"]  # nosec B101 - pytest assert in tests


def test_terminal_fragment_content_is_kept():
    result = drain(_filled([Fragment(content="x"), Fragment.terminal("y")]))
    assert result.text == "xy"  # nosec B101 - pytest assert in tests


def test_first_error_stops_drain_and_abandons_channel():
    first, second = _error("first"), _error("second")
    channel = _filled([Fragment(content="partial "), Fragment.failure(first), Fragment.failure(second)], close=False)
    result = drain(channel)
    assert result.state is DrainState.FAILED  # nosec B101 - pytest assert in tests
    assert result.error is first and result.incomplete  # nosec B101 - pytest assert in tests
    assert result.text == "partial "  # nosec B101 - pytest assert in tests
    assert channel.abandoned is True  # nosec B101 - pytest assert in tests


def test_closure_without_terminal_is_abrupt_and_logged():
    logger = get_logger("tests.drain")
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    logger.addHandler(handler)
    try:
        result = drain(_filled([Fragment(content="half")]), logger=logger)
    finally:
        logger.removeHandler(handler)
    assert result.state is DrainState.SUCCEEDED  # nosec B101 - pytest assert in tests
    assert result.abrupt is True and result.text == "half"  # nosec B101 - pytest assert in tests
    events = [json.loads(line)["event"] for line in buf.getvalue().splitlines() if line.startswith("{")]
    assert "drain.abrupt_end" in events  # nosec B101 - pytest assert in tests


def test_empty_stream_succeeds_with_empty_text():
    result = drain(_filled([Fragment.terminal()]))
    assert result.succeeded and result.text == ""  # nosec B101 - pytest assert in tests


def test_drainer_rejects_input_after_final_state():
    drainer = Drainer()
    assert drainer.state is DrainState.IDLE  # nosec B101 - pytest assert in tests
    assert drainer.feed(Fragment(content="a")) is DrainState.DRAINING  # nosec B101 - pytest assert in tests
    assert drainer.feed(Fragment.terminal("b")) is DrainState.SUCCEEDED  # nosec B101 - pytest assert in tests
    assert drainer.finished is True  # nosec B101 - pytest assert in tests
    with pytest.raises(RuntimeError):
        drainer.feed(Fragment(content="late"))
    with pytest.raises(RuntimeError):
        drainer.on_close()


def test_drainer_failed_state_is_final():
    drainer = Drainer()
    assert drainer.feed(Fragment.failure(_error())) is DrainState.FAILED  # nosec B101 - pytest assert in tests
    with pytest.raises(RuntimeError):
        drainer.feed(Fragment.failure(_error("again")))
