"""OpenRouter adapter tests against an in-process ``httpx.MockTransport``.

Covers request shape, line decoding (deltas, ``[DONE]``, ``finish_reason``,
comments, end of body without a sentinel), mid-stream failures, synchronous
setup errors (including a malformed base URL), abandonment closing the
response, and the buffered ``get_response`` call.
"""
from __future__ import annotations

import json
import logging
import threading
from typing import Iterator, List

import httpx
import pytest

from llmagent.base.errors import ErrorCode, ProviderError
from llmagent.base.logging import get_logger
from llmagent.base.streaming import drain
from llmagent.openrouter import OpenRouterProvider

from utils import collect

BASE_URL = "https://openrouter.test/api/v1"


def _chunk(*contents: str, finish: str | None = None) -> bytes:
    choices = [{"delta": {"content": c}} for c in contents]
    if finish is not None:
        choices.append({"delta": {}, "finish_reason": finish})
    return b"data: " + json.dumps({"choices": choices}).encode() + b"\n\n"


class _Recorder:
    """MockTransport handler returning a canned response and keeping requests."""

    def __init__(self, response: httpx.Response | Exception) -> None:
        self.response = response
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def _provider(response, api_key: str | None = "sk-test"):
    recorder = _Recorder(response)
    provider = OpenRouterProvider(
        api_key=api_key,
        model="test/model",
        base_url=BASE_URL,
        transport=httpx.MockTransport(recorder),
    )
    return provider, recorder


def _sse(*lines: bytes) -> httpx.Response:
    return httpx.Response(200, content=b"".join(lines), headers={"Content-Type": "text/event-stream"})


class _FailingStream(httpx.SyncByteStream):
    def __iter__(self) -> Iterator[bytes]:
        yield _chunk("partial ")
        raise httpx.ReadError("connection reset")


def test_stream_request_shape():
    provider, recorder = _provider(_sse(_chunk("hi"), b"data: [DONE]\n\n"))
    drain(provider.stream("what is up"))
    request = recorder.requests[0]
    assert request.method == "POST"  # nosec B101 - pytest assert in tests
    assert str(request.url) == f"{BASE_URL}/chat/completions"  # nosec B101 - pytest assert in tests
    assert request.headers["Authorization"] == "Bearer sk-test"  # nosec B101 - pytest assert in tests
    assert request.headers["HTTP-Referer"]  # nosec B101 - pytest assert in tests
    assert request.headers["Content-Type"] == "application/json"  # nosec B101 - pytest assert in tests
    body = json.loads(request.content)
    assert body == {  # nosec B101 - pytest assert in tests
        "model": "test/model",
        "messages": [{"role": "user", "content": "what is up"}],
        "stream": True,
    }


def test_deltas_are_relayed_until_done():
    provider, _ = _provider(
        _sse(
            b": OPENROUTER PROCESSING\n\n",
            _chunk("Hel", "lo"),
            b"data:" + json.dumps({"choices": [{"delta": {"content": " world"}}]}).encode() + b"\n\n",
            b"data: [DONE]\n\n",
            _chunk("never"),
        )
    )
    fragments = collect(provider.stream("greet"))
    assert [f.content for f in fragments] == ["Hel", "lo", " world", ""]  # nosec B101 - pytest assert in tests
    assert fragments[-1].is_terminal and fragments[-1].error is None  # nosec B101 - pytest assert in tests


def test_finish_reason_ends_stream():
    provider, _ = _provider(_sse(_chunk("a", finish="stop"), _chunk("b")))
    result = drain(provider.stream("x"))
    assert result.succeeded and result.text == "a" and not result.abrupt  # nosec B101 - pytest assert in tests


def test_end_of_body_without_sentinel_is_terminal():
    provider, _ = _provider(_sse(_chunk("only")))
    fragments = collect(provider.stream("x"))
    assert fragments[-1].is_terminal and fragments[-1].error is None  # nosec B101 - pytest assert in tests
    assert "".join(f.content for f in fragments) == "only"  # nosec B101 - pytest assert in tests


def test_malformed_json_yields_one_decode_error():
    provider, _ = _provider(_sse(_chunk("ok "), b"data: {not json\n\n", _chunk("after")))
    fragments = collect(provider.stream("x"))
    errors = [f for f in fragments if f.error is not None]
    assert len(errors) == 1 and errors[0] is fragments[-1]  # nosec B101 - pytest assert in tests
    assert errors[0].error.code is ErrorCode.DECODE  # nosec B101 - pytest assert in tests
    assert [f.content for f in fragments[:-1]] == ["ok "]  # nosec B101 - pytest assert in tests


def test_payload_error_object_becomes_error_fragment():
    payload = {"error": {"code": 429, "message": "Rate limited", "type": "rate_limit"}}
    provider, _ = _provider(_sse(b"data: " + json.dumps(payload).encode() + b"\n\n"))
    result = drain(provider.stream("x"))
    assert result.error is not None  # nosec B101 - pytest assert in tests
    assert result.error.code is ErrorCode.RATE_LIMIT  # nosec B101 - pytest assert in tests
    assert result.error.message == "OpenRouter stream error: Rate limited (Type: rate_limit)"  # nosec B101


def test_read_failure_mid_stream_keeps_partial_content():
    provider, _ = _provider(httpx.Response(200, stream=_FailingStream()))
    result = drain(provider.stream("x"))
    assert result.text == "partial "  # nosec B101 - pytest assert in tests
    assert result.error is not None and result.error.code is ErrorCode.TRANSIENT  # nosec B101
    assert "connection reset" in result.error.message  # nosec B101 - pytest assert in tests


def test_non_success_status_raises_at_setup():
    body = {"error": {"message": "No auth credentials found", "type": "auth"}}
    provider, _ = _provider(httpx.Response(401, json=body))
    with pytest.raises(ProviderError) as info:
        provider.stream("x")
    err = info.value
    assert err.code is ErrorCode.AUTH and err.status_code == 401  # nosec B101 - pytest assert in tests
    assert err.message == "OpenRouter API error (Status 401): No auth credentials found (Type: auth)"  # nosec B101


def test_non_json_error_body_is_reported_verbatim():
    provider, _ = _provider(httpx.Response(502, text="bad gateway"))
    with pytest.raises(ProviderError) as info:
        provider.stream("x")
    assert info.value.message == "OpenRouter API request failed with status 502: bad gateway"  # nosec B101


def test_connection_failure_raises_at_setup():
    provider, _ = _provider(httpx.ConnectError("connection refused"))
    with pytest.raises(ProviderError) as info:
        provider.stream("x")
    assert info.value.code is ErrorCode.TRANSIENT  # nosec B101 - pytest assert in tests
    assert "connection refused" in info.value.message  # nosec B101 - pytest assert in tests


def test_missing_key_and_empty_prompt_fail_before_any_request():
    provider, recorder = _provider(_sse(), api_key=None)
    with pytest.raises(ProviderError) as info:
        provider.stream("x")
    assert info.value.code is ErrorCode.AUTH  # nosec B101 - pytest assert in tests

    provider, recorder = _provider(_sse())
    with pytest.raises(ProviderError) as info:
        provider.stream("")
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101 - pytest assert in tests
    assert recorder.requests == []  # nosec B101 - pytest assert in tests


def test_get_response_returns_message_content():
    provider, recorder = _provider(
        httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": "42"}}]})
    )
    assert provider.get_response("answer?") == "42"  # nosec B101 - pytest assert in tests
    assert "stream" not in json.loads(recorder.requests[0].content)  # nosec B101 - pytest assert in tests


def test_get_response_without_choices_is_decode_error():
    provider, _ = _provider(httpx.Response(200, json={"choices": []}))
    with pytest.raises(ProviderError) as info:
        provider.get_response("x")
    assert info.value.code is ErrorCode.DECODE  # nosec B101 - pytest assert in tests


def test_get_response_status_error():
    provider, _ = _provider(httpx.Response(429, json={"error": {"message": "slow down"}}))
    with pytest.raises(ProviderError) as info:
        provider.get_response("x")
    assert info.value.code is ErrorCode.RATE_LIMIT  # nosec B101 - pytest assert in tests


@pytest.mark.parametrize("base_url", ["http://[::1", "http://exa\x00mple.com"])
def test_malformed_base_url_is_validation_setup_error(base_url):
    recorder = _Recorder(_sse())
    provider = OpenRouterProvider(api_key="sk-test", base_url=base_url, transport=httpx.MockTransport(recorder))
    with pytest.raises(ProviderError) as info:
        provider.stream("x")
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101 - pytest assert in tests
    assert isinstance(info.value.raw, (httpx.InvalidURL, ValueError))  # nosec B101 - pytest assert in tests
    with pytest.raises(ProviderError) as info:
        provider.get_response("x")
    assert info.value.code is ErrorCode.VALIDATION  # nosec B101 - pytest assert in tests
    assert recorder.requests == []  # nosec B101 - pytest assert in tests


class _GatedStream(httpx.SyncByteStream):
    """Body that yields one chunk, then waits for ``release`` before the rest."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.closed = threading.Event()

    def __iter__(self) -> Iterator[bytes]:
        yield _chunk("first")
        self.release.wait(5)
        yield _chunk("second")
        yield b"data: [DONE]\n\n"

    def close(self) -> None:
        self.closed.set()


class _EventWatcher(logging.Handler):
    def __init__(self, event: str) -> None:
        super().__init__()
        self.event = event
        self.seen = threading.Event()

    def emit(self, record: logging.LogRecord) -> None:
        if f'"event": "{self.event}"' in record.getMessage():
            self.seen.set()


def test_abandon_stops_reading_and_closes_response():
    body = _GatedStream()
    watcher = _EventWatcher("stream.cancelled")
    logger = get_logger("providers.openrouter")
    logger.addHandler(watcher)
    try:
        provider, _ = _provider(httpx.Response(200, stream=body))
        channel = provider.stream("x")
        first = channel.receive(timeout=5)
        assert first is not None and first.content == "first"  # nosec B101 - pytest assert in tests

        channel.abandon()
        body.release.set()

        assert body.closed.wait(5)  # nosec B101 - pytest assert in tests
        assert watcher.seen.wait(5)  # nosec B101 - pytest assert in tests
        rest = collect(channel)
    finally:
        logger.removeHandler(watcher)
    assert all(f.content != "second" for f in rest)  # nosec B101 - pytest assert in tests
    assert all(f.error is None for f in rest)  # nosec B101 - pytest assert in tests
