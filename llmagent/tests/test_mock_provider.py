"""Unit tests covering the deterministic mock provider."""

from __future__ import annotations

import time

import pytest

from llmagent.base.errors import ErrorCode, ProviderError
from llmagent.base.interfaces import LLMProvider, SupportsStreaming
from llmagent.base.streaming import Fragment, drain
from llmagent.mock import MockProvider, canned_fragments, canned_response

from utils import collect, make_fragments


class TestMockProvider:
    """Verify buffered and streaming behaviour for the mock provider."""

    def test_satisfies_both_contracts(self, mock_provider) -> None:
        assert isinstance(mock_provider, LLMProvider)  # nosec B101 - pytest assert in tests
        assert isinstance(mock_provider, SupportsStreaming)  # nosec B101 - pytest assert in tests
        assert mock_provider.provider_name == "mock"  # nosec B101 - pytest assert in tests

    def test_get_response_is_canned_and_idempotent(self, mock_provider) -> None:
        first = mock_provider.get_response("hello")
        assert first == "Mock response for prompt: 'hello'"  # nosec B101 - pytest assert in tests
        assert mock_provider.get_response("hello") == first  # nosec B101 - pytest assert in tests

    def test_canned_stream_is_identical_across_calls(self) -> None:
        provider = MockProvider()
        first = [(f.content, f.is_terminal) for f in collect(provider.stream("q"))]
        second = [(f.content, f.is_terminal) for f in collect(provider.stream("q"))]
        assert len(first) == 3 and first == second  # nosec B101 - pytest assert in tests

    def test_canned_stream_concatenates_to_buffered_text(self, mock_provider) -> None:
        fragments = collect(mock_provider.stream("hello"))
        assert len(fragments) == 3  # nosec B101 - pytest assert in tests
        assert [f.is_terminal for f in fragments] == [False, False, True]  # nosec B101 - pytest assert in tests
        text = "".join(f.content for f in fragments)
        assert text == canned_response("hello")  # nosec B101 - pytest assert in tests
        assert [f.content for f in canned_fragments("hello")] == [f.content for f in fragments]  # nosec B101

    def test_empty_prompt_raises_validation_before_stream(self, mock_provider) -> None:
        with pytest.raises(ProviderError) as info:
            mock_provider.stream("")
        assert info.value.code is ErrorCode.VALIDATION  # nosec B101 - pytest assert in tests
        with pytest.raises(ProviderError):
            mock_provider.get_response("")

    def test_injected_sequence_is_replayed(self) -> None:
        provider = MockProvider(responses=make_fragments("A", "B", "C"))
        result = drain(provider.stream("anything"))
        assert result.text == "ABC" and result.succeeded  # nosec B101 - pytest assert in tests
        assert provider.get_response("anything") == "ABC"  # nosec B101 - pytest assert in tests

    def test_injected_error_is_relayed_and_raised(self) -> None:
        err = ProviderError(code=ErrorCode.RATE_LIMIT, message="slow down", provider="mock")
        provider = MockProvider(responses=[Fragment(content="part"), Fragment.failure(err)])
        fragments = collect(provider.stream("x"))
        assert fragments[-1].error is err  # nosec B101 - pytest assert in tests
        with pytest.raises(ProviderError) as info:
            provider.get_response("x")
        assert info.value is err  # nosec B101 - pytest assert in tests

    def test_fragments_after_terminal_are_not_sent(self) -> None:
        provider = MockProvider(responses=[Fragment.terminal("end"), Fragment(content="ignored")])
        fragments = collect(provider.stream("x"))
        assert [f.content for f in fragments] == ["end"]  # nosec B101 - pytest assert in tests

    def test_abandon_interrupts_delay(self) -> None:
        provider = MockProvider(delay=10.0)
        channel = provider.stream("slow")
        started = time.perf_counter()
        channel.abandon()
        assert channel.receive(timeout=5) is None  # nosec B101 - pytest assert in tests
        assert time.perf_counter() - started < 5  # nosec B101 - pytest assert in tests

    def test_negative_delay_is_clamped(self) -> None:
        assert MockProvider(delay=-1).delay == 0.0  # nosec B101 - pytest assert in tests
