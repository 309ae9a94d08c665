"""HTTP endpoint tests for ``POST /mcp`` using FastAPI's TestClient."""

from __future__ import annotations

from fastapi.testclient import TestClient

from llmagent.base.errors import ErrorCode, ProviderError
from llmagent.base.streaming import Fragment
from llmagent.mock import MockProvider
from llmagent.openrouter import OpenRouterProvider
from llmagent.service.app import create_app, get_app

from utils import make_fragments


class _SpyProvider(MockProvider):
    """Mock provider recording every ``stream`` call."""

    def __init__(self, *args, setup_error: ProviderError | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls = []
        self.setup_error = setup_error

    def stream(self, prompt, *, token=None):
        self.calls.append(prompt)
        if self.setup_error is not None:
            raise self.setup_error
        return super().stream(prompt, token=token)


def _client(provider) -> TestClient:
    return TestClient(create_app(provider))


def test_aggregates_fragments_into_solution():
    client = _client(MockProvider(responses=make_fragments("A", "B", "C")))
    resp = client.post("/mcp", json={"problem_context": "solve"})
    assert resp.status_code == 200  # nosec B101 - pytest assert in tests
    assert resp.json() == {"potential_solution": "ABC"}  # nosec B101 - pytest assert in tests


def test_canned_mock_response():
    resp = _client(MockProvider()).post("/mcp", json={"problem_context": "why"})
    assert resp.json() == {"potential_solution": "Mock response for prompt: 'why'"}  # nosec B101


def test_empty_problem_context_is_rejected_without_streaming():
    provider = _SpyProvider()
    client = _client(provider)
    for body in ({"problem_context": ""}, {}):
        resp = client.post("/mcp", json=body)
        assert resp.status_code == 400  # nosec B101 - pytest assert in tests
        assert resp.json() == {"error": "ProblemContext cannot be empty"}  # nosec B101 - pytest assert in tests
    assert provider.calls == []  # nosec B101 - pytest assert in tests


def test_malformed_body_is_400():
    client = _client(MockProvider())
    resp = client.post("/mcp", content=b"{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400  # nosec B101 - pytest assert in tests
    assert resp.json() == {"error": "Invalid request body"}  # nosec B101 - pytest assert in tests
    resp = client.post("/mcp", json={"problem_context": ["not", "a", "string"]})
    assert resp.status_code == 400  # nosec B101 - pytest assert in tests


def test_get_is_method_not_allowed():
    assert _client(MockProvider()).get("/mcp").status_code == 405  # nosec B101 - pytest assert in tests


def test_stream_error_is_500_with_message():
    err = ProviderError(code=ErrorCode.SERVER_ERROR, message="upstream exploded", provider="mock")
    client = _client(MockProvider(responses=[Fragment(content="half"), Fragment.failure(err)]))
    resp = client.post("/mcp", json={"problem_context": "x"})
    assert resp.status_code == 500  # nosec B101 - pytest assert in tests
    assert resp.json() == {"error": "Error getting response from LLM: upstream exploded"}  # nosec B101


def test_setup_error_is_500():
    err = ProviderError(code=ErrorCode.AUTH, message="missing key", provider="openrouter")
    resp = _client(_SpyProvider(setup_error=err)).post("/mcp", json={"problem_context": "x"})
    assert resp.status_code == 500  # nosec B101 - pytest assert in tests
    assert resp.json()["error"].endswith("missing key")  # nosec B101 - pytest assert in tests


def test_empty_successful_stream_returns_empty_solution():
    resp = _client(MockProvider(responses=[Fragment.terminal()])).post("/mcp", json={"problem_context": "x"})
    assert resp.status_code == 200 and resp.json() == {"potential_solution": ""}  # nosec B101


def test_buffered_only_provider_is_adapted():
    class _Buffered:
        provider_name = "buffered"

        def get_response(self, prompt: str) -> str:
            return prompt.upper()

    resp = _client(_Buffered()).post("/mcp", json={"problem_context": "shout"})
    assert resp.json() == {"potential_solution": "SHOUT"}  # nosec B101 - pytest assert in tests


def test_health_and_env_selected_app():
    client = TestClient(get_app())
    assert client.get("/health").json() == {"ok": True}  # nosec B101 - pytest assert in tests
    resp = client.post("/mcp", json={"problem_context": "env"})
    assert resp.json() == {"potential_solution": "Mock response for prompt: 'env'"}  # nosec B101


def test_malformed_provider_url_returns_json_error():
    provider = OpenRouterProvider(api_key="sk-test", base_url="http://[::1")
    resp = _client(provider).post("/mcp", json={"problem_context": "x"})
    assert resp.status_code == 400  # nosec B101 - pytest assert in tests
    assert resp.json()["error"].startswith("Error getting response from LLM: invalid OpenRouter request")  # nosec B101
