"""OpenRouter provider adapter (OpenAI-style over HTTP).

Summary:
- Buffered ``get_response`` via a plain POST.
- ``stream`` opens one streaming POST synchronously (so connection failures
  and non-success statuses are raised to the caller as ``ProviderError``) and
  hands the open response to a producing task that reads the body.

Timeouts & Retries:
- Each call builds a dedicated ``httpx.Client`` from ``get_timeout_config()``.
- No retries: a single attempt, failures surface immediately.

Errors & Observability:
- Normalize exceptions with ``classify_exception``.
- Emit structured start/finalize events; the producer records
  ``time_to_first_fragment_ms``, ``total_duration_ms`` and ``emitted_count``.

This module orchestrates I/O only; decoding lives in ``stream_helpers``.
"""

from __future__ import annotations

from contextlib import suppress
from typing import Optional, Tuple

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import EMPTY_PROMPT_ERROR, MISSING_API_KEY_ERROR
from ..base.errors import ErrorCode, ProviderError, classify_exception, code_for_status
from ..base.http import open_httpx_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.streaming import Fragment, Producer, RelayChannel, start_producer, validation_error
from ..config.defaults import OPENROUTER_DEFAULT_BASE_URL, OPENROUTER_DEFAULT_MODEL
from .helpers import OpenRouterCommonMixin, api_error_message, extract_message_text
from .stream_helpers import DONE_SENTINEL, StreamDecodeError, decode_payload, parse_data_line, payload_error

_COMPLETIONS_PATH = "/chat/completions"


class OpenRouterProvider(OpenRouterCommonMixin):
    """OpenRouter LLM provider implementation.

    Parameters:
        api_key: API key sent as a bearer token. Required for any request;
            a missing key is reported per call as an ``auth`` setup error.
        model: Model name (defaults to ``"gryphe/mythomax-l2-13b"``).
        base_url: API base URL (defaults to ``"https://openrouter.ai/api/v1"``).
        transport: Optional ``httpx`` transport, used by tests to avoid the
            network.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or OPENROUTER_DEFAULT_MODEL
        self._base_url = (base_url or OPENROUTER_DEFAULT_BASE_URL).rstrip("/")
        self._transport = transport
        self._logger = get_logger("providers.openrouter")

    @property
    def provider_name(self) -> str:
        """Return the canonical provider slug used in logs and errors."""
        return "openrouter"

    @property
    def model(self) -> str:
        return self._model

    def _check_setup(self, prompt: str) -> None:
        if not prompt:
            raise validation_error(self.provider_name, EMPTY_PROMPT_ERROR, self._model)
        if not self._api_key:
            raise ProviderError(
                code=ErrorCode.AUTH,
                message=MISSING_API_KEY_ERROR,
                provider=self.provider_name,
                model=self._model,
            )

    def _transport_error(self, exc: Exception, action: str) -> ProviderError:
        return ProviderError(
            code=classify_exception(exc),
            message=f"failed to {action} OpenRouter: {exc}",
            provider=self.provider_name,
            model=self._model,
            raw=exc,
        )

    def _status_error(self, status: int, body: bytes) -> ProviderError:
        return ProviderError(
            code=code_for_status(status),
            message=api_error_message(status, body),
            provider=self.provider_name,
            model=self._model,
            status_code=status,
        )

    def _prepare(self, prompt: str, purpose: str, *, stream: bool = False) -> Tuple[httpx.Client, httpx.Request]:
        """Open a dedicated client and build the completions request.

        Raises:
            ProviderError: with code ``validation`` when the base URL or the
                request cannot be constructed; no client is left open.
        """
        client: Optional[httpx.Client] = None
        try:
            client = open_httpx_client(self._base_url, purpose, transport=self._transport)
            request = client.build_request(
                "POST", _COMPLETIONS_PATH, json=self._build_payload(prompt, stream=stream), headers=self._build_headers()
            )
        except (httpx.InvalidURL, ValueError) as exc:
            if client is not None:
                client.close()
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message=f"invalid OpenRouter request for base URL {self._base_url!r}: {exc}",
                provider=self.provider_name,
                model=self._model,
                raw=exc,
            ) from exc
        return client, request

    # ---- Buffered ----
    def get_response(self, prompt: str) -> str:
        """Perform a non-streaming chat completion and return its text.

        Raises:
            ProviderError: for empty prompt, missing key, transport failure,
                non-success status, or an undecodable body.
        """
        self._check_setup(prompt)
        ctx = LogContext(provider=self.provider_name, model=self._model)
        normalized_log_event(self._logger, "chat.start", ctx, phase="start", emitted=False)
        client, request = self._prepare(prompt, "openrouter.chat")
        with client:
            try:
                resp = client.send(request)
            except httpx.HTTPError as exc:
                raise self._transport_error(exc, "send request to") from exc
            if resp.status_code != httpx.codes.OK:
                raise self._status_error(resp.status_code, resp.content)
            try:
                data = resp.json()
            except ValueError as exc:
                raise ProviderError(
                    code=ErrorCode.DECODE,
                    message=f"failed to decode OpenRouter response: {exc}",
                    provider=self.provider_name,
                    model=self._model,
                    raw=exc,
                ) from exc
        text = extract_message_text(data)
        if text is None:
            raise ProviderError(
                code=ErrorCode.DECODE,
                message="OpenRouter response has no choices[0].message.content",
                provider=self.provider_name,
                model=self._model,
            )
        normalized_log_event(self._logger, "chat.end", ctx, phase="finalize", emitted=bool(text), chars=len(text))
        return text

    # ---- Streaming ----
    def stream(self, prompt: str, *, token: Optional[CancellationToken] = None) -> RelayChannel:
        """Open a streaming completion and relay it through a new channel.

        The connection is opened and the status inspected before returning;
        only body reading happens in the producing task, which owns the
        response and its dedicated client and closes both when it ends.

        Raises:
            ProviderError: synchronously for every setup failure.
        """
        self._check_setup(prompt)
        client, request = self._prepare(prompt, "openrouter.stream", stream=True)
        try:
            response = client.send(request, stream=True)
        except httpx.HTTPError as exc:
            client.close()
            raise self._transport_error(exc, "send request to") from exc

        if response.status_code != httpx.codes.OK:
            body = b""
            try:
                with suppress(httpx.HTTPError):
                    body = response.read()
            finally:
                response.close()
                client.close()
            raise self._status_error(response.status_code, body)

        def _cleanup() -> None:
            response.close()
            client.close()

        channel = RelayChannel(token)
        start_producer(
            channel,
            lambda producer: self._pump(producer, response),
            provider=self.provider_name,
            model=self._model,
            logger=self._logger,
            cleanup=_cleanup,
        )
        return channel

    def _pump(self, producer: Producer, response: httpx.Response) -> None:
        """Read body lines and translate them into Fragments until terminal."""
        lines = response.iter_lines()
        while True:
            producer.token.raise_if_cancelled()
            try:
                line = next(lines)
            except StopIteration:
                # end of body without a sentinel
                producer.emit(Fragment.terminal())
                return
            except httpx.HTTPError as exc:
                raise self._transport_error(exc, "read stream from") from exc

            data = parse_data_line(line)
            if data is None:
                continue
            if data == DONE_SENTINEL:
                producer.emit(Fragment.terminal())
                return
            try:
                chunk = decode_payload(data)
            except StreamDecodeError as exc:
                raise ProviderError(
                    code=ErrorCode.DECODE,
                    message=str(exc),
                    provider=self.provider_name,
                    model=self._model,
                    raw=exc,
                ) from exc
            if chunk.error is not None:
                raise payload_error(chunk.error, provider=self.provider_name, model=self._model)
            for delta in chunk.deltas:
                if not producer.emit(Fragment(content=delta)):
                    return
            if chunk.finished:
                producer.emit(Fragment.terminal())
                return


__all__ = ["OpenRouterProvider"]
