"""HTTP client for the Anthropic Messages API.

Sends requests encoded by ``codec`` over ``httpx`` and decodes responses
into the wire models. Streaming responses are parsed from SSE frames into
``Event`` values and exposed as a ``MessageStream``.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import AsyncIterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

import httpx

from . import codec
from .catalog import DEFAULT_MODEL, get_model_info
from .errors import (
    AnthropicApiError,
    ConfigurationError,
    DecodeError,
    NetworkError,
    SDKError,
    classify_http_error,
)
from .events import EVENT_TYPES, Event
from .retry import RetryPolicy, retry_with_policy
from .streaming import MessageStream
from .types import (
    Cost,
    ErrorDetail,
    ErrorResponse,
    Message,
    MessageBatchRequest,
    MessageBatchResponse,
    MessageCountTokensRequest,
    MessageRequest,
    MessageResponse,
    MessageTokensCount,
    Usage,
)
from .usage import UsageCollector

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BASE_URL = "https://api.anthropic.com"
API_VERSION = "2023-06-01"
API_KEY_ENV = "ANTHROPIC_API_KEY"
BASE_URL_ENV = "ANTHROPIC_BASE_URL"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings for ``AnthropicClient``."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    anthropic_version: str = API_VERSION
    anthropic_beta: tuple[str, ...] = ()
    timeout: float = 600.0
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    default_model: str = DEFAULT_MODEL
    default_max_tokens: int | None = None
    direct_browser_access: bool = False
    default_headers: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientConfig:
        """Read ``ANTHROPIC_API_KEY`` (and optionally ``ANTHROPIC_BASE_URL``)."""
        values: dict[str, Any] = {}
        api_key = os.environ.get(API_KEY_ENV)
        if api_key:
            values["api_key"] = api_key
        base_url = os.environ.get(BASE_URL_ENV)
        if base_url:
            values["base_url"] = base_url
        values.update(overrides)
        if not values.get("api_key"):
            raise ConfigurationError(f"Missing API key: set the {API_KEY_ENV} environment variable")
        return cls(**values)

    def headers(self) -> dict[str, str]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.anthropic_version,
            "content-type": "application/json",
        }
        if self.anthropic_beta:
            headers["anthropic-beta"] = ",".join(self.anthropic_beta)
        if self.direct_browser_access:
            headers["anthropic-dangerous-direct-browser-access"] = "true"
        headers.update(self.default_headers)
        return headers


async def parse_sse(lines: AsyncIterator[str]) -> AsyncIterator[tuple[str | None, str]]:
    """Group SSE lines into ``(event name, data)`` frames.

    Frames end at a blank line; multiple ``data:`` lines are joined with
    newlines. Comment lines (starting with ``:``) are ignored.
    """
    event_name: str | None = None
    data_lines: list[str] = []
    async for raw in lines:
        line = raw.rstrip("\r\n")
        if not line:
            if data_lines:
                yield event_name, "\n".join(data_lines)
            event_name, data_lines = None, []
            continue
        if line.startswith(":"):
            continue
        name, _, value = line.partition(":")
        value = value.removeprefix(" ")
        if name == "event":
            event_name = value
        elif name == "data":
            data_lines.append(value)
    if data_lines:
        yield event_name, "\n".join(data_lines)


class AnthropicClient:
    """Async client for the Messages API.

    Usage::

        async with AnthropicClient(ClientConfig.from_env()) as client:
            response = await client.create(
                MessageRequest.create("claude-sonnet-4-5", [Message.user("Hello")])
            )
            print(response.text)
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or ClientConfig.from_env()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout, connect=10.0),
        )
        self._base_url = self._config.base_url.rstrip("/")
        self._collector = UsageCollector()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def usage(self) -> Usage:
        return self._collector.usage

    @property
    def cost(self) -> Cost:
        return self._collector.cost

    async def __aenter__(self) -> AnthropicClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ------------------------------------------------------------------ #
    # Messages
    # ------------------------------------------------------------------ #

    async def create(self, request: MessageRequest) -> MessageResponse:
        """Send a request and return the complete response.

        Raises:
            AnthropicApiError: The API answered with an error.
            NetworkError: The request could not be sent.
            DecodeError: The response body was not understood.
        """
        if request.stream:
            request = request.replace(stream=None)
        logger.debug("POST /v1/messages model=%s messages=%d", request.model, len(request.messages))
        response = await self._post("/v1/messages", codec.to_wire(request), MessageResponse)
        self._record(response)
        return response

    async def stream(self, request: MessageRequest) -> MessageStream:
        """Send a streaming request; the returned stream yields ``Event`` values.

        The response stays open until the stream is exhausted or closed, so
        prefer ``async with await client.stream(request) as stream:``.
        """
        body = codec.to_wire(request.replace(stream=True))
        logger.debug("POST /v1/messages (stream) model=%s messages=%d", request.model, len(request.messages))
        http_response = await self._with_retry(lambda: self._open_stream("/v1/messages", body))
        return MessageStream(self._events(http_response), on_complete=self._record, on_close=http_response.aclose)

    async def count_tokens(self, request: MessageRequest | MessageCountTokensRequest) -> MessageTokensCount:
        if isinstance(request, MessageRequest):
            request = MessageCountTokensRequest.from_request(request)
        logger.debug("POST /v1/messages/count_tokens model=%s", request.model)
        return await self._post("/v1/messages/count_tokens", codec.to_wire(request), MessageTokensCount)

    def new_request(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        **fields: Any,
    ) -> MessageRequest:
        """Build a request using this client's default model and token limit."""
        return MessageRequest.create(
            model or self._config.default_model,
            messages,
            max_tokens=max_tokens or self._config.default_max_tokens,
            **fields,
        )

    # ------------------------------------------------------------------ #
    # Batches
    # ------------------------------------------------------------------ #

    async def create_batch(self, batch: MessageBatchRequest) -> MessageBatchResponse:
        logger.debug("POST /v1/messages/batches requests=%d", len(batch.requests))
        return await self._post("/v1/messages/batches", codec.to_wire(batch), MessageBatchResponse)

    async def get_batch(self, batch_id: str) -> MessageBatchResponse:
        logger.debug("GET /v1/messages/batches/%s", batch_id)
        return await self._with_retry(
            lambda: self._send("GET", f"/v1/messages/batches/{batch_id}", None, MessageBatchResponse)
        )

    # ------------------------------------------------------------------ #
    # Transport
    # ------------------------------------------------------------------ #

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    def _headers(self, streaming: bool = False) -> dict[str, str]:
        headers = self._config.headers()
        if streaming:
            headers["accept"] = "text/event-stream"
        return headers

    async def _post(self, path: str, body: Any, expected: type[T]) -> T:
        return await self._with_retry(lambda: self._send("POST", path, body, expected))

    async def _with_retry(self, fn: Any) -> Any:
        return await retry_with_policy(fn, self._config.retry_policy, on_retry=self._on_retry)

    @staticmethod
    def _on_retry(attempt: int, error: SDKError, delay: float) -> None:
        logger.warning(
            "Retrying request (attempt %d, status %s) in %.2fs: %s",
            attempt + 1,
            error.status_code,
            delay,
            error,
        )

    async def _send(self, method: str, path: str, body: Any, expected: type[T]) -> T:
        try:
            http_response = await self._http.request(
                method,
                self._url(path),
                headers=self._headers(),
                json=body,
            )
        except httpx.TransportError as exc:
            raise NetworkError(f"{method} {path} failed: {exc}") from exc

        if http_response.status_code >= 400:
            raise self._http_error(http_response.status_code, http_response.text, http_response.headers)

        if expected is MessageResponse or expected is MessageBatchResponse:
            decoded = codec.decode_response(http_response.content)
            if isinstance(decoded, ErrorResponse):
                raise classify_http_error(
                    http_response.status_code,
                    http_response.text,
                    error=decoded.error,
                    raw_response=http_response.json(),
                )
            if not isinstance(decoded, expected):
                raise DecodeError(
                    f"Expected {expected.__name__}, got {type(decoded).__name__}",
                    element=http_response.text,
                    target=expected.__name__,
                )
            return decoded
        return codec.decode_as(expected, http_response.content)

    async def _open_stream(self, path: str, body: Any) -> httpx.Response:
        request = self._http.build_request("POST", self._url(path), headers=self._headers(streaming=True), json=body)
        try:
            http_response = await self._http.send(request, stream=True)
        except httpx.TransportError as exc:
            raise NetworkError(f"POST {path} failed: {exc}") from exc
        if http_response.status_code >= 400:
            raw = await http_response.aread()
            await http_response.aclose()
            raise self._http_error(
                http_response.status_code,
                raw.decode("utf-8", errors="replace"),
                http_response.headers,
            )
        return http_response

    async def _events(self, http_response: httpx.Response) -> AsyncIterator[Event]:
        try:
            async for name, data in parse_sse(http_response.aiter_lines()):
                if name is not None and name not in EVENT_TYPES:
                    logger.debug("Skipping unknown stream event %r", name)
                    continue
                try:
                    payload = json.loads(data)
                except json.JSONDecodeError as exc:
                    raise DecodeError(f"Invalid JSON in stream frame: {exc}", element=data, target="Event") from exc
                if not isinstance(payload, dict):
                    raise DecodeError(f"Stream frame is not a JSON object: {data}", element=payload, target="Event")
                if payload.get("type") not in EVENT_TYPES:
                    logger.debug("Skipping unknown stream event payload %r", payload.get("type"))
                    continue
                yield codec.decode_event(payload)
        except httpx.TransportError as exc:
            raise NetworkError(f"Stream interrupted: {exc}") from exc
        finally:
            await http_response.aclose()

    @staticmethod
    def _http_error(status_code: int, text: str, headers: Mapping[str, str]) -> AnthropicApiError:
        error: ErrorDetail | None = None
        raw: Mapping[str, Any] | None = None
        try:
            raw = json.loads(text)
            decoded = codec.decode_response(raw)
            if isinstance(decoded, ErrorResponse):
                error = decoded.error
        except (json.JSONDecodeError, DecodeError):
            pass
        return classify_http_error(
            status_code,
            text,
            error=error,
            headers=dict(headers),
            raw_response=raw if isinstance(raw, Mapping) else None,
        )

    def _record(self, response: MessageResponse) -> None:
        self._collector.add(response.usage, get_model_info(response.model))

