"""Error hierarchy for the Anthropic wire client.

Every error carries retryability information for the retry engine.
Pydantic ``ValidationError`` is raised directly when a model is built
from invalid values; ``DecodeError`` wraps failures while reading JSON.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .types import ErrorDetail


class SDKError(Exception):
    """Base error for all client errors."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class DecodeError(SDKError):
    """A JSON element could not be decoded into the requested type."""

    def __init__(self, message: str, *, element: Any = None, target: str | None = None) -> None:
        super().__init__(message)
        self.element = element
        self.target = target


class ProtocolError(SDKError):
    """A streamed event sequence violated the message event grammar."""


class AnthropicApiError(SDKError):
    """Error reported by the Messages API, either as an HTTP error or a stream event."""

    def __init__(
        self,
        message: str,
        *,
        error: ErrorDetail | None = None,
        status_code: int | None = None,
        retryable: bool = False,
        raw_response: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, retryable=retryable)
        self.error = error
        self.raw_response = raw_response


class InvalidRequestError(AnthropicApiError):
    """400/413/422: Bad request parameters. Not retryable."""


class AuthenticationError(AnthropicApiError):
    """401: Invalid or missing API key. Not retryable."""


class AccessDeniedError(AnthropicApiError):
    """403: Insufficient permissions. Not retryable."""


class NotFoundError(AnthropicApiError):
    """404: Model or endpoint not found. Not retryable."""


class RequestTimeoutError(AnthropicApiError):
    """408: Request timed out server side. Retryable."""


class ConflictError(AnthropicApiError):
    """409: Conflicting concurrent request. Retryable."""


class RateLimitError(AnthropicApiError):
    """429: Rate limited. Retryable with backoff."""

    def __init__(
        self,
        message: str,
        *,
        error: ErrorDetail | None = None,
        status_code: int | None = None,
        retry_after: float | None = None,
        raw_response: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            error=error,
            status_code=status_code,
            retryable=True,
            raw_response=raw_response,
        )
        self.retry_after = retry_after


class OverloadedError(AnthropicApiError):
    """529: The API is temporarily overloaded. Retryable."""


class ServerError(AnthropicApiError):
    """5xx: API server error. Retryable."""


class NetworkError(SDKError):
    """Network-level failure. Retryable."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


class ConfigurationError(SDKError):
    """Client misconfiguration, such as a missing API key. Not retryable."""


class ToolError(SDKError):
    """A tool could not be resolved or its input could not be decoded."""

    def __init__(self, message: str, *, tool_name: str | None = None) -> None:
        super().__init__(message, retryable=False)
        self.tool_name = tool_name


def _retry_after(headers: Mapping[str, str] | None) -> float | None:
    if not headers:
        return None
    value = headers.get("retry-after") or headers.get("Retry-After")
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def classify_http_error(
    status_code: int,
    body: str,
    *,
    error: ErrorDetail | None = None,
    headers: Mapping[str, str] | None = None,
    raw_response: Mapping[str, Any] | None = None,
) -> AnthropicApiError:
    """Map an HTTP status code and error payload to the matching error type."""
    message = f"{error.type}: {error.message}" if error is not None else body
    common: dict[str, Any] = {
        "error": error,
        "status_code": status_code,
        "raw_response": raw_response,
    }
    if status_code in (400, 413, 422):
        return InvalidRequestError(message, **common)
    if status_code == 401:
        return AuthenticationError(message, **common)
    if status_code == 403:
        return AccessDeniedError(message, **common)
    if status_code == 404:
        return NotFoundError(message, **common)
    if status_code == 408:
        return RequestTimeoutError(message, retryable=True, **common)
    if status_code == 409:
        return ConflictError(message, retryable=True, **common)
    if status_code == 429:
        return RateLimitError(message, retry_after=_retry_after(headers), **common)
    if status_code == 529:
        return OverloadedError(message, retryable=True, **common)
    if status_code >= 500:
        return ServerError(message, retryable=True, **common)

    return AnthropicApiError(message, retryable=False, **common)
