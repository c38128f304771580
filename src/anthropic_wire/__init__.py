"""Anthropic Messages API wire client.

Typed content blocks, their JSON codec, and assembly of streamed
responses into complete messages.
"""

from __future__ import annotations

from anthropic_wire.cache import CacheControl, EphemeralCacheControl, UnknownCacheControl
from anthropic_wire.catalog import ModelInfo, get_default_model, get_model_info, list_models
from anthropic_wire.client import AnthropicClient, ClientConfig
from anthropic_wire.codec import (
    decode_cache_control,
    decode_content,
    decode_event,
    decode_response,
    decode_source,
    decode_tool,
    decode_user_location,
    encode,
    to_wire,
)
from anthropic_wire.content import (
    Base64Source,
    CharLocation,
    Citation,
    Content,
    ContentBlockLocation,
    Document,
    FileSource,
    Image,
    PageLocation,
    RedactedThinkingBlock,
    Source,
    Text,
    TextSource,
    ThinkingBlock,
    ToolResult,
    ToolUse,
    UnknownSource,
    UrlSource,
    WebFetchErrorCode,
    WebFetchResult,
    WebFetchServerToolUse,
    WebFetchToolResult,
    WebFetchToolResultError,
    WebSearchErrorCode,
    WebSearchResult,
    WebSearchResultLocation,
    WebSearchServerToolUse,
    WebSearchToolResult,
    WebSearchToolResultError,
)
from anthropic_wire.errors import (
    AccessDeniedError,
    AnthropicApiError,
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    DecodeError,
    InvalidRequestError,
    NetworkError,
    NotFoundError,
    OverloadedError,
    ProtocolError,
    RateLimitError,
    RequestTimeoutError,
    SDKError,
    ServerError,
    ToolError,
)
from anthropic_wire.events import Event
from anthropic_wire.media import Attachment, MediaType, detect_media_type
from anthropic_wire.registry import ToolRegistry
from anthropic_wire.retry import RetryPolicy, retry_with_policy
from anthropic_wire.streaming import MessageAssembler, MessageStream, assemble_stream, assemble_stream_async
from anthropic_wire.tools import (
    ApproximateLocation,
    Bash,
    Computer,
    DefaultTool,
    TextEditor,
    Tool,
    ToolChoice,
    ToolChoiceAny,
    ToolChoiceAuto,
    ToolChoiceNone,
    ToolChoiceTool,
    UnknownUserLocation,
    UserLocation,
    WebFetch,
    WebSearch,
)
from anthropic_wire.types import (
    Cost,
    ErrorDetail,
    ErrorResponse,
    Message,
    MessageBatchRequest,
    MessageBatchResponse,
    MessageRequest,
    MessageResponse,
    Response,
    Role,
    StopReason,
    ThinkingDisabled,
    ThinkingEnabled,
    Usage,
)
from anthropic_wire.usage import UsageCollector

__all__ = [
    "AccessDeniedError",
    "AnthropicApiError",
    "AnthropicClient",
    "ApproximateLocation",
    "Attachment",
    "AuthenticationError",
    "Base64Source",
    "Bash",
    "CacheControl",
    "CharLocation",
    "Citation",
    "ClientConfig",
    "Computer",
    "ConfigurationError",
    "ConflictError",
    "Content",
    "ContentBlockLocation",
    "Cost",
    "DecodeError",
    "DefaultTool",
    "Document",
    "EphemeralCacheControl",
    "ErrorDetail",
    "ErrorResponse",
    "Event",
    "FileSource",
    "Image",
    "InvalidRequestError",
    "MediaType",
    "Message",
    "MessageAssembler",
    "MessageBatchRequest",
    "MessageBatchResponse",
    "MessageRequest",
    "MessageResponse",
    "MessageStream",
    "ModelInfo",
    "NetworkError",
    "NotFoundError",
    "OverloadedError",
    "PageLocation",
    "ProtocolError",
    "RateLimitError",
    "RedactedThinkingBlock",
    "RequestTimeoutError",
    "Response",
    "RetryPolicy",
    "Role",
    "SDKError",
    "ServerError",
    "Source",
    "StopReason",
    "Text",
    "TextEditor",
    "TextSource",
    "ThinkingBlock",
    "ThinkingDisabled",
    "ThinkingEnabled",
    "Tool",
    "ToolChoice",
    "ToolChoiceAny",
    "ToolChoiceAuto",
    "ToolChoiceNone",
    "ToolChoiceTool",
    "ToolError",
    "ToolRegistry",
    "ToolResult",
    "ToolUse",
    "UnknownCacheControl",
    "UnknownSource",
    "UnknownUserLocation",
    "UrlSource",
    "Usage",
    "UsageCollector",
    "UserLocation",
    "WebFetch",
    "WebFetchErrorCode",
    "WebFetchResult",
    "WebFetchServerToolUse",
    "WebFetchToolResult",
    "WebFetchToolResultError",
    "WebSearch",
    "WebSearchErrorCode",
    "WebSearchResult",
    "WebSearchResultLocation",
    "WebSearchServerToolUse",
    "WebSearchToolResult",
    "WebSearchToolResultError",
    "assemble_stream",
    "assemble_stream_async",
    "decode_cache_control",
    "decode_content",
    "decode_event",
    "decode_response",
    "decode_source",
    "decode_tool",
    "decode_user_location",
    "detect_media_type",
    "encode",
    "get_default_model",
    "get_model_info",
    "list_models",
    "retry_with_policy",
    "to_wire",
]
