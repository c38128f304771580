"""Server-sent events of a streamed Messages API response.

A stream is ``message_start``, then for every content block a
``content_block_start``, any number of ``content_block_delta`` and a
``content_block_stop``, then ``message_delta`` and ``message_stop``.
``ping`` may appear anywhere; ``error`` aborts the stream.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import Discriminator, Field, Tag

from .content import (
    Citation,
    Document,
    Image,
    RedactedThinkingBlock,
    Text,
    ToolResult,
    ToolUse,
    WebFetchToolResult,
    WebSearchToolResult,
)
from .discriminators import block_start_tag
from .types import ErrorDetail, MessageResponse, StopReason
from .wire import WireModel

# ================================================================== #
# Partial blocks announced by content_block_start
# ================================================================== #


class ServerToolUseStart(WireModel):
    """Opening of a server tool use; ``input`` arrives later as JSON deltas."""

    TAG: ClassVar[str] = "server_tool_use:start"

    type: Literal["server_tool_use"] = "server_tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class ThinkingStart(WireModel):
    """Opening of a thinking block; text and signature arrive as deltas."""

    TAG: ClassVar[str] = "thinking:start"

    type: Literal["thinking"] = "thinking"
    thinking: str = ""
    signature: str | None = None


StartedBlock = Annotated[
    Annotated[Text, Tag("text")]
    | Annotated[Image, Tag("image")]
    | Annotated[Document, Tag("document")]
    | Annotated[ToolUse, Tag("tool_use")]
    | Annotated[ToolResult, Tag("tool_result")]
    | Annotated[ThinkingStart, Tag("thinking:start")]
    | Annotated[RedactedThinkingBlock, Tag("redacted_thinking")]
    | Annotated[ServerToolUseStart, Tag("server_tool_use:start")]
    | Annotated[WebSearchToolResult, Tag("web_search_tool_result")]
    | Annotated[WebFetchToolResult, Tag("web_fetch_tool_result")],
    Discriminator(block_start_tag),
]

# ================================================================== #
# Deltas
# ================================================================== #


class TextDelta(WireModel):
    type: Literal["text_delta"] = "text_delta"
    text: str


class InputJsonDelta(WireModel):
    type: Literal["input_json_delta"] = "input_json_delta"
    partial_json: str


class ThinkingDelta(WireModel):
    type: Literal["thinking_delta"] = "thinking_delta"
    thinking: str


class SignatureDelta(WireModel):
    type: Literal["signature_delta"] = "signature_delta"
    signature: str


class CitationsDelta(WireModel):
    type: Literal["citations_delta"] = "citations_delta"
    citation: Citation


Delta = Annotated[
    TextDelta | InputJsonDelta | ThinkingDelta | SignatureDelta | CitationsDelta,
    Field(discriminator="type"),
]

# ================================================================== #
# Events
# ================================================================== #


class MessageStart(WireModel):
    type: Literal["message_start"] = "message_start"
    message: MessageResponse


class ContentBlockStart(WireModel):
    type: Literal["content_block_start"] = "content_block_start"
    index: int
    content_block: StartedBlock


class ContentBlockDelta(WireModel):
    type: Literal["content_block_delta"] = "content_block_delta"
    index: int
    delta: Delta


class ContentBlockStop(WireModel):
    type: Literal["content_block_stop"] = "content_block_stop"
    index: int


class MessageDeltaBody(WireModel):
    stop_reason: StopReason | None = None
    stop_sequence: str | None = None


class MessageDeltaUsage(WireModel):
    """Usage reported at the end of a stream; ``output_tokens`` is the increment to apply."""

    output_tokens: int
    input_tokens: int | None = None
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None


class MessageDelta(WireModel):
    type: Literal["message_delta"] = "message_delta"
    delta: MessageDeltaBody
    usage: MessageDeltaUsage


class MessageStop(WireModel):
    type: Literal["message_stop"] = "message_stop"


class Ping(WireModel):
    type: Literal["ping"] = "ping"


class ErrorEvent(WireModel):
    type: Literal["error"] = "error"
    error: ErrorDetail


Event = Annotated[
    MessageStart
    | ContentBlockStart
    | ContentBlockDelta
    | ContentBlockStop
    | MessageDelta
    | MessageStop
    | Ping
    | ErrorEvent,
    Field(discriminator="type"),
]

EVENT_TYPES: frozenset[str] = frozenset(
    {
        "message_start",
        "content_block_start",
        "content_block_delta",
        "content_block_stop",
        "message_delta",
        "message_stop",
        "ping",
        "error",
    }
)
