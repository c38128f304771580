"""Request and response envelopes for the Messages API.

Composes the content and tool models into messages, requests, responses,
token usage and the top-level ``Response`` union.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, ClassVar, Literal

from pydantic import Field

from .catalog import TOKENS_PER_MILLION, ModelInfo, get_model_info
from .content import Content, Text, ToolResult, ToolUse, is_content
from .tools import Tool, ToolChoice
from .wire import WireModel

if TYPE_CHECKING:
    from .registry import ToolRegistry

DEFAULT_MAX_TOKENS = 4096


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class StopReason(StrEnum):
    END_TURN = "end_turn"
    MAX_TOKENS = "max_tokens"
    STOP_SEQUENCE = "stop_sequence"
    TOOL_USE = "tool_use"
    PAUSE_TURN = "pause_turn"
    REFUSAL = "refusal"
    MODEL_CONTEXT_WINDOW_EXCEEDED = "model_context_window_exceeded"


# ================================================================== #
# Usage and cost
# ================================================================== #


@dataclass(frozen=True)
class Cost:
    """Dollar cost of a request, split the same way as ``Usage``."""

    input_tokens: Decimal = Decimal(0)
    output_tokens: Decimal = Decimal(0)
    cache_creation_input_tokens: Decimal = Decimal(0)
    cache_read_input_tokens: Decimal = Decimal(0)

    ZERO: ClassVar[Cost]

    @property
    def total(self) -> Decimal:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_creation_input_tokens
            + self.cache_read_input_tokens
        )

    def __add__(self, other: Cost) -> Cost:
        return Cost(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_creation_input_tokens=self.cache_creation_input_tokens + other.cache_creation_input_tokens,
            cache_read_input_tokens=self.cache_read_input_tokens + other.cache_read_input_tokens,
        )


Cost.ZERO = Cost()


class Usage(WireModel):
    """Token counts reported by the API.

    Usages add up; absent cache counts are treated as zero and the sum
    always carries them.
    """

    input_tokens: int
    output_tokens: int
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None

    ZERO: ClassVar[Usage]

    def __add__(self, other: Usage) -> Usage:
        return Usage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_creation_input_tokens=(self.cache_creation_input_tokens or 0)
            + (other.cache_creation_input_tokens or 0),
            cache_read_input_tokens=(self.cache_read_input_tokens or 0) + (other.cache_read_input_tokens or 0),
        )

    def cost(self, model: ModelInfo) -> Cost:
        """Price this usage with the per-million-token rates of ``model``."""

        def price(tokens: int | None, per_million: Decimal) -> Decimal:
            return Decimal(tokens or 0) * per_million / TOKENS_PER_MILLION

        return Cost(
            input_tokens=price(self.input_tokens, model.input_cost_per_million),
            output_tokens=price(self.output_tokens, model.output_cost_per_million),
            cache_creation_input_tokens=price(self.cache_creation_input_tokens, model.cache_write_cost),
            cache_read_input_tokens=price(self.cache_read_input_tokens, model.cache_read_cost),
        )


Usage.ZERO = Usage(input_tokens=0, output_tokens=0, cache_creation_input_tokens=0, cache_read_input_tokens=0)

# ================================================================== #
# Messages and requests
# ================================================================== #


def _blocks(parts: tuple[str | Content, ...]) -> list[Content]:
    blocks: list[Content] = []
    for part in parts:
        if isinstance(part, str):
            blocks.append(Text(text=part))
        elif is_content(part):
            blocks.append(part)
        else:
            raise TypeError(f"Expected str or a content block, got {type(part).__name__}")
    return blocks


class Message(WireModel):
    """One conversation turn."""

    role: Role
    content: list[Content]

    @classmethod
    def user(cls, *parts: str | Content) -> Message:
        """Build a user turn; strings become ``Text`` blocks."""
        return cls(role=Role.USER, content=_blocks(parts))

    @classmethod
    def assistant(cls, *parts: str | Content) -> Message:
        return cls(role=Role.ASSISTANT, content=_blocks(parts))

    @property
    def text(self) -> str | None:
        texts = [block.text for block in self.content if isinstance(block, Text)]
        return "".join(texts) if texts else None


class Metadata(WireModel):
    user_id: str | None = None


class ThinkingEnabled(WireModel):
    type: Literal["enabled"] = "enabled"
    budget_tokens: int = Field(ge=1024)


class ThinkingDisabled(WireModel):
    type: Literal["disabled"] = "disabled"


ThinkingConfig = Annotated[ThinkingEnabled | ThinkingDisabled, Field(discriminator="type")]


class MessageRequest(WireModel):
    model: str
    messages: list[Message]
    max_tokens: int
    system: str | list[Text] | None = None
    metadata: Metadata | None = None
    stop_sequences: list[str] | None = None
    stream: bool | None = None
    temperature: float | None = None
    thinking: ThinkingConfig | None = None
    tool_choice: ToolChoice | None = None
    tools: list[Tool] | None = None
    top_k: int | None = None
    top_p: float | None = None

    @classmethod
    def create(
        cls,
        model: str,
        messages: list[Message],
        *,
        max_tokens: int | None = None,
        tools: list[Tool] | None = None,
        stop_sequences: list[str] | None = None,
        stream: bool = False,
        **fields: Any,
    ) -> MessageRequest:
        """Build a request, filling ``max_tokens`` from the model catalog.

        Empty ``tools`` and ``stop_sequences`` are omitted, and ``stream``
        is only sent when true.
        """
        if max_tokens is None:
            info = get_model_info(model)
            max_tokens = info.max_output if info is not None else DEFAULT_MAX_TOKENS
        return cls(
            model=model,
            messages=messages,
            max_tokens=max_tokens,
            tools=tools or None,
            stop_sequences=stop_sequences or None,
            stream=stream or None,
            **fields,
        )


class MessageCountTokensRequest(WireModel):
    model: str
    messages: list[Message]
    system: str | list[Text] | None = None
    thinking: ThinkingConfig | None = None
    tool_choice: ToolChoice | None = None
    tools: list[Tool] | None = None

    @classmethod
    def from_request(cls, request: MessageRequest) -> MessageCountTokensRequest:
        return cls(
            model=request.model,
            messages=request.messages,
            system=request.system,
            thinking=request.thinking,
            tool_choice=request.tool_choice,
            tools=request.tools,
        )


class MessageTokensCount(WireModel):
    input_tokens: int


# ================================================================== #
# Responses
# ================================================================== #


class ErrorDetail(WireModel):
    type: str
    message: str


class ErrorResponse(WireModel):
    TAG: ClassVar[str] = "error"

    type: Literal["error"] = "error"
    error: ErrorDetail


class MessageResponse(WireModel):
    TAG: ClassVar[str] = "message"

    type: Literal["message"] = "message"
    id: str
    role: Role = Role.ASSISTANT
    content: list[Content]
    model: str
    stop_reason: StopReason | None = None
    stop_sequence: str | None = None
    usage: Usage

    @property
    def text(self) -> str | None:
        """All text blocks joined, or ``None`` when there are none."""
        texts = [block.text for block in self.content if isinstance(block, Text)]
        return "".join(texts) if texts else None

    @property
    def tool_uses(self) -> list[ToolUse]:
        return [block for block in self.content if isinstance(block, ToolUse)]

    @property
    def tool_use(self) -> ToolUse | None:
        """The single tool use in this response, if there is exactly one."""
        uses = self.tool_uses
        return uses[0] if len(uses) == 1 else None

    def as_message(self) -> Message:
        """This response as an assistant turn for the next request."""
        return Message(role=self.role, content=self.content)

    async def use_tools(self, registry: ToolRegistry) -> Message:
        """Run every requested tool and return the user turn carrying the results."""
        results: list[ToolResult] = [await registry.use(tool_use) for tool_use in self.tool_uses]
        return Message(role=Role.USER, content=results)


class BatchRequest(WireModel):
    custom_id: str
    params: MessageRequest


class MessageBatchRequest(WireModel):
    requests: list[BatchRequest]


class ProcessingStatus(StrEnum):
    IN_PROGRESS = "in_progress"
    CANCELING = "canceling"
    ENDED = "ended"


class RequestCounts(WireModel):
    processing: int = 0
    succeeded: int = 0
    errored: int = 0
    canceled: int = 0
    expired: int = 0


class MessageBatchResponse(WireModel):
    TAG: ClassVar[str] = "message_batch"

    type: Literal["message_batch"] = "message_batch"
    id: str
    processing_status: ProcessingStatus
    request_counts: RequestCounts
    ended_at: datetime | None = None
    created_at: datetime
    expires_at: datetime
    cancel_initiated_at: datetime | None = None
    results_url: str | None = None


Response = Annotated[ErrorResponse | MessageResponse | MessageBatchResponse, Field(discriminator="type")]
