"""Stream assembler and MessageStream for building responses from SSE events.

``MessageAssembler`` folds the events of one streamed response into the
same ``MessageResponse`` a non-streaming call returns. ``MessageStream``
wraps a live event iterator with convenient access patterns.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Iterable

from . import codec
from .content import Citation, Content, Text, ThinkingBlock, ToolUse
from .errors import AnthropicApiError, DecodeError, ProtocolError
from .events import (
    CitationsDelta,
    ContentBlockDelta,
    ContentBlockStart,
    ContentBlockStop,
    ErrorEvent,
    Event,
    InputJsonDelta,
    MessageDelta,
    MessageStart,
    MessageStop,
    Ping,
    ServerToolUseStart,
    SignatureDelta,
    TextDelta,
    ThinkingDelta,
    ThinkingStart,
)
from .types import MessageResponse, Usage

logger = logging.getLogger(__name__)

# Status reported for errors embedded in a stream, where no HTTP status applies.
STREAM_ERROR_STATUS = 500


class _BlockBuilder:
    """Accumulates the deltas of one content block."""

    def __init__(self, index: int, block: object) -> None:
        self.index = index
        self.block = block
        self.chunks: list[str] = []
        self.signature_chunks: list[str] = []
        self.citations: list[Citation] = []
        if isinstance(block, Text):
            self.chunks.append(block.text)
            self.citations.extend(block.citations or [])
        elif isinstance(block, ThinkingStart):
            self.chunks.append(block.thinking)
            if block.signature:
                self.signature_chunks.append(block.signature)

    def feed(self, delta: object) -> None:
        block = self.block
        match delta:
            case TextDelta() if isinstance(block, Text):
                self.chunks.append(delta.text)
            case CitationsDelta() if isinstance(block, Text):
                self.citations.append(delta.citation)
            case InputJsonDelta() if isinstance(block, ToolUse | ServerToolUseStart):
                self.chunks.append(delta.partial_json)
            case ThinkingDelta() if isinstance(block, ThinkingStart):
                self.chunks.append(delta.thinking)
            case SignatureDelta() if isinstance(block, ThinkingStart):
                self.signature_chunks.append(delta.signature)
            case _:
                raise ProtocolError(
                    f"Unexpected {getattr(delta, 'type', type(delta).__name__)} "
                    f"for {getattr(block, 'type', type(block).__name__)} block at index {self.index}"
                )

    def _input(self, fallback: dict) -> dict:
        data = "".join(self.chunks)
        if not data:
            return fallback
        try:
            value = json.loads(data)
        except json.JSONDecodeError as exc:
            raise ProtocolError(f"Malformed tool input JSON at index {self.index}: {exc}") from exc
        if not isinstance(value, dict):
            raise ProtocolError(f"Tool input at index {self.index} is not a JSON object: {data}")
        return value

    def build(self) -> Content:
        block = self.block
        match block:
            case Text():
                return block.replace(text="".join(self.chunks), citations=self.citations or None)
            case ToolUse():
                return block.replace(input=self._input(block.input))
            case ServerToolUseStart():
                wire = block.model_dump(mode="json")
                wire["input"] = self._input(block.input)
                try:
                    return codec.decode_content(wire)
                except DecodeError as exc:
                    raise ProtocolError(f"Invalid server tool use at index {self.index}: {exc}") from exc
            case ThinkingStart():
                return ThinkingBlock(thinking="".join(self.chunks), signature="".join(self.signature_chunks))
            case _:
                return block  # type: ignore[return-value]


class MessageAssembler:
    """Folds stream events into a ``MessageResponse``.

    One assembler serves exactly one stream and is not thread safe.

    Usage::

        assembler = MessageAssembler()
        for event in events:
            assembler.feed(event)
        response = assembler.response()
    """

    def __init__(self) -> None:
        self._shell: MessageResponse | None = None
        self._open: dict[int, _BlockBuilder] = {}
        self._finished: dict[int, Content] = {}
        self._usage: Usage | None = None
        self._stop_reason = None
        self._stop_sequence: str | None = None
        self._result: MessageResponse | None = None

    @property
    def started(self) -> bool:
        return self._shell is not None

    @property
    def terminated(self) -> bool:
        return self._result is not None

    def feed(self, event: Event) -> None:
        """Process a single event.

        Raises:
            ProtocolError: The event is out of order for this stream.
            AnthropicApiError: The event is an ``error`` event.
        """
        if self._result is not None:
            raise ProtocolError(f"Received {event.type} after message_stop")

        match event:
            case MessageStart():
                if self._shell is not None:
                    raise ProtocolError("Received a second message_start")
                self._shell = event.message
                self._usage = event.message.usage
                self._stop_reason = event.message.stop_reason
                self._stop_sequence = event.message.stop_sequence
                self._finished = {i: block for i, block in enumerate(event.message.content)}

            case ContentBlockStart():
                self._require_start(event)
                if event.index in self._open or event.index in self._finished:
                    raise ProtocolError(f"Content block {event.index} started twice")
                logger.debug("Content block %d started: %s", event.index, event.content_block.type)
                self._open[event.index] = _BlockBuilder(event.index, event.content_block)

            case ContentBlockDelta():
                self._require_start(event)
                self._builder(event.index, event).feed(event.delta)

            case ContentBlockStop():
                self._require_start(event)
                builder = self._builder(event.index, event)
                self._finished[event.index] = builder.build()
                del self._open[event.index]
                logger.debug("Content block %d stopped", event.index)

            case MessageDelta():
                self._require_start(event)
                if event.delta.stop_reason is not None:
                    self._stop_reason = event.delta.stop_reason
                self._stop_sequence = event.delta.stop_sequence
                assert self._usage is not None  # noqa: S101
                self._usage = self._usage + Usage(input_tokens=0, output_tokens=event.usage.output_tokens)

            case MessageStop():
                self._require_start(event)
                if self._open:
                    raise ProtocolError(f"Content blocks never stopped: {sorted(self._open)}")
                assert self._shell is not None and self._usage is not None  # noqa: S101
                self._result = self._shell.replace(
                    content=[self._finished[i] for i in sorted(self._finished)],
                    stop_reason=self._stop_reason,
                    stop_sequence=self._stop_sequence,
                    usage=self._usage,
                )

            case Ping():
                pass

            case ErrorEvent():
                raise AnthropicApiError(
                    f"{event.error.type}: {event.error.message}",
                    error=event.error,
                    status_code=STREAM_ERROR_STATUS,
                )

    def response(self) -> MessageResponse:
        """The assembled response.

        Raises:
            ProtocolError: No ``message_stop`` has been received.
        """
        if self._result is None:
            raise ProtocolError("No final message_stop event received")
        return self._result

    def _require_start(self, event: Event) -> None:
        if self._shell is None:
            raise ProtocolError(f"Received {event.type} before message_start")

    def _builder(self, index: int, event: Event) -> _BlockBuilder:
        builder = self._open.get(index)
        if builder is None:
            raise ProtocolError(f"Received {event.type} for unknown content block {index}")
        return builder


def assemble_stream(events: Iterable[Event]) -> MessageResponse:
    """Fold a complete event sequence into a ``MessageResponse``."""
    assembler = MessageAssembler()
    for event in events:
        assembler.feed(event)
    return assembler.response()


async def assemble_stream_async(events: AsyncIterable[Event]) -> MessageResponse:
    assembler = MessageAssembler()
    async for event in events:
        assembler.feed(event)
    return assembler.response()


class MessageStream:
    """A live streamed response.

    - Async iterate for raw events: ``async for event in stream: ...``
    - Use ``text_stream`` for text chunks only.
    - Call ``response()`` to consume the remaining events and get the
      assembled ``MessageResponse``.

    Every event passes through the assembler as it is consumed, so an
    ``error`` event raises during iteration. The stream can only be
    consumed once.

    Use ``async with`` (or call ``aclose()``) to release the underlying
    connection when the stream may be abandoned before it is exhausted.
    """

    def __init__(
        self,
        events: AsyncIterator[Event],
        *,
        on_complete: Callable[[MessageResponse], None] | None = None,
        on_close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._events = events
        self._assembler = MessageAssembler()
        self._on_complete = on_complete
        self._on_close = on_close
        self._completed = False

    async def __aenter__(self) -> MessageStream:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the event iterator and release the underlying response."""
        try:
            close = getattr(self._events, "aclose", None)
            if close is not None:
                await close()
        finally:
            if self._on_close is not None:
                await self._on_close()

    def _feed(self, event: Event) -> None:
        self._assembler.feed(event)
        if self._assembler.terminated and not self._completed:
            self._completed = True
            if self._on_complete is not None:
                self._on_complete(self._assembler.response())

    async def _iterate(self) -> AsyncIterator[Event]:
        async for event in self._events:
            self._feed(event)
            yield event

    def __aiter__(self) -> AsyncIterator[Event]:
        return self._iterate()

    @property
    def text_stream(self) -> AsyncIterator[str]:
        return self._text_stream_impl()

    async def _text_stream_impl(self) -> AsyncIterator[str]:
        async for event in self._iterate():
            if isinstance(event, ContentBlockDelta) and isinstance(event.delta, TextDelta):
                yield event.delta.text

    async def response(self) -> MessageResponse:
        """Consume any remaining events and return the assembled response."""
        async for _ in self._iterate():
            pass
        return self._assembler.response()
