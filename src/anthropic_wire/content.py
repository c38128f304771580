"""Content blocks: the units a message is made of.

Every block is an immutable Pydantic model whose ``type`` field holds its
wire tag. ``Content`` is the closed union of all blocks; selection between
variants is done by the functions in ``discriminators``. Use ``replace()``
to derive a modified copy.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Any, ClassVar, Literal

from pydantic import Discriminator, Field, Tag

from .cache import CacheControl
from .discriminators import content_tag, open_tag, web_fetch_content_tag, web_search_content_tag
from .media import Attachment, MediaType
from .tools import CitationsConfig, WebFetch, WebSearch
from .wire import OpenWireModel, WireModel

# ================================================================== #
# Sources
# ================================================================== #


class Base64Source(OpenWireModel):
    type: Literal["base64"] = "base64"
    media_type: str
    data: str


class UrlSource(OpenWireModel):
    type: Literal["url"] = "url"
    url: str


class TextSource(OpenWireModel):
    type: Literal["text"] = "text"
    media_type: str = "text/plain"
    data: str


class FileSource(OpenWireModel):
    type: Literal["file"] = "file"
    file_id: str


class UnknownSource(OpenWireModel):
    """A source kind this client does not know, kept as received."""

    FALLBACK: ClassVar[bool] = True

    type: str


Source = Annotated[
    Annotated[Base64Source, Tag("base64")]
    | Annotated[UrlSource, Tag("url")]
    | Annotated[TextSource, Tag("text")]
    | Annotated[FileSource, Tag("file")]
    | Annotated[UnknownSource, Tag("unknown")],
    Discriminator(open_tag(frozenset({"base64", "url", "text", "file"}))),
]

# ================================================================== #
# Citations
# ================================================================== #


class CharLocation(WireModel):
    """Plain text citation; character indices are 0-based, end exclusive."""

    type: Literal["char_location"] = "char_location"
    cited_text: str
    document_index: int
    document_title: str | None = None
    start_char_index: int
    end_char_index: int


class PageLocation(WireModel):
    """PDF citation; page numbers are 1-based, end exclusive."""

    type: Literal["page_location"] = "page_location"
    cited_text: str
    document_index: int
    document_title: str | None = None
    start_page_number: int
    end_page_number: int


class ContentBlockLocation(WireModel):
    """Custom content citation; block indices are 0-based, end exclusive."""

    type: Literal["content_block_location"] = "content_block_location"
    cited_text: str
    document_index: int
    document_title: str | None = None
    start_block_index: int
    end_block_index: int


class WebSearchResultLocation(WireModel):
    type: Literal["web_search_result_location"] = "web_search_result_location"
    cited_text: str
    url: str
    title: str | None = None
    encrypted_index: str


Citation = Annotated[
    CharLocation | PageLocation | ContentBlockLocation | WebSearchResultLocation,
    Field(discriminator="type"),
]

# ================================================================== #
# Client content blocks
# ================================================================== #


class Text(WireModel):
    TAG: ClassVar[str] = "text"

    type: Literal["text"] = "text"
    text: str
    citations: list[Citation] | None = None
    cache_control: CacheControl | None = None


class Image(WireModel):
    TAG: ClassVar[str] = "image"

    type: Literal["image"] = "image"
    source: Source
    cache_control: CacheControl | None = None

    @classmethod
    def from_bytes(cls, data: bytes, *, cache_control: CacheControl | None = None) -> Image:
        """Build a base64 image, detecting its media type from magic bytes."""
        attachment = Attachment.from_bytes(data)
        if not attachment.media_type.is_image:
            raise ValueError(f"Unsupported image format: {attachment.media_type}")
        return cls(
            source=Base64Source(media_type=attachment.media_type.value, data=attachment.base64),
            cache_control=cache_control,
        )

    @classmethod
    def from_path(cls, path: str | Path, *, cache_control: CacheControl | None = None) -> Image:
        return cls.from_bytes(Path(path).expanduser().read_bytes(), cache_control=cache_control)

    @classmethod
    def from_url(cls, url: str) -> Image:
        return cls(source=UrlSource(url=url))


class Document(WireModel):
    TAG: ClassVar[str] = "document"

    type: Literal["document"] = "document"
    source: Source
    title: str | None = None
    context: str | None = None
    citations: CitationsConfig | None = None
    cache_control: CacheControl | None = None

    @classmethod
    def from_bytes(cls, data: bytes, **fields: Any) -> Document:
        """Build a base64 PDF document; other formats raise ``ValueError``."""
        attachment = Attachment.from_bytes(data)
        if attachment.media_type is not MediaType.PDF:
            raise ValueError(f"Unsupported document format: {attachment.media_type}")
        return cls(source=Base64Source(media_type=attachment.media_type.value, data=attachment.base64), **fields)

    @classmethod
    def from_path(cls, path: str | Path, **fields: Any) -> Document:
        return cls.from_bytes(Path(path).expanduser().read_bytes(), **fields)

    @classmethod
    def from_text(cls, text: str, **fields: Any) -> Document:
        return cls(source=TextSource(data=text), **fields)


class ToolUse(WireModel):
    """A request from the model to run an application tool.

    ``input`` is left as raw JSON; decode it with
    ``ToolRegistry.decode_input``.
    """

    TAG: ClassVar[str] = "tool_use"

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any]
    cache_control: CacheControl | None = None


ToolResultContent = Annotated[
    Annotated[Text, Tag("text")] | Annotated[Image, Tag("image")] | Annotated[Document, Tag("document")],
    Discriminator(content_tag),
]


class ToolResult(WireModel):
    """The application's answer to a ``ToolUse``.

    ``content`` may also be a plain string, the API's shorthand for a
    single text block.
    """

    TAG: ClassVar[str] = "tool_result"

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str
    content: list[ToolResultContent] | str | None = None
    is_error: bool | None = None
    cache_control: CacheControl | None = None

    @property
    def text(self) -> str | None:
        if isinstance(self.content, str):
            return self.content
        texts = [block.text for block in self.content or [] if isinstance(block, Text)]
        return "".join(texts) if texts else None


class ThinkingBlock(WireModel):
    """Extended thinking output. Must be sent back unchanged in follow-up turns."""

    TAG: ClassVar[str] = "thinking"

    type: Literal["thinking"] = "thinking"
    thinking: str
    signature: str
    cache_control: CacheControl | None = None


class RedactedThinkingBlock(WireModel):
    TAG: ClassVar[str] = "redacted_thinking"

    type: Literal["redacted_thinking"] = "redacted_thinking"
    data: str
    cache_control: CacheControl | None = None


# ================================================================== #
# Server tools
# ================================================================== #


class ServerToolUse(WireModel):
    """Invocation of a tool that the API runs itself.

    All server tools share the ``server_tool_use`` tag; ``name`` tells
    them apart.
    """

    type: Literal["server_tool_use"] = "server_tool_use"
    id: str
    name: str
    input: Any
    cache_control: CacheControl | None = None


class WebSearchServerToolUse(ServerToolUse):
    TAG: ClassVar[str] = "server_tool_use:web_search"

    name: Literal["web_search"] = "web_search"
    input: WebSearch.Input


class WebFetchServerToolUse(ServerToolUse):
    TAG: ClassVar[str] = "server_tool_use:web_fetch"

    name: Literal["web_fetch"] = "web_fetch"
    input: WebFetch.Input


class WebSearchResult(WireModel):
    type: Literal["web_search_result"] = "web_search_result"
    title: str
    url: str
    encrypted_content: str
    page_age: str | None = None


class WebSearchErrorCode(StrEnum):
    TOO_MANY_REQUESTS = "too_many_requests"
    INVALID_INPUT = "invalid_input"
    MAX_USES_EXCEEDED = "max_uses_exceeded"
    QUERY_TOO_LONG = "query_too_long"
    UNAVAILABLE = "unavailable"


class WebSearchToolResultError(WireModel):
    TAG: ClassVar[str] = "error"

    type: Literal["web_search_tool_result_error"] = "web_search_tool_result_error"
    error_code: WebSearchErrorCode


WebSearchContent = Annotated[
    Annotated[list[WebSearchResult], Tag("results")] | Annotated[WebSearchToolResultError, Tag("error")],
    Discriminator(web_search_content_tag),
]


class WebSearchToolResult(WireModel):
    """Results of a web search; ``content`` is a result list or an error."""

    TAG: ClassVar[str] = "web_search_tool_result"

    type: Literal["web_search_tool_result"] = "web_search_tool_result"
    tool_use_id: str
    content: WebSearchContent
    cache_control: CacheControl | None = None

    @property
    def results(self) -> list[WebSearchResult]:
        return self.content if isinstance(self.content, list) else []


class WebFetchErrorCode(StrEnum):
    INVALID_INPUT = "invalid_input"
    URL_TOO_LONG = "url_too_long"
    URL_NOT_ALLOWED = "url_not_allowed"
    URL_NOT_ACCESSIBLE = "url_not_accessible"
    TOO_MANY_REQUESTS = "too_many_requests"
    UNSUPPORTED_CONTENT_TYPE = "unsupported_content_type"
    MAX_USES_EXCEEDED = "max_uses_exceeded"
    UNAVAILABLE = "unavailable"


class WebFetchResult(WireModel):
    TAG: ClassVar[str] = "result"

    type: Literal["web_fetch_result"] = "web_fetch_result"
    url: str
    # Kept as sent so the block can be replayed verbatim.
    retrieved_at: str | None = None
    content: Document


class WebFetchToolResultError(WireModel):
    TAG: ClassVar[str] = "error"

    type: Literal["web_fetch_tool_result_error"] = "web_fetch_tool_result_error"
    error_code: WebFetchErrorCode


WebFetchContent = Annotated[
    Annotated[WebFetchResult, Tag("result")] | Annotated[WebFetchToolResultError, Tag("error")],
    Discriminator(web_fetch_content_tag),
]


class WebFetchToolResult(WireModel):
    TAG: ClassVar[str] = "web_fetch_tool_result"

    type: Literal["web_fetch_tool_result"] = "web_fetch_tool_result"
    tool_use_id: str
    content: WebFetchContent
    cache_control: CacheControl | None = None


# ================================================================== #
# The content union
# ================================================================== #

Content = Annotated[
    Annotated[Text, Tag("text")]
    | Annotated[Image, Tag("image")]
    | Annotated[Document, Tag("document")]
    | Annotated[ToolUse, Tag("tool_use")]
    | Annotated[ToolResult, Tag("tool_result")]
    | Annotated[ThinkingBlock, Tag("thinking")]
    | Annotated[RedactedThinkingBlock, Tag("redacted_thinking")]
    | Annotated[WebSearchServerToolUse, Tag("server_tool_use:web_search")]
    | Annotated[WebFetchServerToolUse, Tag("server_tool_use:web_fetch")]
    | Annotated[WebSearchToolResult, Tag("web_search_tool_result")]
    | Annotated[WebFetchToolResult, Tag("web_fetch_tool_result")],
    Discriminator(content_tag),
]

CONTENT_TYPES: tuple[type[WireModel], ...] = (
    Text,
    Image,
    Document,
    ToolUse,
    ToolResult,
    ThinkingBlock,
    RedactedThinkingBlock,
    WebSearchServerToolUse,
    WebFetchServerToolUse,
    WebSearchToolResult,
    WebFetchToolResult,
)


def is_content(value: Any) -> bool:
    return isinstance(value, CONTENT_TYPES)
