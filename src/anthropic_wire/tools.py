"""Tool definitions sent with a request, and tool choice.

User defined tools carry a JSON schema for their input. Built-in tools
(bash, computer, text editor, web search, web fetch) have a fixed ``name``
and a dated ``type``, and describe the input the model may send them
through a nested ``Input`` model.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, ClassVar, Literal

from pydantic import Discriminator, Field, Tag

from .cache import CacheControl
from .discriminators import open_tag, tool_tag
from .wire import OpenWireModel, WireModel

# ================================================================== #
# User location (web search)
# ================================================================== #


class ApproximateLocation(OpenWireModel):
    type: Literal["approximate"] = "approximate"
    city: str | None = None
    region: str | None = None
    country: str | None = None
    timezone: str | None = None


class UnknownUserLocation(OpenWireModel):
    FALLBACK: ClassVar[bool] = True

    type: str


UserLocation = Annotated[
    Annotated[ApproximateLocation, Tag("approximate")] | Annotated[UnknownUserLocation, Tag("unknown")],
    Discriminator(open_tag(frozenset({"approximate"}))),
]

# ================================================================== #
# Tool definitions
# ================================================================== #


class DefaultTool(WireModel):
    """A tool implemented by the application."""

    TAG: ClassVar[str] = "custom"

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = None
    type: Literal["custom"] | None = None
    cache_control: CacheControl | None = None


class BuiltInTool(WireModel):
    name: str
    type: str
    cache_control: CacheControl | None = None


class Bash(BuiltInTool):
    TAG: ClassVar[str] = "bash"

    name: Literal["bash"] = "bash"
    type: str = "bash_20250124"

    class Input(WireModel):
        command: str | None = None
        restart: bool | None = None


class ComputerAction(StrEnum):
    KEY = "key"
    TYPE = "type"
    MOUSE_MOVE = "mouse_move"
    LEFT_CLICK = "left_click"
    LEFT_CLICK_DRAG = "left_click_drag"
    RIGHT_CLICK = "right_click"
    MIDDLE_CLICK = "middle_click"
    DOUBLE_CLICK = "double_click"
    TRIPLE_CLICK = "triple_click"
    SCREENSHOT = "screenshot"
    CURSOR_POSITION = "cursor_position"
    SCROLL = "scroll"
    WAIT = "wait"


class Computer(BuiltInTool):
    TAG: ClassVar[str] = "computer"

    name: Literal["computer"] = "computer"
    type: str = "computer_20250124"
    display_width_px: int
    display_height_px: int
    display_number: int | None = None

    class Input(WireModel):
        action: ComputerAction
        coordinate: tuple[int, int] | None = None
        text: str | None = None
        scroll_direction: str | None = None
        scroll_amount: int | None = None
        duration: float | None = None


class TextEditorCommand(StrEnum):
    VIEW = "view"
    CREATE = "create"
    STR_REPLACE = "str_replace"
    INSERT = "insert"
    UNDO_EDIT = "undo_edit"


class TextEditor(BuiltInTool):
    """File viewing and editing tool.

    Older generations call it ``str_replace_editor``; both names decode here.
    """

    TAG: ClassVar[str] = "text_editor"

    name: Literal["str_replace_based_edit_tool", "str_replace_editor"] = "str_replace_based_edit_tool"
    type: str = "text_editor_20250728"
    max_characters: int | None = None

    class Input(WireModel):
        command: TextEditorCommand
        path: str
        file_text: str | None = None
        insert_line: int | None = None
        new_str: str | None = None
        old_str: str | None = None
        view_range: list[int] | None = None


class WebSearch(BuiltInTool):
    """Server side web search, executed by the API."""

    TAG: ClassVar[str] = "web_search"

    name: Literal["web_search"] = "web_search"
    type: str = "web_search_20250305"
    max_uses: int | None = None
    allowed_domains: list[str] | None = None
    blocked_domains: list[str] | None = None
    user_location: UserLocation | None = None

    class Input(WireModel):
        query: str


class CitationsConfig(WireModel):
    enabled: bool = True


class WebFetch(BuiltInTool):
    """Server side URL fetch, executed by the API."""

    TAG: ClassVar[str] = "web_fetch"

    name: Literal["web_fetch"] = "web_fetch"
    type: str = "web_fetch_20250910"
    max_uses: int | None = None
    allowed_domains: list[str] | None = None
    blocked_domains: list[str] | None = None
    citations: CitationsConfig | None = None
    max_content_tokens: int | None = None

    class Input(WireModel):
        url: str


Tool = Annotated[
    Annotated[DefaultTool, Tag("custom")]
    | Annotated[Bash, Tag("bash")]
    | Annotated[Computer, Tag("computer")]
    | Annotated[TextEditor, Tag("text_editor")]
    | Annotated[WebSearch, Tag("web_search")]
    | Annotated[WebFetch, Tag("web_fetch")],
    Discriminator(tool_tag),
]

# ================================================================== #
# Tool choice
# ================================================================== #


class ToolChoiceAuto(WireModel):
    type: Literal["auto"] = "auto"
    disable_parallel_tool_use: bool | None = None


class ToolChoiceAny(WireModel):
    type: Literal["any"] = "any"
    disable_parallel_tool_use: bool | None = None


class ToolChoiceTool(WireModel):
    type: Literal["tool"] = "tool"
    name: str
    disable_parallel_tool_use: bool | None = None


class ToolChoiceNone(WireModel):
    type: Literal["none"] = "none"
    disable_parallel_tool_use: bool | None = None


ToolChoice = Annotated[
    ToolChoiceAuto | ToolChoiceAny | ToolChoiceTool | ToolChoiceNone,
    Field(discriminator="type"),
]
