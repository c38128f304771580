"""Tag selection for the polymorphic wire unions.

Each function receives either a raw JSON object (while decoding) or an
already-built model (while encoding) and returns the union tag naming the
variant to use. Returning ``None`` or a tag outside the union makes
Pydantic reject the value, which the codec reports as a ``DecodeError``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel

from .wire import field_of

# Built-in tools are selected by name; their ``type`` carries a dated
# capability version that changes between tool generations.
BUILT_IN_TOOL_TAGS: dict[str, str] = {
    "bash": "bash",
    "computer": "computer",
    "str_replace_based_edit_tool": "text_editor",
    "str_replace_editor": "text_editor",
    "web_search": "web_search",
    "web_fetch": "web_fetch",
}


def _model_tag(value: Any) -> str | None:
    return getattr(value, "TAG", None)


def open_tag(known: frozenset[str]) -> Callable[[Any], str]:
    """Discriminator for open unions: unknown ``type`` values map to ``"unknown"``."""

    def select(value: Any) -> str:
        if getattr(value, "FALLBACK", False):
            return "unknown"
        kind = field_of(value, "type")
        return kind if kind in known else "unknown"

    return select


def content_tag(value: Any) -> str | None:
    """Select a content block variant.

    ``server_tool_use`` is shared by every server tool, so the nested
    ``name`` picks the concrete variant.
    """
    if isinstance(value, BaseModel):
        return _model_tag(value)
    if not isinstance(value, Mapping):
        return None
    kind = value.get("type")
    if kind == "server_tool_use":
        return f"server_tool_use:{value.get('name')}"
    return kind


def block_start_tag(value: Any) -> str | None:
    """Like ``content_tag`` but for the partial blocks announced by ``content_block_start``."""
    if isinstance(value, BaseModel):
        return _model_tag(value)
    if isinstance(value, Mapping) and value.get("type") in ("server_tool_use", "thinking"):
        return f"{value['type']}:start"
    return content_tag(value)


def tool_tag(value: Any) -> str | None:
    """Select a tool definition variant.

    A definition without ``type`` (or with ``type: "custom"``) is a user
    defined tool; built-in tools are told apart by ``name``.
    """
    if isinstance(value, BaseModel):
        return _model_tag(value)
    if not isinstance(value, Mapping):
        return None
    if value.get("type") in (None, "custom"):
        return "custom"
    return BUILT_IN_TOOL_TAGS.get(value.get("name"))


def web_search_content_tag(value: Any) -> str | None:
    """An array is a successful search; an object with ``error_code`` is a failure."""
    if isinstance(value, list | tuple):
        return "results"
    if isinstance(value, BaseModel):
        return _model_tag(value)
    if isinstance(value, Mapping) and "error_code" in value:
        return "error"
    return None


def web_fetch_content_tag(value: Any) -> str | None:
    """An object with ``error_code`` is a failure, any other object a fetched document."""
    if isinstance(value, BaseModel):
        return _model_tag(value)
    if not isinstance(value, Mapping):
        return None
    return "error" if "error_code" in value else "result"
