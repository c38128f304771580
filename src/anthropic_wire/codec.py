"""JSON encoding and decoding of every wire type.

``encode`` turns any model (or list of models) into JSON text with absent
optional fields omitted. The ``decode_*`` functions accept JSON text,
bytes or an already parsed object and raise ``DecodeError`` naming the
offending fields when the input does not match.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .cache import CacheControl
from .content import Citation, Content, Source
from .errors import DecodeError
from .events import Event
from .tools import Tool, UserLocation
from .types import Message, MessageRequest, Response

T = TypeVar("T")

_CONTENT: TypeAdapter[Content] = TypeAdapter(Content)
_CONTENT_LIST: TypeAdapter[list[Content]] = TypeAdapter(list[Content])
_TOOL: TypeAdapter[Tool] = TypeAdapter(Tool)
_EVENT: TypeAdapter[Event] = TypeAdapter(Event)
_RESPONSE: TypeAdapter[Response] = TypeAdapter(Response)
_SOURCE: TypeAdapter[Source] = TypeAdapter(Source)
_CACHE_CONTROL: TypeAdapter[CacheControl] = TypeAdapter(CacheControl)
_USER_LOCATION: TypeAdapter[UserLocation] = TypeAdapter(UserLocation)
_CITATION: TypeAdapter[Citation] = TypeAdapter(Citation)


def to_wire(value: Any) -> Any:
    """Convert a model, or a list of models, to plain JSON-compatible data."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Sequence) and not isinstance(value, str | bytes):
        return [to_wire(item) for item in value]
    return value


def encode(value: Any, *, indent: int | None = None) -> str:
    """Serialize ``value`` to JSON text."""
    return json.dumps(to_wire(value), indent=indent, ensure_ascii=False)


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def _parse(data: str | bytes | Any, target: str) -> Any:
    if not isinstance(data, str | bytes | bytearray):
        return data
    try:
        return json.loads(data)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON for {target}: {exc}", element=data, target=target) from exc


def _decode(adapter: TypeAdapter[T], data: str | bytes | Any, target: str) -> T:
    element = _parse(data, target)
    try:
        return adapter.validate_python(element)
    except ValidationError as exc:
        kind = element.get("type") if isinstance(element, Mapping) else None
        detail = f" (type {kind!r})" if kind is not None else ""
        raise DecodeError(
            f"Cannot decode {target}{detail}: {_describe(exc)}; element: {element}",
            element=element,
            target=target,
        ) from exc


def decode_content(data: str | bytes | Any) -> Content:
    return _decode(_CONTENT, data, "Content")


def decode_content_list(data: str | bytes | Any) -> list[Content]:
    return _decode(_CONTENT_LIST, data, "list[Content]")


def decode_tool(data: str | bytes | Any) -> Tool:
    return _decode(_TOOL, data, "Tool")


def decode_event(data: str | bytes | Any) -> Event:
    return _decode(_EVENT, data, "Event")


def decode_response(data: str | bytes | Any) -> Response:
    """Decode a top-level API response: a message, a batch or an error."""
    return _decode(_RESPONSE, data, "Response")


def decode_source(data: str | bytes | Any) -> Source:
    return _decode(_SOURCE, data, "Source")


def decode_cache_control(data: str | bytes | Any) -> CacheControl:
    return _decode(_CACHE_CONTROL, data, "CacheControl")


def decode_user_location(data: str | bytes | Any) -> UserLocation:
    return _decode(_USER_LOCATION, data, "UserLocation")


def decode_citation(data: str | bytes | Any) -> Citation:
    return _decode(_CITATION, data, "Citation")


def decode_message(data: str | bytes | Any) -> Message:
    return _decode(TypeAdapter(Message), data, "Message")


def decode_request(data: str | bytes | Any) -> MessageRequest:
    return _decode(TypeAdapter(MessageRequest), data, "MessageRequest")


def decode_as(model: type[T], data: str | bytes | Any) -> T:
    """Decode into any wire model class."""
    return _decode(TypeAdapter(model), data, model.__name__)
