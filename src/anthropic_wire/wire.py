"""Base models shared by every wire type.

``WireModel`` is immutable and drops absent optional fields when encoded.
``OpenWireModel`` additionally keeps unrecognized JSON keys, exposes them as
``additional_properties`` and writes them back out unchanged (including
explicit ``null`` values).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer


def field_of(value: Any, name: str) -> Any:
    """Read ``name`` from either a raw JSON object or an already-built model."""
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


class WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler: SerializerFunctionWrapHandler) -> Any:
        data = handler(self)
        if not isinstance(data, dict):
            return data
        extra = self.__pydantic_extra__ or {}
        return {key: value for key, value in data.items() if value is not None or key in extra}

    def replace(self, **changes: Any) -> Self:
        """Copy with some fields overridden; the result is validated again."""
        values = {name: getattr(self, name) for name in type(self).model_fields}
        values.update(self.__pydantic_extra__ or {})
        values.update(changes)
        return type(self).model_validate(values)


class OpenWireModel(WireModel):
    model_config = ConfigDict(extra="allow")

    # True for the catch-all variant of an open union.
    FALLBACK: ClassVar[bool] = False

    @property
    def additional_properties(self) -> dict[str, Any]:
        return dict(self.__pydantic_extra__ or {})
