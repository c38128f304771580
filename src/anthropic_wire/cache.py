"""Prompt caching hints attached to content blocks and tool definitions."""

from __future__ import annotations

from typing import Annotated, ClassVar, Literal

from pydantic import Discriminator, Tag

from .discriminators import open_tag
from .wire import OpenWireModel


class EphemeralCacheControl(OpenWireModel):
    """Cache the prefix up to this block; ``ttl`` is ``"5m"`` or ``"1h"``."""

    type: Literal["ephemeral"] = "ephemeral"
    ttl: str | None = None


class UnknownCacheControl(OpenWireModel):
    """A cache control kind this client does not know, kept as received."""

    FALLBACK: ClassVar[bool] = True

    type: str


CacheControl = Annotated[
    Annotated[EphemeralCacheControl, Tag("ephemeral")] | Annotated[UnknownCacheControl, Tag("unknown")],
    Discriminator(open_tag(frozenset({"ephemeral"}))),
]
