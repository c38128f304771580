"""Media type detection from leading magic bytes.

Used to validate attachments before they are base64 encoded into
image and document sources.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path


class MediaType(StrEnum):
    PDF = "application/pdf"
    JPEG = "image/jpeg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"

    @property
    def is_image(self) -> bool:
        return self is not MediaType.PDF


# (media type, offset, magic bytes); every entry must match at its offset.
_SIGNATURES: tuple[tuple[MediaType, tuple[tuple[int, bytes], ...]], ...] = (
    (MediaType.PDF, ((0, b"%PDF-"),)),
    (MediaType.JPEG, ((0, b"\xff\xd8\xff"),)),
    (MediaType.PNG, ((0, b"\x89PNG\r\n\x1a\n"),)),
    (MediaType.GIF, ((0, b"GIF8"),)),
    (MediaType.WEBP, ((0, b"RIFF"), (8, b"WEBP"))),
)


def detect_media_type(data: bytes) -> MediaType | None:
    """Return the media type whose signature prefixes ``data``, if any.

    Inputs shorter than a signature never match it.
    """
    for media_type, parts in _SIGNATURES:
        if all(data[offset : offset + len(magic)] == magic for offset, magic in parts):
            return media_type
    return None


@dataclass(frozen=True)
class Attachment:
    """Raw bytes paired with their detected media type."""

    data: bytes
    media_type: MediaType

    @property
    def base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @classmethod
    def from_bytes(cls, data: bytes) -> Attachment:
        media_type = detect_media_type(data)
        if media_type is None:
            raise ValueError("Unsupported attachment: no known magic number found")
        return cls(data=data, media_type=media_type)

    @classmethod
    def from_path(cls, path: str | Path) -> Attachment:
        return cls.from_bytes(Path(path).expanduser().read_bytes())
