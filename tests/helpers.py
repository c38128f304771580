"""Payload builders shared by the client and streaming tests."""

from __future__ import annotations

import json
from typing import Any


def message_payload(text: str = "Hello!", **overrides: Any) -> dict[str, Any]:
    """A complete Messages API response body."""
    body: dict[str, Any] = {
        "id": "msg_01XFDUDYJgAACzvnptvVoYEL",
        "type": "message",
        "role": "assistant",
        "content": [{"type": "text", "text": text}],
        "model": "claude-sonnet-4-5",
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 10, "output_tokens": 20},
    }
    body.update(overrides)
    return body


def error_payload(kind: str, message: str) -> dict[str, Any]:
    return {"type": "error", "error": {"type": kind, "message": message}}


def text_events(*fragments: str, input_tokens: int = 25, output_tokens: int = 15) -> list[dict[str, Any]]:
    """Raw event payloads of a streamed single text block response."""
    start = message_payload(content=[], stop_reason=None, usage={"input_tokens": input_tokens, "output_tokens": 1})
    return [
        {"type": "message_start", "message": start},
        {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
        *[
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": fragment}}
            for fragment in fragments
        ],
        {"type": "content_block_stop", "index": 0},
        {
            "type": "message_delta",
            "delta": {"stop_reason": "end_turn", "stop_sequence": None},
            "usage": {"output_tokens": output_tokens},
        },
        {"type": "message_stop"},
    ]


def sse_body(events: list[dict[str, Any]]) -> bytes:
    """Frame event payloads the way the API sends them."""
    frames = [f"event: {event['type']}\ndata: {json.dumps(event)}\n\n" for event in events]
    return "".join(frames).encode()
