"""Tests for ToolRegistry: typed input decoding and tool execution."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from anthropic_wire.cache import EphemeralCacheControl
from anthropic_wire.codec import decode_response, to_wire
from anthropic_wire.content import Image, Text, ToolResult, ToolUse
from anthropic_wire.errors import ConfigurationError, ToolError
from anthropic_wire.registry import ToolRegistry
from anthropic_wire.types import Role
from tests.helpers import message_payload


class Operands(BaseModel):
    """Add two integers."""

    a: int
    b: int


class Location(BaseModel):
    city: str


def add(operands: Operands) -> int:
    return operands.a + operands.b


PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8

# ================================================================== #
# Registration
# ================================================================== #


class TestRegistration:
    def test_definition_from_model(self):
        registry = ToolRegistry()
        definition = registry.register("add", Operands, add)
        assert definition.name == "add"
        assert definition.description == "Add two integers."
        assert definition.input_schema["type"] == "object"
        assert definition.input_schema["required"] == ["a", "b"]
        assert "title" not in definition.input_schema
        assert registry.tools == [definition]

    def test_explicit_description_and_cache_control(self):
        registry = ToolRegistry()
        definition = registry.register(
            "weather",
            Location,
            description="Current weather",
            cache_control=EphemeralCacheControl(),
        )
        wire = to_wire(definition)
        assert wire["description"] == "Current weather"
        assert wire["cache_control"] == {"type": "ephemeral"}
        assert "type" not in wire

    def test_decorator(self):
        registry = ToolRegistry()

        @registry.tool("weather", Location)
        def weather(location: Location) -> str:
            return f"Sunny in {location.city}"

        assert registry.has("weather")
        assert registry.get("weather").handler is weather
        assert weather(Location(city="Paris")) == "Sunny in Paris"

    def test_definition_of_unknown_tool(self):
        with pytest.raises(ConfigurationError, match="missing"):
            ToolRegistry().definition("missing")


# ================================================================== #
# Input decoding
# ================================================================== #


class TestDecodeInput:
    def test_valid_input(self):
        registry = ToolRegistry()
        registry.register("add", Operands, add)
        decoded = registry.decode_input(ToolUse(id="t1", name="add", input={"a": 1, "b": 2}))
        assert decoded == Operands(a=1, b=2)

    def test_tool_use_is_not_modified(self):
        registry = ToolRegistry()
        registry.register("add", Operands, add)
        tool_use = ToolUse(id="t1", name="add", input={"a": 1, "b": 2})
        registry.decode_input(tool_use)
        assert to_wire(tool_use) == {"type": "tool_use", "id": "t1", "name": "add", "input": {"a": 1, "b": 2}}

    def test_unknown_tool(self):
        with pytest.raises(ToolError, match="Unknown tool: calc") as exc_info:
            ToolRegistry().decode_input(ToolUse(id="t1", name="calc", input={}))
        assert exc_info.value.tool_name == "calc"

    def test_invalid_input(self):
        registry = ToolRegistry()
        registry.register("add", Operands, add)
        with pytest.raises(ToolError, match="Invalid input for tool add"):
            registry.decode_input(ToolUse(id="t1", name="add", input={"a": "one"}))


# ================================================================== #
# Execution
# ================================================================== #


class TestUse:
    @pytest.mark.asyncio
    async def test_sync_handler(self):
        registry = ToolRegistry()
        registry.register("add", Operands, add)
        result = await registry.use(ToolUse(id="t1", name="add", input={"a": 2, "b": 3}))
        assert result == ToolResult(tool_use_id="t1", content=[Text(text="5")])

    @pytest.mark.asyncio
    async def test_async_handler(self):
        registry = ToolRegistry()

        @registry.tool("weather", Location)
        async def weather(location: Location) -> str:
            return f"Sunny in {location.city}"

        result = await registry.use(ToolUse(id="t1", name="weather", input={"city": "Oslo"}))
        assert result.text == "Sunny in Oslo"
        assert result.is_error is None

    @pytest.mark.asyncio
    async def test_none_result_has_no_content(self):
        registry = ToolRegistry()
        registry.register("noop", Location, lambda location: None)
        result = await registry.use(ToolUse(id="t1", name="noop", input={"city": "x"}))
        assert to_wire(result) == {"type": "tool_result", "tool_use_id": "t1"}

    @pytest.mark.asyncio
    async def test_content_results_pass_through(self):
        registry = ToolRegistry()
        image = Image.from_bytes(PNG_BYTES)
        registry.register("snap", Location, lambda location: image)
        registry.register("both", Location, lambda location: [Text(text="here"), image])

        single = await registry.use(ToolUse(id="t1", name="snap", input={"city": "x"}))
        both = await registry.use(ToolUse(id="t2", name="both", input={"city": "x"}))
        assert single.content == [image]
        assert both.content == [Text(text="here"), image]

    @pytest.mark.asyncio
    async def test_model_result_is_json(self):
        registry = ToolRegistry()
        registry.register("echo", Location, lambda location: location)
        result = await registry.use(ToolUse(id="t1", name="echo", input={"city": "Rome"}))
        assert result.text == '{"city":"Rome"}'

    @pytest.mark.asyncio
    async def test_handler_failure_becomes_error_result(self):
        registry = ToolRegistry()

        def explode(location: Location) -> str:
            raise RuntimeError("weather service down")

        registry.register("weather", Location, explode)
        result = await registry.use(ToolUse(id="t1", name="weather", input={"city": "x"}))
        assert result.is_error is True
        assert result.content == [Text(text="weather service down")]

    @pytest.mark.asyncio
    async def test_unknown_tool_becomes_error_result(self):
        result = await ToolRegistry().use(ToolUse(id="t1", name="calc", input={}))
        assert result.is_error is True
        assert result.text == "Unknown tool: calc"

    @pytest.mark.asyncio
    async def test_missing_handler_becomes_error_result(self):
        registry = ToolRegistry()
        registry.register("add", Operands)
        result = await registry.use(ToolUse(id="t1", name="add", input={"a": 1, "b": 1}))
        assert result.is_error is True
        assert "no handler" in result.text

    @pytest.mark.asyncio
    async def test_response_use_tools(self):
        registry = ToolRegistry()
        registry.register("add", Operands, add)
        response = decode_response(
            message_payload(
                content=[
                    {"type": "text", "text": "Adding."},
                    {"type": "tool_use", "id": "t1", "name": "add", "input": {"a": 1, "b": 2}},
                    {"type": "tool_use", "id": "t2", "name": "add", "input": {"a": 3, "b": 4}},
                ],
                stop_reason="tool_use",
            )
        )
        reply = await response.use_tools(registry)
        assert reply.role is Role.USER
        assert [result.tool_use_id for result in reply.content] == ["t1", "t2"]
        assert [result.text for result in reply.content] == ["3", "7"]
