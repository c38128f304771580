"""Tool registry: typed input decoding and execution of tool uses.

A ``ToolUse`` decoded from a response only carries raw JSON input. The
registry maps tool names to a Pydantic input model and a handler, so the
input can be validated into that model and the handler invoked. The tool
use itself is never modified.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .cache import CacheControl
from .content import Text, ToolResult, ToolUse, is_content
from .errors import ConfigurationError, ToolError
from .tools import DefaultTool

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ToolHandler = Callable[[Any], Any | Awaitable[Any]]


@dataclass(frozen=True)
class RegisteredTool:
    definition: DefaultTool
    input_model: type[BaseModel]
    handler: ToolHandler | None


def input_schema(model: type[BaseModel]) -> dict[str, Any]:
    """JSON schema for a tool input model, without the title and description."""
    schema = model.model_json_schema()
    schema.pop("title", None)
    schema.pop("description", None)
    return schema


class ToolRegistry:
    """Maps tool names to input models and handlers.

    Usage::

        registry = ToolRegistry()

        @registry.tool("get_weather", WeatherInput)
        async def get_weather(request: WeatherInput) -> str:
            return "sunny"

        response = await client.create(MessageRequest.create(..., tools=registry.tools))
        reply = await response.use_tools(registry)
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}

    def register(
        self,
        name: str,
        input_model: type[BaseModel],
        handler: ToolHandler | None = None,
        *,
        description: str | None = None,
        cache_control: CacheControl | None = None,
    ) -> DefaultTool:
        """Register a tool; the description defaults to the input model's docstring."""
        if description is None and input_model.__doc__:
            description = inspect.cleandoc(input_model.__doc__)
        definition = DefaultTool(
            name=name,
            description=description,
            input_schema=input_schema(input_model),
            cache_control=cache_control,
        )
        self._tools[name] = RegisteredTool(definition, input_model, handler)
        return definition

    def tool(
        self,
        name: str,
        input_model: type[M],
        *,
        description: str | None = None,
        cache_control: CacheControl | None = None,
    ) -> Callable[[Callable[[M], Any]], Callable[[M], Any]]:
        """Decorator form of ``register``."""

        def decorator(handler: Callable[[M], Any]) -> Callable[[M], Any]:
            self.register(name, input_model, handler, description=description, cache_control=cache_control)
            return handler

        return decorator

    def get(self, name: str) -> RegisteredTool | None:
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    @property
    def tools(self) -> list[DefaultTool]:
        """Definitions of every registered tool, for a request's ``tools``."""
        return [entry.definition for entry in self._tools.values()]

    def definition(self, name: str) -> DefaultTool:
        entry = self._tools.get(name)
        if entry is None:
            raise ConfigurationError(f"Tool not registered: {name}")
        return entry.definition

    def decode_input(self, tool_use: ToolUse) -> BaseModel:
        """Validate ``tool_use.input`` into the registered input model.

        Raises:
            ToolError: The tool is unknown or the input does not match.
        """
        entry = self._tools.get(tool_use.name)
        if entry is None:
            logger.warning("Response requested unregistered tool %r", tool_use.name)
            raise ToolError(f"Unknown tool: {tool_use.name}", tool_name=tool_use.name)
        try:
            return entry.input_model.model_validate(tool_use.input)
        except ValidationError as exc:
            raise ToolError(f"Invalid input for tool {tool_use.name}: {exc}", tool_name=tool_use.name) from exc

    async def use(self, tool_use: ToolUse) -> ToolResult:
        """Execute ``tool_use`` and wrap the outcome in a ``ToolResult``.

        Any failure, including an unknown tool or invalid input, becomes an
        error result so the model can react to it.
        """
        try:
            tool_input = self.decode_input(tool_use)
            entry = self._tools[tool_use.name]
            if entry.handler is None:
                raise ToolError(f"Tool {tool_use.name} has no handler", tool_name=tool_use.name)
            value = entry.handler(tool_input)
            if inspect.isawaitable(value):
                value = await value
            return ToolResult(tool_use_id=tool_use.id, content=_result_content(value))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Tool %s failed", tool_use.name, exc_info=True)
            return ToolResult(
                tool_use_id=tool_use.id,
                content=[Text(text=str(exc) or type(exc).__name__)],
                is_error=True,
            )


def _result_content(value: Any) -> list[Any] | None:
    if value is None:
        return None
    if is_content(value):
        return [value]
    if isinstance(value, list) and all(is_content(item) for item in value):
        return value
    if isinstance(value, BaseModel):
        return [Text(text=value.model_dump_json())]
    return [Text(text=str(value))]
