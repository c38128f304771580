#!/usr/bin/env python3
"""Example: a minimal tool-use conversation against the real API.

Usage:
    ANTHROPIC_API_KEY=sk-... python examples/tool_loop.py

What it does:
    1. Registers a calculator tool with a ToolRegistry
    2. Streams the first answer and prints text as it arrives
    3. Runs every requested tool and sends the results back
    4. Stops once the model ends its turn without asking for tools
"""

import asyncio
import os
import sys

from pydantic import BaseModel

from anthropic_wire import AnthropicClient, ClientConfig, Message, StopReason, ToolRegistry


class Operation(BaseModel):
    """Evaluate a binary arithmetic operation."""

    a: float
    b: float
    operator: str


registry = ToolRegistry()


@registry.tool("calculator", Operation)
def calculator(op: Operation) -> float:
    if op.operator == "+":
        return op.a + op.b
    if op.operator == "-":
        return op.a - op.b
    if op.operator == "*":
        return op.a * op.b
    if op.operator == "/":
        return op.a / op.b
    raise ValueError(f"Unsupported operator: {op.operator}")


async def main() -> None:
    if not os.environ.get("ANTHROPIC_API_KEY"):
        print("ERROR: Set ANTHROPIC_API_KEY environment variable")
        sys.exit(1)

    conversation = [Message.user("What is (17.5 * 4) / 3? Use the calculator for every step.")]

    async with AnthropicClient(ClientConfig.from_env()) as client:
        for turn in range(1, 6):
            print(f"\n--- turn {turn} ---")
            request = client.new_request(conversation, max_tokens=1024, tools=registry.tools)
            async with await client.stream(request) as stream:
                async for chunk in stream.text_stream:
                    print(chunk, end="", flush=True)
                response = await stream.response()
            print()

            conversation.append(response.as_message())
            if response.stop_reason is not StopReason.TOOL_USE:
                break
            for tool_use in response.tool_uses:
                print(f"  [tool] {tool_use.name}({tool_use.input})")
            conversation.append(await response.use_tools(registry))

        print(f"\nUsage: {client.usage.input_tokens} in / {client.usage.output_tokens} out")
        print(f"Cost:  ${client.cost.total:.6f}")


if __name__ == "__main__":
    asyncio.run(main())
