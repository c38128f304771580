"""Shared fixtures for client tests.

HTTP traffic never leaves the process: every client is built on an
``httpx.MockTransport`` whose handler plays the API.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from anthropic_wire.client import AnthropicClient, ClientConfig
from anthropic_wire.retry import RetryPolicy

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        api_key="sk-ant-test",
        retry_policy=RetryPolicy(max_retries=2, initial_delay=0.0, jitter=False),
    )


@pytest.fixture
def make_client(config: ClientConfig) -> Callable[..., AnthropicClient]:
    """Build a client whose HTTP traffic is answered by ``handler``."""

    def factory(handler: Handler, **overrides: Any) -> AnthropicClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return AnthropicClient(dataclasses.replace(config, **overrides), http_client=http_client)

    return factory
