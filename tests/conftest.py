# tests/conftest.py
"""
Shared fixtures for gptsession tests.

Network access is replaced by ``httpx.MockTransport``; every handler used
through ``make_client`` records the requests it receives so tests can
assert on the number and content of exchanges.
"""

import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from gptsession.api import GPTClient
from gptsession.config.models import ClientConfig


def completion_body(content: Optional[str] = "Hello!", function_call: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build a chat completion response body."""
    message: Dict[str, Any] = {"role": "assistant"}
    if content is not None:
        message["content"] = content
    if function_call is not None:
        message["function_call"] = function_call
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [{"index": 0, "message": message, "finish_reason": "stop"}],
    }


class RecordingHandler:
    """MockTransport handler that records requests and returns a canned response."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]):
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(token="sk-test", model="gpt-test", max_tokens=64, n=1)


@pytest.fixture
def make_client(client_config):
    """Factory: make_client(responder) -> (client, handler)."""
    clients: List[GPTClient] = []

    def _make(responder: Callable[[httpx.Request], httpx.Response], config: Optional[ClientConfig] = None):
        handler = RecordingHandler(responder)
        client = GPTClient(config=config or client_config, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client, handler

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def ok_client(make_client):
    """A client whose endpoint always answers with a plain completion."""
    return make_client(lambda request: httpx.Response(200, json=completion_body("Hello!")))
