"""Shared test fixtures for the elevenlabs_client test suite.

WHY: Every test needs a configured transport or client whose network is
replaced by an in-process handler, plus a way to inspect the requests the
code under test actually sent.

HOW: httpx.MockTransport stands in for the network. make_transport /
make_client build a transport or client around any handler function and
close it after the test. Recorder is a handler that stores each request
and answers with a canned response.

RULES:
- The real API is never called
- Each test builds its own transport/client (no shared connection state)
- Environment variables touched by tests are restored by monkeypatch
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from elevenlabs_client.api.client import ElevenLabsClient
from elevenlabs_client.api.transport import HttpTransport
from elevenlabs_client.config import API_KEY_ENV, BASE_URL_ENV, ClientConfig

API_KEY = "test-api-key-123"
BASE_URL = "https://api.example.test"

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """MockTransport handler that records requests and returns a fixed response."""

    def __init__(self, response: Optional[Callable[[httpx.Request], httpx.Response]] = None):
        self.requests: List[httpx.Request] = []
        self._response = response or (lambda request: httpx.Response(200, json={}))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._response(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def parse_multipart(request: httpx.Request) -> List[Dict[str, Any]]:
    """Split a multipart/form-data request body into its parts.

    Returns one dict per part with name, filename, content_type, content.
    """
    content_type = request.headers["content-type"]
    assert content_type.startswith("multipart/form-data")
    boundary = content_type.split("boundary=", 1)[1].strip('"').encode()

    parts = []
    for chunk in request.content.split(b"--" + boundary)[1:]:
        if chunk.startswith(b"--"):
            break
        head, _, content = chunk[2:].partition(b"\r\n\r\n")
        name = re.search(rb'; name="([^"]*)"', head)
        filename = re.search(rb'; filename="([^"]*)"', head)
        ctype = re.search(rb"Content-Type: (\S+)", head)
        parts.append({
            "name": name.group(1).decode() if name else None,
            "filename": filename.group(1).decode() if filename else None,
            "content_type": ctype.group(1).decode() if ctype else None,
            "content": content[:-2],
        })
    return parts


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key=API_KEY, base_url=BASE_URL)


@pytest.fixture
def make_transport(config):
    """Factory: HttpTransport whose network is the given handler."""
    created: List[HttpTransport] = []

    def _make(handler: Handler) -> HttpTransport:
        transport = HttpTransport(config, transport=httpx.MockTransport(handler))
        created.append(transport)
        return transport

    yield _make
    for transport in created:
        transport.close()


@pytest.fixture
def make_client(config):
    """Factory: ElevenLabsClient whose network is the given handler."""
    created: List[ElevenLabsClient] = []

    def _make(handler: Handler) -> ElevenLabsClient:
        client = ElevenLabsClient(config, transport=httpx.MockTransport(handler))
        created.append(client)
        return client

    yield _make
    for client in created:
        client.close()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove API key/base URL variables for the test, restoring them afterwards."""
    for name in (API_KEY_ENV, BASE_URL_ENV):
        monkeypatch.setenv(name, "placeholder")
        monkeypatch.delenv(name)
    return monkeypatch
