"""Shared pytest fixtures for the chaosmonkey test suite."""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest

from chaosmonkey.config import ENV_ENDPOINT, ENV_PASSWORD, ENV_USERNAME, ClientConfig
from chaosmonkey.core import ChaosMonkey

ENDPOINT = "http://chaos.example.com:8080"

# ---------------------------------------------------------------------------
# Fake Chaos Monkey server
# ---------------------------------------------------------------------------


class FakeServer:
    """``httpx.MockTransport`` handler that records requests.

    Set ``response`` to the reply to send, or ``error`` to an exception to
    raise instead.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.response = httpx.Response(200, json=[])
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


class TrackingStream(httpx.SyncByteStream):
    """Response body that remembers whether it was closed."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        yield self._data

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CHAOSMONKEY_* variables of the developer's shell out of the tests."""
    for name in (ENV_ENDPOINT, ENV_USERNAME, ENV_PASSWORD):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def server() -> FakeServer:
    """A fresh FakeServer replying 200 with an empty event list."""
    return FakeServer()


@pytest.fixture()
def http_client(server: FakeServer) -> httpx.Client:
    """An httpx.Client wired to *server*."""
    return httpx.Client(transport=httpx.MockTransport(server))


@pytest.fixture()
def client(http_client: httpx.Client) -> ChaosMonkey:
    """A ChaosMonkey client without credentials talking to the fake server."""
    return ChaosMonkey(ClientConfig(endpoint=ENDPOINT, http_client=http_client))


@pytest.fixture()
def event_data() -> dict[str, object]:
    """A single event as returned by the API."""
    return {
        "monkeyType": "CHAOS",
        "eventId": "i-12345678",
        "eventType": "CHAOS_TERMINATION",
        "eventTime": 1500000000999,
        "region": "us-east-1",
        "groupType": "ASG",
        "groupName": "my-asg",
        "chaosType": "ShutdownInstance",
    }
