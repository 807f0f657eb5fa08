"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - relay_config: Relay configuration with a test API key
    - fake_upstream: In-memory stand-in for the Anthropic client
    - app: FastAPI app whose relay talks to fake_upstream
    - async_client: HTTPX client for API testing
"""

from collections.abc import AsyncGenerator, Iterable
from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.api.app import create_app
from src.relay.config import RelayConfig
from src.relay.service import RelayService, get_relay_service

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"


def text_event(text: str) -> SimpleNamespace:
    """Build an upstream content_block_delta event carrying text."""
    return SimpleNamespace(
        type="content_block_delta",
        delta=SimpleNamespace(type="text_delta", text=text),
    )


def upstream_response(status_code: int) -> httpx.Response:
    """Build an HTTP response suitable for constructing SDK status errors."""
    return httpx.Response(status_code, request=httpx.Request("POST", ANTHROPIC_URL))


def upstream_request() -> httpx.Request:
    return httpx.Request("POST", ANTHROPIC_URL)


class FakeStream:
    """Async context manager and iterator mimicking a MessageStream."""

    def __init__(
        self,
        events: Iterable[Any],
        open_error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self._events = list(events)
        self._open_error = open_error
        self._stream_error = stream_error
        self.entered = False
        self.closed = False

    async def __aenter__(self) -> "FakeStream":
        if self._open_error is not None:
            raise self._open_error
        self.entered = True
        return self

    async def __aexit__(self, *exc_info: Any) -> bool:
        self.closed = True
        return False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for event in self._events:
            yield event
        if self._stream_error is not None:
            raise self._stream_error


class FakeMessages:
    def __init__(self, stream: FakeStream) -> None:
        self._stream = stream
        self.calls: list[dict[str, Any]] = []

    def stream(self, **kwargs: Any) -> FakeStream:
        self.calls.append(kwargs)
        return self._stream


class FakeAnthropic:
    """Upstream client exposing messages.stream like AsyncAnthropic."""

    def __init__(
        self,
        events: Iterable[Any] = (),
        open_error: Exception | None = None,
        stream_error: Exception | None = None,
    ) -> None:
        self.stream = FakeStream(events, open_error, stream_error)
        self.messages = FakeMessages(self.stream)

    @property
    def calls(self) -> list[dict[str, Any]]:
        return self.messages.calls


@pytest.fixture
def relay_config() -> RelayConfig:
    """Return a relay configuration with a test API key."""
    return RelayConfig(api_key="sk-ant-test", model_name="claude-test", max_tokens=256)


@pytest.fixture
def fake_upstream() -> FakeAnthropic:
    """Upstream client replying "Hi there!" in three fragments."""
    return FakeAnthropic(
        events=[
            SimpleNamespace(type="message_start"),
            SimpleNamespace(type="content_block_start"),
            text_event("Hi"),
            text_event(" there"),
            text_event("!"),
            SimpleNamespace(type="content_block_stop"),
            SimpleNamespace(type="message_stop"),
        ]
    )


def build_app(config: RelayConfig, upstream: FakeAnthropic) -> FastAPI:
    """Create an app whose relay service uses the given fake upstream."""
    application = create_app()
    application.dependency_overrides[get_relay_service] = lambda: RelayService(
        config=config, client=upstream
    )
    return application


@pytest.fixture
def app(relay_config: RelayConfig, fake_upstream: FakeAnthropic) -> FastAPI:
    return build_app(relay_config, fake_upstream)


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
