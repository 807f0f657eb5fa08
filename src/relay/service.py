"""Anthropic relay service with streaming support.

Core module for forwarding a conversation to the model provider.

Architecture Decisions:

1. **Stateless per request** - The browser sends the full history on every
   turn. Nothing is stored between requests, so a fresh service (and a fresh
   config read) per request is enough.

2. **Open before respond** - The upstream stream is entered (request sent,
   response headers received) before the HTTP response starts. Setup errors
   such as a bad key or a refused connection can therefore still become a
   JSON error with the right status code instead of a broken stream.

3. **Typed error mapping** - SDK exceptions are classified by type in
   src.relay.errors, never by matching message text.

4. **No retries** - The SDK client is built with max_retries=0 so a failed
   upstream call surfaces immediately.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator, Iterable
from contextlib import AsyncExitStack
from typing import Any

import anthropic

from src.models.schemas import ERROR_SENTINEL, Message, UpstreamMessage
from src.relay.config import RelayConfig, get_relay_config
from src.relay.errors import (
    ConfigurationError,
    EmptyConversationError,
    UnclassifiedUpstreamError,
    classify_upstream_error,
)

logger = logging.getLogger(__name__)


def filter_messages(messages: Iterable[Message]) -> list[UpstreamMessage]:
    """Drop empty and error-placeholder messages, trimming the rest.

    Args:
        messages: Conversation history as received from the client.

    Returns:
        Messages to forward upstream, in their original order.
    """
    return [
        UpstreamMessage(role=msg.role, content=msg.content.strip())
        for msg in messages
        if msg.content.strip() and not msg.content.startswith(ERROR_SENTINEL)
    ]


class RelayService:
    """Service for relaying a conversation to the Anthropic Messages API.

    Wraps the Anthropic SDK with:
    - Message filtering and validation
    - Per-request credential check
    - Clean text-delta streaming interface for the NDJSON endpoint
    - Centralized error classification
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize the relay service.

        Args:
            config: Optional relay configuration.
                    Loads from environment if not provided.
            client: Optional upstream client exposing ``messages.stream``.
                    An AsyncAnthropic client is created when omitted.
        """
        self._config = config or get_relay_config()
        self._client = client

    def _get_client(self) -> Any:
        """Return the upstream client, creating it on first use.

        Raises:
            ConfigurationError: If no API key is configured.
        """
        if not self._config.api_key:
            raise ConfigurationError()

        if self._client is None:
            self._client = anthropic.AsyncAnthropic(
                api_key=self._config.api_key,
                timeout=self._config.timeout,
                max_retries=0,
            )
        return self._client

    async def open_stream(self, messages: list[Message]) -> AsyncIterator[str]:
        """Validate the conversation and open the upstream stream.

        Everything that can fail before the first byte happens here, so the
        caller can still turn the failure into a regular error response.

        Args:
            messages: Full conversation history from the client.

        Returns:
            Async iterator over text fragments in arrival order.

        Raises:
            EmptyConversationError: If no message survives filtering.
            ConfigurationError: If no API key is configured.
            RelayError: If the upstream call could not be opened.
        """
        formatted = filter_messages(messages)
        logger.info(f"Relaying {len(formatted)} of {len(messages)} messages")

        if not formatted:
            raise EmptyConversationError()

        client = self._get_client()

        stack = AsyncExitStack()
        try:
            stream = await stack.enter_async_context(
                client.messages.stream(
                    model=self._config.model_name,
                    max_tokens=self._config.max_tokens,
                    system=self._config.system_prompt,
                    messages=[m.model_dump() for m in formatted],
                )
            )
        except Exception as e:
            await stack.aclose()
            relay_error = classify_upstream_error(e)
            if isinstance(relay_error, UnclassifiedUpstreamError):
                logger.exception("Failed to open upstream stream")
            else:
                logger.warning(f"Upstream request failed: {relay_error.message}")
            raise relay_error from e

        return self._iter_text(stream, stack)

    async def _iter_text(
        self,
        stream: AsyncIterator[Any],
        stack: AsyncExitStack,
    ) -> AsyncGenerator[str]:
        """Yield text deltas from an opened upstream stream.

        Events other than text deltas are dropped. Errors raised mid-stream
        propagate so the outgoing response is aborted.
        """
        fragments = 0
        async with stack:
            try:
                async for event in stream:
                    if event.type != "content_block_delta":
                        continue
                    delta = event.delta
                    if getattr(delta, "type", None) != "text_delta":
                        continue
                    fragments += 1
                    yield delta.text
            except Exception:
                logger.exception(f"Upstream stream failed after {fragments} fragments")
                raise
        logger.info(f"Upstream stream completed with {fragments} fragments")


def get_relay_service() -> RelayService:
    """Create a relay service bound to the current configuration.

    Built per request so that the API key is read at request time.

    Returns:
        A new RelayService instance.
    """
    return RelayService()
