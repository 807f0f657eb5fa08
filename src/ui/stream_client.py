"""HTTP client for the NDJSON chat relay endpoint."""

import asyncio
import contextlib
import logging
import os
from collections.abc import AsyncGenerator, Callable

import httpx

from src.models.schemas import ChatRequest, Message
from src.ui.ndjson import NDJSONLineBuffer, delta_text, parse_record
from src.ui.session import ChatSession

logger = logging.getLogger(__name__)

CHAT_ENDPOINT = "/api/chat"

# No read timeout: a reply may take arbitrarily long to finish streaming
DEFAULT_TIMEOUT = httpx.Timeout(30.0, read=None)


class ChatStreamError(Exception):
    """Raised when the relay responds without a usable stream."""


def api_base_url() -> str:
    """Return the relay base URL.

    API_BASE_URL wins when set. Otherwise the relay is assumed to run on this
    host on PORT, which is where the integrated server listens.
    """
    return os.getenv("API_BASE_URL") or f"http://127.0.0.1:{os.getenv('PORT', '8000')}"


async def stream_deltas(
    client: httpx.AsyncClient,
    history: list[Message],
) -> AsyncGenerator[str]:
    """POST the history and yield text fragments as they arrive.

    Args:
        client: HTTP client whose base URL points at the relay.
        history: Full conversation including the new user message.

    Yields:
        Non-empty text fragments in arrival order.

    Raises:
        ChatStreamError: If the relay answers with a non-success status.
        httpx.HTTPError: On transport failures, including a mid-stream abort.
    """
    payload = ChatRequest(messages=history).model_dump()

    async with client.stream(
        "POST",
        CHAT_ENDPOINT,
        json=payload,
        headers={"Accept": "application/x-ndjson"},
    ) as response:
        if not response.is_success:
            body = (await response.aread()).decode("utf-8", errors="replace")
            raise ChatStreamError(f"HTTP {response.status_code}: {body[:200]}")

        buffer = NDJSONLineBuffer()
        async for chunk in response.aiter_bytes():
            for line in buffer.feed(chunk):
                record = parse_record(line)
                if record is None:
                    continue
                if text := delta_text(record):
                    yield text

        if remainder := buffer.close():
            logger.warning(f"Discarding unterminated stream fragment ({len(remainder)} chars)")


async def run_chat_turn(
    session: ChatSession,
    text: str,
    on_update: Callable[[], None],
    http_client: httpx.AsyncClient | None = None,
    base_url: str | None = None,
) -> Message | None:
    """Run one request/response cycle for the session.

    The user message is appended before the request is sent and on_update
    is called after every state change so the UI can re-render the pending
    message. Any failure while sending or streaming, including one raised by
    on_update, ends the turn with the error reply so the session never stays
    busy.

    Args:
        session: Conversation state for this page.
        text: The user's input.
        on_update: Called after each state change.
        http_client: Optional client to reuse; one is created otherwise.
        base_url: Relay base URL when no client is given. Defaults to
            api_base_url().

    Returns:
        The appended assistant message (reply or error reply), or None if
        the reply was empty and discarded.
    """
    history = session.begin_turn(text)

    try:
        on_update()

        if http_client is None:
            client_context = httpx.AsyncClient(
                base_url=base_url or api_base_url(), timeout=DEFAULT_TIMEOUT
            )
        else:
            client_context = contextlib.nullcontext(http_client)

        async with client_context as client:
            async for fragment in stream_deltas(client, history):
                session.append_fragment(fragment)
                on_update()
    except (ChatStreamError, httpx.HTTPError) as e:
        logger.error(f"Error in chat: {e}")
    except asyncio.CancelledError:
        logger.info("Chat turn cancelled")
        session.fail_turn()
        raise
    except Exception as e:
        logger.exception(f"Unexpected error in chat turn: {e}")
    else:
        reply = session.finish_turn()
        on_update()
        return reply

    reply = session.fail_turn()
    on_update()
    return reply
