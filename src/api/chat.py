"""Chat relay endpoint streaming newline-delimited JSON.

Forwards the conversation to the model provider and re-emits each text
fragment as one JSON line.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from src.models.schemas import ChatRequest, ErrorResponse, StreamDelta
from src.relay.service import RelayService, get_relay_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

NDJSON_MEDIA_TYPE = "application/x-ndjson"


async def _ndjson_lines(fragments: AsyncIterator[str]) -> AsyncGenerator[bytes]:
    """Serialize text fragments as newline-delimited JSON records."""
    async for text in fragments:
        yield StreamDelta.from_text(text).to_line()


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        200: {"content": {NDJSON_MEDIA_TYPE: {}}},
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
async def chat(
    request: ChatRequest,
    relay: RelayService = Depends(get_relay_service),
) -> StreamingResponse:
    """Relay a conversation and stream the assistant reply.

    Args:
        request: The full conversation history.
        relay: Relay service bound to the current configuration.

    Returns:
        StreamingResponse of content_block_delta records, one per line.

    Raises:
        400: No valid messages after filtering, or malformed body.
        401: Upstream rejected the API key.
        429: Upstream rate limit.
        500: Missing API key or unclassified upstream error.
        503: Upstream connection failure.
    """
    fragments = await relay.open_stream(request.messages)

    return StreamingResponse(
        _ndjson_lines(fragments),
        media_type=NDJSON_MEDIA_TYPE,
    )
