"""Pydantic models for the chat wire protocol.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: Individual message in the conversation
    - ChatRequest: Incoming relay request payload
    - UpstreamMessage: Filtered message forwarded to the model provider
    - StreamDelta: One newline-delimited JSON record of the response stream
    - ErrorResponse: JSON body for failed requests
"""

from src.models.schemas import (
    ERROR_SENTINEL,
    ChatRequest,
    ErrorResponse,
    Message,
    Role,
    StreamDelta,
    TextDelta,
    UpstreamMessage,
)

__all__ = [
    "ERROR_SENTINEL",
    "ChatRequest",
    "ErrorResponse",
    "Message",
    "Role",
    "StreamDelta",
    "TextDelta",
    "UpstreamMessage",
]
