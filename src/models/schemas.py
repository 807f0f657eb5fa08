from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]

# Prefix of the reply the client shows for a failed turn. The relay drops
# history entries starting with it so they never reach the model.
ERROR_SENTINEL = "Sorry, I encountered an error"


class Message(BaseModel):
    """A single chat message in the conversation.

    Attributes:
        id: Opaque client-generated identifier (time-derived).
        role: The speaker, either 'user' or 'assistant'.
        content: The message text, may contain Markdown.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default="", description="Client-generated message identifier")
    role: Role = Field(..., description="Message role: 'user' or 'assistant'")
    content: str = Field(..., description="The message content")


class ChatRequest(BaseModel):
    """Request payload for the chat relay endpoint.

    Attributes:
        messages: Full conversation history including the new user message.
    """

    messages: list[Message]


class UpstreamMessage(BaseModel):
    """A filtered, trimmed message as forwarded to the model provider."""

    role: Role
    content: str


class TextDelta(BaseModel):
    """Incremental text fragment carried by a StreamDelta."""

    type: Literal["text_delta"] = "text_delta"
    text: str


class StreamDelta(BaseModel):
    """One record of the newline-delimited JSON response stream.

    Attributes:
        type: Always 'content_block_delta'.
        delta: The incremental text fragment.
    """

    type: Literal["content_block_delta"] = "content_block_delta"
    delta: TextDelta

    @classmethod
    def from_text(cls, text: str) -> "StreamDelta":
        """Wrap a text fragment in a content_block_delta record."""
        return cls(delta=TextDelta(text=text))

    def to_line(self) -> bytes:
        """Serialize as a single UTF-8 JSON line terminated by a newline."""
        return (self.model_dump_json() + "\n").encode("utf-8")


class ErrorResponse(BaseModel):
    """JSON body returned for every failed relay request.

    Attributes:
        error: User-facing error message.
        details: Optional short classification (usually an exception name).
    """

    error: str
    details: str | None = None
