"""Client-side conversation state.

ChatSession owns the message list for one page session and moves through
one explicit state machine per turn:

    IDLE -> SENDING -> STREAMING -> (COMMITTED | DISCARDED) -> IDLE
    SENDING | STREAMING -> FAILED -> IDLE
"""

import time
from enum import Enum

from src.models.schemas import ERROR_SENTINEL, Message

ERROR_REPLY = f"{ERROR_SENTINEL}. Please check your API key and try again."


class TurnState(str, Enum):
    """States of a single chat turn."""

    IDLE = "idle"
    SENDING = "sending"
    STREAMING = "streaming"
    COMMITTED = "committed"
    DISCARDED = "discarded"
    FAILED = "failed"


class TurnInProgressError(RuntimeError):
    """Raised when a turn is started while another one is outstanding."""


class ChatSession:
    """Manages chat state for a user session."""

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self.pending: Message | None = None
        self.state: TurnState = TurnState.IDLE
        self.last_outcome: TurnState | None = None
        self._last_id = 0
        self._pending_id = ""

    @property
    def is_busy(self) -> bool:
        return self.state is not TurnState.IDLE

    @property
    def visible_messages(self) -> list[Message]:
        """Committed history followed by the pending message, if any."""
        if self.pending is None:
            return list(self.messages)
        return [*self.messages, self.pending]

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped to stay unique within one session
        self._last_id = max(time.time_ns() // 1_000_000, self._last_id + 1)
        return str(self._last_id)

    def begin_turn(self, text: str) -> list[Message]:
        """Optimistically append a user message and enter SENDING.

        Args:
            text: Raw user input; surrounding whitespace is trimmed.

        Returns:
            The history to send, including the new user message.

        Raises:
            TurnInProgressError: If a turn is already outstanding.
            ValueError: If the input is blank.
        """
        if self.is_busy:
            raise TurnInProgressError(f"Cannot start a turn while {self.state.value}")
        content = text.strip()
        if not content:
            raise ValueError("Message is empty")

        self.messages.append(Message(id=self._next_id(), role="user", content=content))
        self.pending = None
        self._pending_id = self._next_id()
        self.state = TurnState.SENDING
        self.last_outcome = None
        return list(self.messages)

    def append_fragment(self, text: str) -> Message:
        """Grow the pending assistant message by one fragment."""
        if self.state not in (TurnState.SENDING, TurnState.STREAMING):
            raise RuntimeError("No turn is streaming")
        self.state = TurnState.STREAMING
        content = self.pending.content if self.pending else ""
        self.pending = Message(id=self._pending_id, role="assistant", content=content + text)
        return self.pending

    def finish_turn(self) -> Message | None:
        """Close the stream, committing the pending message if non-empty.

        Returns:
            The committed assistant message, or None if it was discarded.
        """
        pending, self.pending = self.pending, None
        committed: Message | None = None

        if pending is not None and pending.content.strip():
            self.messages.append(pending)
            committed = pending
            self.last_outcome = TurnState.COMMITTED
        else:
            self.last_outcome = TurnState.DISCARDED

        self.state = TurnState.IDLE
        return committed

    def fail_turn(self) -> Message:
        """Abandon the pending message and append the error reply."""
        self.pending = None
        error_message = Message(id=self._next_id(), role="assistant", content=ERROR_REPLY)
        self.messages.append(error_message)
        self.last_outcome = TurnState.FAILED
        self.state = TurnState.IDLE
        return error_message

    def reset(self) -> None:
        """Start a new conversation. Not allowed mid-turn."""
        if self.is_busy:
            raise TurnInProgressError("Cannot clear the conversation mid-turn")
        self.messages.clear()
        self.pending = None
        self.last_outcome = None


class PanelState:
    """Open/closed state of the floating assistant panel."""

    def __init__(self, is_open: bool = False) -> None:
        self.is_open = is_open

    def toggle(self) -> None:
        self.is_open = not self.is_open
