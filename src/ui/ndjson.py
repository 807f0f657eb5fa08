"""Incremental newline-delimited JSON reader.

Turns raw body chunks into parsed JSON records. Multi-byte characters
split across chunks are held back by the UTF-8 decoder, and a line split
across chunks is held back by the line buffer, so every record is parsed
exactly once and only when complete.
"""

import codecs
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

RECORD_DELIMITER = "\n"


class NDJSONLineBuffer:
    """Reassembles complete lines from a chunked UTF-8 byte stream."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received after the last delimiter."""
        return self._buffer

    def feed(self, chunk: bytes) -> list[str]:
        """Add a chunk and return the non-blank lines it completed.

        Args:
            chunk: Next slice of the response body.

        Returns:
            Complete lines, without delimiters, in arrival order.
        """
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split(RECORD_DELIMITER)
        return [line for line in lines if line.strip()]

    def close(self) -> str:
        """Flush the decoder and return the unterminated remainder.

        The remainder is not a complete record and must not be parsed.
        """
        remainder = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return remainder


def parse_record(line: str) -> dict[str, Any] | None:
    """Parse one line as a JSON object, returning None if it is malformed."""
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        logger.warning(f"Error parsing streaming response line: {e}")
        return None

    if not isinstance(record, dict):
        logger.warning(f"Skipping non-object stream record: {line[:80]!r}")
        return None
    return record


def delta_text(record: dict[str, Any]) -> str | None:
    """Return the text of a content_block_delta record, if it carries any."""
    if record.get("type") != "content_block_delta":
        return None
    delta = record.get("delta")
    if not isinstance(delta, dict):
        return None
    text = delta.get("text")
    if not isinstance(text, str) or not text:
        return None
    return text
