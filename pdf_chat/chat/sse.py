"""Incremental decoder for the chat SSE stream.

Network reads do not line up with frames: one read may carry several frames
or end halfway through one. The decoder keeps the unterminated tail of each
read and prepends it to the next.
"""

import logging

from pydantic import ValidationError

from pdf_chat.models.schemas import StreamEvent

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "


def parse_sse_line(line: str) -> StreamEvent | None:
    """Decode one ``data: {...}`` line.

    Returns:
        The event, or None for non-data lines and malformed payloads.
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None

    try:
        return StreamEvent.model_validate_json(line[len(DATA_PREFIX) :])
    except ValidationError:
        logger.debug(f"Dropping malformed SSE frame: {line[:80]!r}")
        return None


class SSEDecoder:
    """Turns a sequence of text chunks into stream events."""

    def __init__(self) -> None:
        self._buffer = ""

    def feed(self, chunk: str) -> list[StreamEvent]:
        """Add a chunk and return the events completed by it."""
        self._buffer += chunk
        *lines, self._buffer = self._buffer.split("\n")
        return self._decode(lines)

    def flush(self) -> list[StreamEvent]:
        """Decode whatever is left once the stream has ended."""
        tail, self._buffer = self._buffer, ""
        return self._decode([tail])

    def _decode(self, lines: list[str]) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        for line in lines:
            if not line.strip():
                continue
            event = parse_sse_line(line)
            if event is not None:
                events.append(event)
        return events
