"""Client side of the chat: stream consumer and chat state machine.

Responsibilities:
    - Message validation against ChatConfig
    - Incremental SSE frame decoding
    - Folding stream events into an observable ChatState
    - Cancellation, partial-failure recovery and the synchronous fallback

Talks to the API only over HTTP (httpx), so it runs equally against a live
server or an in-process ASGI app.
"""

from pdf_chat.chat.client import ChatClient, ChatRequestError
from pdf_chat.chat.sse import SSEDecoder, parse_sse_line
from pdf_chat.chat.types import (
    DEFAULT_CHAT_CONFIG,
    ChatConfig,
    ChatState,
    ConnectionState,
    StreamingMessage,
    ValidationResult,
    validate_message_content,
)

__all__ = [
    "DEFAULT_CHAT_CONFIG",
    "ChatClient",
    "ChatConfig",
    "ChatRequestError",
    "ChatState",
    "ConnectionState",
    "SSEDecoder",
    "StreamingMessage",
    "ValidationResult",
    "parse_sse_line",
    "validate_message_content",
]
