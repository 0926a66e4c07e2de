"""Pydantic models shared by the API, the chatbot and the chat client.

Provides type safety, validation, and automatic OpenAPI documentation.

Models:
    - Message: Immutable chat message
    - Session: Conversation context with optional PDF
    - StreamEvent: token / done / error event on the chat stream
    - SendMessageRequest / SendMessageResponse: Synchronous exchange
    - PDFUploadResponse: Upload result
"""

from pdf_chat.models.schemas import (
    CreateSessionRequest,
    CreateSessionResponse,
    Message,
    PDFUploadResponse,
    Role,
    SendMessageRequest,
    SendMessageResponse,
    Session,
    SessionDetailResponse,
    SessionListResponse,
    StreamEvent,
    StreamEventType,
)

__all__ = [
    "CreateSessionRequest",
    "CreateSessionResponse",
    "Message",
    "PDFUploadResponse",
    "Role",
    "SendMessageRequest",
    "SendMessageResponse",
    "Session",
    "SessionDetailResponse",
    "SessionListResponse",
    "StreamEvent",
    "StreamEventType",
]
