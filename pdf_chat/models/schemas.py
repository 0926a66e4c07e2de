"""Pydantic schemas for sessions, messages, stream events and API payloads."""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["user", "assistant"]


def new_id() -> str:
    """Generate a unique identifier for sessions and messages."""
    return str(uuid.uuid4())


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(UTC).isoformat()


class StreamEventType(str, Enum):
    """Event types carried by the chat stream."""

    TOKEN = "token"
    DONE = "done"
    ERROR = "error"


class StreamEvent(BaseModel):
    """A single event on the chat stream.

    Attributes:
        type: token, done or error.
        data: Token text, error message, or empty string for done.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    type: StreamEventType
    data: str = ""

    @classmethod
    def token(cls, text: str) -> "StreamEvent":
        return cls(type=StreamEventType.TOKEN, data=text)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(type=StreamEventType.DONE, data="")

    @classmethod
    def error(cls, message: str) -> "StreamEvent":
        return cls(type=StreamEventType.ERROR, data=message)

    @property
    def is_terminal(self) -> bool:
        return self.type == StreamEventType.DONE


class Message(BaseModel):
    """A chat message. Immutable once created.

    Attributes:
        id: Unique message identifier.
        session_id: Owning session.
        role: user or assistant.
        content: Message text.
        timestamp: ISO-8601 creation time.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    session_id: str
    role: Role
    content: str
    timestamp: str = Field(default_factory=now_iso)


class Session(BaseModel):
    """A conversation context with an optional PDF attached.

    Attributes:
        id: Unique session identifier.
        title: Display title.
        pdf_file_name: Name of the uploaded PDF, if any.
        pdf_pages: Page count of the uploaded PDF, if any.
        created_at: ISO-8601 creation time.
        updated_at: ISO-8601 time of the last change.
    """

    id: str = Field(default_factory=new_id)
    title: str = "Untitled Session"
    pdf_file_name: str | None = None
    pdf_pages: int | None = Field(default=None, ge=0)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


class CreateSessionRequest(BaseModel):
    title: str | None = Field(None, description="Optional session title")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        """Strip whitespace and treat blank titles as missing."""
        if isinstance(v, str):
            return v.strip() or None
        return v


class CreateSessionResponse(BaseModel):
    session: Session


class SessionListResponse(BaseModel):
    sessions: list[Session]


class SessionDetailResponse(BaseModel):
    session: Session
    messages: list[Message]


class SendMessageRequest(BaseModel):
    """Request payload for the non-streaming message endpoint.

    Both fields are optional at the schema level so that missing values
    produce a 400 from the handler rather than a 422 from validation.
    """

    session_id: str | None = None
    content: str | None = None


class SendMessageResponse(BaseModel):
    """Both halves of a synchronous exchange, in conversation order."""

    user_message: Message
    assistant_message: Message


class PDFUploadResponse(BaseModel):
    """Response after PDF upload processing.

    Attributes:
        success: Whether the upload was accepted.
        file_name: Name of the uploaded file.
        pages: Number of pages in the document.
    """

    success: bool
    file_name: str
    pages: int
