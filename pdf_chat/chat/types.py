"""Chat client types: configuration, validation and UI state."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pdf_chat.models.schemas import Message, Role, new_id, now_iso


class ConnectionState(str, Enum):
    """Connection state of the reply stream."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class ChatConfig(BaseModel):
    """Validation and behavior settings for one chat client.

    Attributes:
        max_message_length: Longest accepted message after trimming.
        min_message_length: Shortest accepted message after trimming.
        enable_streaming: Stream replies; otherwise use the synchronous endpoint.
        auto_scroll: Scroll to new messages (display only).
        show_timestamps: Show message timestamps (display only).
        timestamp_format: relative or absolute (display only).
    """

    model_config = ConfigDict(frozen=True)

    max_message_length: int = Field(default=10000, ge=0)
    min_message_length: int = Field(default=1, ge=0)
    enable_streaming: bool = True
    auto_scroll: bool = True
    show_timestamps: bool = True
    timestamp_format: Literal["relative", "absolute"] = "relative"

    @model_validator(mode="after")
    def check_length_bounds(self) -> Self:
        """Require max_message_length >= min_message_length."""
        if self.max_message_length < self.min_message_length:
            raise ValueError(
                "max_message_length must be greater than or equal to min_message_length"
            )
        return self


DEFAULT_CHAT_CONFIG = ChatConfig()


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


def validate_message_content(
    content: str,
    config: ChatConfig = DEFAULT_CHAT_CONFIG,
) -> ValidationResult:
    """Check trimmed content length against the config (bounds inclusive)."""
    trimmed = content.strip()

    if len(trimmed) < config.min_message_length:
        return ValidationResult(
            valid=False,
            error=f"Message must be at least {config.min_message_length} character(s)",
        )

    if len(trimmed) > config.max_message_length:
        return ValidationResult(
            valid=False,
            error=f"Message must be at most {config.max_message_length} characters",
        )

    return ValidationResult(valid=True)


class StreamingMessage(BaseModel):
    """An assistant message still being assembled from stream tokens.

    Exists only while its stream is in flight, so there is no separate
    "still streaming" flag; ChatState.is_streaming derives that.

    Attributes:
        streaming_progress: Number of tokens appended so far.
    """

    id: str = Field(default_factory=new_id)
    session_id: str
    role: Role = "assistant"
    content: str = ""
    timestamp: str = Field(default_factory=now_iso)
    streaming_progress: int = Field(default=0, ge=0)

    def append(self, token: str) -> None:
        self.content += token
        self.streaming_progress += 1

    def to_message(self) -> Message:
        """Freeze into an immutable Message, dropping the progress counter."""
        return Message(
            id=self.id,
            session_id=self.session_id,
            role=self.role,
            content=self.content,
            timestamp=self.timestamp,
        )


@dataclass
class ChatState:
    """Observable chat UI state.

    ``is_streaming`` is derived from ``streaming_message`` so the two can
    never disagree.
    """

    messages: list[Message] = field(default_factory=list)
    streaming_message: StreamingMessage | None = None
    is_sending: bool = False
    is_loading: bool = False
    error: str | None = None
    connection_state: ConnectionState = ConnectionState.DISCONNECTED

    @property
    def is_streaming(self) -> bool:
        return self.streaming_message is not None
