"""Unit tests for chat client types and message validation."""

import pytest
import pytest_check as check
from pydantic import ValidationError

from pdf_chat.chat.types import (
    ChatConfig,
    ChatState,
    ConnectionState,
    StreamingMessage,
    validate_message_content,
)
from pdf_chat.models.schemas import Message


class TestValidateMessageContent:
    """Tests for length validation of outgoing messages."""

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_rejected(self, content: str) -> None:
        """Blank content fails the default minimum."""
        result = validate_message_content(content)

        check.is_false(result.valid)
        check.equal(result.error, "Message must be at least 1 character(s)")

    def test_single_character_accepted(self) -> None:
        """The minimum length is inclusive."""
        result = validate_message_content("a")

        check.is_true(result.valid)
        check.is_none(result.error)

    def test_maximum_is_inclusive(self) -> None:
        """Exactly max_message_length characters is accepted."""
        check.is_true(validate_message_content("x" * 10000).valid)

    def test_over_maximum_rejected(self) -> None:
        """One character past the maximum is rejected."""
        result = validate_message_content("x" * 10001)

        check.is_false(result.valid)
        check.equal(result.error, "Message must be at most 10000 characters")

    def test_length_measured_after_trim(self) -> None:
        """Surrounding whitespace does not count towards length."""
        config = ChatConfig(max_message_length=3)

        check.is_true(validate_message_content("  abc  ", config).valid)

    def test_custom_minimum(self) -> None:
        """Custom bounds show up in the error message."""
        config = ChatConfig(min_message_length=3)

        result = validate_message_content("ab", config)

        check.equal(result.error, "Message must be at least 3 character(s)")


class TestChatConfig:
    """Tests for client configuration."""

    def test_defaults(self) -> None:
        """Defaults enable streaming with a 10000 character limit."""
        config = ChatConfig()

        check.equal(config.max_message_length, 10000)
        check.equal(config.min_message_length, 1)
        check.is_true(config.enable_streaming)
        check.equal(config.timestamp_format, "relative")

    def test_max_below_min_rejected(self) -> None:
        """max_message_length may not be below min_message_length."""
        with pytest.raises(ValidationError, match="max_message_length"):
            ChatConfig(max_message_length=2, min_message_length=5)

    def test_frozen(self) -> None:
        """Config cannot be mutated after creation."""
        config = ChatConfig()

        with pytest.raises(ValidationError):
            config.enable_streaming = False  # type: ignore[misc]


class TestStreamingMessage:
    """Tests for the in-progress assistant message."""

    def test_append_is_verbatim(self) -> None:
        """Tokens are concatenated with no separator."""
        message = StreamingMessage(session_id="s1")

        message.append("Hello")
        message.append("world")

        check.equal(message.content, "Helloworld")

    def test_progress_counts_tokens(self) -> None:
        """Progress starts at zero and counts every appended token, empty ones included."""
        message = StreamingMessage(session_id="s1")
        check.equal(message.streaming_progress, 0)

        for token in ("Hel", "lo", ""):
            message.append(token)

        check.equal(message.streaming_progress, 3)
        check.equal(message.content, "Hello")

    def test_has_no_separate_streaming_flag(self) -> None:
        """Streaming status is derived from ChatState, not stored per message."""
        message = StreamingMessage(session_id="s1")

        check.is_false("is_streaming" in StreamingMessage.model_fields)
        check.is_true(ChatState(streaming_message=message).is_streaming)

    def test_to_message_keeps_identity(self) -> None:
        """Finalizing keeps id, timestamp and content."""
        streaming = StreamingMessage(session_id="s1", content="partial")

        message = streaming.to_message()

        check.is_instance(message, Message)
        check.equal(message.id, streaming.id)
        check.equal(message.timestamp, streaming.timestamp)
        check.equal(message.content, "partial")
        check.equal(message.role, "assistant")


class TestChatState:
    """Tests for derived state."""

    def test_initial_state(self) -> None:
        """A new state is idle and disconnected."""
        state = ChatState()

        check.equal(state.messages, [])
        check.is_false(state.is_streaming)
        check.equal(state.connection_state, ConnectionState.DISCONNECTED)

    def test_is_streaming_follows_streaming_message(self) -> None:
        """is_streaming is true exactly while a streaming message exists."""
        state = ChatState(streaming_message=StreamingMessage(session_id="s1"))
        check.is_true(state.is_streaming)

        state.streaming_message = None
        check.is_false(state.is_streaming)
