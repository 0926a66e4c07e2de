"""Chat client: sends messages and folds the reply stream into chat state.

Lifecycle of one stream attempt::

    send_message ─► user message appended ─► CONNECTING ─► CONNECTED
        token*  ─► content appended to the streaming message
        done    ─► streaming message finalized into messages
        error   ─► streaming message discarded, error reported, wait for done
        stop_streaming() ─► partial message finalized, read task cancelled

Every attempt ends in exactly one terminal outcome (finalized or discarded)
and fires ``on_stream_end`` exactly once. Failures are folded into
``state.error`` and ``on_error``; public operations do not raise them.

All state lives on one event loop; nothing here is thread-safe.
"""

import asyncio
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

import httpx

from pdf_chat.cancellation import CancellationToken
from pdf_chat.chat.sse import SSEDecoder
from pdf_chat.chat.types import (
    DEFAULT_CHAT_CONFIG,
    ChatConfig,
    ChatState,
    ConnectionState,
    StreamingMessage,
    ValidationResult,
    validate_message_content,
)
from pdf_chat.models.schemas import (
    Message,
    SendMessageResponse,
    SessionDetailResponse,
    StreamEvent,
    StreamEventType,
)

logger = logging.getLogger(__name__)

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")

STREAM_PATH = "/api/messages/stream"
MESSAGES_PATH = "/api/messages"

STREAM_ENDED_EARLY = "Stream ended before completion"

MessageCallback = Callable[[Message], None]
ErrorCallback = Callable[[str], None]
Hook = Callable[[], None]
StateListener = Callable[[ChatState], None]


class ChatRequestError(Exception):
    """Raised when the API answers with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and isinstance(body.get("detail"), str):
        return body["detail"]
    return response.reason_phrase or f"HTTP {response.status_code}"


@dataclass
class _StreamAttempt:
    """Bookkeeping for one stream request."""

    token: CancellationToken
    message: StreamingMessage | None
    task: asyncio.Task | None = None
    errored: bool = False
    settled: bool = False


class ChatClient:
    """Client-side chat state machine for one session.

    Args:
        session_id: Session to chat in.
        http_client: Client pointed at the API. When omitted, one is created
            for ``base_url`` and closed by ``aclose()``.
        base_url: API base URL used when no client is given.
        config: Validation and behavior settings.
        on_message_sent: Called with each user message once appended.
        on_message_received: Called once per completed assistant message.
        on_error: Called with every error message reported to the state.
        on_stream_start: Called when a stream attempt begins.
        on_stream_end: Called exactly once when a stream attempt ends.
    """

    def __init__(
        self,
        session_id: str,
        *,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = API_BASE_URL,
        config: ChatConfig | None = None,
        on_message_sent: MessageCallback | None = None,
        on_message_received: MessageCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_stream_start: Hook | None = None,
        on_stream_end: Hook | None = None,
    ) -> None:
        self.session_id = session_id
        self.config = config or DEFAULT_CHAT_CONFIG
        self.state = ChatState()

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(base_url=base_url, timeout=120.0)
        self._attempt: _StreamAttempt | None = None
        self._listeners: list[StateListener] = []

        self._on_message_sent = on_message_sent
        self._on_message_received = on_message_received
        self._on_error = on_error
        self._on_stream_start = on_stream_start
        self._on_stream_end = on_stream_end

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # --- observable state -------------------------------------------------

    @property
    def messages(self) -> list[Message]:
        return self.state.messages

    @property
    def streaming_message(self) -> StreamingMessage | None:
        return self.state.streaming_message

    @property
    def is_sending(self) -> bool:
        return self.state.is_sending

    @property
    def is_streaming(self) -> bool:
        return self.state.is_streaming

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> str | None:
        return self.state.error

    @property
    def connection_state(self) -> ConnectionState:
        return self.state.connection_state

    @property
    def can_send(self) -> bool:
        return not (self.state.is_sending or self.state.is_streaming or self.state.is_loading)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with the state after every change.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    def _report_error(self, message: str) -> None:
        self.state.error = message
        self._notify()
        if self._on_error:
            self._on_error(message)

    # --- plain operations -------------------------------------------------

    def validate_message(self, content: str) -> ValidationResult:
        return validate_message_content(content, self.config)

    def clear_error(self) -> None:
        self.state.error = None
        self._notify()

    def clear_messages(self) -> None:
        """Drop all messages, any in-flight reply, and the error.

        A running stream keeps reading until its done event, but its reply is
        discarded. The connection state is left alone.
        """
        if self._attempt is not None:
            self._attempt.message = None
        self.state.messages = []
        self.state.streaming_message = None
        self.state.error = None
        self._notify()

    async def fetch_messages(self) -> None:
        """Replace the message list with the session history from the API."""
        self.state.is_loading = True
        self.state.error = None
        self._notify()

        try:
            response = await self._http.get(f"/api/sessions/{self.session_id}")
            if response.is_error:
                raise ChatRequestError(_error_detail(response), response.status_code)
            detail = SessionDetailResponse.model_validate(response.json())
        except (httpx.HTTPError, ChatRequestError, ValueError) as e:
            logger.warning(f"Failed to fetch messages for session {self.session_id}: {e}")
            self.state.is_loading = False
            self._report_error(str(e) or "Failed to fetch messages")
            return

        self.state.messages = list(detail.messages)
        self.state.is_loading = False
        self._notify()

    # --- sending ----------------------------------------------------------

    async def send_message(self, content: str) -> None:
        """Send a message and receive the reply.

        Streams the reply when ``config.enable_streaming`` is set, otherwise
        delegates to :meth:`send_message_sync`. Ignored while a send, stream
        or load is in progress.
        """
        validation = self.validate_message(content)
        if not validation.valid:
            self._report_error(validation.error or "Invalid message")
            return

        if not self.can_send:
            return

        trimmed = content.strip()
        if not self.config.enable_streaming:
            await self.send_message_sync(trimmed)
            return

        self.state.is_sending = True
        self.state.error = None
        self._notify()

        user_message = Message(session_id=self.session_id, role="user", content=trimmed)
        self.state.messages.append(user_message)
        self.state.is_sending = False
        self._notify()

        if self._on_message_sent:
            self._on_message_sent(user_message)

        await self._stream_response(trimmed, user_message.id)

    async def send_message_sync(self, content: str) -> SendMessageResponse | None:
        """Send a message and receive the whole reply in one response.

        Both messages are appended together, user first; no streaming
        message is involved.

        Returns:
            The exchange, or None if validation or the request failed.
        """
        validation = self.validate_message(content)
        if not validation.valid:
            self._report_error(validation.error or "Invalid message")
            return None

        self.state.is_sending = True
        self.state.error = None
        self._notify()

        try:
            response = await self._http.post(
                MESSAGES_PATH,
                json={"session_id": self.session_id, "content": content.strip()},
            )
            if response.is_error:
                raise ChatRequestError(_error_detail(response), response.status_code)
            exchange = SendMessageResponse.model_validate(response.json())
        except (httpx.HTTPError, ChatRequestError, ValueError) as e:
            logger.warning(f"Send failed for session {self.session_id}: {e}")
            self.state.is_sending = False
            self._report_error(str(e) or "Failed to send message")
            return None

        self.state.messages.extend([exchange.user_message, exchange.assistant_message])
        self.state.is_sending = False
        self._notify()

        if self._on_message_sent:
            self._on_message_sent(exchange.user_message)
        if self._on_message_received:
            self._on_message_received(exchange.assistant_message)

        return exchange

    # --- streaming --------------------------------------------------------

    def stop_streaming(self) -> None:
        """Cancel the in-flight stream, keeping the reply received so far.

        No-op when nothing is streaming.
        """
        attempt = self._attempt
        if attempt is None:
            return

        logger.info(f"Stopping stream for session {self.session_id}")
        attempt.token.cancel()
        self._settle(attempt, finalize=True)

    async def aclose(self) -> None:
        """Stop any stream and release the HTTP client if this instance owns it."""
        self.stop_streaming()
        if self._owns_http:
            await self._http.aclose()

    async def _stream_response(self, prompt: str, user_message_id: str) -> None:
        if self._attempt is not None:
            self.stop_streaming()

        attempt = _StreamAttempt(
            token=CancellationToken(),
            message=StreamingMessage(session_id=self.session_id),
        )
        self._attempt = attempt
        self.state.streaming_message = attempt.message
        self.state.connection_state = ConnectionState.CONNECTING
        self._notify()

        if self._on_stream_start:
            self._on_stream_start()

        task = asyncio.ensure_future(self._consume(attempt, prompt, user_message_id))
        attempt.task = task
        attempt.token.on_cancel(lambda: self._abort_task(task))

        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                # Torn down from outside: drop the partial reply quietly.
                attempt.token.cancel()
                self._settle(attempt, finalize=False)
                raise
            # Otherwise stop_streaming() cancelled the read and already settled.
        except (httpx.HTTPError, ChatRequestError) as e:
            logger.warning(f"Stream request failed for session {self.session_id}: {e}")
            self._fail_connection(attempt, str(e) or "Failed to stream response")
        except Exception as e:
            logger.exception(f"Unexpected stream failure for session {self.session_id}")
            self._discard(attempt)
            self._report_error(str(e) or "Failed to stream response")
        finally:
            if not attempt.settled:
                self._settle(attempt, finalize=False)

    @staticmethod
    def _abort_task(task: asyncio.Task) -> None:
        # A task stopping itself just returns at its next cancellation check.
        if task is not asyncio.current_task():
            task.cancel()

    async def _consume(self, attempt: _StreamAttempt, prompt: str, user_message_id: str) -> None:
        params = {
            "session_id": self.session_id,
            "prompt": prompt,
            "message_id": user_message_id,
        }
        async with self._http.stream(
            "GET",
            STREAM_PATH,
            params=params,
            headers={"Accept": "text/event-stream"},
        ) as response:
            if response.is_error:
                await response.aread()
                raise ChatRequestError(
                    f"Stream request failed: {_error_detail(response)}",
                    response.status_code,
                )

            if attempt.token.cancelled:
                return
            self.state.connection_state = ConnectionState.CONNECTED
            self._notify()
            if attempt.token.cancelled:
                return

            decoder = SSEDecoder()
            async for chunk in response.aiter_text():
                for event in decoder.feed(chunk):
                    if self._apply_event(attempt, event):
                        return
                if attempt.token.cancelled:
                    return

            for event in decoder.flush():
                if self._apply_event(attempt, event):
                    return

        if not attempt.errored:
            logger.warning(f"Stream for session {self.session_id} closed without done")
            self._discard(attempt)
            self._report_error(STREAM_ENDED_EARLY)
        self._settle(attempt, finalize=False)

    def _apply_event(self, attempt: _StreamAttempt, event: StreamEvent) -> bool:
        """Fold one event into the state.

        Returns:
            True when the attempt is over and reading should stop.
        """
        if attempt.settled:
            return True

        if event.type == StreamEventType.TOKEN:
            if attempt.message is not None:
                attempt.message.append(event.data)
                self._notify()
            return False

        if event.type == StreamEventType.ERROR:
            attempt.errored = True
            self._discard(attempt)
            self._report_error(event.data or "Stream error")
            return False

        self._settle(attempt, finalize=True)
        return True

    def _discard(self, attempt: _StreamAttempt) -> None:
        attempt.message = None
        if self._attempt is attempt:
            self.state.streaming_message = None
        self._notify()

    def _fail_connection(self, attempt: _StreamAttempt, message: str) -> None:
        if attempt.settled:
            return
        self.state.connection_state = ConnectionState.ERROR
        self._discard(attempt)
        self._report_error(message)
        self._settle(attempt, finalize=False)

    def _settle(self, attempt: _StreamAttempt, *, finalize: bool) -> None:
        """End an attempt: finalize or discard its reply, then reset flags.

        Runs once per attempt; later calls are ignored.
        """
        if attempt.settled:
            return
        attempt.settled = True

        received: Message | None = None
        if finalize and attempt.message is not None:
            received = attempt.message.to_message()
            self.state.messages.append(received)
        attempt.message = None

        if self._attempt is attempt:
            self._attempt = None
            self.state.streaming_message = None
            self.state.connection_state = ConnectionState.DISCONNECTED
        self._notify()

        if received is not None and self._on_message_received:
            self._on_message_received(received)
        if self._on_stream_end:
            self._on_stream_end()
