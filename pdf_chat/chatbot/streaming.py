"""Stream event encoder for chat replies.

Turns a prompt into the ordered event sequence the SSE endpoint writes out:

    token* done          normal reply
    done                 blank reply
    error done           generation or tokenization failed

The encoder is an explicit state machine pulled by the transport's write
loop through the async-iterator protocol. Pacing happens inside each pull,
so the event loop is free between events.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from pdf_chat.cancellation import CancellationToken
from pdf_chat.chatbot.config import ChatbotConfig
from pdf_chat.chatbot.generator import generate_response, tokenize
from pdf_chat.models.schemas import StreamEvent

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "
SSE_FRAME_END = "\n\n"

FALLBACK_ERROR = "unknown error in chatbot"

GenerateFn = Callable[[str, str], str]
TokenizeFn = Callable[[str, int], list[str]]


class EncoderState(str, Enum):
    STARTING = "starting"
    EMITTING_TOKENS = "emitting_tokens"
    ERRORED = "errored"
    COMPLETE = "complete"


def format_sse_frame(event: StreamEvent) -> str:
    """Serialize an event as ``data: <compact json>\\n\\n``."""
    return f"{SSE_DATA_PREFIX}{event.model_dump_json()}{SSE_FRAME_END}"


class StreamEncoder:
    """Pull-based producer of stream events for one request.

    Finite and not restartable: once COMPLETE every pull raises
    StopAsyncIteration. Create a fresh encoder per request.

    Args:
        session_id: Session the reply belongs to (seeds the generator).
        prompt: User prompt.
        config: Pacing and chunking settings.
        generate: Reply generator, ``(session_id, prompt) -> text``.
        tokenizer: Chunker, ``(text, chunk_size) -> chunks``.
        cancel_token: Checked before every pull; once cancelled the encoder
            completes without emitting anything further.
    """

    def __init__(
        self,
        session_id: str,
        prompt: str,
        *,
        config: ChatbotConfig | None = None,
        generate: GenerateFn = generate_response,
        tokenizer: TokenizeFn = tokenize,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        self._session_id = session_id
        self._prompt = prompt
        self._config = config or ChatbotConfig()
        self._generate = generate
        self._tokenize = tokenizer
        self._cancel_token = cancel_token or CancellationToken()
        self._state = EncoderState.STARTING
        self._tokens: list[str] = []
        self._cursor = 0
        self._errored = False
        self.text: str | None = None

    @property
    def state(self) -> EncoderState:
        return self._state

    @property
    def succeeded(self) -> bool:
        """True once the stream completed without an error event."""
        return self._state is EncoderState.COMPLETE and not self._errored

    def __aiter__(self) -> "StreamEncoder":
        return self

    async def __anext__(self) -> StreamEvent:
        if self._cancel_token.cancelled and self._state is not EncoderState.COMPLETE:
            logger.info(f"Stream cancelled for session {self._session_id}")
            self._state = EncoderState.COMPLETE
            self._errored = True

        if self._state is EncoderState.STARTING:
            return await self._start()

        if self._state is EncoderState.EMITTING_TOKENS:
            if self._cursor < len(self._tokens):
                await self._pause(self._config.token_delay)
                token = self._tokens[self._cursor]
                self._cursor += 1
                return StreamEvent.token(token)
            return self._finish()

        if self._state is EncoderState.ERRORED:
            return self._finish()

        raise StopAsyncIteration

    async def _start(self) -> StreamEvent:
        try:
            await self._pause(self._config.generation_delay)
            text = self._generate(self._session_id, self._prompt)
            self.text = text
            if not text or not text.strip():
                return self._finish()
            self._tokens = self._tokenize(text, self._config.token_chunk_size)
        except Exception as e:
            logger.warning(f"Reply generation failed for session {self._session_id}: {e}")
            self._state = EncoderState.ERRORED
            self._errored = True
            return StreamEvent.error(str(e) or FALLBACK_ERROR)

        self._state = EncoderState.EMITTING_TOKENS
        return await self.__anext__()

    def _finish(self) -> StreamEvent:
        self._state = EncoderState.COMPLETE
        return StreamEvent.done()

    async def _pause(self, seconds: float) -> None:
        if seconds > 0:
            await asyncio.sleep(seconds)
