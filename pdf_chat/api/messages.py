"""Message endpoints: SSE reply stream and synchronous send.

Stream format, one frame per event:

    data: {"type":"token","data":"Hello!"}\\n\\n
    data: {"type":"done","data":""}\\n\\n

Validation errors are ordinary HTTP errors raised before the first byte.
Once the body has started, failures are only reported in-band as an
``error`` frame followed by ``done``.
"""

import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from pdf_chat.cancellation import CancellationToken
from pdf_chat.chatbot.config import ChatbotConfig, get_chatbot_config
from pdf_chat.chatbot.generator import generate_response
from pdf_chat.chatbot.streaming import FALLBACK_ERROR, StreamEncoder, format_sse_frame
from pdf_chat.models.schemas import (
    SendMessageRequest,
    SendMessageResponse,
    StreamEvent,
    StreamEventType,
)
from pdf_chat.storage.memory import InMemoryStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/messages", tags=["messages"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _require_session(store: InMemoryStore, session_id: str) -> None:
    if not store.session_exists(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Session not found",
        )


async def _event_frames(
    encoder: StreamEncoder,
    store: InMemoryStore,
    session_id: str,
    cancel_token: CancellationToken,
) -> AsyncGenerator[str]:
    """Write encoder events as SSE frames.

    The assistant reply is stored before the final done frame goes out, so a
    client that hangs up right after done still finds it in the session.
    """
    error_sent = False
    try:
        async for event in encoder:
            if event.type == StreamEventType.ERROR:
                error_sent = True
            elif event.type == StreamEventType.DONE and encoder.succeeded and encoder.text:
                store.append_message(session_id, "assistant", encoder.text)
            yield format_sse_frame(event)
    except Exception as e:
        logger.error(f"Stream failed for session {session_id}: {e}")
        if not error_sent:
            yield format_sse_frame(StreamEvent.error(str(e) or FALLBACK_ERROR))
        yield format_sse_frame(StreamEvent.done())
    finally:
        cancel_token.cancel()
        logger.info(f"Stream closed for session {session_id} (state={encoder.state.value})")


@router.get("/stream")
async def stream_message(
    session_id: str | None = Query(None, description="Session to answer in"),
    prompt: str | None = Query(None, description="The user's prompt"),
    message_id: str | None = Query(None, description="User message id, for correlation"),
    store: InMemoryStore = Depends(get_store),
    config: ChatbotConfig = Depends(get_chatbot_config),
) -> StreamingResponse:
    """Stream an assistant reply token by token as Server-Sent Events.

    Raises:
        400: Missing session_id, missing prompt, or blank prompt.
        404: Unknown session.
    """
    if not session_id or not session_id.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_id query parameter is required",
        )

    if prompt is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="prompt query parameter is required",
        )

    if not prompt.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="prompt cannot be empty",
        )

    _require_session(store, session_id)

    prompt = prompt.strip()
    logger.info(f"Stream opened for session {session_id} (message_id={message_id})")
    store.append_message(session_id, "user", prompt)

    cancel_token = CancellationToken()
    encoder = StreamEncoder(session_id, prompt, config=config, cancel_token=cancel_token)

    return StreamingResponse(
        _event_frames(encoder, store, session_id, cancel_token),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("", response_model=SendMessageResponse)
async def send_message(
    body: SendMessageRequest,
    store: InMemoryStore = Depends(get_store),
) -> SendMessageResponse:
    """Store a user message and reply to it in one round trip.

    Runs the generator once, with no token emission.

    Raises:
        400: Missing session_id or content, or blank content.
        404: Unknown session.
    """
    if not body.session_id or body.content is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_id and content are required",
        )

    content = body.content.strip()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="content cannot be empty",
        )

    _require_session(store, body.session_id)

    user_message = store.append_message(body.session_id, "user", content)
    reply = generate_response(body.session_id, content)
    assistant_message = store.append_message(body.session_id, "assistant", reply)

    return SendMessageResponse(user_message=user_message, assistant_message=assistant_message)
