"""End-to-end tests: ChatClient talking to the real app in-process.

The client's httpx.AsyncClient is pointed at the FastAPI app through
ASGITransport, so requests run the actual routes, encoder and store.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from pdf_chat.chat.client import ChatClient
from pdf_chat.chat.types import ChatConfig, ConnectionState
from pdf_chat.chatbot.generator import GREETING_REPLY, generate_response
from pdf_chat.models.schemas import Session
from pdf_chat.storage.memory import InMemoryStore


@pytest.fixture
async def http(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestStreamingChat:
    """Tests for the streaming path end to end."""

    async def test_streamed_reply(
        self, http: AsyncClient, session: Session, store: InMemoryStore
    ) -> None:
        """A streamed reply is finalized on the client and stored on the server."""
        received = []
        client = ChatClient(session.id, http_client=http, on_message_received=received.append)

        await client.send_message("hello")

        assert [m.role for m in client.messages] == ["user", "assistant"]
        # Tokens are concatenated as received; the tokenizer drops whitespace.
        assert client.messages[1].content == "".join(GREETING_REPLY.split())
        assert client.connection_state == ConnectionState.DISCONNECTED
        assert client.error is None
        assert received == [client.messages[1]]

        stored = store.list_messages(session.id)
        assert [(m.role, m.content) for m in stored] == [
            ("user", "hello"),
            ("assistant", GREETING_REPLY),
        ]

    async def test_unknown_session(self, http: AsyncClient) -> None:
        """A 404 from the stream endpoint surfaces as a client error."""
        client = ChatClient("missing", http_client=http)

        await client.send_message("hello")

        assert client.error == "Stream request failed: Session not found"
        assert [m.role for m in client.messages] == ["user"]
        assert client.connection_state == ConnectionState.DISCONNECTED

    async def test_fetch_history_after_stream(self, http: AsyncClient, session: Session) -> None:
        """A second client sees the stored exchange with full spacing."""
        await ChatClient(session.id, http_client=http).send_message("hello")
        reader = ChatClient(session.id, http_client=http)

        await reader.fetch_messages()

        assert [m.content for m in reader.messages] == ["hello", GREETING_REPLY]


class TestNonStreamingChat:
    """Tests for the synchronous fallback end to end."""

    async def test_repeated_prompt(self, http: AsyncClient, session: Session) -> None:
        """Two identical sends append two distinct pairs with equal replies."""
        client = ChatClient(
            session.id, http_client=http, config=ChatConfig(enable_streaming=False)
        )

        await client.send_message("Explain the results")
        await client.send_message("Explain the results")

        messages = client.messages
        assert [m.role for m in messages] == ["user", "assistant", "user", "assistant"]
        assert messages[1].content == messages[3].content
        assert messages[1].content == generate_response(session.id, "Explain the results")
        assert len({m.id for m in messages}) == 4
        assert messages[3].timestamp >= messages[1].timestamp
        assert client.streaming_message is None
