"""Pytest fixtures and shared test configuration.

Fixtures:
    - store: Fresh InMemoryStore per test
    - chatbot_config: Chatbot settings with pacing disabled
    - app: FastAPI app wired to the fixture store and config
    - async_client: HTTPX client over ASGITransport for API testing
    - session: A session created in the fixture store
    - sample_pdf_bytes: A small generated two-page PDF
"""

import io
from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pypdf import PdfWriter

from pdf_chat.api.app import create_app
from pdf_chat.chatbot.config import ChatbotConfig, get_chatbot_config
from pdf_chat.models.schemas import Session
from pdf_chat.storage.memory import InMemoryStore, get_store


@pytest.fixture
def store() -> InMemoryStore:
    """Return an empty store isolated from the module singleton."""
    return InMemoryStore()


@pytest.fixture
def chatbot_config() -> ChatbotConfig:
    """Return chatbot settings that stream without any pacing.

    Returns:
        ChatbotConfig with zero delays and the default chunk size.
    """
    return ChatbotConfig(token_delay_ms=0, token_chunk_size=8, generation_delay_ms=0)


@pytest.fixture
def app(store: InMemoryStore, chatbot_config: ChatbotConfig) -> Generator[FastAPI]:
    """Create an app whose routes use the fixture store and config.

    Yields:
        FastAPI application with dependency overrides installed.
    """
    application = create_app()
    application.dependency_overrides[get_store] = lambda: store
    application.dependency_overrides[get_chatbot_config] = lambda: chatbot_config
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for API testing.

    Yields:
        Configured AsyncClient for making test requests.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def session(store: InMemoryStore) -> Session:
    """Create a session to chat in."""
    return store.create_session("Test Session")


@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Build a two-page blank PDF in memory.

    Returns:
        Raw PDF bytes.
    """
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    writer.add_blank_page(width=612, height=792)
    writer.add_metadata({"/Title": "Quarterly Report"})

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
