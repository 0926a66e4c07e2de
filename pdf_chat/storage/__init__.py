"""Session and message storage.

In-memory only: sessions, their attached PDF metadata, and message history.
Injected into routes with FastAPI's dependency system.
"""

from pdf_chat.storage.memory import InMemoryStore, get_store

__all__ = ["InMemoryStore", "get_store"]
