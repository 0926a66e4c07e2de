"""In-memory session and message store.

Ephemeral: everything is lost on restart. Only touched from the event loop,
so there is no locking; callers make sequential calls per session.
"""

import logging

from pdf_chat.models.schemas import Message, Role, Session, now_iso

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Sessions and their messages, keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._messages: dict[str, list[Message]] = {}

    def list_sessions(self) -> list[Session]:
        """All sessions, most recently updated first."""
        return sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)

    def create_session(self, title: str | None = None) -> Session:
        session = Session(title=title) if title else Session()
        self._sessions[session.id] = session
        self._messages[session.id] = []
        logger.info(f"Created session {session.id}")
        return session

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def session_exists(self, session_id: str) -> bool:
        return session_id in self._sessions

    def delete_session(self, session_id: str) -> bool:
        """Delete a session and its messages.

        Returns:
            True if anything was deleted.
        """
        existed_session = self._sessions.pop(session_id, None) is not None
        existed_messages = self._messages.pop(session_id, None) is not None
        if existed_session:
            logger.info(f"Deleted session {session_id}")
        return existed_session or existed_messages

    def save_pdf(self, session_id: str, file_name: str, pages: int) -> Session | None:
        """Attach a PDF to a session.

        Returns:
            The updated session, or None if it does not exist.
        """
        session = self._sessions.get(session_id)
        if session is None:
            return None
        updated = session.model_copy(
            update={"pdf_file_name": file_name, "pdf_pages": pages, "updated_at": now_iso()}
        )
        self._sessions[session_id] = updated
        return updated

    def append_message(self, session_id: str, role: Role, content: str) -> Message:
        """Append a message and bump the session's updated_at."""
        message = Message(session_id=session_id, role=role, content=content)
        self._messages.setdefault(session_id, []).append(message)

        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions[session_id] = session.model_copy(
                update={"updated_at": message.timestamp}
            )
        return message

    def list_messages(
        self,
        session_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Message]:
        messages = self._messages.get(session_id, [])
        if limit is not None:
            return messages[offset : offset + limit]
        return messages[offset:]

    def reset(self) -> None:
        self._sessions.clear()
        self._messages.clear()

    def seed_sample_data(self) -> list[Session]:
        """Replace the contents with two example sessions for local development."""
        self.reset()

        overview = self.create_session("Example PDF: AI Overview")
        self.save_pdf(overview.id, "ai_overview.pdf", 12)
        self.append_message(overview.id, "user", "Hi, what is this PDF about?")
        self.append_message(
            overview.id, "assistant", "This PDF discusses foundational AI concepts."
        )

        notes = self.create_session("Meeting Notes")
        self.save_pdf(notes.id, "meeting_notes.pdf", 3)
        self.append_message(notes.id, "user", "Summarize key takeaways.")
        self.append_message(notes.id, "assistant", "Key takeaways: project timeline, action items.")

        return [self._sessions[overview.id], self._sessions[notes.id]]


# Module-level singleton instance
_store: InMemoryStore | None = None


def get_store() -> InMemoryStore:
    """Get or create the global store.

    Used as a FastAPI dependency; tests swap it via dependency_overrides.

    Returns:
        The InMemoryStore instance.
    """
    global _store
    if _store is None:
        _store = InMemoryStore()
    return _store
