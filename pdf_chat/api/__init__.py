"""FastAPI endpoints for PDF Chat.

HTTP and streaming routes with RESTful API design and async request handling.
Supports Server-Sent Events for real-time reply streaming.

Endpoints:
    - GET /api/health: Service health status
    - GET, POST /api/sessions: List and create sessions
    - GET, DELETE /api/sessions/{id}: Session history and removal
    - POST /api/sessions/{id}/upload: Attach a PDF
    - POST /api/messages: Synchronous send and reply
    - GET /api/messages/stream: Reply as an SSE token stream
"""

from pdf_chat.api.app import app, create_app

__all__ = ["app", "create_app"]
