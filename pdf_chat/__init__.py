"""PDF Chat - chat with a PDF through a streaming assistant.

Combines FastAPI for HTTP streaming, httpx for the stream consumer,
NiceGUI for visualization, and Pydantic for data validation.

Components:
    - api: HTTP endpoints and Server-Sent Events responses
    - chatbot: Deterministic mock assistant and stream event encoder
    - chat: Client-side stream consumer and chat state machine
    - storage: In-memory session and message store
    - parsing: PDF validation and text extraction
    - ui: Web interface for chat interactions
    - models: Request/response schemas
"""

__version__ = "0.1.0"
