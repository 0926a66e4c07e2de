"""Integration tests for components working together as a system.

No mocks for core functionality: requests run the real FastAPI routes,
stream encoder and store in-process with pacing disabled.

Coverage:
    - Session CRUD and PDF upload
    - SSE stream endpoint and the synchronous message endpoint
    - ChatClient against the live app, streaming and non-streaming
"""
