"""Unit tests for individual components in isolation.

Coverage:
    - chatbot/: Generator, tokenizer, stream encoder and config
    - chat/: SSE decoding, validation and the client state machine
    - storage/ and parsing/: In-memory store and PDF reader

The API is replaced with httpx.MockTransport where the client needs one.
"""
