"""Mock assistant and stream encoding.

Responsibilities:
    - Deterministic, session-seeded reply generation
    - Tokenization of replies into bounded-size chunks
    - Encoding replies as an ordered token/done/error event sequence
    - Pacing configuration loaded from the environment

Maintains clean separation from the HTTP layer: nothing here knows about
requests or responses beyond the SSE frame format.
"""

from pdf_chat.chatbot.config import ChatbotConfig, get_chatbot_config
from pdf_chat.chatbot.generator import generate_response, tokenize
from pdf_chat.chatbot.streaming import EncoderState, StreamEncoder, format_sse_frame

__all__ = [
    "ChatbotConfig",
    "EncoderState",
    "StreamEncoder",
    "format_sse_frame",
    "generate_response",
    "get_chatbot_config",
    "tokenize",
]
