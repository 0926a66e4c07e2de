"""Chatbot configuration with environment variable loading.

Pydantic-based configuration for the mock assistant and its stream pacing.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

# Load environment variables from .env file
load_dotenv()


def _env_or(name: str, default: int) -> str | int:
    """Raw environment value, left for field validation to parse."""
    return os.getenv(name, "").strip() or default


class ChatbotConfig(BaseModel):
    """Configuration for the mock chatbot stream.

    Attributes:
        token_delay_ms: Pause before each token event (0 disables pacing).
        token_chunk_size: Maximum characters per token chunk.
        generation_delay_ms: Simulated latency of the initial generation call.
    """

    # Environment values arrive as strings; validate them like explicit arguments.
    model_config = ConfigDict(validate_default=True)

    token_delay_ms: int = Field(
        default_factory=lambda: _env_or("CHATBOT_TOKEN_DELAY_MS", 80),
        ge=0,
        description="Delay between token events in milliseconds",
    )
    token_chunk_size: int = Field(
        default_factory=lambda: _env_or("CHATBOT_TOKEN_CHUNK_SIZE", 8),
        ge=1,
        description="Maximum characters per token chunk",
    )
    generation_delay_ms: int = Field(
        default_factory=lambda: _env_or("CHATBOT_GENERATION_DELAY_MS", 50),
        ge=0,
        description="Simulated generation latency in milliseconds",
    )

    @property
    def token_delay(self) -> float:
        return self.token_delay_ms / 1000

    @property
    def generation_delay(self) -> float:
        return self.generation_delay_ms / 1000


def get_chatbot_config() -> ChatbotConfig:
    """Create chatbot configuration from environment.

    Used as a FastAPI dependency so tests can override pacing.

    Returns:
        Configured ChatbotConfig instance.
    """
    return ChatbotConfig()
