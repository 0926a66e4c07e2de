"""Deterministic mock assistant.

Replies are a pure function of ``(session_id, prompt)``: a handful of keyword
shortcuts, otherwise a template filled with topics picked by a PRNG seeded
from the session id. Good enough to exercise the streaming protocol without
an LLM behind it.
"""

DEFAULT_CHUNK_SIZE = 8

_MASK32 = 0xFFFFFFFF

SUMMARY_REPLY = (
    "This document provides an overview of the main concepts, with sections "
    "detailing the background, methodology, and conclusions. Key takeaways: "
    "clear problem statement, step-by-step methods, and recommended next steps."
)
GREETING_REPLY = "Hello! How can I help you with this PDF today?"
CAPABILITY_REPLY = (
    "I can read the PDF's metadata and content (if uploaded). Ask me to "
    "summarize, find keywords, or extract specific sections."
)

TEMPLATES = (
    "I reviewed the PDF and here are some points: {}",
    "Based on the content, the document focuses on: {}",
    "Here's a brief summary: {}",
    "High level: {}",
)

TOPICS = (
    "introduction and objectives",
    "background and related work",
    "methodology and experiments",
    "results and conclusions",
    "recommendations and next steps",
)


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class Mulberry32:
    """Small seeded 32-bit PRNG (mulberry32).

    Every intermediate value is kept modulo 2**32, so the sequence is
    identical across platforms for a given seed.
    """

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / 4294967296

    def choice(self, options: tuple[str, ...]) -> str:
        return options[int(self.random() * len(options))]


def session_seed(session_id: str) -> int:
    """Sum of the character codes of the session id."""
    return sum(ord(c) for c in session_id)


def generate_response(session_id: str, prompt: str) -> str:
    """Build the assistant reply for a prompt.

    Args:
        session_id: Session identifier, seeds the pseudo-random choices.
        prompt: The user's prompt.

    Returns:
        Generated reply text.
    """
    lower = (prompt or "").lower()

    if "summarize" in lower or "summary" in lower or "summarise" in lower:
        return SUMMARY_REPLY

    if "hello" in lower or "hi" in lower:
        return GREETING_REPLY

    if "what" in lower and "pdf" in lower:
        return CAPABILITY_REPLY

    rnd = Mulberry32(session_seed(session_id))
    template = rnd.choice(TEMPLATES)
    topic_a = rnd.choice(TOPICS)
    topic_b = rnd.choice(TOPICS)
    body = topic_a if topic_a == topic_b else f"{topic_a} and {topic_b}"

    return template.format(body)


def tokenize(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split text into bounded-size token chunks.

    Words are the minimum unit: a chunk never spans whitespace. Words longer
    than ``chunk_size`` are cut into ``chunk_size`` character slices, the last
    of which may be shorter. Whitespace itself is dropped.

    Args:
        text: Text to split.
        chunk_size: Maximum characters per chunk.

    Returns:
        Ordered list of chunks.

    Raises:
        ValueError: If chunk_size is smaller than 1.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")

    tokens: list[str] = []
    for word in text.split():
        if len(word) <= chunk_size:
            tokens.append(word)
            continue
        tokens.extend(word[i : i + chunk_size] for i in range(0, len(word), chunk_size))
    return tokens
