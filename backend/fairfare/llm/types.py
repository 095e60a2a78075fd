"""
LLM provider types, dataclasses, and exceptions.

WHAT: Standard type definitions for LLM interactions
WHY: Ensure consistent contracts across providers and the pipeline
HOW: TypedDict for messages, dataclasses for results/status, UpstreamError subclasses for errors
"""

from typing import TypedDict, Literal, Any
from dataclasses import dataclass

from ..utils.exceptions import UpstreamError


# Message format compatible with OpenAI-style APIs.
# content is either plain text or a list of content parts
# ({"type": "text", ...}, {"type": "image_url", ...}, {"type": "input_audio", ...}).
ChatMessage = TypedDict(
    "ChatMessage",
    {"role": Literal["system", "user", "assistant"], "content": str | list[dict[str, Any]]}
)


@dataclass
class LLMResult:
    """Complete LLM generation result."""
    text: str
    usage: dict
    model: str


@dataclass
class ProviderStatus:
    """Health status of an LLM provider."""
    available: bool
    base_url: str
    models: list[str] | None = None
    error: str | None = None


# Provider exceptions
class ProviderTimeoutError(UpstreamError):
    """Request to provider timed out."""
    pass


class ProviderUnavailableError(UpstreamError):
    """Provider is not reachable or down."""
    pass


class ProviderDisabledError(UpstreamError):
    """Provider is not configured (missing API key)."""
    pass


class ProviderResponseError(UpstreamError):
    """Provider returned a non-success status or an invalid envelope."""
    pass
