"""
LLM provider protocol definition.

WHAT: Abstract interface for LLM providers
WHY: Decouple the pipeline from a specific provider implementation
HOW: Use Protocol to define async methods for ping and generate
"""

from typing import Protocol
from .types import ChatMessage, LLMResult, ProviderStatus


class LLMProvider(Protocol):
    """Protocol defining the interface all LLM providers must implement."""

    async def ping(self) -> ProviderStatus:
        """Check provider health and availability."""
        ...

    async def generate(
        self,
        messages: list[ChatMessage],
        *,
        temperature: float,
        max_tokens: int,
        json_mode: bool = False,
        model: str | None = None
    ) -> LLMResult:
        """
        Generate a complete response with exactly one upstream request.

        json_mode=True asks the provider for strict JSON output (structured mode);
        json_mode=False leaves the output unconstrained (free-text mode).
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...
