"""
LLM provider factory.

WHAT: Build the configured LLM provider
WHY: Centralize provider selection; callers inject the result instead of sharing a global
HOW: Read LLM_PROVIDER from explicit settings, construct, log selection
"""

from typing import TYPE_CHECKING

from .chat_completions import ChatCompletionsProvider
from ..utils.logger import get_logger

if TYPE_CHECKING:
    from ..core.config import Settings
    from .provider import LLMProvider

logger = get_logger(__name__)


def create_provider(settings: "Settings") -> "LLMProvider":
    """
    Create a new LLM provider from settings.

    Args:
        settings: Application settings

    Returns:
        LLMProvider instance based on settings.LLM_PROVIDER

    Raises:
        ValueError: If provider name is unknown
    """
    provider_name = settings.LLM_PROVIDER

    if provider_name == "openai":
        provider = ChatCompletionsProvider(
            name="OpenAI",
            base_url=settings.OPENAI_BASE_URL,
            api_key=settings.OPENAI_API_KEY,
            default_model=settings.OPENAI_DEFAULT_MODEL,
            timeout=settings.LLM_TIMEOUT,
        )
    elif provider_name == "openrouter":
        provider = ChatCompletionsProvider(
            name="OpenRouter",
            base_url=settings.OPENROUTER_BASE_URL,
            api_key=settings.OPENROUTER_API_KEY,
            default_model=settings.OPENROUTER_DEFAULT_MODEL,
            timeout=settings.LLM_TIMEOUT,
            extra_headers={
                "HTTP-Referer": settings.APP_NAME,
                "X-Title": settings.APP_NAME,
            },
        )
    else:
        raise ValueError(f"Unknown LLM provider: {provider_name}")

    logger.info(f"LLM provider created: {provider_name}")
    return provider
