"""
OpenAI-compatible chat-completions provider.

WHAT: Hosted LLM provider for OpenAI and OpenRouter style APIs
WHY: The pipeline needs free-text and strict-JSON generation from a hosted model
HOW: httpx AsyncClient, bearer auth, a single POST per call with no retry
"""

import httpx

from .types import (
    ChatMessage,
    LLMResult,
    ProviderStatus,
    ProviderDisabledError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    ProviderResponseError,
)
from ..utils.logger import get_logger, mask_secret

logger = get_logger(__name__)


class ChatCompletionsProvider:
    """LLM provider speaking the OpenAI /chat/completions protocol."""

    def __init__(
        self,
        *,
        name: str,
        base_url: str,
        api_key: str,
        default_model: str,
        timeout: float = 60.0,
        extra_headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None
    ):
        """
        Initialize provider with an httpx client.

        Args:
            name: Provider label used in logs and status output
            base_url: API root, e.g. https://api.openai.com/v1
            api_key: Bearer token; an empty key leaves the provider disabled
            default_model: Model used when generate() gets no explicit model
            timeout: Read timeout in seconds
            extra_headers: Additional headers (OpenRouter attribution headers)
            transport: Optional httpx transport (tests)
        """
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.default_model = default_model
        self.enabled = bool(api_key and api_key.strip())

        headers = dict(extra_headers or {})
        if self.enabled:
            headers["Authorization"] = f"Bearer {self.api_key}"

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(5.0, read=timeout),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            headers=headers,
            transport=transport,
        )

        if self.enabled:
            logger.info(f"{self.name} provider initialized (model: {self.default_model}, API key: {mask_secret(self.api_key)})")
        else:
            logger.warning(f"{self.name} provider initialized without an API key; generation requests will fail")

    def _check_enabled(self):
        """Raise exception if no API key is configured."""
        if not self.enabled:
            raise ProviderDisabledError(f"{self.name} provider has no API key configured")

    async def ping(self) -> ProviderStatus:
        """
        Check availability by fetching the models list.

        Returns:
            ProviderStatus, never raises
        """
        if not self.enabled:
            return ProviderStatus(available=False, base_url=self.base_url, error="API key not configured")

        try:
            response = await self.client.get(f"{self.base_url}/models", timeout=10.0)
            response.raise_for_status()
            data = response.json()

            models = [model.get("id") for model in data.get("data", [])]
            logger.info(f"{self.name} ping success ({len(models)} models available)")

            return ProviderStatus(
                available=True,
                base_url=self.base_url,
                models=models[:10] if models else None,
            )
        except httpx.TimeoutException:
            logger.warning(f"{self.name} ping timeout")
            return ProviderStatus(available=False, base_url=self.base_url, error="Request timed out")
        except httpx.ConnectError:
            logger.warning(f"{self.name} not reachable")
            return ProviderStatus(available=False, base_url=self.base_url, error="Connection refused")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{self.name} ping failed: {e}")
            return ProviderStatus(available=False, base_url=self.base_url, error=str(e))

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
        Generate a complete response with a single request.

        Args:
            messages: Chat messages (text or multi-part content)
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            json_mode: Request response_format json_object (structured mode)
            model: Optional model name (uses default_model if not provided)

        Returns:
            LLMResult with text, usage, and model

        Raises:
            ProviderDisabledError: No API key configured
            ProviderTimeoutError: Request timed out
            ProviderUnavailableError: Provider not reachable
            ProviderResponseError: Non-2xx status or invalid envelope
        """
        self._check_enabled()

        model_to_use = model or self.default_model
        payload = {
            "model": model_to_use,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "stream": False
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        logger.debug(f"{self.name} generate (model: {model_to_use}, json_mode: {json_mode})")

        try:
            response = await self.client.post(f"{self.base_url}/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()

            text = data["choices"][0]["message"]["content"]
            if not isinstance(text, str):
                raise ProviderResponseError("Provider returned no message content")
            usage = data.get("usage") or {}
            response_model = data.get("model", model_to_use)

        except httpx.TimeoutException as e:
            logger.error(f"{self.name} request timed out")
            raise ProviderTimeoutError(f"{self.name} request timed out") from e

        except httpx.ConnectError as e:
            logger.error(f"{self.name} connection refused")
            raise ProviderUnavailableError(f"{self.name} is not reachable") from e

        except httpx.HTTPStatusError as e:
            logger.error(f"{self.name} HTTP error {e.response.status_code}: {e.response.text[:500]}")
            raise ProviderResponseError(f"HTTP {e.response.status_code} from {self.name}") from e

        except httpx.HTTPError as e:
            logger.error(f"{self.name} transport error: {e}")
            raise ProviderUnavailableError(f"{self.name} transport error") from e

        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Invalid response envelope from {self.name}: {e}")
            raise ProviderResponseError(f"Invalid response format: {e}") from e

        logger.info(f"{self.name} generate success (model: {response_model}, tokens: {usage.get('total_tokens', 'unknown')})")
        return LLMResult(text=text, usage=usage, model=response_model)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
