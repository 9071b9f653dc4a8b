"""
LLM client for hosted chat-completion providers.

Every supported provider exposes an OpenAI-compatible chat-completions
endpoint, so one openai SDK client pointed at the provider's base URL
covers all of them.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from deployment.circuit_breaker import CircuitBreaker, CircuitOpenError
from shared.config import Settings

logger = logging.getLogger(__name__)


PROVIDERS: Dict[str, Dict[str, Any]] = {
    "openai": {
        "name": "OpenAI",
        "base_url": "https://api.openai.com/v1",
        "models": ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo"],
    },
    "anthropic": {
        "name": "Anthropic",
        "base_url": "https://api.anthropic.com/v1",
        "models": [
            "claude-3-5-sonnet-20241022",
            "claude-3-5-haiku-20241022",
            "claude-3-opus-20240229",
        ],
    },
    "groq": {
        "name": "Groq",
        "base_url": "https://api.groq.com/openai/v1",
        "models": [
            "llama-3.3-70b-versatile",
            "llama-3.1-70b-versatile",
            "mixtral-8x7b-32768",
        ],
    },
}


class LLMError(Exception):
    """Base class for chat-completion failures."""

    pass


class LLMConfigurationError(LLMError):
    """Missing API key or unknown provider; nothing was sent."""

    pass


class LLMRequestError(LLMError):
    """The provider call failed or returned an unusable response."""

    pass


@dataclass
class LLMResponse:
    """LLM response with metadata."""

    content: str
    model: str
    usage: Dict[str, int] = field(default_factory=dict)
    raw_response: Any = None


class LLMClient:
    """
    Chat-completion client with circuit breaker protection.

    Usage:
        client = LLMClient(provider="groq", api_key="...", model="llama-3.3-70b-versatile")
        response = client.generate([{"role": "user", "content": "Hello"}])
    """

    def __init__(
        self,
        provider: str = "openai",
        api_key: str = "",
        model: str = "gpt-4o-mini",
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout: float = 30.0,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.breaker = breaker or CircuitBreaker(name=f"llm:{provider}")
        self._client = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMClient":
        return cls(
            provider=settings.llm.provider,
            api_key=settings.API_KEY,
            model=settings.llm.model,
            temperature=settings.llm.temperature,
            max_tokens=settings.llm.max_tokens,
            timeout=settings.llm.timeout,
        )

    @property
    def client(self):
        """Lazy load the OpenAI SDK client for the configured provider."""
        if self._client is None:
            from openai import OpenAI

            config = self._provider_config()
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=config["base_url"],
                timeout=self.timeout,
            )
        return self._client

    def generate(
        self,
        messages: List[Dict[str, str]],
        model: str = None,
        temperature: float = None,
        max_tokens: int = None,
    ) -> LLMResponse:
        """
        Send a chat-completion request.

        Args:
            messages: Chat messages with "role" and "content"
            model: Override configured model
            temperature: Override configured temperature
            max_tokens: Override configured max tokens

        Returns:
            LLMResponse with content and usage

        Raises:
            LLMConfigurationError: No API key or unknown provider
            CircuitOpenError: Provider recently failing, call not attempted
            LLMRequestError: Provider call failed
        """
        if not self.api_key:
            raise LLMConfigurationError(
                "API key not configured. Please set it in extension settings."
            )
        self._provider_config()

        kwargs = {
            "model": model or self.model,
            "messages": messages,
            "temperature": temperature if temperature is not None else self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }

        try:
            response = self.breaker.call(self.client.chat.completions.create, **kwargs)
        except CircuitOpenError:
            logger.error(f"LLM circuit breaker is open for provider {self.provider}")
            raise
        except Exception as e:
            logger.error(f"LLM API error ({self.provider}): {e}")
            raise LLMRequestError(str(e)) from e

        try:
            content = response.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            raise LLMRequestError(f"Malformed response from {self.provider}: {e}") from e

        usage = {}
        if getattr(response, "usage", None) is not None:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

        return LLMResponse(
            content=content,
            model=getattr(response, "model", None) or kwargs["model"],
            usage=usage,
            raw_response=response,
        )

    def get_public_config(self) -> Dict[str, Any]:
        """Current configuration without the API key itself."""
        return {
            "provider": self.provider,
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "has_api_key": bool(self.api_key),
        }

    def _provider_config(self) -> Dict[str, Any]:
        config = PROVIDERS.get(self.provider)
        if config is None:
            raise LLMConfigurationError(f"Unknown provider: {self.provider}")
        return config


def get_providers() -> Dict[str, Dict[str, Any]]:
    """Available providers and their models."""
    return {key: dict(value, models=list(value["models"])) for key, value in PROVIDERS.items()}
