"""
Provider-agnostic async LLM client used for output generation and judging.

Features:
  - One fixed model per client (the id recorded on every evaluation result)
  - Token tracking per call and cumulative usage
  - Timeout enforcement at the SDK level
  - No retries: a failed call raises LLMError with the provider's message

Supports: Google (Gemini), Anthropic (Claude), OpenAI (GPT).

The complete() method is the text endpoint used by the evaluation pipeline:
    client = create_client()
    text = await client.complete("What is 2+2?")

call() returns the full LLMResponse with usage and latency.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 120
# Anthropic requires an explicit output limit; the other providers run uncapped
# unless max_tokens is configured.
ANTHROPIC_MAX_TOKENS = 8192

DEFAULT_MODELS = {
    "google": "gemini-2.0-flash-exp",
    "anthropic": "claude-sonnet-4-20250514",
    "openai": "gpt-4o",
}

API_KEY_ENV_VARS = {
    "google": "GOOGLE_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class LLMError(RuntimeError):
    """Transport, auth, quota or SDK failure while talking to a provider."""

    def __init__(self, message: str, provider: str = "", model: str = ""):
        super().__init__(message)
        self.provider = provider
        self.model = model


# =============================================================================
# DATA MODELS
# =============================================================================


@dataclass
class TokenUsage:
    """Token usage tracking for a single LLM call."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        self.total_tokens = self.input_tokens + self.output_tokens


@dataclass
class LLMResponse:
    """Response from an LLM call."""

    content: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    model: str = ""
    provider: str = ""
    latency_ms: float = 0.0


# =============================================================================
# LLM CLIENT
# =============================================================================


class LLMClient:
    """
    Provider-agnostic LLM client bound to a single model.

    Usage:
        client = LLMClient(provider="google")
        text = await client.complete("Explain photosynthesis")
        print(client.total_usage.total_tokens)

    The SDK client is created lazily on the first call, so constructing an
    LLMClient never touches the network and never fails on a missing key.
    """

    def __init__(
        self,
        provider: str = "google",
        model: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_tokens: int | None = None,
    ):
        self._provider = provider.lower()
        if self._provider not in DEFAULT_MODELS:
            raise ValueError(f"Unsupported provider: {provider}")
        self._model = model or DEFAULT_MODELS[self._provider]
        self._api_key = api_key or self._load_api_key()
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._client: Any = None
        self._total_usage = TokenUsage()

        logger.info(
            f"[LLM] Configured {self._provider} client "
            f"(model={self._model}, timeout={self._timeout}s)"
        )

    def _load_api_key(self) -> str:
        env_var = API_KEY_ENV_VARS[self._provider]
        key = os.environ.get(env_var, "")
        if not key:
            logger.warning(f"[LLM] {env_var} not set -- calls will fail")
        return key

    def _init_client(self) -> Any:
        """Initialize the provider-specific SDK client."""
        try:
            if self._provider == "google":
                import google.generativeai as genai

                genai.configure(api_key=self._api_key)
                return genai.GenerativeModel(self._model)
            if self._provider == "anthropic":
                import anthropic

                return anthropic.AsyncAnthropic(
                    api_key=self._api_key, timeout=self._timeout
                )
            import openai

            return openai.AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        except ImportError as e:
            raise LLMError(
                f"{self._provider} SDK not installed: {e}",
                provider=self._provider,
                model=self._model,
            ) from e

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._init_client()
        return self._client

    async def complete(self, prompt: str) -> str:
        """Send a bare prompt and return the completion text verbatim."""
        response = await self.call(prompt)
        return response.content

    async def call(self, prompt: str, temperature: float | None = None) -> LLMResponse:
        """
        Make a single LLM call.

        Args:
            prompt: Prompt text, sent as-is.
            temperature: Sampling temperature. None uses the provider default.

        Returns:
            LLMResponse with .content and .usage

        Raises:
            LLMError: on any provider or transport failure. Not retried.
        """
        client = self._get_client()
        start = time.time()

        try:
            response = await self._call_provider(client, prompt, temperature)
        except LLMError:
            raise
        except Exception as e:
            logger.error(
                f"[LLM] {self._provider}/{self._model} call failed: "
                f"{type(e).__name__}: {e}"
            )
            raise LLMError(str(e), provider=self._provider, model=self._model) from e

        response.latency_ms = (time.time() - start) * 1000
        self._track_usage(response.usage)

        logger.debug(
            f"[LLM] {self._provider}: {len(prompt)} chars in, "
            f"{response.usage.input_tokens}in + {response.usage.output_tokens}out "
            f"= {response.usage.total_tokens}tok ({response.latency_ms:.0f}ms)"
        )
        return response

    async def _call_provider(
        self, client: Any, prompt: str, temperature: float | None
    ) -> LLMResponse:
        """Dispatch to provider-specific implementation."""
        if self._provider == "google":
            return await self._call_google(client, prompt, temperature)
        elif self._provider == "anthropic":
            return await self._call_anthropic(client, prompt, temperature)
        return await self._call_openai(client, prompt, temperature)

    async def _call_google(
        self, client: Any, prompt: str, temperature: float | None
    ) -> LLMResponse:
        """Google Gemini. The SDK call is blocking, so it runs in a worker thread."""
        generation_config: dict[str, Any] = {}
        if self._max_tokens is not None:
            generation_config["max_output_tokens"] = self._max_tokens
        if temperature is not None:
            generation_config["temperature"] = temperature

        response = await asyncio.to_thread(
            client.generate_content,
            prompt,
            generation_config=generation_config,
            request_options={"timeout": self._timeout},
        )

        input_tok = 0
        output_tok = 0
        if hasattr(response, "usage_metadata"):
            input_tok = getattr(response.usage_metadata, "prompt_token_count", 0) or 0
            output_tok = getattr(response.usage_metadata, "candidates_token_count", 0) or 0

        return LLMResponse(
            content=response.text,
            usage=TokenUsage(input_tokens=input_tok, output_tokens=output_tok),
            model=self._model,
            provider="google",
        )

    async def _call_anthropic(
        self, client: Any, prompt: str, temperature: float | None
    ) -> LLMResponse:
        """Anthropic Claude."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "max_tokens": self._max_tokens or ANTHROPIC_MAX_TOKENS,
            "messages": [{"role": "user", "content": prompt}],
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = await client.messages.create(**kwargs)

        usage_data = response.usage
        return LLMResponse(
            content=response.content[0].text,
            usage=TokenUsage(
                input_tokens=getattr(usage_data, "input_tokens", 0),
                output_tokens=getattr(usage_data, "output_tokens", 0),
            ),
            model=self._model,
            provider="anthropic",
        )

    async def _call_openai(
        self, client: Any, prompt: str, temperature: float | None
    ) -> LLMResponse:
        """OpenAI chat completions."""
        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self._max_tokens is not None:
            kwargs["max_tokens"] = self._max_tokens
        if temperature is not None:
            kwargs["temperature"] = temperature

        response = await client.chat.completions.create(**kwargs)

        usage_data = response.usage
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage_data.prompt_tokens if usage_data else 0,
                output_tokens=usage_data.completion_tokens if usage_data else 0,
            ),
            model=self._model,
            provider="openai",
        )

    def _track_usage(self, usage: TokenUsage) -> None:
        """Accumulate usage stats across calls."""
        self._total_usage.input_tokens += usage.input_tokens
        self._total_usage.output_tokens += usage.output_tokens
        self._total_usage.total_tokens += usage.total_tokens

    @property
    def total_usage(self) -> TokenUsage:
        """Cumulative token usage across all calls in this client's lifetime."""
        return self._total_usage

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model


# =============================================================================
# FACTORY
# =============================================================================


def detect_provider() -> str:
    """
    Pick a provider from the environment.

    Detection order:
      1. GOOGLE_API_KEY set -> google
      2. ANTHROPIC_API_KEY set -> anthropic
      3. OPENAI_API_KEY set -> openai
      4. Default: google
    """
    for provider in ("google", "anthropic", "openai"):
        if os.environ.get(API_KEY_ENV_VARS[provider]):
            return provider
    logger.warning("[LLM] No API key found. Defaulting to google.")
    return "google"


def create_client(
    provider: str | None = None,
    model: str | None = None,
    api_key: str | None = None,
    **kwargs,
) -> LLMClient:
    """Create an LLM client, auto-detecting the provider if not specified."""
    if provider is None:
        provider = detect_provider()
    return LLMClient(provider=provider, model=model, api_key=api_key, **kwargs)
