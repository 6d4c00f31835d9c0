"""LLM client -- provider dispatch, usage tracking, error wrapping, no retries."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from evalboard.llm import DEFAULT_MODELS, LLMClient, LLMError, create_client, detect_provider
from evalboard.llm.client import ANTHROPIC_MAX_TOKENS


@pytest.fixture(autouse=True)
def clear_api_keys(monkeypatch):
    for name in ("GOOGLE_API_KEY", "ANTHROPIC_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(name, raising=False)


def _google_sdk(text="4", error=None):
    sdk = MagicMock()
    if error is not None:
        sdk.generate_content.side_effect = error
    else:
        sdk.generate_content.return_value = SimpleNamespace(
            text=text,
            usage_metadata=SimpleNamespace(prompt_token_count=12, candidates_token_count=3),
        )
    return sdk


class TestConstruction:
    def test_defaults_to_google_model(self):
        client = LLMClient()
        assert client.provider == "google"
        assert client.model == "gemini-2.0-flash-exp"

    def test_explicit_model(self):
        assert LLMClient(provider="openai", model="gpt-4o-mini").model == "gpt-4o-mini"

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported provider"):
            LLMClient(provider="cohere")

    def test_construction_does_not_build_sdk(self):
        client = LLMClient(provider="anthropic")
        assert client._client is None


class TestProviderDetection:
    def test_default_google(self):
        assert detect_provider() == "google"

    def test_anthropic_key(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        assert detect_provider() == "anthropic"

    def test_google_wins_over_openai(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("GOOGLE_API_KEY", "g-test")
        assert detect_provider() == "google"

    def test_create_client_uses_detection(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        client = create_client()
        assert client.provider == "openai"
        assert client.model == DEFAULT_MODELS["openai"]


class TestGoogle:
    @pytest.mark.asyncio
    async def test_complete_returns_text(self):
        client = LLMClient(provider="google")
        client._client = _google_sdk("Paris")

        assert await client.complete("Capital of France?") == "Paris"

        args, kwargs = client._client.generate_content.call_args
        assert args == ("Capital of France?",)
        assert kwargs["request_options"] == {"timeout": 120}

    @pytest.mark.asyncio
    async def test_output_uncapped_by_default(self):
        client = LLMClient(provider="google")
        client._client = _google_sdk()

        await client.complete("Write a long essay")

        config = client._client.generate_content.call_args.kwargs["generation_config"]
        assert "max_output_tokens" not in config

    @pytest.mark.asyncio
    async def test_configured_output_cap_sent(self):
        client = LLMClient(provider="google", max_tokens=256)
        client._client = _google_sdk()

        await client.complete("p")

        config = client._client.generate_content.call_args.kwargs["generation_config"]
        assert config["max_output_tokens"] == 256

    @pytest.mark.asyncio
    async def test_usage_tracked(self):
        client = LLMClient(provider="google")
        client._client = _google_sdk()

        response = await client.call("p")
        await client.call("p")

        assert response.usage.total_tokens == 15
        assert client.total_usage.input_tokens == 24
        assert client.total_usage.total_tokens == 30

    @pytest.mark.asyncio
    async def test_failure_wrapped_and_not_retried(self):
        client = LLMClient(provider="google")
        client._client = _google_sdk(error=RuntimeError("429 Resource has been exhausted"))

        with pytest.raises(LLMError, match="Resource has been exhausted") as exc:
            await client.complete("p")

        assert exc.value.provider == "google"
        assert exc.value.model == "gemini-2.0-flash-exp"
        assert client._client.generate_content.call_count == 1


class TestAnthropic:
    @pytest.mark.asyncio
    async def test_complete(self):
        client = LLMClient(provider="anthropic")
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(return_value=SimpleNamespace(
            content=[SimpleNamespace(text='{"accuracy": 9}')],
            usage=SimpleNamespace(input_tokens=50, output_tokens=10),
        ))
        client._client = sdk

        assert await client.complete("judge this") == '{"accuracy": 9}'

        kwargs = sdk.messages.create.call_args.kwargs
        assert kwargs["messages"] == [{"role": "user", "content": "judge this"}]
        assert kwargs["model"] == DEFAULT_MODELS["anthropic"]
        assert kwargs["max_tokens"] == ANTHROPIC_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_failure_wrapped(self):
        client = LLMClient(provider="anthropic")
        sdk = MagicMock()
        sdk.messages.create = AsyncMock(side_effect=ConnectionError("connection reset"))
        client._client = sdk

        with pytest.raises(LLMError, match="connection reset"):
            await client.complete("p")
        assert sdk.messages.create.await_count == 1


class TestOpenAI:
    @pytest.mark.asyncio
    async def test_complete(self):
        client = LLMClient(provider="openai")
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content="4"))],
            usage=SimpleNamespace(prompt_tokens=7, completion_tokens=1),
        ))
        client._client = sdk

        response = await client.call("What is 2+2?", temperature=0.0)

        assert response.content == "4"
        assert response.provider == "openai"
        assert sdk.chat.completions.create.call_args.kwargs["temperature"] == 0.0
        assert "max_tokens" not in sdk.chat.completions.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_empty_content_becomes_empty_string(self):
        client = LLMClient(provider="openai")
        sdk = MagicMock()
        sdk.chat.completions.create = AsyncMock(return_value=SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=None))],
            usage=None,
        ))
        client._client = sdk

        assert await client.complete("p") == ""
