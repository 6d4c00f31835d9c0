"""
LLM Client -- provider-agnostic async wrapper bound to one model.

Supports Google (Gemini, the default), Anthropic (Claude) and OpenAI (GPT).

Usage:
    from .llm import create_client

    client = create_client()  # Auto-detects provider from env
    text = await client.complete("What is 2+2?")
"""

from .client import (
    DEFAULT_MODELS,
    LLMClient,
    LLMError,
    LLMResponse,
    TokenUsage,
    create_client,
    detect_provider,
)
