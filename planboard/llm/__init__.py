"""LLM provider abstraction layer."""

import os

from planboard.config.models import LLMSettings
from planboard.llm.base import ChatHandle, HistoryChat, LLMProvider
from planboard.llm.claude import ClaudeProvider
from planboard.llm.gemini import GeminiProvider
from planboard.llm.models import (
    GroundingSource,
    LLMConfig,
    LLMError,
    LLMResponse,
    TokenUsage,
    Turn,
)
from planboard.llm.openai_adapter import OpenAIProvider

_PROVIDER_MAP: dict[str, type[LLMProvider]] = {
    "google": GeminiProvider,
    "openai": OpenAIProvider,
    "anthropic": ClaudeProvider,
}


def create_llm_provider(config: LLMSettings) -> LLMProvider:
    """Create an LLM provider from app-level settings.

    Resolves the API key from the env var in config.api_key_env, then
    bridges LLMSettings to the provider-level LLMConfig.
    For "auto" provider, delegates to auto_detect_provider().
    """
    if config.provider == "auto":
        from planboard.llm.auto_detect import auto_detect_provider

        return auto_detect_provider(config.temperature, config.grounding)

    cls = _PROVIDER_MAP.get(config.provider)
    if cls is None:
        raise ValueError(
            f"Unsupported LLM provider: {config.provider!r}. "
            f"Supported: {', '.join(_PROVIDER_MAP)}"
        )

    api_key = os.environ.get(config.api_key_env)
    if not api_key:
        raise ValueError(
            f"Missing API key: set environment variable {config.api_key_env!r}"
        )
    llm_config = LLMConfig(
        provider=config.provider,
        model=config.model,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        api_key=api_key,
        base_url=config.base_url,
        grounding=config.grounding,
    )
    return cls(llm_config)


__all__ = [
    "ChatHandle",
    "ClaudeProvider",
    "GeminiProvider",
    "GroundingSource",
    "HistoryChat",
    "LLMConfig",
    "LLMError",
    "LLMProvider",
    "LLMResponse",
    "OpenAIProvider",
    "TokenUsage",
    "Turn",
    "create_llm_provider",
]
