"""Auto-detect the best available LLM provider."""

from __future__ import annotations

import os

from planboard.llm.base import LLMProvider
from planboard.llm.models import LLMConfig


def auto_detect_provider(temperature: float = 1.45, grounding: bool = True) -> LLMProvider:
    """Try providers in priority order and return the first with an API key.

    Order: Google Gemini > OpenAI > Anthropic.
    Raises ValueError if no key is set.
    """
    # 1. Google Gemini
    api_key = os.environ.get("GEMINI_API_KEY") or os.environ.get("GOOGLE_API_KEY")
    if api_key:
        from planboard.llm.gemini import GeminiProvider

        return GeminiProvider(
            LLMConfig(
                provider="google",
                model="gemini-2.5-flash",
                api_key=api_key,
                temperature=temperature,
                grounding=grounding,
            )
        )

    # 2. OpenAI
    api_key = os.environ.get("OPENAI_API_KEY")
    if api_key:
        from planboard.llm.openai_adapter import OpenAIProvider

        return OpenAIProvider(
            LLMConfig(
                provider="openai",
                model="gpt-4o",
                api_key=api_key,
                temperature=temperature,
            )
        )

    # 3. Anthropic
    api_key = os.environ.get("ANTHROPIC_API_KEY")
    if api_key:
        from planboard.llm.claude import ClaudeProvider

        return ClaudeProvider(
            LLMConfig(
                provider="anthropic",
                model="claude-haiku-4-5-20251001",
                api_key=api_key,
                temperature=temperature,
            )
        )

    raise ValueError(
        "No LLM provider found. Set llm.provider in planboard.yaml or export an "
        "API key (GEMINI_API_KEY, GOOGLE_API_KEY, OPENAI_API_KEY, ANTHROPIC_API_KEY)."
    )
