"""OpenAI adapter for planboard."""

from __future__ import annotations

from collections.abc import Sequence

from openai import APIError, AsyncOpenAI, RateLimitError

from planboard.llm.base import ChatHandle, HistoryChat, LLMProvider
from planboard.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage, Turn


class OpenAIProvider(LLMProvider):
    """OpenAI adapter using the async SDK."""

    supports_multi_turn = True

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncOpenAI(
            api_key=config.api_key,  # falls back to OPENAI_API_KEY env var
            base_url=config.base_url,
            max_retries=0,
        )

    def start_chat(self, system: str, temperature: float | None = None) -> ChatHandle:
        return HistoryChat(self, system, temperature)

    async def generate_turns(
        self,
        system: str,
        turns: Sequence[Turn],
        temperature: float | None = None,
    ) -> LLMResponse:
        messages = [{"role": "system", "content": system}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        try:
            response = await self._client.chat.completions.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self._temperature(temperature),
                messages=messages,
            )
        except APIError as e:
            raise LLMError(
                "openai", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        if not response.choices:
            raise LLMError("openai", "generate", ValueError("No choices in OpenAI response"))
        usage = response.usage
        details = getattr(usage, "prompt_tokens_details", None) if usage else None
        return LLMResponse(
            content=response.choices[0].message.content or "",
            usage=TokenUsage(
                input_tokens=usage.prompt_tokens if usage else 0,
                output_tokens=usage.completion_tokens if usage else 0,
                cached_tokens=(details.cached_tokens or 0) if details else 0,
            ),
            model=response.model,
        )
