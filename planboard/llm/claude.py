"""Anthropic Claude adapter for planboard."""

from __future__ import annotations

from collections.abc import Sequence

from anthropic import APIError, AsyncAnthropic, RateLimitError

from planboard.llm.base import ChatHandle, HistoryChat, LLMProvider
from planboard.llm.models import LLMConfig, LLMError, LLMResponse, TokenUsage, Turn


class ClaudeProvider(LLMProvider):
    """Claude adapter using the Anthropic async SDK."""

    supports_multi_turn = True

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        self._client = AsyncAnthropic(
            api_key=config.api_key,  # falls back to ANTHROPIC_API_KEY env var
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
        # Anthropic caps temperature at 1.0
        temp = min(self._temperature(temperature), 1.0)
        try:
            message = await self._client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=temp,
                system=system,
                messages=[{"role": t.role, "content": t.content} for t in turns],
            )
        except APIError as e:
            raise LLMError(
                "claude", "generate", e, retryable=isinstance(e, RateLimitError)
            ) from e

        text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        return LLMResponse(
            content=text,
            usage=TokenUsage(
                input_tokens=message.usage.input_tokens,
                output_tokens=message.usage.output_tokens,
                cached_tokens=getattr(message.usage, "cache_read_input_tokens", None) or 0,
            ),
            model=message.model,
        )
