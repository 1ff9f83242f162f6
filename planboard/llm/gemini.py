"""Google Gemini adapter for planboard."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from planboard.llm.base import ChatHandle, LLMProvider
from planboard.llm.models import (
    GroundingSource,
    LLMConfig,
    LLMError,
    LLMResponse,
    TokenUsage,
    Turn,
)

# Gemini calls the assistant side of a conversation "model"
_ROLE_MAP = {"user": "user", "assistant": "model"}


def _wrap_error(operation: str, e: Exception) -> LLMError:
    return LLMError("gemini", operation, e, retryable=getattr(e, "code", None) == 429)


def _extract_sources(response: Any) -> list[GroundingSource]:
    """Pull web references out of the first candidate's grounding metadata."""
    candidates = getattr(response, "candidates", None)
    if not isinstance(candidates, (list, tuple)) or not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None)
    if not isinstance(chunks, (list, tuple)):
        return []

    sources: list[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        uri = getattr(web, "uri", None)
        if not isinstance(uri, str) or not uri:
            continue
        title = getattr(web, "title", None)
        sources.append(GroundingSource(uri=uri, title=title if isinstance(title, str) else None))
    return sources


def _count(usage: Any, field: str) -> int:
    value = getattr(usage, field, None)
    return value if isinstance(value, int) else 0


def to_llm_response(response: Any, model: str) -> LLMResponse:
    """Normalize a google-genai GenerateContentResponse."""
    text = getattr(response, "text", None)
    usage = getattr(response, "usage_metadata", None)
    return LLMResponse(
        content=text if isinstance(text, str) else "",
        usage=TokenUsage(
            input_tokens=_count(usage, "prompt_token_count"),
            output_tokens=_count(usage, "candidates_token_count"),
            cached_tokens=_count(usage, "cached_content_token_count"),
        ),
        sources=_extract_sources(response),
        model=model,
    )


class GeminiChat(ChatHandle):
    """Wraps a google-genai async chat session."""

    def __init__(self, chat: Any, model: str) -> None:
        self._chat = chat
        self._model = model

    async def send(self, message: str | list[str]) -> LLMResponse:
        try:
            response = await self._chat.send_message(message)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise _wrap_error("chat", e) from e
        return to_llm_response(response, self._model)


class GeminiProvider(LLMProvider):
    """Gemini adapter using the google-genai async client."""

    supports_multi_turn = True

    def __init__(self, config: LLMConfig) -> None:
        super().__init__(config)
        http_options = types.HttpOptions(base_url=config.base_url) if config.base_url else None
        self._client = genai.Client(api_key=config.api_key, http_options=http_options)

    def _generate_config(
        self, system: str, temperature: float | None
    ) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self.config.grounding else None
        return types.GenerateContentConfig(
            system_instruction=system,
            temperature=self._temperature(temperature),
            max_output_tokens=self.config.max_tokens,
            tools=tools,
        )

    def start_chat(self, system: str, temperature: float | None = None) -> ChatHandle:
        chat = self._client.aio.chats.create(
            model=self.config.model,
            config=self._generate_config(system, temperature),
        )
        return GeminiChat(chat, self.config.model)

    async def generate_turns(
        self,
        system: str,
        turns: Sequence[Turn],
        temperature: float | None = None,
    ) -> LLMResponse:
        contents = [
            types.Content(role=_ROLE_MAP[t.role], parts=[types.Part.from_text(text=t.content)])
            for t in turns
        ]
        try:
            response = await self._client.aio.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=self._generate_config(system, temperature),
            )
        except (genai_errors.APIError, httpx.HTTPError) as e:
            raise _wrap_error("generate", e) from e
        return to_llm_response(response, self.config.model)
