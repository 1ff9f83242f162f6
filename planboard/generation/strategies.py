"""Generation strategies: how prior turns are supplied to the model.

Both strategies share the same tail: record token usage, publish non-empty
Markdown, and build a ``GenerationResponse`` with cumulative totals.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from planboard.generation.models import GenerationResponse
from planboard.generation.prompts import build_user_prompt, serialize_history
from planboard.llm.models import LLMResponse, Turn
from planboard.publisher import DocumentPublisher, PublishError
from planboard.session.session import ConversationSession, GenerationMode

logger = logging.getLogger(__name__)

EMPTY_RESPONSE_MARKER = "Empty model response ({mode})."


class GenerationStrategy(ABC):
    """One way of turning a user request into a published board."""

    mode: GenerationMode

    def __init__(self, session: ConversationSession, publisher: DocumentPublisher) -> None:
        self.session = session
        self.publisher = publisher

    @property
    def empty_marker(self) -> str:
        return EMPTY_RESPONSE_MARKER.format(mode=self.mode.name.upper())

    async def generate(
        self,
        user_text: str,
        project_id: str | None = None,
        transcript: Sequence[Turn] = (),
    ) -> GenerationResponse:
        logger.info("Generating in %s mode", self.mode.value)
        response = await self._invoke(build_user_prompt(user_text), transcript)
        logger.debug("Model output (%s):\n%s", self.mode.value, response.content.strip())
        return await self._finish(response, project_id)

    @abstractmethod
    async def _invoke(self, user_prompt: str, transcript: Sequence[Turn]) -> LLMResponse:
        """Run the LLM call for this strategy."""
        ...

    async def _finish(
        self, response: LLMResponse, project_id: str | None
    ) -> GenerationResponse:
        usage = response.usage
        self.session.usage.add(usage.input_tokens, usage.output_tokens, usage.cached_tokens)
        totals = self.session.usage.snapshot()
        logger.info(
            "Tokens (%s) added in=%d out=%d cached=%d; totals in=%d out=%d cached=%d",
            self.mode.value,
            usage.input_tokens,
            usage.output_tokens,
            usage.cached_tokens,
            totals.input_tokens,
            totals.output_tokens,
            totals.cached_tokens,
        )

        markdown = response.content.strip()
        if not markdown:
            logger.warning("Model returned no text in %s mode; skipping publish", self.mode.value)
            return self._envelope(self.empty_marker, response, project_id, None, empty=True)

        try:
            published = await self.publisher.publish(markdown, project_id)
        except PublishError as e:
            e.markdown = markdown
            raise
        return self._envelope(
            markdown,
            response,
            published.project_id or project_id,
            published.url,
        )

    def _envelope(
        self,
        text: str,
        response: LLMResponse,
        project_id: str | None,
        project_url: str | None,
        empty: bool = False,
    ) -> GenerationResponse:
        totals = self.session.usage.snapshot()
        return GenerationResponse(
            text=text,
            sources=response.sources,
            input_tokens=totals.input_tokens,
            output_tokens=totals.output_tokens,
            cached_tokens=totals.cached_tokens,
            project_id=project_id,
            project_url=project_url,
            mode=self.mode,
            empty=empty,
        )


class StatefulStrategy(GenerationStrategy):
    """Sends only the new prompt; the session's chat handle carries history."""

    mode = GenerationMode.stateful

    async def _invoke(self, user_prompt: str, transcript: Sequence[Turn]) -> LLMResponse:
        handle = self.session.get_or_create_handle()
        return await handle.send(user_prompt)


class FullHistoryStrategy(GenerationStrategy):
    """Resends the whole transcript with every request; keeps no handle.

    Uses the provider's native multi-turn call when available, otherwise
    serializes the transcript into a single two-part message sent through a
    throwaway chat handle. The bundled Gemini, OpenAI and Claude adapters all
    support multi-turn input, so the serialized path serves third-party
    providers only.
    """

    mode = GenerationMode.full_history

    async def _invoke(self, user_prompt: str, transcript: Sequence[Turn]) -> LLMResponse:
        provider = self.session.provider
        system = self.session.system_instruction
        temperature = self.session.temperature

        if provider.supports_multi_turn:
            turns = [*transcript, Turn(role="user", content=user_prompt)]
            logger.debug("Sending %d turns natively", len(turns))
            return await provider.generate_turns(system, turns, temperature)

        logger.debug("Provider lacks multi-turn input; sending serialized history")
        one_off = provider.start_chat(system, temperature)
        return await one_off.send([serialize_history(transcript), user_prompt])
