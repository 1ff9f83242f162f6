"""Public facade: routes each user turn to the active generation strategy."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from planboard.config import PlanboardConfig
from planboard.generation.models import GenerationResponse, InputError, TurnInFlightError
from planboard.generation.prompts import load_system_instruction
from planboard.generation.strategies import (
    FullHistoryStrategy,
    GenerationStrategy,
    StatefulStrategy,
)
from planboard.llm import LLMProvider, Turn, create_llm_provider
from planboard.publisher import DocumentPublisher
from planboard.session import ConversationSession, GenerationMode, UsageSnapshot

logger = logging.getLogger(__name__)


class GenerationOrchestrator:
    """Holds the session and dispatches ``send`` to the strategy for its mode.

    Only one ``send`` may run at a time; mode changes and resets are refused
    while a turn is in flight.
    """

    def __init__(self, session: ConversationSession, publisher: DocumentPublisher) -> None:
        self.session = session
        self.publisher = publisher
        self._strategies: dict[GenerationMode, GenerationStrategy] = {
            GenerationMode.stateful: StatefulStrategy(session, publisher),
            GenerationMode.full_history: FullHistoryStrategy(session, publisher),
        }
        self._in_flight = False

    @classmethod
    def from_config(
        cls,
        config: PlanboardConfig,
        provider: LLMProvider | None = None,
        publisher: DocumentPublisher | None = None,
    ) -> GenerationOrchestrator:
        """Wire provider, publisher and session from app config."""
        session = ConversationSession(
            provider or create_llm_provider(config.llm),
            load_system_instruction(config.system_prompt_path),
            temperature=config.llm.temperature,
            mode=GenerationMode(config.session.mode),
            reset_on_same_mode=config.session.reset_on_same_mode,
        )
        return cls(session, publisher or DocumentPublisher(config.publisher))

    @property
    def mode(self) -> GenerationMode:
        return self.session.mode

    @property
    def project_id(self) -> str | None:
        return self.session.project_id

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def set_mode(self, mode: GenerationMode | str) -> None:
        """Switch strategy. A real change resets the whole session."""
        self._ensure_idle("set_mode")
        self.session.set_mode(mode)

    def reset_session(self) -> None:
        self._ensure_idle("reset_session")
        self.session.reset_session()

    def get_usage_snapshot(self) -> UsageSnapshot:
        return self.session.usage.snapshot()

    async def send(
        self,
        user_text: str,
        project_id: str | None = None,
        transcript: Sequence[Turn | Mapping] | None = None,
    ) -> GenerationResponse:
        """Run one user turn through the active strategy.

        ``project_id`` defaults to the id the session last received from the
        document service. ``transcript`` is only read in full-history mode.
        """
        if not isinstance(user_text, str) or not user_text.strip():
            raise InputError("User text must be a non-empty string")
        self._ensure_idle("send")

        mode = self.session.mode
        turns = _coerce_transcript(transcript) if mode is GenerationMode.full_history else []
        known_id = project_id if project_id is not None else self.session.project_id

        self._in_flight = True
        try:
            response = await self._strategies[mode].generate(user_text, known_id, turns)
        finally:
            self._in_flight = False

        self.session.record_project_id(response.project_id)
        return response

    def _ensure_idle(self, operation: str) -> None:
        if self._in_flight:
            raise TurnInFlightError(f"Cannot {operation} while a turn is in flight")


def _coerce_transcript(transcript: Sequence[Turn | Mapping] | None) -> list[Turn]:
    """Copy the caller's transcript into Turn objects without touching it."""
    return [
        t.model_copy() if isinstance(t, Turn) else Turn.model_validate(dict(t))
        for t in transcript or ()
    ]
