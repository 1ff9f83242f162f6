"""Conversation session: generation mode, chat handle and project identity."""

from __future__ import annotations

import logging
from enum import Enum

from planboard.llm.base import ChatHandle, LLMProvider
from planboard.session.usage import UsageAccumulator

logger = logging.getLogger(__name__)


class GenerationMode(str, Enum):
    """How prior turns reach the model."""

    stateful = "stateful"
    full_history = "full_history"


class ConversationSession:
    """Owns the mutable state shared by all turns of one conversation.

    The chat handle only exists in stateful mode, and only after the first
    turn since the last reset. Changing mode or resetting discards the handle,
    zeroes the usage totals and forgets the project id.
    """

    def __init__(
        self,
        provider: LLMProvider,
        system_instruction: str,
        temperature: float | None = None,
        mode: GenerationMode = GenerationMode.stateful,
        reset_on_same_mode: bool = False,
        usage: UsageAccumulator | None = None,
    ) -> None:
        self.provider = provider
        self.system_instruction = system_instruction
        self.temperature = temperature
        self.reset_on_same_mode = reset_on_same_mode
        self.usage = usage or UsageAccumulator()
        self._mode = GenerationMode(mode)
        self._handle: ChatHandle | None = None
        self._project_id: str | None = None

    @property
    def mode(self) -> GenerationMode:
        return self._mode

    @property
    def project_id(self) -> str | None:
        return self._project_id

    @property
    def has_handle(self) -> bool:
        return self._handle is not None

    def set_mode(self, new_mode: GenerationMode | str) -> None:
        new_mode = GenerationMode(new_mode)
        if new_mode == self._mode and not self.reset_on_same_mode:
            logger.debug("Mode already %s, keeping session", new_mode.value)
            return
        self.reset_session()
        self._mode = new_mode
        logger.info("Generation mode set to %s", new_mode.value)

    def reset_session(self) -> None:
        """Drop the chat handle, zero usage totals and clear the project id."""
        if self._handle is not None:
            logger.info("Stateful chat handle discarded")
        self._handle = None
        self._project_id = None
        self.usage.reset()

    def record_project_id(self, project_id: str | None) -> None:
        if project_id:
            self._project_id = project_id

    def get_or_create_handle(self) -> ChatHandle:
        if self._mode is not GenerationMode.stateful:
            raise RuntimeError(
                f"Chat handles are only kept in stateful mode (current: {self._mode.value})"
            )
        if self._handle is None:
            self._handle = self.provider.start_chat(self.system_instruction, self.temperature)
            logger.info("Stateful chat handle created")
        return self._handle
