"""Abstract LLM interface for planboard."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from planboard.llm.models import LLMConfig, LLMResponse, Turn


class ChatHandle(ABC):
    """A conversation that remembers its own prior turns.

    Callers send only the new user message; the handle supplies the history.
    """

    @abstractmethod
    async def send(self, message: str | list[str]) -> LLMResponse:
        """Send one user message (optionally multi-part) and return the reply."""
        ...


class LLMProvider(ABC):
    """Provider-agnostic interface for conversational generation.

    Every adapter must be able to open a chat handle. Adapters whose backend
    accepts a list of role-tagged turns in one call also set
    ``supports_multi_turn`` and implement ``generate_turns``.
    """

    supports_multi_turn: bool = False

    def __init__(self, config: LLMConfig) -> None:
        self.config = config

    @abstractmethod
    def start_chat(self, system: str, temperature: float | None = None) -> ChatHandle:
        """Create a fresh chat handle bound to a system instruction."""
        ...

    async def generate_turns(
        self,
        system: str,
        turns: Sequence[Turn],
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a reply to a whole role-tagged transcript in one call."""
        raise NotImplementedError(
            f"{type(self).__name__} has no native multi-turn entry point"
        )

    def _temperature(self, temperature: float | None) -> float:
        return self.config.temperature if temperature is None else temperature


class HistoryChat(ChatHandle):
    """Chat handle that keeps the transcript locally.

    Used by providers without a server-side chat object; every send replays
    the accumulated turns through ``generate_turns``. History is only extended
    after a successful call.
    """

    def __init__(
        self, provider: LLMProvider, system: str, temperature: float | None = None
    ) -> None:
        self._provider = provider
        self._system = system
        self._temperature = temperature
        self.history: list[Turn] = []

    async def send(self, message: str | list[str]) -> LLMResponse:
        text = message if isinstance(message, str) else "\n\n".join(message)
        turn = Turn(role="user", content=text)
        response = await self._provider.generate_turns(
            self._system, [*self.history, turn], self._temperature
        )
        self.history.append(turn)
        self.history.append(Turn(role="assistant", content=response.content))
        return response
