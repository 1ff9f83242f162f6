"""Shared test fixtures for planboard."""

from __future__ import annotations

from collections.abc import Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from planboard.config.models import PlanboardConfig
from planboard.generation import GenerationOrchestrator
from planboard.llm.base import ChatHandle, LLMProvider
from planboard.llm.models import GroundingSource, LLMConfig, LLMResponse, TokenUsage, Turn
from planboard.publisher import DocumentPublisher, DocumentPublishResult
from planboard.session import ConversationSession, GenerationMode


def make_response(
    content: str = "# Trip\n## Plan\n### Day 1",
    prompt: int = 0,
    output: int = 0,
    cached: int = 0,
    sources: list[GroundingSource] | None = None,
) -> LLMResponse:
    return LLMResponse(
        content=content,
        usage=TokenUsage(input_tokens=prompt, output_tokens=output, cached_tokens=cached),
        sources=sources or [],
        model="fake-model",
    )


class FakeChat(ChatHandle):
    def __init__(self, provider: FakeProvider, system: str, temperature: float | None) -> None:
        self.provider = provider
        self.system = system
        self.temperature = temperature
        self.sent: list[str | list[str]] = []

    async def send(self, message: str | list[str]) -> LLMResponse:
        self.sent.append(message)
        return self.provider.next_response()


class FakeProvider(LLMProvider):
    """Scripted provider: hands out queued responses (or raises queued errors)."""

    def __init__(self, responses: Sequence[LLMResponse | Exception] = (), multi_turn: bool = False):
        super().__init__(LLMConfig(provider="google", model="fake-model"))
        self.responses = list(responses)
        self.supports_multi_turn = multi_turn
        self.chats: list[FakeChat] = []
        self.turn_calls: list[list[Turn]] = []

    def queue(self, *items: LLMResponse | Exception) -> None:
        self.responses.extend(items)

    def next_response(self) -> LLMResponse:
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def start_chat(self, system: str, temperature: float | None = None) -> ChatHandle:
        chat = FakeChat(self, system, temperature)
        self.chats.append(chat)
        return chat

    async def generate_turns(
        self, system: str, turns: Sequence[Turn], temperature: float | None = None
    ) -> LLMResponse:
        self.turn_calls.append(list(turns))
        return self.next_response()


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def mock_publisher():
    publisher = MagicMock(spec=DocumentPublisher)
    publisher.publish = AsyncMock(
        return_value=DocumentPublishResult(url="https://x/p1", project_id="p1")
    )
    return publisher


@pytest.fixture
def session(fake_provider):
    return ConversationSession(
        fake_provider,
        "SYSTEM",
        temperature=1.45,
        mode=GenerationMode.stateful,
    )


@pytest.fixture
def orchestrator(session, mock_publisher):
    return GenerationOrchestrator(session, mock_publisher)


@pytest.fixture
def sample_config():
    return PlanboardConfig()
