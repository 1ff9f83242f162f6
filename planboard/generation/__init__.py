"""Turn orchestration: prompts, strategies and the public facade."""

from planboard.generation.models import GenerationResponse, InputError, TurnInFlightError
from planboard.generation.orchestrator import GenerationOrchestrator
from planboard.generation.strategies import (
    EMPTY_RESPONSE_MARKER,
    FullHistoryStrategy,
    GenerationStrategy,
    StatefulStrategy,
)

__all__ = [
    "EMPTY_RESPONSE_MARKER",
    "FullHistoryStrategy",
    "GenerationOrchestrator",
    "GenerationResponse",
    "GenerationStrategy",
    "InputError",
    "StatefulStrategy",
    "TurnInFlightError",
]
