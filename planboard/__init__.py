"""planboard - turn chat requests into published xTiles project boards."""

from planboard.config import PlanboardConfig, load_config
from planboard.generation import GenerationOrchestrator, GenerationResponse
from planboard.llm import LLMProvider, create_llm_provider
from planboard.publisher import DocumentPublisher, PublishError
from planboard.session import ConversationSession, GenerationMode, UsageAccumulator

__version__ = "0.1.0"

__all__ = [
    "ConversationSession",
    "DocumentPublisher",
    "GenerationMode",
    "GenerationOrchestrator",
    "GenerationResponse",
    "LLMProvider",
    "PlanboardConfig",
    "PublishError",
    "UsageAccumulator",
    "create_llm_provider",
    "load_config",
]
