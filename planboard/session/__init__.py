"""Session state: generation mode, chat handle, token accounting."""

from planboard.session.session import ConversationSession, GenerationMode
from planboard.session.usage import UsageAccumulator, UsageSnapshot

__all__ = [
    "ConversationSession",
    "GenerationMode",
    "UsageAccumulator",
    "UsageSnapshot",
]
