"""Response envelope and errors for the generation layer."""

from __future__ import annotations

from pydantic import BaseModel, Field

from planboard.llm.models import GroundingSource
from planboard.session.session import GenerationMode


class InputError(ValueError):
    """The caller passed unusable user text; nothing was sent."""


class TurnInFlightError(RuntimeError):
    """Another turn is still running on this session."""


class GenerationResponse(BaseModel):
    """Result of one user turn.

    Token counts are cumulative for the session, not per turn. ``text`` is the
    generated Markdown, or the empty-response marker when the model returned
    nothing (in which case no publish was attempted).
    """

    text: str
    sources: list[GroundingSource] = Field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0
    project_id: str | None = None
    project_url: str | None = None
    mode: GenerationMode
    empty: bool = False
