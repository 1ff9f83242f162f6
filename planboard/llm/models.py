"""Pydantic models for the LLM subsystem."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class LLMError(Exception):
    """Wraps provider-specific exceptions with context."""

    def __init__(
        self, provider: str, operation: str, cause: Exception, retryable: bool = False
    ) -> None:
        self.provider = provider
        self.operation = operation
        self.retryable = retryable
        super().__init__(f"{provider} {operation} failed: {cause}")
        self.__cause__ = cause


class LLMConfig(BaseModel):
    """Configuration for an LLM provider."""

    provider: Literal["anthropic", "openai", "google"]
    model: str
    max_tokens: int = 8192
    temperature: float = 1.45
    api_key: str | None = None
    base_url: str | None = None
    grounding: bool = False


class Turn(BaseModel):
    """One message of a conversation transcript."""

    role: Literal["user", "assistant"]
    content: str


class TokenUsage(BaseModel):
    """Token usage stats from a single LLM call.

    Providers that don't report a field leave it at zero.
    """

    input_tokens: int = Field(default=0, ge=0)
    output_tokens: int = Field(default=0, ge=0)
    cached_tokens: int = Field(default=0, ge=0)


class GroundingSource(BaseModel):
    """A web reference the model cited."""

    uri: str
    title: str | None = None


class LLMResponse(BaseModel):
    """Structured response from an LLM provider."""

    content: str
    usage: TokenUsage = Field(default_factory=TokenUsage)
    sources: list[GroundingSource] = Field(default_factory=list)
    model: str
