"""Cumulative token accounting for a conversation session."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class UsageSnapshot(BaseModel):
    """Read-only view of the running totals."""

    model_config = ConfigDict(frozen=True)

    input_tokens: int = 0
    output_tokens: int = 0
    cached_tokens: int = 0


class UsageAccumulator:
    """Running input/output/cached token totals.

    Totals only grow between resets; each turn adds its own usage.
    """

    def __init__(self) -> None:
        self._input = 0
        self._output = 0
        self._cached = 0

    def add(self, prompt: int, output: int, cached: int) -> None:
        if prompt < 0 or output < 0 or cached < 0:
            raise ValueError(
                f"Token counts must be non-negative, got ({prompt}, {output}, {cached})"
            )
        self._input += prompt
        self._output += output
        self._cached += cached

    def reset(self) -> None:
        self._input = 0
        self._output = 0
        self._cached = 0
        logger.info("Token accumulators reset")

    def snapshot(self) -> UsageSnapshot:
        return UsageSnapshot(
            input_tokens=self._input,
            output_tokens=self._output,
            cached_tokens=self._cached,
        )
