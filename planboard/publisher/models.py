"""Models and errors for the document publisher."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class PublishError(Exception):
    """The document service rejected or never answered a publish request.

    ``status_code`` and ``body`` are set when an HTTP response came back.
    ``markdown`` is attached by the generation layer so callers can still
    show what the model produced.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.markdown: str | None = None


class DocumentPublishResult(BaseModel):
    """Canonical publish result; either field may be missing."""

    url: str | None = None
    project_id: str | None = None

    @classmethod
    def from_payload(cls, data: Any) -> DocumentPublishResult:
        """Read ``url``/``projectId`` from the top level, then from ``data``."""
        if not isinstance(data, dict):
            return cls()
        nested = data.get("data")
        if not isinstance(nested, dict):
            nested = {}
        return cls(
            url=_as_str(data.get("url")) or _as_str(nested.get("url")),
            project_id=_as_str(data.get("projectId")) or _as_str(nested.get("projectId")),
        )


def _as_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    # Some deployments return numeric project ids
    return str(value)
