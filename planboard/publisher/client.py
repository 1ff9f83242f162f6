"""HTTP client for the xTiles generate-from-markdown endpoint."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from planboard.config.models import PublisherConfig
from planboard.publisher.models import DocumentPublishResult, PublishError

logger = logging.getLogger(__name__)


class DocumentPublisher:
    """Posts generated Markdown and returns the project url/id.

    One attempt per call, no retries. A shared ``httpx.AsyncClient`` may be
    passed in; otherwise a client is opened for each request.
    """

    def __init__(
        self,
        config: PublisherConfig,
        api_key: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config
        self._api_key = api_key if api_key is not None else os.environ.get(config.api_key_env)
        self._client = client

    def build_payload(self, markdown: str, project_id: str | None = None) -> dict[str, Any]:
        if self.config.payload_shape == "email_bot":
            body: dict[str, Any] = {
                "content": markdown,
                "email": "",
                "emailsData": "",
                "source": "EMAIL_BOT",
                "metaInfo": {"processId": self.config.process_id},
            }
        else:
            body = {"markdown": markdown}
        if project_id:
            body["projectId"] = project_id
        return body

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._api_key:
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def publish(
        self, markdown: str, project_id: str | None = None
    ) -> DocumentPublishResult:
        payload = self.build_payload(markdown, project_id)
        logger.info(
            "POST %s (projectId=%s, markdown length=%d)",
            self.config.endpoint,
            project_id,
            len(markdown),
        )
        try:
            if self._client is not None:
                resp = await self._post(self._client, payload)
            else:
                async with httpx.AsyncClient() as client:
                    resp = await self._post(client, payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Publish request failed: %s", e)
            raise PublishError(f"xTiles request failed: {e}") from e

        if not resp.is_success:
            body = resp.text
            logger.error("Publish failed: %s %s %s", resp.status_code, resp.reason_phrase, body)
            raise PublishError(
                f"xTiles API error {resp.status_code}: {body or resp.reason_phrase}",
                status_code=resp.status_code,
                body=body,
            )

        try:
            data = resp.json()
        except ValueError:
            data = {}
        result = DocumentPublishResult.from_payload(data)
        logger.info(
            "Publish ok: status=%s projectId=%s url=%s",
            resp.status_code,
            result.project_id,
            result.url,
        )
        return result

    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.config.endpoint,
            json=payload,
            headers=self._headers(),
            timeout=self.config.timeout,
        )
