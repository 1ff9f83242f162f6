"""CORS pass-through for the publish endpoint.

Browsers can't call the xTiles API directly from another origin, so this app
accepts the same POST body, forwards it upstream unchanged and hands back the
upstream status and body with permissive CORS headers.
"""

from __future__ import annotations

import logging

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from planboard.config.models import DEFAULT_PUBLISH_ENDPOINT

logger = logging.getLogger(__name__)

_ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}
_PREFLIGHT_HEADERS = {
    **_ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(
    upstream: str = DEFAULT_PUBLISH_ENDPOINT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the proxy app. ``transport`` lets tests stand in for the upstream."""
    app = FastAPI(title="planboard publish proxy")

    async def forward(request: Request) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=_PREFLIGHT_HEADERS)
        if request.method != "POST":
            return PlainTextResponse("Method Not Allowed", status_code=405)

        body = await request.body()
        headers = {"Content-Type": "application/json"}
        if "authorization" in request.headers:
            headers["Authorization"] = request.headers["authorization"]

        try:
            async with httpx.AsyncClient(transport=transport) as client:
                upstream_resp = await client.post(
                    upstream, content=body, headers=headers, timeout=None
                )
        except httpx.HTTPError as e:
            logger.error("Proxy request to %s failed: %s", upstream, e)
            return JSONResponse(
                {"error": "proxy_error", "message": str(e) or "Unknown error"},
                status_code=500,
                headers=_ALLOW_ORIGIN,
            )

        logger.info("Proxied POST -> %s (%d)", upstream, upstream_resp.status_code)
        return Response(
            content=upstream_resp.content,
            status_code=upstream_resp.status_code,
            media_type="application/json",
            headers=_ALLOW_ORIGIN,
        )

    app.add_api_route("/", forward, methods=_ALL_METHODS)
    app.add_api_route("/api/xtiles/generate", forward, methods=_ALL_METHODS)
    return app
