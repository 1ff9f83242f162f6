"""Tests for the CORS pass-through app."""

import httpx
import pytest
from fastapi.testclient import TestClient

from planboard.proxy import create_app

UPSTREAM = "https://tiles.test/api/generate"


@pytest.fixture
def upstream():
    calls: list[httpx.Request] = []
    state = {"response": httpx.Response(201, json={"url": "https://x/p1", "projectId": "p1"})}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return state["response"]

    return calls, state, handler


@pytest.fixture
def client(upstream):
    _, _, handler = upstream
    app = create_app(UPSTREAM, transport=httpx.MockTransport(handler))
    return TestClient(app)


class TestProxy:
    @pytest.mark.parametrize("path", ["/", "/api/xtiles/generate"])
    def test_preflight(self, client, upstream, path):
        resp = client.options(path)
        assert resp.status_code == 204
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "POST" in resp.headers["access-control-allow-methods"]
        assert "Authorization" in resp.headers["access-control-allow-headers"]
        assert upstream[0] == []

    def test_get_not_allowed(self, client, upstream):
        resp = client.get("/")
        assert resp.status_code == 405
        assert resp.text == "Method Not Allowed"
        assert upstream[0] == []

    def test_post_forwarded_verbatim(self, client, upstream):
        calls, _, _ = upstream
        body = b'{"markdown": "# Board", "projectId": "p0"}'

        resp = client.post("/", content=body, headers={"Authorization": "Bearer t"})

        assert resp.status_code == 201
        assert resp.json() == {"url": "https://x/p1", "projectId": "p1"}
        assert resp.headers["access-control-allow-origin"] == "*"
        assert len(calls) == 1
        assert str(calls[0].url) == UPSTREAM
        assert calls[0].content == body
        assert calls[0].headers["Authorization"] == "Bearer t"

    def test_no_auth_header_when_absent(self, client, upstream):
        calls, _, _ = upstream
        client.post("/api/xtiles/generate", content=b"{}")
        assert "Authorization" not in calls[0].headers

    def test_upstream_error_status_passed_through(self, client, upstream):
        _, state, _ = upstream
        state["response"] = httpx.Response(502, text='{"error": "bad gateway"}')

        resp = client.post("/", content=b"{}")

        assert resp.status_code == 502
        assert resp.text == '{"error": "bad gateway"}'

    def test_transport_failure_is_500(self):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = TestClient(create_app(UPSTREAM, transport=httpx.MockTransport(boom)))
        resp = client.post("/", content=b"{}")

        assert resp.status_code == 500
        assert resp.json() == {"error": "proxy_error", "message": "connection refused"}
        assert resp.headers["access-control-allow-origin"] == "*"
