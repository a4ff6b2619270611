import json

import httpx
from fastapi.testclient import TestClient

from airouter.devproxy import create_dev_proxy_app, filter_response_headers, rewrite_request_headers


def _proxy_client(handler, calls: list | None = None) -> TestClient:
    def recording_handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return handler(request)

    app = create_dev_proxy_app(backend_url="http://backend:3001", transport=httpx.MockTransport(recording_handler))
    return TestClient(app)


class TestHeaderRewriting:
    def test_host_rewritten_to_target(self):
        headers = rewrite_request_headers(
            {"Host": "localhost:3000", "Connection": "keep-alive", "Accept": "application/json"},
            httpx.URL("http://backend:3001"),
        )
        assert headers == {"Accept": "application/json", "host": "backend:3001"}

    def test_hop_by_hop_response_headers_dropped(self):
        filtered = filter_response_headers(httpx.Headers({
            "content-type": "application/json",
            "transfer-encoding": "chunked",
            "content-length": "12",
            "x-request-id": "r1",
        }))
        assert filtered == {"content-type": "application/json", "x-request-id": "r1"}


class TestForwarding:
    def test_path_forwarded_unchanged(self):
        calls = []
        client = _proxy_client(lambda request: httpx.Response(200, json={"success": True}), calls)
        response = client.get("/api/tools/Text%20Generation?x=1")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        sent = calls[0]
        assert sent.url.raw_path == b"/api/tools/Text%20Generation?x=1"
        assert sent.headers["host"] == "backend:3001"

    def test_status_and_body_passed_through(self):
        client = _proxy_client(lambda request: httpx.Response(
            404, json={"success": False, "error": "Category 'X' not found"}, headers={"x-trace": "abc"},
        ))
        response = client.get("/api/tools/X")
        assert response.status_code == 404
        assert response.json()["error"] == "Category 'X' not found"
        assert response.headers["x-trace"] == "abc"

    def test_post_body_forwarded(self):
        calls = []
        client = _proxy_client(lambda request: httpx.Response(200, json={}), calls)
        client.post("/api/auth/login", json={"email": "a@b.co"})
        assert calls[0].method == "POST"
        assert json.loads(calls[0].content) == {"email": "a@b.co"}

    def test_backend_unreachable_is_502(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        client = _proxy_client(handler)
        response = client.get("/api/tools")
        assert response.status_code == 502
        assert response.json()["success"] is False
