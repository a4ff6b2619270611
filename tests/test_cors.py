from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from airouter.cors import OriginPolicy
from airouter.main import create_app


@pytest.fixture
def policy():
    return OriginPolicy(exact_origins=frozenset({"https://app.example.com"}))


def _allowed(policy: OriginPolicy, origin: str) -> bool:
    resp = TestClient(create_app(policy)).get("/health", headers={"Origin": origin})
    return resp.headers.get("access-control-allow-origin") == origin


class TestOriginPolicy:
    @pytest.mark.parametrize("origin", [
        "http://localhost",
        "http://localhost:3000",
        "https://localhost:5173",
        "http://127.0.0.1:8080",
    ])
    def test_local_origins_allowed(self, policy, origin):
        assert _allowed(policy, origin)

    def test_vercel_preview_allowed(self, policy):
        assert _allowed(policy, "https://my-app-git-main-team.vercel.app")

    def test_exact_origin_allowed(self, policy):
        assert _allowed(policy, "https://app.example.com")

    @pytest.mark.parametrize("origin", [
        "https://evil.com",
        "https://vercel.app.evil.com",
        "https://localhost.evil.com",
        "https://app.example.com.evil.com",
    ])
    def test_everything_else_denied(self, policy, origin):
        assert not _allowed(policy, origin)

    def test_local_can_be_disabled(self):
        policy = OriginPolicy(allow_local=False, domain_suffixes=())
        assert policy.origin_regex is None
        assert not _allowed(policy, "http://localhost:3000")

    def test_regex_anchored_at_end(self, policy):
        assert policy.origin_regex.endswith(r")\Z")

    def test_from_settings(self):
        with patch.dict("os.environ", {
            "CORS_ALLOWED_ORIGINS": "https://a.example.com/",
            "CORS_ALLOWED_DOMAIN_SUFFIXES": "example.org",
        }):
            policy = OriginPolicy.from_settings()
        assert policy.exact_origins == frozenset({"https://a.example.com"})
        assert policy.domain_suffixes == (".example.org",)
        assert _allowed(policy, "https://docs.example.org")
        assert not _allowed(policy, "https://x.vercel.app")


class TestCorsMiddleware:
    def _client(self):
        return TestClient(create_app(OriginPolicy()))

    def test_allowed_origin_echoed_with_credentials(self):
        resp = self._client().get("/health", headers={"Origin": "https://preview.vercel.app"})
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "https://preview.vercel.app"
        assert resp.headers["access-control-allow-credentials"] == "true"

    def test_denied_origin_gets_no_allow_header(self):
        resp = self._client().get("/health", headers={"Origin": "https://evil.com"})
        assert resp.status_code == 200
        assert "access-control-allow-origin" not in resp.headers

    def test_no_origin_served(self):
        resp = self._client().get("/api/tools")
        assert resp.status_code == 200

    def test_preflight_allowed(self):
        resp = self._client().options("/api/generate", headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type, Authorization",
        })
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "POST" in resp.headers["access-control-allow-methods"]

    def test_preflight_denied_origin(self):
        resp = self._client().options("/api/generate", headers={
            "Origin": "https://evil.com",
            "Access-Control-Request-Method": "POST",
        })
        assert resp.status_code == 400
