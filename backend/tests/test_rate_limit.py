"""
Testes para o middleware de Rate Limiting.
"""
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import RATE_LIMIT_AUTH_LOGIN, RATE_LIMIT_AUTH_REGISTER, RATE_LIMIT_REQUESTS
from middleware.rate_limit import PATH_RULES, RateLimitMiddleware, SlidingWindow


class TestSlidingWindow:
    """Testes da janela deslizante."""

    def test_blocks_after_limit(self):
        window = SlidingWindow(limit=2, window_seconds=60)
        assert window.hit("1.1.1.1", 100.0) == (False, 1)
        assert window.hit("1.1.1.1", 101.0) == (False, 0)
        assert window.hit("1.1.1.1", 102.0) == (True, 0)

    def test_keys_are_independent(self):
        window = SlidingWindow(limit=1, window_seconds=60)
        window.hit("1.1.1.1", 100.0)
        assert window.hit("2.2.2.2", 100.0) == (False, 0)

    def test_window_expires(self):
        window = SlidingWindow(limit=1, window_seconds=60)
        window.hit("1.1.1.1", 100.0)
        assert window.hit("1.1.1.1", 161.0) == (False, 0)

    def test_cleanup_removes_empty_keys(self):
        window = SlidingWindow(limit=5, window_seconds=10)
        window.hit("1.1.1.1", 100.0)
        window.cleanup(200.0)
        assert "1.1.1.1" not in window.hits


class TestPathRules:
    """Regras específicas por path."""

    def test_rules_defined(self):
        names = [rule[0] for rule in PATH_RULES]
        assert names == ["login", "register", "upload"]

    def test_auth_limits_are_restrictive(self):
        assert RATE_LIMIT_AUTH_LOGIN < RATE_LIMIT_REQUESTS
        assert RATE_LIMIT_AUTH_REGISTER <= RATE_LIMIT_AUTH_LOGIN

    def test_select_window(self):
        middleware = RateLimitMiddleware(app=None, enabled=True)
        assert middleware._select_window("POST", "/api/auth/login")[0] == "login"
        assert middleware._select_window("POST", "/api/auth/register")[0] == "register"
        assert middleware._select_window("POST", "/api/imports/3/documents")[0] == "upload"
        assert middleware._select_window("POST", "/api/imports/3/documents/batch")[0] == "upload"
        assert middleware._select_window("POST", "/api/document-requests/2/upload")[0] == "upload"
        assert middleware._select_window("POST", "/api/documents/validate")[0] == "upload"

    def test_get_uses_default(self):
        middleware = RateLimitMiddleware(app=None, enabled=True)
        assert middleware._select_window("GET", "/api/auth/login")[0] == "default"
        assert middleware._select_window("GET", "/api/imports")[0] == "default"


def _app(limit: int = 2, enabled: bool = True) -> TestClient:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, requests_limit=limit, window_seconds=60, enabled=enabled)

    @app.get("/api/imports")
    def list_imports():
        return {"ok": True}

    @app.get("/health")
    def health():
        return {"status": "healthy"}

    return TestClient(app)


class TestRateLimitMiddleware:
    """Comportamento HTTP do middleware."""

    def test_returns_429_after_limit(self):
        client = _app(limit=2)
        assert client.get("/api/imports").status_code == 200
        assert client.get("/api/imports").status_code == 200

        response = client.get("/api/imports")
        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert "detail" in response.json()

    def test_remaining_header(self):
        client = _app(limit=5)
        response = client.get("/api/imports")
        assert response.headers["X-RateLimit-Limit"] == "5"
        assert response.headers["X-RateLimit-Remaining"] == "4"

    def test_health_is_not_limited(self):
        client = _app(limit=1)
        for _ in range(3):
            assert client.get("/health").status_code == 200

    def test_disabled(self):
        client = _app(limit=1, enabled=False)
        for _ in range(3):
            assert client.get("/api/imports").status_code == 200
