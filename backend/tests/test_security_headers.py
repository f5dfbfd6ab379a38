"""
Testes para o middleware de Security Headers.
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from middleware.security_headers import API_CSP, DOCS_CSP, SecurityHeadersMiddleware


def _client(**kwargs) -> TestClient:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware, **kwargs)

    @app.get("/test")
    def test_endpoint():
        return {"message": "ok"}

    return TestClient(app)


class TestSecurityHeadersMiddleware:
    """Testes do middleware SecurityHeadersMiddleware."""

    @pytest.fixture
    def client(self):
        return _client()

    def test_x_content_type_options_header(self, client):
        response = client.get("/test")
        assert response.headers.get("X-Content-Type-Options") == "nosniff"

    def test_x_frame_options_header(self, client):
        response = client.get("/test")
        assert response.headers.get("X-Frame-Options") == "DENY"

    def test_referrer_policy_header(self, client):
        response = client.get("/test")
        assert response.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"

    def test_api_csp(self, client):
        """A API só serve JSON: CSP bloqueia tudo."""
        response = client.get("/test")
        assert response.headers.get("Content-Security-Policy") == API_CSP

    def test_docs_csp(self):
        app = FastAPI()
        app.add_middleware(SecurityHeadersMiddleware)
        client = TestClient(app)

        response = client.get("/docs")
        assert response.headers.get("Content-Security-Policy") == DOCS_CSP

    def test_permissions_policy_header(self, client):
        pp = client.get("/test").headers.get("Permissions-Policy")
        assert "camera=()" in pp
        assert "geolocation=()" in pp

    def test_custom_frame_options(self):
        response = _client(frame_options="SAMEORIGIN").get("/test")
        assert response.headers.get("X-Frame-Options") == "SAMEORIGIN"

    def test_custom_csp(self):
        custom_csp = "default-src 'none'; script-src 'self'"
        response = _client(content_security_policy=custom_csp).get("/test")
        assert response.headers.get("Content-Security-Policy") == custom_csp


class TestHSTSBehavior:
    """Testes do comportamento do HSTS."""

    def test_hsts_not_added_in_development(self):
        with patch("middleware.security_headers.ENVIRONMENT", "development"):
            response = _client(enable_hsts=True).get("/test")
        assert response.headers.get("Strict-Transport-Security") is None

    def test_hsts_added_in_production(self):
        with patch("middleware.security_headers.ENVIRONMENT", "production"):
            response = _client(enable_hsts=True, hsts_max_age=86400).get("/test")
        hsts = response.headers.get("Strict-Transport-Security")
        assert hsts == "max-age=86400; includeSubDomains"

    def test_hsts_disabled(self):
        with patch("middleware.security_headers.ENVIRONMENT", "production"):
            middleware = SecurityHeadersMiddleware(MagicMock(), enable_hsts=False)
        assert middleware.enable_hsts is False
