"""
Headers de segurança em todas as respostas HTTP.

A API só serve JSON; a CSP padrão bloqueia qualquer recurso embutido,
exceto nas páginas de documentação (/docs, /redoc), que carregam o
Swagger UI do CDN.
"""
from typing import Callable, Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from config import ENVIRONMENT
from logging_config import get_logger

logger = get_logger(__name__)

API_CSP = "default-src 'none'; frame-ancestors 'none'; base-uri 'none'"

DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https://fastapi.tiangolo.com; "
    "frame-ancestors 'none'"
)

DOCS_PATHS = ("/docs", "/redoc")

PERMISSIONS_POLICY = (
    "accelerometer=(), camera=(), geolocation=(), gyroscope=(), "
    "magnetometer=(), microphone=(), payment=(), usb=()"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adiciona headers de segurança; HSTS apenas em produção."""

    def __init__(
        self,
        app,
        enable_hsts: bool = True,
        hsts_max_age: int = 31536000,
        frame_options: str = "DENY",
        referrer_policy: str = "strict-origin-when-cross-origin",
        content_security_policy: Optional[str] = None,
    ):
        super().__init__(app)
        self.enable_hsts = enable_hsts and ENVIRONMENT == "production"
        self.hsts_max_age = hsts_max_age
        self.csp = content_security_policy or API_CSP
        self.static_headers: Dict[str, str] = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": frame_options,
            "Referrer-Policy": referrer_policy,
            "Permissions-Policy": PERMISSIONS_POLICY,
        }
        logger.info(
            f"SecurityHeadersMiddleware inicializado "
            f"(HSTS: {self.enable_hsts}, Frame-Options: {frame_options})"
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        for name, value in self.static_headers.items():
            response.headers[name] = value

        if request.url.path.startswith(DOCS_PATHS):
            response.headers["Content-Security-Policy"] = DOCS_CSP
        else:
            response.headers["Content-Security-Policy"] = self.csp

        # O proxy reverso garante HTTPS em produção
        if self.enable_hsts:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.hsts_max_age}; includeSubDomains"
            )
        return response
