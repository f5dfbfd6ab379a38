"""
Middleware de Rate Limiting por IP.

Janela deslizante em memória, com um limite geral e regras mais
restritivas para login, cadastro e envio de documentos.
"""
import re
import time
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config import (
    RATE_LIMIT_AUTH_LOGIN,
    RATE_LIMIT_AUTH_REGISTER,
    RATE_LIMIT_AUTH_WINDOW,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_UPLOAD_WINDOW,
    RATE_LIMIT_WINDOW,
    Messages,
)
from logging_config import get_logger
from utils.http_helpers import get_client_ip_safe

logger = get_logger(__name__)

CLEANUP_INTERVAL = 60

SKIP_PREFIXES = ("/health", "/metrics", "/docs", "/redoc", "/openapi.json")

# (nome, regex do path, métodos, limite, janela em segundos)
PATH_RULES: List[Tuple[str, "re.Pattern[str]", Tuple[str, ...], int, int]] = [
    ("login", re.compile(r"/auth/login$"), ("POST",),
     RATE_LIMIT_AUTH_LOGIN, RATE_LIMIT_AUTH_WINDOW),
    ("register", re.compile(r"/auth/register$"), ("POST",),
     RATE_LIMIT_AUTH_REGISTER, RATE_LIMIT_AUTH_WINDOW),
    ("upload", re.compile(r"/(documents(/batch)?|upload|validate)$"), ("POST",),
     RATE_LIMIT_UPLOAD, RATE_LIMIT_UPLOAD_WINDOW),
]


class SlidingWindow:
    """Timestamps de requisições por chave dentro de uma janela."""

    def __init__(self, limit: int, window_seconds: int):
        self.limit = limit
        self.window_seconds = window_seconds
        self.hits: Dict[str, Deque[float]] = defaultdict(deque)

    def _expire(self, key: str, now: float) -> Deque[float]:
        bucket = self.hits[key]
        cutoff = now - self.window_seconds
        while bucket and bucket[0] <= cutoff:
            bucket.popleft()
        return bucket

    def hit(self, key: str, now: float) -> Tuple[bool, int]:
        """Registra a requisição. Retorna (bloqueada, restantes)."""
        bucket = self._expire(key, now)
        if len(bucket) >= self.limit:
            return True, 0
        bucket.append(now)
        return False, self.limit - len(bucket)

    def cleanup(self, now: float) -> None:
        for key in list(self.hits):
            if not self._expire(key, now):
                del self.hits[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Limita requisições por IP; responde 429 com Retry-After."""

    def __init__(
        self,
        app,
        requests_limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.enabled = RATE_LIMIT_ENABLED if enabled is None else enabled
        self.default = SlidingWindow(
            requests_limit or RATE_LIMIT_REQUESTS,
            window_seconds or RATE_LIMIT_WINDOW,
        )
        self.rules = {
            name: SlidingWindow(limit, window)
            for name, _, _, limit, window in PATH_RULES
        }
        self._last_cleanup = time.time()

    def _select_window(self, method: str, path: str) -> Tuple[str, SlidingWindow]:
        for name, pattern, methods, _, _ in PATH_RULES:
            if method in methods and pattern.search(path):
                return name, self.rules[name]
        return "default", self.default

    def _maybe_cleanup(self, now: float) -> None:
        if now - self._last_cleanup < CLEANUP_INTERVAL:
            return
        self.default.cleanup(now)
        for window in self.rules.values():
            window.cleanup(now)
        self._last_cleanup = now

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not self.enabled or path.startswith(SKIP_PREFIXES):
            return await call_next(request)

        client_ip = get_client_ip_safe(request)
        rule_name, window = self._select_window(request.method, path)
        now = time.time()
        is_limited, remaining = window.hit(client_ip, now)
        self._maybe_cleanup(now)

        if is_limited:
            logger.warning(
                f"Rate limit excedido para IP {client_ip} "
                f"(regra: {rule_name}, {window.limit}/{window.window_seconds}s)"
            )
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": Messages.RATE_LIMIT_EXCEEDED},
                headers={
                    "X-RateLimit-Limit": str(window.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(int(now) + window.window_seconds),
                    "Retry-After": str(window.window_seconds),
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(window.limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
