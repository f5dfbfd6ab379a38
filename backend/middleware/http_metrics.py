"""
Métricas HTTP para o Prometheus.

Cada requisição gera contador e histograma de duração por método,
endpoint (IDs normalizados em services.metrics) e classe de status.
"""
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from services.metrics import record_http_request


class HTTPMetricsMiddleware(BaseHTTPMiddleware):

    IGNORED_PATHS = frozenset({"/metrics", "/health", "/favicon.ico"})

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self.IGNORED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            record_http_request(
                method=request.method,
                endpoint=request.url.path,
                status_code=status_code,
                duration_seconds=time.perf_counter() - started,
            )
