"""
Métricas Prometheus do Spark Comex.

Requisições HTTP e eventos de negócio (solicitações de crédito,
importações, uploads e validações de documentos).
"""
import re

from prometheus_client import REGISTRY, Counter, Histogram, Info
from prometheus_client.exposition import CONTENT_TYPE_LATEST, generate_latest

from logging_config import get_logger

logger = get_logger('services.metrics')

_ID_SEGMENT = re.compile(r'/\d+')


# === HTTP ===

http_requests_total = Counter(
    'sparkcomex_http_requests_total',
    'Total de requisições HTTP',
    ['method', 'endpoint', 'status']
)

http_request_duration_seconds = Histogram(
    'sparkcomex_http_request_duration_seconds',
    'Duração das requisições HTTP em segundos',
    ['method', 'endpoint'],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10]
)


# === Negócio ===

credit_applications_total = Counter(
    'sparkcomex_credit_applications_total',
    'Eventos de solicitações de crédito',
    ['event']  # created, pre_approved, approved, admin_finalized, rejected, cancelled
)

imports_total = Counter(
    'sparkcomex_imports_total',
    'Eventos de importações',
    ['event']  # created, status_changed, cancelled
)

uploads_total = Counter(
    'sparkcomex_uploads_total',
    'Total de uploads de documentos',
    ['type', 'status']  # type: credit/import/request, status: success/invalid/failed
)

upload_size_bytes = Histogram(
    'sparkcomex_upload_size_bytes',
    'Tamanho dos uploads em bytes',
    ['type'],
    buckets=[10240, 102400, 1048576, 5242880, 10485760, 52428800]
)

document_validations_total = Counter(
    'sparkcomex_document_validations_total',
    'Resultados da validação de documentos',
    ['document_type', 'result']  # result: valid/invalid
)

credit_bureau_requests_total = Counter(
    'sparkcomex_credit_bureau_requests_total',
    'Consultas ao bureau de crédito',
    ['endpoint', 'status']  # status: success/error/cached
)


app_info = Info('sparkcomex_app', 'Informações da aplicação')


def set_app_info(version: str, environment: str) -> None:
    app_info.info({'version': version, 'environment': environment})


def record_credit_event(event: str) -> None:
    credit_applications_total.labels(event=event).inc()


def record_import_event(event: str) -> None:
    imports_total.labels(event=event).inc()


def record_upload(upload_type: str, status: str, size_bytes: int = 0) -> None:
    """Registra um upload (status: success, invalid ou failed)."""
    uploads_total.labels(type=upload_type, status=status).inc()
    if status == 'success' and size_bytes > 0:
        upload_size_bytes.labels(type=upload_type).observe(size_bytes)


def record_document_validation(document_type: str, is_valid: bool) -> None:
    document_validations_total.labels(
        document_type=document_type or 'unknown',
        result='valid' if is_valid else 'invalid',
    ).inc()


def record_bureau_request(endpoint: str, status: str) -> None:
    credit_bureau_requests_total.labels(endpoint=endpoint, status=status).inc()


def record_http_request(method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
    """Registra uma requisição HTTP com o path normalizado."""
    path = _normalize_endpoint(endpoint)
    http_requests_total.labels(
        method=method, endpoint=path, status=f"{status_code // 100}xx"
    ).inc()
    http_request_duration_seconds.labels(method=method, endpoint=path).observe(duration_seconds)


def _normalize_endpoint(path: str) -> str:
    """Troca IDs numéricos por {id} para limitar a cardinalidade."""
    return _ID_SEGMENT.sub('/{id}', path)


def get_metrics() -> bytes:
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST
