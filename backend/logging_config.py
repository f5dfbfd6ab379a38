"""
Configuração de logging para o Spark Comex.

Uso:
    from logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Importação criada")

Para logging estruturado (JSON):
    export LOG_FORMAT=json

Ações de negócio (criação, aprovação, pagamento) devem usar log_action,
que inclui o request_id da requisição corrente:
    log_action(logger, "credit_application_created", user_id=1,
               resource_type="credit_application", resource_id=10)
"""
import json
import logging
import os
import re
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

# Context var para correlation ID (uma por requisição)
_correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# Atributos padrão de LogRecord que não entram como campos extras no JSON
_RECORD_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info', 'exc_info', 'exc_text',
    'message', 'context', 'thread', 'threadName', 'taskName',
}


class StructuredFormatter(logging.Formatter):
    """
    Formatter que produz logs em JSON, um objeto por linha.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "line": record.lineno,
        }

        correlation_id = _correlation_id.get()
        if correlation_id:
            log_data['request_id'] = correlation_id

        if hasattr(record, 'context'):
            log_data['context'] = record.context

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    use_json: Optional[bool] = None
) -> None:
    """
    Configura o logging para toda a aplicação.

    Environment Variables:
        LOG_LEVEL: Nível de logging (default: INFO)
        LOG_FILE: Caminho para arquivo de log
        LOG_FORMAT: "json" para formato JSON
    """
    effective_level: str = level or os.getenv("LOG_LEVEL", "INFO") or "INFO"
    log_level = getattr(logging, effective_level.upper(), logging.INFO)

    if use_json is None:
        use_json = os.getenv("LOG_FORMAT", "").lower() == "json"

    formatter: logging.Formatter
    if use_json:
        formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_FORMAT)

    handlers: List[logging.Handler] = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    log_file_path = log_file or os.getenv("LOG_FILE")
    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=log_level, format=DEFAULT_FORMAT, handlers=handlers)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if not any(isinstance(f, SanitizingFilter) for f in handler.filters):
            handler.addFilter(SanitizingFilter())

    # Reduzir verbosidade de bibliotecas externas
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Obtém um logger configurado para um módulo."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context
) -> None:
    """Loga uma mensagem anexando `context` ao registro."""
    logger.log(level, message, extra={'context': context})


# === Correlation ID (Request Tracking) ===

def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """
    Define o correlation ID para a requisição atual.

    Args:
        correlation_id: ID para usar (gera novo se None)

    Returns:
        O correlation ID definido
    """
    cid = correlation_id or uuid.uuid4().hex[:12]
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> Optional[str]:
    """Obtém o correlation ID da requisição atual."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Limpa o correlation ID (fim da requisição)."""
    _correlation_id.set(None)


# === Timing ===

@contextmanager
def log_timing(
    logger: logging.Logger,
    operation: str,
    level: int = logging.DEBUG,
    threshold_ms: Optional[float] = None
):
    """
    Context manager para medir e logar tempo de operações.

    Example:
        with log_timing(logger, "consulta_bureau", level=logging.INFO):
            await client.consultar_dossie(cnpj)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        if threshold_ms is None or elapsed_ms > threshold_ms:
            logger.log(level, f"[timing] {operation} completed in {elapsed_ms:.2f}ms")


# === Sanitização de dados sensíveis ===

SENSITIVE_KEYS = {
    'password', 'senha', 'secret', 'token', 'api_key', 'apikey',
    'authorization', 'credential', 'private_key', 'secret_key',
    'access_token', 'refresh_token', 'bearer', 'jwt',
}

SENSITIVE_PATTERNS = [
    # JWT (xxx.yyy.zzz)
    (re.compile(r'eyJ[A-Za-z0-9_-]+\.eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+'), '[JWT_TOKEN]'),
    (re.compile(r'[Bb]earer\s+[A-Za-z0-9_.-]+'), 'Bearer [TOKEN]'),
    # TOKEN=... em query strings (bureau de crédito)
    (re.compile(r'(password|senha|secret|api_key|token)\s*[=:]\s*[^\s&]+', re.IGNORECASE), r'\1=[REDACTED]'),
    # CNPJ formatado: mantém apenas a raiz
    (re.compile(r'\b(\d{2}\.\d{3}\.\d{3})/\d{4}-\d{2}\b'), r'\1/****-**'),
    # CPF formatado
    (re.compile(r'\b\d{3}\.\d{3}\.\d{3}-\d{2}\b'), '***.***.***-**'),
]


def _sanitize_text(text: str) -> str:
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SanitizingFilter(logging.Filter):
    """
    Filter que mascara tokens, senhas e documentos (CNPJ/CPF) antes da escrita.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = _sanitize_text(record.msg)

        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: _sanitize_text(v) if isinstance(v, str) else v
                    for k, v in record.args.items()
                }
            else:
                record.args = tuple(
                    _sanitize_text(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )

        return True


def sanitize_dict(data: Dict[str, Any], mask: str = '***') -> Dict[str, Any]:
    """
    Mascara valores de chaves sensíveis (recursivo em dicts e listas).
    """
    if not isinstance(data, dict):
        return data

    result: Dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
            result[key] = mask
        elif isinstance(value, dict):
            result[key] = sanitize_dict(value, mask)
        elif isinstance(value, list):
            result[key] = [
                sanitize_dict(item, mask) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result


# === Structured Action Logging ===

def log_action(
    logger: logging.Logger,
    action: str,
    user_id: Optional[int] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[int] = None,
    level: int = logging.INFO,
    **extra
) -> None:
    """
    Loga uma ação do usuário com campos estruturados padronizados.

    Args:
        logger: Logger a usar
        action: Ação realizada (ex: "import_created", "payment_paid")
        user_id: ID do usuário (opcional se não autenticado)
        resource_type: Tipo do recurso (ex: "import", "credit_application")
        resource_id: ID do recurso afetado
        level: Nível de log (default: INFO)
        **extra: Campos adicionais (sanitizados antes do log)
    """
    context: Dict[str, Any] = {
        'action': action,
        'request_id': get_correlation_id() or '-',
    }

    if user_id is not None:
        context['user_id'] = user_id
    if resource_type:
        context['resource_type'] = resource_type
    if resource_id is not None:
        context['resource_id'] = resource_id

    context.update(sanitize_dict(extra))

    msg_parts = [f"[{action.upper()}]"]
    if user_id:
        msg_parts.append(f"user={user_id}")
    if resource_type:
        resource_str = resource_type
        if resource_id:
            resource_str += f"#{resource_id}"
        msg_parts.append(resource_str)

    log_with_context(logger, level, " ".join(msg_parts), **context)


# Configurar logging na importação
setup_logging()
