"""
Configuracoes do Spark Comex.

Este modulo re-exporta as configuracoes usadas pela aplicacao.

Exemplo:
    from config import Messages, API_PREFIX
"""

# API
from .api import (
    API_PREFIX,
    API_VERSION,
)

# Base - helpers e constantes fundamentais
from .base import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALLOWED_DOCUMENT_EXTENSIONS,
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_PDF_EXTENSIONS,
    AUTO_CREATE_TABLES,
    BASE_DIR,
    CORS_ALLOW_CREDENTIALS,
    CORS_ORIGINS,
    DEFAULT_PAGE_SIZE,
    ENVIRONMENT,
    MAX_PAGE_SIZE,
    MAX_UPLOAD_SIZE_BYTES,
    MAX_UPLOAD_SIZE_MB,
    METRICS_PUBLIC,
    RATE_LIMIT_AUTH_LOGIN,
    RATE_LIMIT_AUTH_REGISTER,
    RATE_LIMIT_AUTH_WINDOW,
    RATE_LIMIT_ENABLED,
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_UPLOAD,
    RATE_LIMIT_UPLOAD_WINDOW,
    RATE_LIMIT_WINDOW,
    UPLOAD_DIR,
    UPLOAD_QUEUE_DELAY_SECONDS,
    env_bool,
    env_float,
    env_int,
    get_cors_origins,
    get_file_extension,
    is_allowed_extension,
)

# Credito e pagamentos
from .credit import (
    DEFAULT_ADMIN_FEE_PERCENT,
    DEFAULT_DOWN_PAYMENT_PERCENT,
    DEFAULT_PAYMENT_TERMS,
    DIRECTD_API_TOKEN,
    DIRECTD_API_URL,
)

# Defaults
from .defaults import (
    DEFAULT_ADMIN_COMPANY,
    DEFAULT_ADMIN_EMAIL,
    DEFAULT_ADMIN_NAME,
    DEFAULT_CURRENCY,
    DEFAULT_PAGE,
    MIN_PASSWORD_LENGTH,
)

# Documentos
from .documents import (
    DOCUMENT_REQUIREMENTS,
    IMPORT_DOCUMENT_TYPES,
    MANDATORY_IMPORT_DOCUMENTS,
    DocumentRequirement,
    get_requirement,
)

# Mensagens
from .messages import Messages

# Seguranca
from .security import (
    ACCOUNT_LOCKOUT_MINUTES,
    FRAME_OPTIONS,
    HSTS_MAX_AGE,
    JWT_ALGORITHM,
    JWT_EXPIRATION_HOURS,
    MAX_FAILED_LOGIN_ATTEMPTS,
    PASSWORD_MIN_LENGTH,
    PASSWORD_REQUIRE_DIGIT,
    PASSWORD_REQUIRE_LOWERCASE,
    PASSWORD_REQUIRE_SPECIAL,
    PASSWORD_REQUIRE_UPPERCASE,
    REFERRER_POLICY,
    SECRET_KEY,
    SECURITY_HEADERS_ENABLED,
)

# Exportar tudo
__all__ = [
    # API
    "API_VERSION",
    "API_PREFIX",
    # Base
    "env_bool",
    "env_int",
    "env_float",
    "BASE_DIR",
    "UPLOAD_DIR",
    "ALLOWED_PDF_EXTENSIONS",
    "ALLOWED_IMAGE_EXTENSIONS",
    "ALLOWED_DOCUMENT_EXTENSIONS",
    "MAX_UPLOAD_SIZE_MB",
    "MAX_UPLOAD_SIZE_BYTES",
    "get_cors_origins",
    "CORS_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
    "RATE_LIMIT_ENABLED",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW",
    "RATE_LIMIT_AUTH_LOGIN",
    "RATE_LIMIT_AUTH_REGISTER",
    "RATE_LIMIT_AUTH_WINDOW",
    "RATE_LIMIT_UPLOAD",
    "RATE_LIMIT_UPLOAD_WINDOW",
    "ENVIRONMENT",
    "AUTO_CREATE_TABLES",
    "METRICS_PUBLIC",
    "ACCESS_TOKEN_EXPIRE_MINUTES",
    "UPLOAD_QUEUE_DELAY_SECONDS",
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "is_allowed_extension",
    "get_file_extension",
    # Credito
    "DEFAULT_DOWN_PAYMENT_PERCENT",
    "DEFAULT_ADMIN_FEE_PERCENT",
    "DEFAULT_PAYMENT_TERMS",
    "DIRECTD_API_URL",
    "DIRECTD_API_TOKEN",
    # Documentos
    "DocumentRequirement",
    "DOCUMENT_REQUIREMENTS",
    "IMPORT_DOCUMENT_TYPES",
    "MANDATORY_IMPORT_DOCUMENTS",
    "get_requirement",
    # Seguranca
    "SECRET_KEY",
    "JWT_ALGORITHM",
    "JWT_EXPIRATION_HOURS",
    "SECURITY_HEADERS_ENABLED",
    "HSTS_MAX_AGE",
    "FRAME_OPTIONS",
    "REFERRER_POLICY",
    "PASSWORD_MIN_LENGTH",
    "PASSWORD_REQUIRE_UPPERCASE",
    "PASSWORD_REQUIRE_LOWERCASE",
    "PASSWORD_REQUIRE_DIGIT",
    "PASSWORD_REQUIRE_SPECIAL",
    "MAX_FAILED_LOGIN_ATTEMPTS",
    "ACCOUNT_LOCKOUT_MINUTES",
    # Mensagens
    "Messages",
    # Defaults
    "DEFAULT_ADMIN_EMAIL",
    "DEFAULT_ADMIN_NAME",
    "DEFAULT_ADMIN_COMPANY",
    "DEFAULT_CURRENCY",
    "MIN_PASSWORD_LENGTH",
    "DEFAULT_PAGE",
]
