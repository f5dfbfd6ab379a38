"""
Configuracoes base do Spark Comex.
Helpers de ambiente, diretorios e extensoes de arquivo.
"""
import os
from typing import List, Optional
from dotenv import load_dotenv

load_dotenv()


# === Helpers para leitura de variaveis de ambiente ===
def env_bool(key: str, default: bool = False) -> bool:
    """Le variavel de ambiente como booleano."""
    val = os.getenv(key, "").lower()
    if val in ("1", "true", "yes", "on"):
        return True
    if val in ("0", "false", "no", "off"):
        return False
    return default


def env_int(key: str, default: int = 0) -> int:
    """Le variavel de ambiente como inteiro."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def env_float(key: str, default: float = 0.0) -> float:
    """Le variavel de ambiente como float."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


# === Diretorios ===
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Detectar ambiente serverless (Vercel, AWS Lambda)
IS_SERVERLESS = os.getenv("VERCEL") or os.getenv("AWS_LAMBDA_FUNCTION_NAME")

# Em serverless, usar /tmp (único diretório gravável)
if IS_SERVERLESS:
    UPLOAD_DIR = "/tmp/uploads"
else:
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")


# === Extensoes de Arquivo Permitidas ===
ALLOWED_PDF_EXTENSIONS = [".pdf"]
ALLOWED_IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg"]
ALLOWED_OFFICE_EXTENSIONS = [".doc", ".docx", ".xls", ".xlsx"]
ALLOWED_DOCUMENT_EXTENSIONS = (
    ALLOWED_PDF_EXTENSIONS + ALLOWED_IMAGE_EXTENSIONS + ALLOWED_OFFICE_EXTENSIONS
)

# === Limite de Upload ===
MAX_UPLOAD_SIZE_MB = env_int("MAX_UPLOAD_SIZE_MB", 50)
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024

# Bytes lidos do início do arquivo para checar a assinatura
HEADER_SIZE = 1024


# === CORS ===
def get_cors_origins() -> List[str]:
    """
    Retorna lista de origens permitidas para CORS.

    Em producao, defina CORS_ORIGINS como lista separada por virgula:
    CORS_ORIGINS=https://app.sparkcomex.com.br,https://admin.sparkcomex.com.br
    """
    origins_env = os.getenv("CORS_ORIGINS", "")
    if origins_env:
        return [origin.strip() for origin in origins_env.split(",") if origin.strip()]

    # Em desenvolvimento, permitir o frontend local (Vite)
    if os.getenv("ENVIRONMENT", "development") == "development":
        return [
            "http://localhost:5000",
            "http://127.0.0.1:5000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]

    return []


CORS_ORIGINS = get_cors_origins()
CORS_ALLOW_CREDENTIALS = os.getenv("CORS_ALLOW_CREDENTIALS", "true").lower() == "true"


# === Rate Limiting ===
RATE_LIMIT_ENABLED = env_bool("RATE_LIMIT_ENABLED", True)
RATE_LIMIT_REQUESTS = env_int("RATE_LIMIT_REQUESTS", 300)
RATE_LIMIT_WINDOW = env_int("RATE_LIMIT_WINDOW", 60)

# Limites mais restritivos para autenticacao
RATE_LIMIT_AUTH_LOGIN = env_int("RATE_LIMIT_AUTH_LOGIN", 5)  # 5 tentativas
RATE_LIMIT_AUTH_REGISTER = env_int("RATE_LIMIT_AUTH_REGISTER", 3)  # 3 cadastros
RATE_LIMIT_AUTH_WINDOW = env_int("RATE_LIMIT_AUTH_WINDOW", 60)  # por minuto

# Uploads de documentos
RATE_LIMIT_UPLOAD = env_int("RATE_LIMIT_UPLOAD", 30)
RATE_LIMIT_UPLOAD_WINDOW = env_int("RATE_LIMIT_UPLOAD_WINDOW", 60)


# === Ambiente ===
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
AUTO_CREATE_TABLES = env_bool("AUTO_CREATE_TABLES", ENVIRONMENT != "production")
METRICS_PUBLIC = env_bool("METRICS_PUBLIC", ENVIRONMENT != "production")


# === Autenticacao ===
ACCESS_TOKEN_EXPIRE_MINUTES = env_int("ACCESS_TOKEN_EXPIRE_MINUTES", 60)


# === Fila de upload sequencial ===
# Pausa fixa entre um upload e o seguinte
UPLOAD_QUEUE_DELAY_SECONDS = env_float("UPLOAD_QUEUE_DELAY_SECONDS", 0.5)


# === Paginacao ===
DEFAULT_PAGE_SIZE = env_int("DEFAULT_PAGE_SIZE", 20)
MAX_PAGE_SIZE = env_int("MAX_PAGE_SIZE", 100)


# === Funcoes auxiliares para validar extensoes ===
def is_allowed_extension(filename: str, allowed: Optional[List[str]] = None) -> bool:
    """Verifica se a extensao do arquivo e permitida."""
    if allowed is None:
        allowed = ALLOWED_DOCUMENT_EXTENSIONS
    ext = os.path.splitext(filename)[1].lower()
    return ext in allowed


def get_file_extension(filename: str) -> str:
    """Retorna a extensao do arquivo em minusculas."""
    return os.path.splitext(filename)[1].lower()
