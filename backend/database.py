"""
Configuração do banco de dados do Spark Comex.

Produção usa PostgreSQL (DATABASE_URL). Em testes, sem DATABASE_URL,
cai para um arquivo SQLite local.
"""

from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os
import sys
from dotenv import load_dotenv

# Carregar .env do diretório raiz do projeto (um nível acima do backend)
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "")

_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes") or "pytest" in sys.modules

if not DATABASE_URL and not _TESTING:
    raise ValueError(
        "DATABASE_URL não configurada. "
        "Configure com uma URL PostgreSQL no arquivo .env"
    )

if not DATABASE_URL and _TESTING:
    DATABASE_URL = "sqlite:///./test_sparkcomex.db"

# Heroku/Render ainda entregam o esquema antigo "postgres://"
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

_is_sqlite = DATABASE_URL.startswith("sqlite")

if _is_sqlite:
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        echo=False
    )
else:
    _pool_size = int(os.getenv("DB_POOL_SIZE", "5"))
    _max_overflow = int(os.getenv("DB_MAX_OVERFLOW", "10"))
    engine = create_engine(
        DATABASE_URL,
        pool_size=_pool_size,
        max_overflow=_max_overflow,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
        echo=False
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Dependency para obter sessão do banco de dados."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session():
    """
    Context manager para obter sessão fora de rotas FastAPI (seed, scripts).

    O commit deve ser feito manualmente; rollback é automático em exceção.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
