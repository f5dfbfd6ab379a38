"""
Fixtures compartilhadas para testes do Spark Comex.
"""
import os
import sys

# Ambiente de teste antes de importar os módulos da aplicação
os.environ.setdefault("TESTING", "1")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("SECRET_KEY", "test-secret-key-para-os-testes-do-spark-comex")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["METRICS_PUBLIC"] = "true"
os.environ["UPLOAD_QUEUE_DELAY_SECONDS"] = "0"
os.environ.pop("DIRECTD_API_TOKEN", None)
os.environ.pop("REDIS_URL", None)

# Adicionar o diretório backend ao path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from decimal import Decimal  # noqa: E402
from typing import Callable, Generator, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import models  # noqa: E402,F401  (registra todas as tabelas no metadata)
from auth import create_access_token, get_password_hash  # noqa: E402
from database import Base  # noqa: E402
from models import (  # noqa: E402
    CreditStatus,
    FinancialStatus,
    AdminStatus,
    PreAnalysisStatus,
    SolicitacaoCredito,
    UserRole,
    Usuario,
)

TEST_PASSWORD = "Senha123"


# === Configuração do Banco de Dados de Teste ===

@pytest.fixture
def test_engine():
    """Engine SQLite em memória, recriada a cada teste."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_engine) -> Generator[Session, None, None]:
    """Sessão de banco de dados para cada teste."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# === Serviços com estado ===

@pytest.fixture(autouse=True)
def isolated_services(tmp_path):
    """Storage em diretório temporário, fila sem pausa e cache limpo."""
    from dependencies import ServiceContainer
    from services.cache import reset_cache
    from services.storage_service import LocalStorageBackend, reset_storage, set_storage
    from services.upload_queue import SequentialUploadQueue

    storage = LocalStorageBackend(str(tmp_path / "uploads"))
    ServiceContainer.reset()
    reset_cache()
    set_storage(storage)
    container = ServiceContainer.get()
    container.set_storage(storage)
    container.set_upload_queue(SequentialUploadQueue(delay_seconds=0))
    yield container
    ServiceContainer.reset()
    reset_cache()
    reset_storage()


# === Fixtures de Usuário ===

_cnpj_counter = {"value": 0}


def next_cnpj() -> str:
    """CNPJ único de 14 dígitos para fixtures (sem checagem de dígitos)."""
    _cnpj_counter["value"] += 1
    return f"{10000000000000 + _cnpj_counter['value']}"


def make_user(
    db: Session,
    *,
    email: str,
    role: str = UserRole.IMPORTER,
    nome: str = "Usuário Teste",
    razao_social: str = "Empresa Teste LTDA",
    cnpj: Optional[str] = None,
    password: str = TEST_PASSWORD,
    is_active: bool = True,
) -> Usuario:
    user = Usuario(
        email=email,
        nome=nome,
        razao_social=razao_social,
        cnpj=cnpj or next_cnpj(),
        senha_hash=get_password_hash(password),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user_factory(db_session: Session) -> Callable[..., Usuario]:
    def _factory(**kwargs) -> Usuario:
        return make_user(db_session, **kwargs)
    return _factory


@pytest.fixture
def test_user(db_session: Session) -> Usuario:
    """Importador de teste."""
    return make_user(db_session, email="importador@exemplo.com", razao_social="Importadora Teste LTDA")


@pytest.fixture
def other_user(db_session: Session) -> Usuario:
    """Segundo importador, para testes de isolamento."""
    return make_user(db_session, email="outro@exemplo.com", razao_social="Outra Importadora SA")


@pytest.fixture
def admin_user(db_session: Session) -> Usuario:
    return make_user(db_session, email="admin@exemplo.com", nome="Admin Teste", role=UserRole.ADMIN)


@pytest.fixture
def financeira_user(db_session: Session) -> Usuario:
    return make_user(db_session, email="financeira@exemplo.com", nome="Analista", role=UserRole.FINANCEIRA)


@pytest.fixture
def broker_user(db_session: Session) -> Usuario:
    return make_user(db_session, email="despachante@exemplo.com", nome="Despachante", role=UserRole.CUSTOMS_BROKER)


# === Fixtures de Crédito ===

def make_application(
    db: Session,
    user: Usuario,
    *,
    status: str = CreditStatus.PENDING,
    valor_solicitado: Decimal = Decimal("100000.00"),
    limite_credito: Optional[Decimal] = None,
    limite_final: Optional[Decimal] = None,
    prazos_aprovados: Optional[str] = None,
    **extra,
) -> SolicitacaoCredito:
    solicitacao = SolicitacaoCredito(
        user_id=user.id,
        razao_social=user.razao_social,
        cnpj=user.cnpj,
        valor_solicitado=valor_solicitado,
        moeda="USD",
        status=status,
        pre_analysis_status=PreAnalysisStatus.PENDING,
        limite_credito=limite_credito,
        limite_final=limite_final,
        prazos_aprovados=prazos_aprovados,
        documentos={},
        **extra,
    )
    db.add(solicitacao)
    db.commit()
    db.refresh(solicitacao)
    return solicitacao


@pytest.fixture
def pending_application(db_session: Session, test_user: Usuario) -> SolicitacaoCredito:
    return make_application(db_session, test_user)


@pytest.fixture
def approved_application(db_session: Session, test_user: Usuario) -> SolicitacaoCredito:
    """Solicitação aprovada pela financeira com limite de 50.000."""
    return make_application(
        db_session, test_user,
        status=CreditStatus.APPROVED,
        limite_credito=Decimal("50000.00"),
        prazos_aprovados="30,60,90",
        financial_status=FinancialStatus.APPROVED,
        admin_status=AdminStatus.PENDING_ADMIN,
    )


# === Fixtures de Cliente HTTP ===

@pytest.fixture
def client(test_engine) -> Generator[TestClient, None, None]:
    """Cliente de teste FastAPI."""
    from main import app
    from database import get_db

    # Override da dependencia de banco
    def override_get_db():
        TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def bearer(user: Usuario) -> dict:
    token = create_access_token({"sub": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_user: Usuario) -> dict:
    """Headers de autenticacao para o importador de teste."""
    return bearer(test_user)


@pytest.fixture
def other_headers(other_user: Usuario) -> dict:
    return bearer(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: Usuario) -> dict:
    return bearer(admin_user)


@pytest.fixture
def financeira_headers(financeira_user: Usuario) -> dict:
    return bearer(financeira_user)


@pytest.fixture
def broker_headers(broker_user: Usuario) -> dict:
    return bearer(broker_user)
