from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError as SAIntegrityError
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.middleware.gzip import GZipMiddleware

from auth import get_current_admin_user
from config import (
    API_PREFIX,
    API_VERSION,
    AUTO_CREATE_TABLES,
    CORS_ALLOW_CREDENTIALS,
    CORS_ORIGINS,
    ENVIRONMENT,
    METRICS_PUBLIC,
    Messages,
)
from config.security import (
    FRAME_OPTIONS,
    HSTS_MAX_AGE,
    REFERRER_POLICY,
    SECURITY_HEADERS_ENABLED,
)
from database import Base, engine, get_db
from exceptions import (
    BusinessRuleError,
    ConfigurationError,
    DatabaseError,
    DuplicateRecordError,
    ExternalAPIError,
    PermissionDeniedError,
    RecordNotFoundError,
    SparkComexError,
    ValidationError,
)
from logging_config import (
    clear_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from middleware.http_metrics import HTTPMetricsMiddleware
from middleware.rate_limit import RateLimitMiddleware
from middleware.security_headers import SecurityHeadersMiddleware
from routers import (
    admin,
    auth,
    credit,
    customs_broker,
    dashboard,
    document_requests,
    documents,
    financeira,
    imports,
    notifications,
    payment_schedules,
    suppliers,
)
from services.cache import get_cache
from services.metrics import get_metrics, get_metrics_content_type, set_app_info

setup_logging()
logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gerenciador de ciclo de vida da aplicação."""
    # Produção usa `alembic upgrade head`
    if AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Tabelas criadas/verificadas (AUTO_CREATE_TABLES)")

    set_app_info(API_VERSION, ENVIRONMENT)
    logger.info(f"Spark Comex API {API_VERSION} iniciada ({ENVIRONMENT})")

    yield

    logger.info("Spark Comex API encerrada")


app = FastAPI(
    title="Spark Comex",
    description="Gestão de importações com crédito: solicitações, importações, fornecedores e pagamentos",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Ordem: o último adicionado é o primeiro a executar
app.add_middleware(RateLimitMiddleware)

if SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware,
        enable_hsts=True,
        hsts_max_age=HSTS_MAX_AGE,
        frame_options=FRAME_OPTIONS,
        referrer_policy=REFERRER_POLICY,
    )

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(HTTPMetricsMiddleware)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Propaga X-Correlation-ID (recebido ou gerado) para logs e resposta."""
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))
    try:
        response = await call_next(request)
    finally:
        clear_correlation_id()
    response.headers["X-Correlation-ID"] = correlation_id
    return response


if not CORS_ORIGINS and ENVIRONMENT == "production":
    logger.error("CORS_ORIGINS não definido em produção! Nenhuma origem liberada.")
else:
    logger.info(f"CORS configurado para origens: {CORS_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=CORS_ALLOW_CREDENTIALS,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


# === Exception Handlers ===

def _error(status_code: int, exc: SparkComexError) -> JSONResponse:
    content = {"detail": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(400, exc)


@app.exception_handler(BusinessRuleError)
async def business_rule_handler(request: Request, exc: BusinessRuleError):
    """Regras de negócio violadas (transição inválida, crédito insuficiente...)."""
    return _error(400, exc)


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    return _error(403, exc)


@app.exception_handler(RecordNotFoundError)
async def record_not_found_handler(request: Request, exc: RecordNotFoundError):
    return _error(404, exc)


@app.exception_handler(DuplicateRecordError)
async def duplicate_record_handler(request: Request, exc: DuplicateRecordError):
    return _error(409, exc)


@app.exception_handler(ExternalAPIError)
async def external_api_handler(request: Request, exc: ExternalAPIError):
    logger.error(f"Erro em API externa: {exc.message} ({exc.details})")
    return JSONResponse(status_code=502, content={"detail": exc.message})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.warning(f"Serviço não configurado: {exc.message}")
    return _error(503, exc)


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    logger.error(f"Erro de banco de dados: {exc.message}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": Messages.DB_ERROR})


@app.exception_handler(SAIntegrityError)
async def sqlalchemy_integrity_handler(request: Request, exc: SAIntegrityError):
    logger.error(f"Violação de integridade: {exc}", exc_info=True)
    return JSONResponse(status_code=409, content={"detail": Messages.DUPLICATE_ENTRY})


@app.exception_handler(OperationalError)
async def sqlalchemy_operational_handler(request: Request, exc: OperationalError):
    logger.error(f"Erro operacional do banco: {exc}", exc_info=True)
    return JSONResponse(status_code=503, content={"detail": Messages.DB_UNAVAILABLE})


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_generic_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Erro SQLAlchemy: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": Messages.DB_ERROR})


@app.exception_handler(SparkComexError)
async def sparkcomex_error_handler(request: Request, exc: SparkComexError):
    logger.error(f"Erro da aplicação: {exc.message}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": exc.message})


# === Routers ===

for module in (
    auth,
    credit,
    imports,
    suppliers,
    payment_schedules,
    document_requests,
    documents,
    notifications,
    dashboard,
    admin,
    financeira,
    customs_broker,
):
    app.include_router(module.router, prefix=API_PREFIX)


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Saúde da API com checagem do banco e do cache."""
    checks = {"database": "unknown", "cache": get_cache().backend}

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except SQLAlchemyError as e:
        logger.warning(f"Health check do banco falhou: {e}")
        checks["database"] = "unhealthy"

    return {
        "status": "healthy" if checks["database"] == "healthy" else "degraded",
        "version": API_VERSION,
        "checks": checks,
    }


@app.get(f"{API_PREFIX}/version")
def api_version():
    """Retorna informações sobre a versão da API."""
    return {
        "version": API_VERSION,
        "prefix": API_PREFIX,
        "environment": ENVIRONMENT,
    }


def _metrics_response() -> Response:
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


if METRICS_PUBLIC:
    @app.get("/metrics", include_in_schema=False)
    def metrics():
        return _metrics_response()
else:
    @app.get("/metrics", include_in_schema=False)
    async def metrics_admin(current_user=Depends(get_current_admin_user)):
        """Em produção, métricas apenas com token de admin."""
        return _metrics_response()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=ENVIRONMENT == "development",
    )
