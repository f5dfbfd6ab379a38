"""
Router de administração.

Usuários, análise de crédito (pré-aprovação, análise, envio à financeira
e finalização), acompanhamento das importações, taxas administrativas,
confirmação de pagamentos, bureau de crédito e auditoria.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from auth import get_current_admin_user, get_password_hash
from config import Messages
from database import get_db
from dependencies import get_bureau_client
from logging_config import get_logger, log_action
from models.credito import SolicitacaoCredito
from models.importacao import Importacao
from models.pagamento import Pagamento
from models.usuario import UserRole, Usuario
from repositories.credito_repository import credito_repository, taxa_repository
from repositories.fornecedor_repository import fornecedor_repository
from repositories.importacao_repository import documento_importacao_repository, importacao_repository
from repositories.pagamento_repository import pagamento_repository
from repositories.usuario_repository import usuario_repository
from routers.base import AdminRouter
from schemas import (
    CreditApplicationResponse,
    CreditBureauResponse,
    ImportacaoResponse,
    Mensagem,
    PaginatedAuditLogResponse,
    PaginatedCreditApplicationResponse,
    PaginatedFornecedorResponse,
    PaginatedImportacaoResponse,
    PaginatedPaymentResponse,
    PaginatedUsuarioResponse,
    PaymentResponse,
    UsuarioAdminResponse,
)
from schemas.credito import (
    AnalysisUpdate,
    FinalizationRequest,
    PreApprovalRequest,
    RejectionRequest,
    TaxaAdministrativaCreate,
    TaxaAdministrativaResponse,
)
from schemas.dashboard import AdminDashboardResponse
from schemas.importacao import (
    CustomsBrokerAssignment,
    DocumentoImportacaoResponse,
    DocumentoImportacaoStatusUpdate,
    ImportStatusUpdate,
)
from schemas.pagamento import PaymentRejection
from schemas.usuario import AdminUsuarioCreate, RoleUpdate
from services import credit_application_service, credit_service, dashboard_service, import_service, payment_schedule
from services.audit_service import AuditAction, audit_service
from services.credit_bureau import DirectDataClient
from utils.http_helpers import get_client_ip_safe
from utils.pagination import PaginationParams, paginate_query
from utils.password_validator import validate_password
from utils.router_helpers import bureau_lookup

logger = get_logger("routers.admin")
router = AdminRouter(prefix="/admin", tags=["Administração"])


def _audit(
    db: Session,
    request: Request,
    admin: Usuario,
    action: str,
    resource_type: str,
    resource_id: Optional[int] = None,
    **details,
) -> None:
    audit_service.log_action(
        db=db,
        user_id=admin.id,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        details=details or None,
        ip_address=get_client_ip_safe(request),
    )


def _get_user(db: Session, user_id: int) -> Usuario:
    usuario = usuario_repository.get_by_id(db, user_id)
    if not usuario:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.USER_NOT_FOUND)
    return usuario


def _get_application(db: Session, solicitacao_id: int) -> SolicitacaoCredito:
    solicitacao = credito_repository.get_by_id(db, solicitacao_id)
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.CREDIT_NOT_FOUND)
    return solicitacao


def _get_import(db: Session, importacao_id: int) -> Importacao:
    importacao = importacao_repository.get_by_id(db, importacao_id)
    if not importacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.IMPORT_NOT_FOUND)
    return importacao


def _get_payment(db: Session, pagamento_id: int) -> Pagamento:
    pagamento = pagamento_repository.get_by_id(db, pagamento_id)
    if not pagamento:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.PAYMENT_NOT_FOUND)
    return pagamento


# =============================================================================
# Usuários
# =============================================================================


@router.get(
    "/users",
    response_model=PaginatedUsuarioResponse,
    summary="Listar usuários",
    responses={
        200: {"description": "Lista de usuários"},
        401: {"description": "Não autenticado"},
        403: {"description": "Não é administrador"},
    }
)
def list_users(
    pagination: PaginationParams = Depends(),
    role: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
) -> PaginatedUsuarioResponse:
    """Lista os usuários, filtrando por papel, atividade ou texto."""
    query = usuario_repository.query_filtered(db, role=role, is_active=is_active, busca=busca)
    return paginate_query(query, pagination, PaginatedUsuarioResponse)


@router.post(
    "/users",
    response_model=UsuarioAdminResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Criar usuário",
    responses={
        201: {"description": "Usuário criado"},
        400: {"description": "Email/CNPJ já cadastrado ou senha fora da política"},
    }
)
def create_user(
    dados: AdminUsuarioCreate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Cria um usuário de qualquer papel (importador, admin, financeira ou
    despachante). O criador fica registrado em `created_by`.
    """
    is_valid, errors = validate_password(dados.senha)
    if not is_valid:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="; ".join(errors))
    if usuario_repository.get_by_email(db, dados.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.EMAIL_EXISTS)
    if usuario_repository.get_by_cnpj(db, dados.cnpj):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.CNPJ_EXISTS)

    usuario = usuario_repository.create(db, Usuario(
        email=dados.email,
        nome=dados.nome,
        razao_social=dados.razao_social,
        cnpj=dados.cnpj,
        telefone=dados.telefone,
        senha_hash=get_password_hash(dados.senha),
        role=dados.role,
        created_by=current_user.id,
    ))
    _audit(db, request, current_user, AuditAction.USER_CREATED, "usuario", usuario.id,
           email=usuario.email, role=usuario.role)
    return usuario


@router.patch(
    "/users/{user_id}/role",
    response_model=UsuarioAdminResponse,
    summary="Alterar papel do usuário",
)
def change_role(
    user_id: int,
    dados: RoleUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    usuario = _get_user(db, user_id)
    if usuario.id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.INVALID_ROLE)

    anterior = usuario.role
    usuario = usuario_repository.update(db, usuario, {"role": dados.role})
    _audit(db, request, current_user, AuditAction.USER_ROLE_CHANGED, "usuario", usuario.id,
           de=anterior, para=dados.role)
    return usuario


@router.post(
    "/users/{user_id}/deactivate",
    response_model=Mensagem,
    summary="Desativar usuário",
    responses={
        200: {"description": "Usuário desativado com sucesso"},
        400: {"description": "Não pode desativar a si mesmo"},
        404: {"description": "Usuário não encontrado"},
    }
)
def deactivate_user(
    user_id: int,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """Usuários desativados não conseguem fazer login."""
    usuario = _get_user(db, user_id)
    if usuario.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=Messages.CANNOT_DEACTIVATE_SELF
        )

    usuario_repository.deactivate(db, usuario)
    _audit(db, request, current_user, AuditAction.USER_DEACTIVATED, "usuario", usuario.id,
           email=usuario.email, nome=usuario.nome)
    return Mensagem(
        mensagem=f"Usuário {usuario.nome} desativado com sucesso!",
        sucesso=True
    )


# =============================================================================
# Solicitações de crédito
# =============================================================================


@router.get("/credit/applications", response_model=PaginatedCreditApplicationResponse)
def list_credit_applications(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    query = credito_repository.query_filtered(db, user_id=user_id, status=status_filter, busca=busca)
    return paginate_query(query, pagination, PaginatedCreditApplicationResponse)


@router.get("/credit/applications/{solicitacao_id}", response_model=CreditApplicationResponse)
def get_credit_application(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    return _get_application(db, solicitacao_id)


@router.post("/credit/applications/{solicitacao_id}/approve", response_model=CreditApplicationResponse)
def pre_approve_application(
    solicitacao_id: int,
    dados: PreApprovalRequest,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """Pré-aprovação do admin; a solicitação segue para a financeira."""
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.pre_approve(
        db, solicitacao, current_user.id, dados.limite_credito, dados.prazos_aprovados, dados.notas,
    )
    _audit(db, request, current_user, AuditAction.CREDIT_PRE_APPROVED, "credit_application", solicitacao.id,
           limite=str(solicitacao.limite_credito) if solicitacao.limite_credito is not None else None)
    return solicitacao


@router.post("/credit/applications/{solicitacao_id}/reject", response_model=CreditApplicationResponse)
def reject_application(
    solicitacao_id: int,
    dados: RejectionRequest,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.reject(db, solicitacao, dados.motivo)
    _audit(db, request, current_user, AuditAction.CREDIT_REJECTED, "credit_application", solicitacao.id,
           motivo=dados.motivo)
    return solicitacao


@router.put("/credit/applications/{solicitacao_id}/analysis", response_model=CreditApplicationResponse)
def update_analysis(
    solicitacao_id: int,
    dados: AnalysisUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.update_analysis(
        db, solicitacao, current_user.id, dados.analise, dados.pre_analysis_status,
    )
    _audit(db, request, current_user, AuditAction.CREDIT_ANALYSIS_UPDATED, "credit_application", solicitacao.id,
           pre_analysis_status=solicitacao.pre_analysis_status)
    return solicitacao


@router.post("/credit/applications/{solicitacao_id}/submit-financial", response_model=CreditApplicationResponse)
def submit_to_financial(
    solicitacao_id: int,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.submit_to_financial(db, solicitacao)
    _audit(db, request, current_user, AuditAction.CREDIT_SUBMITTED_FINANCIAL, "credit_application", solicitacao.id)
    return solicitacao


@router.post("/credit/applications/{solicitacao_id}/finalize", response_model=CreditApplicationResponse)
def finalize_application(
    solicitacao_id: int,
    dados: FinalizationRequest,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """
    Define limite final, prazos, entrada e taxa. Só depois da aprovação da
    financeira; a partir daqui o crédito pode ser usado em importações.
    """
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.finalize(db, solicitacao, dados)
    _audit(db, request, current_user, AuditAction.CREDIT_FINALIZED, "credit_application", solicitacao.id,
           limite_final=str(dados.limite_final), prazos=dados.prazos_finais)
    return solicitacao


# =============================================================================
# Importações
# =============================================================================


@router.get("/imports", response_model=PaginatedImportacaoResponse)
def list_imports(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = Query(None),
    despachante_id: Optional[int] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    query = importacao_repository.query_filtered(
        db, user_id=user_id, status=status_filter, despachante_id=despachante_id, busca=busca,
    )
    return paginate_query(query, pagination, PaginatedImportacaoResponse)


@router.patch("/imports/{importacao_id}/status", response_model=ImportacaoResponse)
def update_import_status(
    importacao_id: int,
    dados: ImportStatusUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    importacao = _get_import(db, importacao_id)
    anterior = importacao.status
    importacao = import_service.change_status(
        db, importacao, dados.status, current_user.id,
        notas=dados.notas,
        numero_container=dados.numero_container,
        chegada_real=dados.chegada_real,
    )
    _audit(db, request, current_user, AuditAction.IMPORT_STATUS_CHANGED, "import", importacao.id,
           de=anterior, para=importacao.status)
    return importacao


@router.put("/imports/{importacao_id}/customs-broker", response_model=ImportacaoResponse)
def assign_customs_broker(
    importacao_id: int,
    dados: CustomsBrokerAssignment,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """Atribui o despachante (ou remove, com `despachante_id` nulo)."""
    importacao = _get_import(db, importacao_id)
    importacao = import_service.assign_customs_broker(db, importacao, dados.despachante_id)
    _audit(db, request, current_user, AuditAction.IMPORT_BROKER_ASSIGNED, "import", importacao.id,
           despachante_id=dados.despachante_id)
    return importacao


@router.patch(
    "/imports/{importacao_id}/documents/{documento_id}",
    response_model=DocumentoImportacaoResponse,
)
def review_import_document(
    importacao_id: int,
    documento_id: int,
    dados: DocumentoImportacaoStatusUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    importacao = _get_import(db, importacao_id)
    documento = documento_importacao_repository.get_for_import(db, importacao.id, documento_id)
    if not documento:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.DOCUMENTO_NOT_FOUND)
    documento = import_service.review_document(db, documento, dados.status, dados.notas)
    _audit(db, request, current_user, AuditAction.IMPORT_DOCUMENT_REVIEWED, "import", importacao.id,
           documento_id=documento.id, status=documento.status)
    return documento


# =============================================================================
# Fornecedores e taxas
# =============================================================================


@router.get("/suppliers", response_model=PaginatedFornecedorResponse)
def list_suppliers(
    pagination: PaginationParams = Depends(),
    user_id: Optional[int] = Query(None),
    pais: Optional[str] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    query = fornecedor_repository.query_filtered(db, user_id=user_id, pais=pais, busca=busca)
    return paginate_query(query, pagination, PaginatedFornecedorResponse)


@router.get("/admin-fees/{user_id}", response_model=TaxaAdministrativaResponse)
def get_admin_fee(
    user_id: int,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    taxa = taxa_repository.get_active_for_user(db, user_id)
    if not taxa:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.NOT_FOUND)
    return taxa


@router.post("/admin-fees", response_model=TaxaAdministrativaResponse, status_code=201)
def set_admin_fee(
    dados: TaxaAdministrativaCreate,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """Define a taxa administrativa do importador; a anterior é desativada."""
    usuario = _get_user(db, dados.user_id)
    if usuario.role != UserRole.IMPORTER:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.INVALID_ROLE)
    taxa = credit_service.set_admin_fee(db, usuario.id, dados.percentual, current_user.id)
    _audit(db, request, current_user, AuditAction.ADMIN_FEE_SET, "usuario", usuario.id,
           percentual=str(taxa.percentual))
    return taxa


# =============================================================================
# Pagamentos
# =============================================================================


@router.get("/payments", response_model=PaginatedPaymentResponse)
def list_payments(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    importacao_id: Optional[int] = Query(None),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    payment_schedule.refresh_overdue(db)
    query = pagamento_repository.query_filtered(db, status=status_filter, importacao_id=importacao_id)
    return paginate_query(query, pagination, PaginatedPaymentResponse)


@router.post("/payments/{pagamento_id}/confirm", response_model=PaymentResponse)
def confirm_payment(
    pagamento_id: int,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    pagamento = payment_schedule.confirm_payment(db, _get_payment(db, pagamento_id), current_user.id)
    _audit(db, request, current_user, AuditAction.PAYMENT_CONFIRMED, "payment", pagamento.id,
           valor=str(pagamento.valor))
    return pagamento


@router.post("/payments/{pagamento_id}/reject", response_model=PaymentResponse)
def reject_payment(
    pagamento_id: int,
    dados: PaymentRejection,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    pagamento = payment_schedule.reject_payment(
        db, _get_payment(db, pagamento_id), current_user.id, dados.motivo,
    )
    _audit(db, request, current_user, AuditAction.PAYMENT_REJECTED, "payment", pagamento.id,
           motivo=dados.motivo)
    return pagamento


# =============================================================================
# Painel, bureau e auditoria
# =============================================================================


@router.get(
    "/dashboard",
    response_model=AdminDashboardResponse,
    summary="Métricas gerais da plataforma",
)
def admin_dashboard(
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    """Usuários por papel, solicitações e importações por status e volumes."""
    return dashboard_service.admin_dashboard(db)


@router.get(
    "/credit-bureau/{cnpj}",
    response_model=CreditBureauResponse,
    summary="Consultar bureau de crédito",
    responses={
        400: {"description": "CNPJ inválido"},
        502: {"description": "Falha na consulta ao bureau"},
        503: {"description": "Bureau não configurado"},
    }
)
async def credit_bureau_lookup(
    cnpj: str,
    request: Request,
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
    client: DirectDataClient = Depends(get_bureau_client),
):
    """Dossiê de crédito do CNPJ com categoria de score e nível de risco."""
    resultado = await bureau_lookup(db, request, current_user.id, cnpj, client)
    log_action(
        logger, "credit_bureau_query",
        user_id=current_user.id,
        resource_type="credit_bureau",
        nivel_risco=resultado["nivel_risco"],
    )
    return resultado


@router.get("/audit-logs", response_model=PaginatedAuditLogResponse)
def list_audit_logs(
    pagination: PaginationParams = Depends(),
    user_id: Optional[int] = Query(None),
    action: Optional[str] = Query(None),
    resource_type: Optional[str] = Query(None),
    current_user: Usuario = Depends(get_current_admin_user),
    db: Session = Depends(get_db)
):
    query = audit_service.query_logs(db, user_id=user_id, action=action, resource_type=resource_type)
    return paginate_query(query, pagination, PaginatedAuditLogResponse)
