"""
Router da equipe financeira.

A financeira enxerga as solicitações a partir da pré-aprovação do admin
e decide a aprovação do crédito, com limite e prazos. Também consulta
fornecedores, importações, o bureau de crédito e o próprio painel.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from auth import get_current_financeira_user
from config import Messages
from database import get_db
from dependencies import get_bureau_client
from logging_config import get_logger, log_action
from models.credito import CreditStatus, SolicitacaoCredito
from models.usuario import Usuario
from repositories.credito_repository import credito_repository
from repositories.fornecedor_repository import fornecedor_repository
from repositories.importacao_repository import importacao_repository
from routers.base import FinanceiraRouter
from schemas import (
    CreditApplicationResponse,
    CreditBureauResponse,
    PaginatedCreditApplicationResponse,
    PaginatedFornecedorResponse,
    PaginatedImportacaoResponse,
)
from schemas.credito import (
    FinancialApprovalRequest,
    FinancialDataUpdate,
    FinancialStatusUpdate,
    RejectionRequest,
)
from schemas.dashboard import FinanceiraDashboardResponse
from services import credit_application_service, dashboard_service
from services.audit_service import AuditAction, audit_service
from services.credit_bureau import DirectDataClient
from utils.http_helpers import get_client_ip_safe
from utils.pagination import PaginationParams, paginate_query
from utils.router_helpers import bureau_lookup

logger = get_logger("routers.financeira")
router = FinanceiraRouter(prefix="/financeira", tags=["Financeira"])


def _get_application(db: Session, solicitacao_id: int) -> SolicitacaoCredito:
    """Solicitação dentro do escopo da financeira; fora dele, 403."""
    solicitacao = credito_repository.get_by_id(db, solicitacao_id)
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.CREDIT_NOT_FOUND)
    if not credit_application_service.in_financial_scope(solicitacao):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=Messages.CREDIT_NOT_IN_FINANCIAL_SCOPE)
    return solicitacao


def _audit(db: Session, request: Request, user: Usuario, action: str, solicitacao_id: int, **details) -> None:
    audit_service.log_action(
        db=db,
        user_id=user.id,
        action=action,
        resource_type="credit_application",
        resource_id=solicitacao_id,
        details=details or None,
        ip_address=get_client_ip_safe(request),
    )


@router.get("/credit/applications", response_model=PaginatedCreditApplicationResponse)
def list_applications(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    """Solicitações pré-aprovadas em diante."""
    query = credito_repository.query_filtered(
        db, status=status_filter, statuses=CreditStatus.FINANCIAL_SCOPE, busca=busca,
    )
    return paginate_query(query, pagination, PaginatedCreditApplicationResponse)


@router.get("/credit/applications/{solicitacao_id}", response_model=CreditApplicationResponse)
def get_application(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    return _get_application(db, solicitacao_id)


@router.post("/credit/applications/{solicitacao_id}/approve", response_model=CreditApplicationResponse)
def approve_application(
    solicitacao_id: int,
    dados: FinancialApprovalRequest,
    request: Request,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    """
    Aprova o crédito. Exige limite, informado aqui ou já definido na
    pré-aprovação; a solicitação fica aguardando a finalização do admin.
    """
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.financial_approve(
        db, solicitacao, current_user.id,
        dados.limite_credito, dados.prazos_aprovados, dados.notas_financeiras,
    )
    _audit(db, request, current_user, AuditAction.CREDIT_APPROVED, solicitacao.id,
           limite=str(solicitacao.limite_credito), prazos=solicitacao.prazos_aprovados)
    return solicitacao


@router.post("/credit/applications/{solicitacao_id}/reject", response_model=CreditApplicationResponse)
def reject_application(
    solicitacao_id: int,
    dados: RejectionRequest,
    request: Request,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.financial_reject(db, solicitacao, current_user.id, dados.motivo)
    _audit(db, request, current_user, AuditAction.CREDIT_REJECTED, solicitacao.id, motivo=dados.motivo)
    return solicitacao


@router.patch("/credit/applications/{solicitacao_id}/financial-status", response_model=CreditApplicationResponse)
def update_financial_status(
    solicitacao_id: int,
    dados: FinancialStatusUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    solicitacao = _get_application(db, solicitacao_id)
    solicitacao = credit_application_service.set_financial_status(
        db, solicitacao, current_user.id, dados.status,
        dados.limite_credito, dados.prazos_aprovados, dados.notas_financeiras,
    )
    _audit(db, request, current_user, AuditAction.CREDIT_FINANCIAL_STATUS, solicitacao.id,
           financial_status=solicitacao.financial_status)
    return solicitacao


@router.put("/credit/applications/{solicitacao_id}/financial-data", response_model=CreditApplicationResponse)
def update_financial_data(
    solicitacao_id: int,
    dados: FinancialDataUpdate,
    request: Request,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    """Ajusta limite, prazos e notas sem mudar o status."""
    solicitacao = _get_application(db, solicitacao_id)
    changes = dados.model_dump(exclude_unset=True)
    solicitacao = credit_application_service.update_financial_data(db, solicitacao, current_user.id, changes)
    _audit(db, request, current_user, AuditAction.CREDIT_FINANCIAL_UPDATED, solicitacao.id,
           campos=sorted(changes))
    return solicitacao


@router.get("/suppliers", response_model=PaginatedFornecedorResponse)
def list_suppliers(
    pagination: PaginationParams = Depends(),
    user_id: Optional[int] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    query = fornecedor_repository.query_filtered(db, user_id=user_id, busca=busca)
    return paginate_query(query, pagination, PaginatedFornecedorResponse)


@router.get("/imports", response_model=PaginatedImportacaoResponse)
def list_imports(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    user_id: Optional[int] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    query = importacao_repository.query_filtered(db, user_id=user_id, status=status_filter, busca=busca)
    return paginate_query(query, pagination, PaginatedImportacaoResponse)


@router.get("/dashboard", response_model=FinanceiraDashboardResponse)
def financeira_dashboard(
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
):
    return dashboard_service.financeira_dashboard(db)


@router.get("/credit-bureau/{cnpj}", response_model=CreditBureauResponse)
async def credit_bureau_lookup(
    cnpj: str,
    request: Request,
    current_user: Usuario = Depends(get_current_financeira_user),
    db: Session = Depends(get_db),
    client: DirectDataClient = Depends(get_bureau_client),
):
    resultado = await bureau_lookup(db, request, current_user.id, cnpj, client)
    log_action(
        logger, "credit_bureau_query",
        user_id=current_user.id,
        resource_type="credit_bureau",
        nivel_risco=resultado["nivel_risco"],
    )
    return resultado
