"""
Router das solicitações de crédito (lado do importador).

Endpoints:
    POST   /credit/applications                     - Criar solicitação
    GET    /credit/applications                     - Listar solicitações próprias
    GET    /credit/applications/usage               - Crédito disponível atual
    GET    /credit/applications/{id}                - Detalhe (dono, admin ou financeira)
    PUT    /credit/applications/{id}                - Editar (apenas pendente)
    DELETE /credit/applications/{id}                - Cancelar (apenas pendente)
    POST   /credit/applications/{id}/documents      - Enviar lote de documentos
    GET    /credit/applications/{id}/workflow       - Etapa e próximos status
    GET    /credit/applications/{id}/usage          - Uso de crédito da solicitação
    GET    /credit/applications/{id}/admin-fee      - Simular taxa administrativa
"""
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from auth import get_current_active_user, require_roles
from config import DOCUMENT_REQUIREMENTS, Messages
from database import get_db
from dependencies import get_upload_queue, get_upload_service
from logging_config import get_logger, log_action
from models.credito import SolicitacaoCredito
from models.usuario import UserRole, Usuario
from repositories.credito_repository import credito_repository
from routers.base import AuthenticatedRouter
from schemas import (
    AdminFeeResponse,
    CreditApplicationCreate,
    CreditApplicationResponse,
    CreditApplicationUpdate,
    CreditUsageResponse,
    Mensagem,
    PaginatedCreditApplicationResponse,
    UploadQueueResponse,
    WorkflowResponse,
)
from services import credit_application_service, credit_service, credit_workflow
from services.file_upload_service import FileUploadService
from services.upload_queue import SequentialUploadQueue
from utils.http_helpers import ensure_owner_or_roles
from utils.pagination import PaginationParams, paginate_query
from utils.router_helpers import drain_to_storage, queue_response

logger = get_logger("routers.credit")
router = AuthenticatedRouter(prefix="/credit/applications", tags=["Crédito"])

READ_ROLES = (UserRole.ADMIN, UserRole.FINANCEIRA)


def _get_application(db: Session, solicitacao_id: int) -> SolicitacaoCredito:
    solicitacao = credito_repository.get_by_id(db, solicitacao_id)
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.CREDIT_NOT_FOUND)
    return solicitacao


def _get_readable(db: Session, solicitacao_id: int, user: Usuario) -> SolicitacaoCredito:
    solicitacao = _get_application(db, solicitacao_id)
    ensure_owner_or_roles(user, solicitacao.user_id, READ_ROLES)
    return solicitacao


def _get_own(db: Session, solicitacao_id: int, user: Usuario) -> SolicitacaoCredito:
    solicitacao = _get_application(db, solicitacao_id)
    ensure_owner_or_roles(user, solicitacao.user_id)
    return solicitacao


@router.post("", response_model=CreditApplicationResponse, status_code=201)
def create_application(
    dados: CreditApplicationCreate,
    current_user: Usuario = Depends(require_roles(UserRole.IMPORTER)),
    db: Session = Depends(get_db),
):
    """Cria uma solicitação de crédito em `pending`."""
    solicitacao = credit_application_service.create_application(db, current_user, dados)
    log_action(
        logger, "credit_application_created",
        user_id=current_user.id,
        resource_type="credit_application",
        resource_id=solicitacao.id,
    )
    return solicitacao


@router.get("", response_model=PaginatedCreditApplicationResponse)
def list_applications(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    query = credito_repository.query_filtered(db, user_id=current_user.id, status=status_filter)
    return paginate_query(query, pagination, PaginatedCreditApplicationResponse)


@router.get("/usage", response_model=CreditUsageResponse)
def get_current_usage(
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Limite, usado e disponível da solicitação aprovada mais recente."""
    solicitacao = credito_repository.get_usable_for_user(db, current_user.id)
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.CREDIT_NOT_APPROVED)
    return credit_service.get_credit_usage(db, solicitacao)


@router.get("/{solicitacao_id}", response_model=CreditApplicationResponse)
def get_application(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return _get_readable(db, solicitacao_id, current_user)


@router.put("/{solicitacao_id}", response_model=CreditApplicationResponse)
def update_application(
    solicitacao_id: int,
    dados: CreditApplicationUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    solicitacao = _get_own(db, solicitacao_id, current_user)
    solicitacao = credit_application_service.update_application(db, solicitacao, dados)
    log_action(
        logger, "credit_application_updated",
        user_id=current_user.id,
        resource_type="credit_application",
        resource_id=solicitacao.id,
    )
    return solicitacao


@router.delete("/{solicitacao_id}", response_model=Mensagem)
def cancel_application(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Cancela a solicitação (status `cancelled`); só enquanto pendente."""
    solicitacao = _get_own(db, solicitacao_id, current_user)
    credit_application_service.cancel_application(db, solicitacao)
    log_action(
        logger, "credit_application_cancelled",
        user_id=current_user.id,
        resource_type="credit_application",
        resource_id=solicitacao.id,
    )
    return Mensagem(mensagem=Messages.CREDIT_CANCELLED, sucesso=True)


@router.post("/{solicitacao_id}/documents", response_model=UploadQueueResponse)
async def upload_documents(
    solicitacao_id: int,
    document_type: str = Form(...),
    files: List[UploadFile] = File(...),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    upload_service: FileUploadService = Depends(get_upload_service),
    queue: SequentialUploadQueue = Depends(get_upload_queue),
):
    """
    Envia um lote de documentos de um mesmo tipo.

    Todos os arquivos são validados antes do envio; os reprovados voltam
    em `invalidos` com a pontuação e os erros. Os aprovados são gravados
    um a um e registrados em `documentos[tipo]` da solicitação.
    """
    solicitacao = _get_own(db, solicitacao_id, current_user)
    if document_type not in DOCUMENT_REQUIREMENTS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.DOCUMENTO_INVALID_TYPE)
    if not credit_application_service.accepts_documents(solicitacao):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.CREDIT_DOCUMENTS_CLOSED)

    result = await drain_to_storage(
        files, document_type, current_user.id, f"credito/{solicitacao.id}",
        upload_service, queue, upload_type="credit",
    )
    credit_application_service.add_documents(db, solicitacao, document_type, [
        {
            "arquivo": item["file"].filename,
            "caminho": item["stored"],
            "pontuacao": item["validation"].score,
        }
        for item in result.uploaded
    ])
    log_action(
        logger, "credit_documents_uploaded",
        user_id=current_user.id,
        resource_type="credit_application",
        resource_id=solicitacao.id,
        document_type=document_type,
        enviados=len(result.uploaded),
    )
    return queue_response(result)


@router.get("/{solicitacao_id}/workflow", response_model=WorkflowResponse)
def get_workflow(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    solicitacao = _get_readable(db, solicitacao_id, current_user)
    return credit_workflow.describe(solicitacao)


@router.get("/{solicitacao_id}/usage", response_model=CreditUsageResponse)
def get_usage(
    solicitacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    solicitacao = _get_readable(db, solicitacao_id, current_user)
    return credit_service.get_credit_usage(db, solicitacao)


@router.get("/{solicitacao_id}/admin-fee", response_model=AdminFeeResponse)
def simulate_admin_fee(
    solicitacao_id: int,
    valor: Decimal = Query(..., gt=0),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Entrada, valor financiado e taxa para uma importação de `valor`."""
    solicitacao = _get_readable(db, solicitacao_id, current_user)
    return credit_service.calculate_admin_fee(
        valor,
        credit_service.get_down_payment_percentage(solicitacao),
        credit_service.get_fee_percentage(db, solicitacao.user_id, solicitacao),
    )
