"""
Router de pedidos de documentos.

Endpoints:
    GET    /document-requests               - Pedidos recebidos (importador) ou todos (admin/financeira)
    POST   /document-requests               - Pedir documento (admin/financeira)
    GET    /document-requests/{id}          - Detalhe
    POST   /document-requests/{id}/upload   - Enviar o arquivo pedido
    DELETE /document-requests/{id}          - Cancelar (quem pediu ou admin)
"""
from typing import Optional

from fastapi import Depends, File, HTTPException, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from auth import get_current_active_user, require_roles
from config import Messages
from database import get_db
from dependencies import get_upload_service
from logging_config import get_logger, log_action
from models.solicitacao_documento import DocumentRequestStatus, SolicitacaoDocumento
from models.usuario import UserRole, Usuario
from repositories.credito_repository import credito_repository
from repositories.solicitacao_documento_repository import solicitacao_documento_repository
from routers.base import AuthenticatedRouter
from schemas import DocumentRequestCreate, DocumentRequestResponse
from schemas.documento import PaginatedDocumentRequestResponse
from services import document_request_service
from services.audit_service import AuditAction, audit_service
from services.file_upload_service import FileUploadService
from utils.http_helpers import ensure_owner_or_roles, get_client_ip_safe
from utils.pagination import PaginationParams, paginate_query
from utils.router_helpers import validate_or_400

logger = get_logger("routers.document_requests")
router = AuthenticatedRouter(prefix="/document-requests", tags=["Pedidos de Documentos"])

STAFF_ROLES = (UserRole.ADMIN, UserRole.FINANCEIRA)


def _get_request(db: Session, pedido_id: int) -> SolicitacaoDocumento:
    pedido = solicitacao_documento_repository.get_by_id(db, pedido_id)
    if not pedido:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.DOCUMENT_REQUEST_NOT_FOUND)
    return pedido


@router.get("", response_model=PaginatedDocumentRequestResponse)
def list_requests(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    solicitacao_credito_id: Optional[int] = Query(None),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    if current_user.role not in STAFF_ROLES:
        query = solicitacao_documento_repository.query_for_recipient(db, current_user.id, status_filter)
    else:
        query = solicitacao_documento_repository.query(
            db, solicitacao_credito_id=solicitacao_credito_id, status=status_filter,
        )
    return paginate_query(query, pagination, PaginatedDocumentRequestResponse)


@router.post("", response_model=DocumentRequestResponse, status_code=201)
def create_request(
    dados: DocumentRequestCreate,
    request: Request,
    current_user: Usuario = Depends(require_roles(*STAFF_ROLES)),
    db: Session = Depends(get_db),
):
    """Pede um documento ao dono da solicitação de crédito e o notifica."""
    solicitacao = credito_repository.get_by_id(db, dados.solicitacao_credito_id)
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.CREDIT_NOT_FOUND)

    pedido = document_request_service.create_request(db, solicitacao, current_user.id, dados)
    audit_service.log_action(
        db=db,
        user_id=current_user.id,
        action=AuditAction.DOCUMENT_REQUESTED,
        resource_type="document_request",
        resource_id=pedido.id,
        details={"solicitacao_credito_id": solicitacao.id, "tipo": dados.tipo_documento},
        ip_address=get_client_ip_safe(request),
    )
    return pedido


@router.get("/{pedido_id}", response_model=DocumentRequestResponse)
def get_request(
    pedido_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    pedido = _get_request(db, pedido_id)
    ensure_owner_or_roles(current_user, pedido.solicitado_de, STAFF_ROLES)
    return pedido


@router.post("/{pedido_id}/upload", response_model=DocumentRequestResponse)
async def upload_requested_document(
    pedido_id: int,
    file: UploadFile = File(...),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    upload_service: FileUploadService = Depends(get_upload_service),
):
    """Envia o arquivo pedido; reprovado na validação, responde 400 com os erros."""
    pedido = _get_request(db, pedido_id)
    ensure_owner_or_roles(current_user, pedido.solicitado_de)
    if pedido.status != DocumentRequestStatus.PENDING:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.DOCUMENT_REQUEST_CLOSED)

    queued = await upload_service.read(file, pedido.tipo_documento)
    result = validate_or_400(queued)

    caminho = upload_service.store(queued, current_user.id, f"solicitacoes/{pedido.id}", "document_request")
    pedido = document_request_service.mark_uploaded(db, pedido, queued.filename, caminho, result.score)
    log_action(
        logger, "document_request_uploaded",
        user_id=current_user.id,
        resource_type="document_request",
        resource_id=pedido.id,
    )
    return pedido


@router.delete("/{pedido_id}", response_model=DocumentRequestResponse)
def cancel_request(
    pedido_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    pedido = _get_request(db, pedido_id)
    ensure_owner_or_roles(current_user, pedido.solicitado_por, (UserRole.ADMIN,))
    return document_request_service.cancel_request(db, pedido)
