"""
Pedidos de documentos complementares.

Admin ou financeira pedem um documento ao dono de uma solicitação de
crédito; o importador envia o arquivo e quem pediu é avisado.
"""
from typing import Optional

from sqlalchemy.orm import Session

from config import DOCUMENT_REQUIREMENTS
from config.messages import Messages
from exceptions import BusinessRuleError, ValidationError
from logging_config import get_logger
from models.credito import SolicitacaoCredito
from models.solicitacao_documento import DocumentRequestStatus, SolicitacaoDocumento
from repositories.solicitacao_documento_repository import solicitacao_documento_repository
from schemas.documento import DocumentRequestCreate
from services import credit_application_service
from services.notification import notification_service
from utils.dates import utcnow

logger = get_logger("services.document_requests")


def create_request(
    db: Session, solicitacao: SolicitacaoCredito, requester_id: int, data: DocumentRequestCreate,
) -> SolicitacaoDocumento:
    if data.tipo_documento not in DOCUMENT_REQUIREMENTS:
        raise ValidationError(Messages.DOCUMENTO_INVALID_TYPE)
    pedido = solicitacao_documento_repository.create(db, SolicitacaoDocumento(
        solicitacao_credito_id=solicitacao.id,
        solicitado_por=requester_id,
        solicitado_de=solicitacao.user_id,
        tipo_documento=data.tipo_documento,
        nome_documento=data.nome_documento,
        descricao=data.descricao,
        status=DocumentRequestStatus.PENDING,
    ))
    notification_service.notify_document_requested(db, pedido)
    return pedido


def _ensure_pending(pedido: SolicitacaoDocumento) -> None:
    if pedido.status != DocumentRequestStatus.PENDING:
        raise BusinessRuleError(Messages.DOCUMENT_REQUEST_CLOSED)


def mark_uploaded(
    db: Session,
    pedido: SolicitacaoDocumento,
    nome_arquivo: str,
    caminho: str,
    pontuacao: Optional[int] = None,
) -> SolicitacaoDocumento:
    """
    Registra o arquivo enviado e avisa quem pediu.

    Se a solicitação de crédito ainda aceita documentos, o arquivo também
    entra em `documentos[tipo]` dela.
    """
    _ensure_pending(pedido)
    pedido.status = DocumentRequestStatus.UPLOADED
    pedido.arquivo_url = caminho
    pedido.nome_arquivo = nome_arquivo
    pedido.enviado_em = utcnow()
    db.commit()
    db.refresh(pedido)

    solicitacao = pedido.solicitacao_credito
    if solicitacao is not None and credit_application_service.accepts_documents(solicitacao):
        credit_application_service.add_documents(db, solicitacao, pedido.tipo_documento, [
            {"arquivo": nome_arquivo, "caminho": caminho, "pontuacao": pontuacao},
        ])

    notification_service.notify_document_uploaded(db, pedido)
    logger.info(f"Documento do pedido {pedido.id} enviado: {nome_arquivo}")
    return pedido


def cancel_request(db: Session, pedido: SolicitacaoDocumento) -> SolicitacaoDocumento:
    _ensure_pending(pedido)
    pedido.status = DocumentRequestStatus.CANCELLED
    db.commit()
    db.refresh(pedido)
    return pedido
