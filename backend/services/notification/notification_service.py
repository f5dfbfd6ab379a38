"""
Serviço de notificações in-app.
"""
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import Session

from logging_config import get_logger
from models.credito import CreditStatus, SolicitacaoCredito
from models.notificacao import Notificacao, NotificacaoPrioridade, NotificacaoTipo
from models.pagamento import Pagamento, PaymentStatus
from models.solicitacao_documento import SolicitacaoDocumento
from repositories.notificacao_repository import notificacao_repository

logger = get_logger("services.notification")

CREDIT_REFERENCE = "credit_application"
DOCUMENT_REQUEST_REFERENCE = "document_request"
PAYMENT_REFERENCE = "payment"

# (status anterior, novo status) -> notificação ao importador
_NOTIFIABLE_CREDIT_CHANGES = {
    (CreditStatus.PENDING, CreditStatus.PRE_APPROVED),
    (CreditStatus.PRE_APPROVED, CreditStatus.SUBMITTED_TO_FINANCIAL),
    (CreditStatus.SUBMITTED_TO_FINANCIAL, CreditStatus.APPROVED),
    (CreditStatus.APPROVED, CreditStatus.ADMIN_FINALIZED),
    (CreditStatus.PENDING, CreditStatus.REJECTED),
    (CreditStatus.PRE_APPROVED, CreditStatus.REJECTED),
    (CreditStatus.SUBMITTED_TO_FINANCIAL, CreditStatus.REJECTED),
}


def _money(value: Optional[Decimal], moeda: str) -> str:
    return f"{moeda} {Decimal(value or 0):,.2f}"


def _credit_message(solicitacao: SolicitacaoCredito, status: str) -> Optional[Tuple[str, str, str, str]]:
    """(título, mensagem, tipo, prioridade) para o novo status."""
    valor = _money(solicitacao.valor_solicitado, solicitacao.moeda)
    messages: Dict[str, Tuple[str, str, str, str]] = {
        CreditStatus.PRE_APPROVED: (
            "Crédito Pré-Aprovado",
            f"Sua solicitação de crédito de {valor} foi pré-aprovada e seguirá para análise financeira.",
            NotificacaoTipo.SUCCESS, NotificacaoPrioridade.HIGH,
        ),
        CreditStatus.SUBMITTED_TO_FINANCIAL: (
            "Enviado para Análise Final",
            "Sua solicitação de crédito está em análise final pela equipe financeira.",
            NotificacaoTipo.INFO, NotificacaoPrioridade.NORMAL,
        ),
        CreditStatus.APPROVED: (
            "Crédito Aprovado",
            f"Sua solicitação de crédito de {valor} foi aprovada.",
            NotificacaoTipo.SUCCESS, NotificacaoPrioridade.URGENT,
        ),
        CreditStatus.ADMIN_FINALIZED: (
            "Crédito Disponível",
            "Seu crédito foi finalizado e está disponível para uso. Valor aprovado: "
            + _money(solicitacao.limite_final or solicitacao.valor_solicitado, solicitacao.moeda),
            NotificacaoTipo.SUCCESS, NotificacaoPrioridade.URGENT,
        ),
        CreditStatus.REJECTED: (
            "Solicitação Rejeitada",
            "Sua solicitação de crédito foi rejeitada. Entre em contato para mais informações.",
            NotificacaoTipo.ERROR, NotificacaoPrioridade.HIGH,
        ),
    }
    return messages.get(status)


class NotificationService:
    """Cria notificações in-app para os eventos de negócio."""

    def notify(
        self,
        db: Session,
        user_id: int,
        titulo: str,
        mensagem: str,
        tipo: str = NotificacaoTipo.INFO,
        prioridade: str = NotificacaoPrioridade.NORMAL,
        link: Optional[str] = None,
        referencia_tipo: Optional[str] = None,
        referencia_id: Optional[int] = None,
    ) -> Notificacao:
        notificacao = Notificacao(
            user_id=user_id,
            titulo=titulo,
            mensagem=mensagem,
            tipo=tipo,
            prioridade=prioridade,
            link=link,
            referencia_tipo=referencia_tipo,
            referencia_id=referencia_id,
        )
        notificacao = notificacao_repository.create(db, notificacao)
        logger.info(f"Notificação '{titulo}' criada para usuário {user_id}")
        return notificacao

    def should_notify_credit_change(self, old_status: str, new_status: str) -> bool:
        return (old_status, new_status) in _NOTIFIABLE_CREDIT_CHANGES

    def notify_credit_status_change(
        self,
        db: Session,
        solicitacao: SolicitacaoCredito,
        old_status: str,
        new_status: str,
    ) -> Optional[Notificacao]:
        """Notifica o importador quando a mudança de status é relevante para ele."""
        if not self.should_notify_credit_change(old_status, new_status):
            return None
        content = _credit_message(solicitacao, new_status)
        if content is None:
            return None
        titulo, mensagem, tipo, prioridade = content
        return self.notify(
            db,
            user_id=solicitacao.user_id,
            titulo=titulo,
            mensagem=mensagem,
            tipo=tipo,
            prioridade=prioridade,
            referencia_tipo=CREDIT_REFERENCE,
            referencia_id=solicitacao.id,
        )

    def notify_document_requested(self, db: Session, pedido: SolicitacaoDocumento) -> Notificacao:
        return self.notify(
            db,
            user_id=pedido.solicitado_de,
            titulo="Documento Solicitado",
            mensagem=f"Foi solicitado o documento: {pedido.nome_documento}",
            tipo=NotificacaoTipo.WARNING,
            prioridade=NotificacaoPrioridade.HIGH,
            referencia_tipo=DOCUMENT_REQUEST_REFERENCE,
            referencia_id=pedido.id,
        )

    def notify_document_uploaded(self, db: Session, pedido: SolicitacaoDocumento) -> Notificacao:
        return self.notify(
            db,
            user_id=pedido.solicitado_por,
            titulo="Documento Enviado",
            mensagem=f"O documento {pedido.nome_documento} foi enviado",
            referencia_tipo=DOCUMENT_REQUEST_REFERENCE,
            referencia_id=pedido.id,
        )

    def notify_payment_status(self, db: Session, pagamento: Pagamento) -> Optional[Notificacao]:
        """Avisa o importador da confirmação ou recusa de um pagamento."""
        if pagamento.status == PaymentStatus.CONFIRMED:
            titulo, tipo = "Pagamento Confirmado", NotificacaoTipo.SUCCESS
            mensagem = f"O pagamento de {_money(pagamento.valor, pagamento.moeda)} foi confirmado"
        elif pagamento.status == PaymentStatus.REJECTED:
            titulo, tipo = "Pagamento Rejeitado", NotificacaoTipo.ERROR
            mensagem = (
                f"O pagamento de {_money(pagamento.valor, pagamento.moeda)} foi rejeitado: "
                f"{pagamento.motivo_rejeicao}"
            )
        else:
            return None
        return self.notify(
            db,
            user_id=pagamento.importacao.user_id,
            titulo=titulo,
            mensagem=mensagem,
            tipo=tipo,
            prioridade=NotificacaoPrioridade.HIGH,
            referencia_tipo=PAYMENT_REFERENCE,
            referencia_id=pagamento.id,
        )


notification_service = NotificationService()
