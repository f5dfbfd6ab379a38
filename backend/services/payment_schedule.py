"""
Geração e manutenção do cronograma de pagamentos das importações.

Uma importação financiada gera uma entrada (percentual_entrada da
solicitação, 30% por padrão) com vencimento imediato e parcelas iguais
para o restante, uma por prazo em dias. A última parcela absorve a
diferença de arredondamento.
"""
from datetime import datetime, timedelta
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from config.credit import DEFAULT_PAYMENT_TERMS
from config.messages import Messages
from exceptions import BusinessRuleError
from logging_config import get_logger
from models.credito import CreditStatus, SolicitacaoCredito
from models.importacao import Importacao
from models.pagamento import Pagamento, PaymentStatus, PaymentType
from repositories.pagamento_repository import pagamento_repository
from services.credit_service import get_down_payment_percentage
from services.notification import notification_service
from utils.dates import utcnow

logger = get_logger("services.payment_schedule")

CENTS = Decimal("0.01")


def parse_terms(terms: Optional[str]) -> List[int]:
    """'30,60,90' -> [30, 60, 90]. Entradas vazias caem no prazo padrão."""
    parsed = [int(p) for p in (terms or "").split(",") if p.strip().isdigit()]
    if not parsed:
        parsed = [int(p) for p in DEFAULT_PAYMENT_TERMS.split(",")]
    return parsed


def get_schedule_terms(solicitacao: Optional[SolicitacaoCredito]) -> str:
    """Prazos finais se o admin finalizou; senão os aprovados; senão o padrão."""
    if solicitacao is None:
        return DEFAULT_PAYMENT_TERMS
    if solicitacao.status == CreditStatus.ADMIN_FINALIZED and solicitacao.prazos_finais:
        return solicitacao.prazos_finais
    return solicitacao.prazos_aprovados or DEFAULT_PAYMENT_TERMS


def build_schedule(
    valor_total: Any,
    percentual_entrada: Any,
    terms: Optional[str],
    start: datetime,
) -> List[Dict[str, Any]]:
    """
    Calcula as linhas do cronograma sem tocar no banco.

    Returns:
        Lista de dicts com tipo, valor, vencimento, numero_parcela e
        total_parcelas, começando pela entrada.
    """
    total = Decimal(valor_total).quantize(CENTS, rounding=ROUND_HALF_UP)
    entrada = (total * Decimal(percentual_entrada) / Decimal("100")).quantize(CENTS, rounding=ROUND_HALF_UP)
    restante = total - entrada
    prazos = parse_terms(terms)

    rows: List[Dict[str, Any]] = [{
        "tipo": PaymentType.DOWN_PAYMENT,
        "valor": entrada,
        "vencimento": start,
        "numero_parcela": 0,
        "total_parcelas": len(prazos),
    }]
    if restante <= 0:
        rows[0]["total_parcelas"] = 0
        return rows

    # truncado: a última parcela absorve a sobra e nunca fica negativa
    parcela = (restante / len(prazos)).quantize(CENTS, rounding=ROUND_DOWN)
    for index, dias in enumerate(prazos, start=1):
        valor = parcela
        if index == len(prazos):
            valor = restante - parcela * (len(prazos) - 1)
        rows.append({
            "tipo": PaymentType.INSTALLMENT,
            "valor": valor,
            "vencimento": start + timedelta(days=dias),
            "numero_parcela": index,
            "total_parcelas": len(prazos),
        })
    return rows


def generate_schedule(db: Session, importacao: Importacao) -> List[Pagamento]:
    """Cria o cronograma de uma importação vinculada a crédito."""
    solicitacao = importacao.solicitacao_credito
    if solicitacao is None:
        return []

    rows = build_schedule(
        importacao.valor_total,
        get_down_payment_percentage(solicitacao),
        get_schedule_terms(solicitacao),
        utcnow(),
    )
    pagamentos = [
        Pagamento(importacao_id=importacao.id, moeda=importacao.moeda, **row)
        for row in rows
    ]
    pagamentos = pagamento_repository.bulk_create(db, pagamentos)
    logger.info(
        f"Cronograma gerado: importacao={importacao.id} parcelas={len(pagamentos)}"
    )
    return pagamentos


def overdue_cutoff(now: Optional[datetime] = None) -> datetime:
    """Início do dia corrente (UTC); vence quem tinha vencimento antes dele."""
    now = now or utcnow()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def refresh_overdue(db: Session) -> int:
    """Marca como vencidas as parcelas pendentes com vencimento em dia anterior."""
    count = pagamento_repository.mark_overdue(db, overdue_cutoff())
    if count:
        logger.info(f"{count} parcelas marcadas como vencidas")
    return count


def set_down_payment_due_now(db: Session, importacao: Importacao) -> Optional[Pagamento]:
    """Entrega ao agente antecipa o vencimento da entrada (sem commit)."""
    entrada = pagamento_repository.get_down_payment(db, importacao.id)
    if entrada is not None and entrada.status in PaymentStatus.OPEN:
        entrada.vencimento = utcnow()
    return entrada


def cancel_open_payments(db: Session, importacao: Importacao) -> int:
    """Cancela as parcelas em aberto de uma importação cancelada (sem commit)."""
    return pagamento_repository.cancel_open_for_import(db, importacao.id)


def regenerate_schedule(db: Session, importacao: Importacao) -> List[Pagamento]:
    """
    Refaz o cronograma após mudança do valor total.

    Só acontece enquanto nenhuma parcela foi paga; caso contrário o
    cronograma atual é mantido.
    """
    atuais = pagamento_repository.list_for_import(db, importacao.id)
    if any(p.status not in (PaymentStatus.PENDING, PaymentStatus.OVERDUE) for p in atuais):
        logger.warning(f"Cronograma da importacao {importacao.id} mantido: há parcelas movimentadas")
        return atuais
    for pagamento in atuais:
        db.delete(pagamento)
    db.commit()
    db.refresh(importacao)
    return generate_schedule(db, importacao)


# === Movimentação das parcelas ===


def update_payment(db: Session, pagamento: Pagamento, data: Dict[str, Any]) -> Pagamento:
    if pagamento.status != PaymentStatus.PENDING:
        raise BusinessRuleError(Messages.PAYMENT_ONLY_PENDING_EDIT)
    for field, value in data.items():
        setattr(pagamento, field, value)
    db.commit()
    db.refresh(pagamento)
    return pagamento


def pay(
    db: Session,
    pagamento: Pagamento,
    metodo_pagamento: str,
    comprovante: Optional[str] = None,
    observacoes: Optional[str] = None,
) -> Pagamento:
    """Importador informa o pagamento; a parcela aguarda confirmação do admin."""
    if pagamento.status not in PaymentStatus.PAYABLE:
        raise BusinessRuleError(Messages.PAYMENT_CANNOT_PAY)
    pagamento.status = PaymentStatus.PAID
    pagamento.pago_em = utcnow()
    pagamento.metodo_pagamento = metodo_pagamento
    pagamento.comprovante = comprovante
    pagamento.motivo_rejeicao = None
    if observacoes is not None:
        pagamento.observacoes = observacoes
    db.commit()
    db.refresh(pagamento)
    logger.info(f"Parcela {pagamento.id} paga via {metodo_pagamento}")
    return pagamento


def confirm_payment(db: Session, pagamento: Pagamento, admin_id: int) -> Pagamento:
    if pagamento.status != PaymentStatus.PAID:
        raise BusinessRuleError(Messages.PAYMENT_NOT_PAID)
    pagamento.status = PaymentStatus.CONFIRMED
    pagamento.confirmado_por = admin_id
    pagamento.confirmado_em = utcnow()
    db.commit()
    db.refresh(pagamento)
    notification_service.notify_payment_status(db, pagamento)
    return pagamento


def reject_payment(db: Session, pagamento: Pagamento, admin_id: int, motivo: str) -> Pagamento:
    """Recusa o pagamento informado; a parcela volta a poder ser paga."""
    if pagamento.status != PaymentStatus.PAID:
        raise BusinessRuleError(Messages.PAYMENT_NOT_PAID)
    pagamento.status = PaymentStatus.REJECTED
    pagamento.motivo_rejeicao = motivo
    pagamento.confirmado_por = admin_id
    pagamento.confirmado_em = utcnow()
    db.commit()
    db.refresh(pagamento)
    notification_service.notify_payment_status(db, pagamento)
    return pagamento
