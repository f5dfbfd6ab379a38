"""
Indicadores dos painéis de cada papel.

As funções devolvem dicts no formato dos schemas de schemas/dashboard.py.
"""
from typing import Any, Dict

from sqlalchemy.orm import Session

from models.credito import CreditStatus, FinancialStatus, SolicitacaoCredito
from models.importacao import Importacao, ImportStatus
from models.pagamento import Pagamento, PaymentStatus
from repositories.credito_repository import credito_repository
from repositories.fornecedor_repository import fornecedor_repository
from repositories.importacao_repository import importacao_repository
from repositories.pagamento_repository import pagamento_repository
from repositories.usuario_repository import usuario_repository
from services import credit_service


def importer_dashboard(db: Session, user_id: int) -> Dict[str, Any]:
    """Resumo de crédito, importações e pagamentos do importador."""
    data: Dict[str, Any] = {}

    solicitacao = credito_repository.get_usable_for_user(db, user_id)
    if solicitacao is not None:
        uso = credit_service.get_credit_usage(db, solicitacao)
        data.update(
            limite_credito=uso["limite"],
            credito_usado=uso["usado"],
            credito_disponivel=uso["disponivel"],
            status_credito=solicitacao.status,
        )
    else:
        latest = credito_repository.get_latest_for_user(db, user_id)
        data["status_credito"] = latest.status if latest else None

    por_status = importacao_repository.count_by_status(db, Importacao.user_id == user_id)
    data["total_importacoes"] = sum(por_status.values())
    data["importacoes_ativas"] = sum(por_status.get(s, 0) for s in ImportStatus.ACTIVE)
    data["importacoes_por_status"] = por_status
    data["valor_total_importado"] = credit_service.quantize(importacao_repository.sum_value(
        db, Importacao.user_id == user_id, Importacao.status != ImportStatus.CANCELADO,
    ))
    data["total_fornecedores"] = fornecedor_repository.count_for_user(db, user_id)

    data["pagamentos_pendentes"] = pagamento_repository.count_for_user(db, user_id, PaymentStatus.OPEN)
    data["valor_pagamentos_pendentes"] = credit_service.quantize(
        pagamento_repository.sum_for_user(db, user_id, PaymentStatus.OPEN)
    )
    proximo = pagamento_repository.next_due_for_user(db, user_id)
    if proximo is not None:
        data["proximo_pagamento"] = {
            "id": proximo.id,
            "importacao_id": proximo.importacao_id,
            "valor": proximo.valor,
            "vencimento": proximo.vencimento,
            "status": proximo.status,
        }
    return data


def admin_dashboard(db: Session) -> Dict[str, Any]:
    return {
        "usuarios_por_papel": usuario_repository.count_by_role(db),
        "solicitacoes_por_status": credito_repository.count_by_status(db),
        "importacoes_por_status": importacao_repository.count_by_status(db),
        "volume_solicitado": credit_service.quantize(credito_repository.sum_requested(db)),
        "volume_aprovado": credit_service.quantize(credito_repository.sum_approved_limits(db)),
        "volume_importacoes": credit_service.quantize(
            importacao_repository.sum_value(db, Importacao.status != ImportStatus.CANCELADO)
        ),
        "pagamentos_vencidos": db.query(Pagamento).filter(
            Pagamento.status == PaymentStatus.OVERDUE
        ).count(),
    }


def financeira_dashboard(db: Session) -> Dict[str, Any]:
    """Fila e volumes da análise financeira."""
    por_status = credito_repository.count_by_status(
        db, SolicitacaoCredito.status.in_(CreditStatus.FINANCIAL_SCOPE + [CreditStatus.REJECTED])
    )
    rejeitadas = db.query(SolicitacaoCredito).filter(
        SolicitacaoCredito.financial_status == FinancialStatus.REJECTED
    ).count()
    return {
        "aguardando_analise": por_status.get(CreditStatus.SUBMITTED_TO_FINANCIAL, 0),
        "aprovadas": sum(por_status.get(s, 0) for s in CreditStatus.USABLE),
        "rejeitadas": rejeitadas,
        "volume_solicitado": credit_service.quantize(credito_repository.sum_requested(
            db, SolicitacaoCredito.status.in_(CreditStatus.FINANCIAL_SCOPE)
        )),
        "limites_aprovados": credit_service.quantize(credito_repository.sum_approved_limits(db)),
        "importacoes_financiadas": db.query(Importacao).filter(
            Importacao.solicitacao_credito_id.isnot(None),
            Importacao.status != ImportStatus.CANCELADO,
        ).count(),
    }


def customs_broker_dashboard(db: Session, despachante_id: int) -> Dict[str, Any]:
    por_status = importacao_repository.count_by_status(db, Importacao.despachante_id == despachante_id)
    return {
        "importacoes_atribuidas": sum(por_status.values()),
        "em_desembaraco": por_status.get(ImportStatus.DESEMBARACO, 0),
        "concluidas": por_status.get(ImportStatus.CONCLUIDO, 0),
        "valor_total": credit_service.quantize(importacao_repository.sum_value(
            db, Importacao.despachante_id == despachante_id, Importacao.status != ImportStatus.CANCELADO,
        )),
        "importacoes_por_status": por_status,
    }
