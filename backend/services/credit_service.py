"""
Disponibilidade de crédito, uso de crédito pelas importações e cálculo
da taxa administrativa.

O limite efetivo de uma solicitação é o limite final definido pelo admin
ou, na falta dele, o limite aprovado pela financeira. O valor usado é a
soma das importações ativas vinculadas à solicitação.
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from config.credit import DEFAULT_ADMIN_FEE_PERCENT, DEFAULT_DOWN_PAYMENT_PERCENT
from config.messages import Messages
from exceptions import BusinessRuleError, InsufficientCreditError, RecordNotFoundError
from logging_config import get_logger
from models.credito import (
    CreditStatus,
    CreditUsageStatus,
    SolicitacaoCredito,
    TaxaAdministrativa,
    UsoCredito,
)
from models.importacao import Importacao
from repositories.credito_repository import (
    credito_repository,
    taxa_repository,
    uso_credito_repository,
)
from repositories.importacao_repository import importacao_repository
from utils.dates import utcnow

logger = get_logger("services.credit")

CENTS = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def quantize(value: Any) -> Decimal:
    return Decimal(value or 0).quantize(CENTS, rounding=ROUND_HALF_UP)


def effective_limit(solicitacao: SolicitacaoCredito) -> Decimal:
    """limite_final, senão limite_credito, senão zero."""
    limite = solicitacao.limite_final
    if limite is None:
        limite = solicitacao.limite_credito
    return Decimal(limite or 0)


def get_credit_usage(
    db: Session,
    solicitacao: SolicitacaoCredito,
    exclude_import_id: Optional[int] = None,
) -> Dict[str, Any]:
    """Limite, usado, disponível e percentual usado de uma solicitação."""
    limite = effective_limit(solicitacao)
    usado = importacao_repository.sum_active_for_credit(db, solicitacao.id, exclude_import_id)
    disponivel = max(ZERO, limite - usado)
    percentual = float(usado / limite * HUNDRED) if limite > 0 else 0.0
    return {
        "solicitacao_id": solicitacao.id,
        "limite": quantize(limite),
        "usado": quantize(usado),
        "disponivel": quantize(disponivel),
        "percentual_usado": round(percentual, 2),
        "importacoes_ativas": importacao_repository.count_active_for_credit(db, solicitacao.id),
    }


def get_available_credit(
    db: Session,
    solicitacao: SolicitacaoCredito,
    exclude_import_id: Optional[int] = None,
) -> Decimal:
    return get_credit_usage(db, solicitacao, exclude_import_id)["disponivel"]


def ensure_credit_for_import(
    db: Session,
    user_id: int,
    solicitacao_credito_id: int,
    valor: Decimal,
    exclude_import_id: Optional[int] = None,
) -> SolicitacaoCredito:
    """
    Garante que a solicitação pode financiar uma importação de `valor`.

    A solicitação precisa pertencer ao usuário, estar aprovada (ou
    finalizada pelo admin) e ter crédito disponível suficiente. Ao editar
    uma importação, `exclude_import_id` tira o valor atual dela da conta.

    Raises:
        RecordNotFoundError: solicitação inexistente ou de outro usuário
        BusinessRuleError: solicitação não aprovada
        InsufficientCreditError: valor acima do disponível
    """
    solicitacao = credito_repository.get_by_id_for_user(db, solicitacao_credito_id, user_id)
    if solicitacao is None:
        raise RecordNotFoundError("Solicitação de crédito", solicitacao_credito_id)
    if solicitacao.status not in CreditStatus.USABLE:
        raise BusinessRuleError(Messages.CREDIT_NOT_APPROVED)

    disponivel = get_available_credit(db, solicitacao, exclude_import_id)
    if Decimal(valor) > disponivel:
        raise InsufficientCreditError(quantize(valor), disponivel)
    return solicitacao


def reserve_credit(db: Session, importacao: Importacao) -> Optional[UsoCredito]:
    """Reserva (ou atualiza a reserva de) crédito para a importação."""
    if importacao.solicitacao_credito_id is None:
        return None
    uso = uso_credito_repository.get_for_import(db, importacao.id)
    if uso is None:
        uso = UsoCredito(
            solicitacao_credito_id=importacao.solicitacao_credito_id,
            importacao_id=importacao.id,
            valor=importacao.valor_total,
            status=CreditUsageStatus.RESERVED,
        )
        db.add(uso)
    else:
        uso.solicitacao_credito_id = importacao.solicitacao_credito_id
        uso.valor = importacao.valor_total
    db.commit()
    db.refresh(uso)
    logger.info(f"Crédito reservado: importacao={importacao.id} valor={uso.valor}")
    return uso


def confirm_credit_usage(db: Session, importacao: Importacao) -> Optional[UsoCredito]:
    """Confirma a reserva quando a carga é entregue ao agente (sem commit)."""
    uso = uso_credito_repository.get_for_import(db, importacao.id)
    if uso is None or uso.status == CreditUsageStatus.CONFIRMED:
        return uso
    uso.status = CreditUsageStatus.CONFIRMED
    uso.confirmado_em = utcnow()
    return uso


def release_credit_usage(db: Session, importacao: Importacao) -> Optional[UsoCredito]:
    """Libera a reserva quando a importação é cancelada (sem commit)."""
    uso = uso_credito_repository.get_for_import(db, importacao.id)
    if uso is None:
        return None
    uso.status = CreditUsageStatus.RELEASED
    uso.liberado_em = utcnow()
    return uso


def calculate_admin_fee(
    valor_importacao: Any,
    percentual_entrada: Any = None,
    percentual_taxa: Any = None,
) -> Dict[str, Decimal]:
    """
    Entrada, valor financiado e taxa administrativa de uma importação.

    entrada = valor * entrada% / 100
    financiado = valor - entrada
    taxa = financiado * taxa% / 100
    total = valor + taxa
    """
    valor = Decimal(valor_importacao or 0)
    entrada_pct = Decimal(DEFAULT_DOWN_PAYMENT_PERCENT if percentual_entrada is None else percentual_entrada)
    taxa_pct = Decimal(DEFAULT_ADMIN_FEE_PERCENT if percentual_taxa is None else percentual_taxa)

    entrada = valor * entrada_pct / HUNDRED
    financiado = valor - entrada
    taxa = financiado * taxa_pct / HUNDRED
    return {
        "valor_importacao": quantize(valor),
        "percentual_entrada": entrada_pct,
        "valor_entrada": quantize(entrada),
        "valor_financiado": quantize(financiado),
        "percentual_taxa": taxa_pct,
        "valor_taxa": quantize(taxa),
        "valor_total": quantize(valor + taxa),
    }


def get_fee_percentage(
    db: Session, user_id: int, solicitacao: Optional[SolicitacaoCredito] = None,
) -> Decimal:
    """Taxa ativa do usuário; senão a taxa da solicitação; senão o padrão."""
    taxa = taxa_repository.get_active_for_user(db, user_id)
    if taxa is not None:
        return Decimal(taxa.percentual)
    if solicitacao is not None and solicitacao.taxa_administrativa is not None:
        return Decimal(solicitacao.taxa_administrativa)
    return DEFAULT_ADMIN_FEE_PERCENT


def get_down_payment_percentage(solicitacao: Optional[SolicitacaoCredito]) -> Decimal:
    if solicitacao is not None and solicitacao.percentual_entrada is not None:
        return Decimal(solicitacao.percentual_entrada)
    return DEFAULT_DOWN_PAYMENT_PERCENT


def calculate_import_fee(db: Session, importacao: Importacao) -> Dict[str, Decimal]:
    """Taxa administrativa de uma importação com os percentuais vigentes."""
    solicitacao = importacao.solicitacao_credito
    return calculate_admin_fee(
        importacao.valor_total,
        get_down_payment_percentage(solicitacao),
        get_fee_percentage(db, importacao.user_id, solicitacao),
    )


def set_admin_fee(db: Session, user_id: int, percentual: Decimal, admin_id: int) -> TaxaAdministrativa:
    """Nova taxa do importador; as anteriores deixam de valer."""
    taxa_repository.deactivate_for_user(db, user_id)
    taxa = taxa_repository.create(db, TaxaAdministrativa(
        user_id=user_id,
        percentual=quantize(percentual),
        ativo=True,
        criado_por=admin_id,
    ))
    logger.info(f"Taxa administrativa de {taxa.percentual}% definida para usuario={user_id}")
    return taxa
