"""
Repositório de solicitações de crédito, usos de crédito e taxas administrativas.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from models.credito import (
    CreditStatus,
    CreditUsageStatus,
    SolicitacaoCredito,
    TaxaAdministrativa,
    UsoCredito,
)

from .base import BaseRepository


class CreditoRepository(BaseRepository[SolicitacaoCredito]):

    def __init__(self):
        super().__init__(SolicitacaoCredito)

    def query_filtered(
        self,
        db: Session,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        statuses: Optional[List[str]] = None,
        busca: Optional[str] = None,
    ) -> Query:
        query = self.query(db, user_id=user_id, status=status)
        if statuses:
            query = query.filter(SolicitacaoCredito.status.in_(statuses))
        if busca:
            pattern = f"%{busca}%"
            query = query.filter(
                SolicitacaoCredito.razao_social.ilike(pattern)
                | SolicitacaoCredito.cnpj.ilike(pattern)
            )
        return query

    def get_usable_for_user(self, db: Session, user_id: int) -> Optional[SolicitacaoCredito]:
        """Solicitação aprovada mais recente do usuário."""
        return (
            db.query(SolicitacaoCredito)
            .filter(
                SolicitacaoCredito.user_id == user_id,
                SolicitacaoCredito.status.in_(CreditStatus.USABLE),
            )
            .order_by(SolicitacaoCredito.created_at.desc(), SolicitacaoCredito.id.desc())
            .first()
        )

    def get_latest_for_user(self, db: Session, user_id: int) -> Optional[SolicitacaoCredito]:
        return (
            db.query(SolicitacaoCredito)
            .filter(SolicitacaoCredito.user_id == user_id)
            .order_by(SolicitacaoCredito.created_at.desc(), SolicitacaoCredito.id.desc())
            .first()
        )

    def sum_requested(self, db: Session, *criteria) -> Decimal:
        total = db.query(func.coalesce(func.sum(SolicitacaoCredito.valor_solicitado), 0)).filter(*criteria).scalar()
        return Decimal(total or 0)

    def sum_approved_limits(self, db: Session) -> Decimal:
        """Soma dos limites efetivos (final ou financeira) das solicitações aprovadas."""
        limite = func.coalesce(SolicitacaoCredito.limite_final, SolicitacaoCredito.limite_credito, 0)
        total = db.query(func.coalesce(func.sum(limite), 0)).filter(
            SolicitacaoCredito.status.in_(CreditStatus.USABLE)
        ).scalar()
        return Decimal(total or 0)


class UsoCreditoRepository(BaseRepository[UsoCredito]):

    def __init__(self):
        super().__init__(UsoCredito)

    def get_for_import(self, db: Session, importacao_id: int) -> Optional[UsoCredito]:
        return (
            db.query(UsoCredito)
            .filter(
                UsoCredito.importacao_id == importacao_id,
                UsoCredito.status.in_(CreditUsageStatus.ACTIVE),
            )
            .first()
        )


class TaxaAdministrativaRepository(BaseRepository[TaxaAdministrativa]):

    def __init__(self):
        super().__init__(TaxaAdministrativa)

    def get_active_for_user(self, db: Session, user_id: int) -> Optional[TaxaAdministrativa]:
        return (
            db.query(TaxaAdministrativa)
            .filter(
                TaxaAdministrativa.user_id == user_id,
                TaxaAdministrativa.ativo.is_(True),
            )
            .order_by(TaxaAdministrativa.id.desc())
            .first()
        )

    def deactivate_for_user(self, db: Session, user_id: int) -> int:
        """Desativa as taxas vigentes sem commit (a nova taxa fecha a transação)."""
        return (
            db.query(TaxaAdministrativa)
            .filter(
                TaxaAdministrativa.user_id == user_id,
                TaxaAdministrativa.ativo.is_(True),
            )
            .update({"ativo": False}, synchronize_session=False)
        )


credito_repository = CreditoRepository()
uso_credito_repository = UsoCreditoRepository()
taxa_repository = TaxaAdministrativaRepository()
