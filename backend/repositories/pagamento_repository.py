"""
Repositório do cronograma de pagamentos.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from models.importacao import Importacao
from models.pagamento import Pagamento, PaymentStatus, PaymentType

from .base import BaseRepository


class PagamentoRepository(BaseRepository[Pagamento]):

    def __init__(self):
        super().__init__(Pagamento)

    def query_filtered(
        self,
        db: Session,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        importacao_id: Optional[int] = None,
    ) -> Query:
        query = db.query(Pagamento)
        if user_id is not None:
            query = query.join(Importacao, Pagamento.importacao_id == Importacao.id).filter(
                Importacao.user_id == user_id
            )
        if status:
            query = query.filter(Pagamento.status == status)
        if importacao_id is not None:
            query = query.filter(Pagamento.importacao_id == importacao_id)
        return query.order_by(Pagamento.vencimento.asc(), Pagamento.id.asc())

    def list_for_import(self, db: Session, importacao_id: int) -> List[Pagamento]:
        return self.query_filtered(db, importacao_id=importacao_id).all()

    def get_down_payment(self, db: Session, importacao_id: int) -> Optional[Pagamento]:
        return db.query(Pagamento).filter(
            Pagamento.importacao_id == importacao_id,
            Pagamento.tipo == PaymentType.DOWN_PAYMENT,
        ).first()

    def mark_overdue(self, db: Session, now: datetime) -> int:
        """Parcelas pendentes com vencimento passado viram `overdue`."""
        count = (
            db.query(Pagamento)
            .filter(
                Pagamento.status == PaymentStatus.PENDING,
                Pagamento.vencimento < now,
            )
            .update({"status": PaymentStatus.OVERDUE}, synchronize_session=False)
        )
        if count:
            db.commit()
        return count

    def cancel_open_for_import(self, db: Session, importacao_id: int) -> int:
        """Cancela parcelas em aberto sem commit (o chamador fecha a transação)."""
        return (
            db.query(Pagamento)
            .filter(
                Pagamento.importacao_id == importacao_id,
                Pagamento.status.in_(PaymentStatus.OPEN),
            )
            .update({"status": PaymentStatus.CANCELLED}, synchronize_session=False)
        )

    def sum_for_user(self, db: Session, user_id: int, statuses: List[str]) -> Decimal:
        total = (
            db.query(func.coalesce(func.sum(Pagamento.valor), 0))
            .join(Importacao, Pagamento.importacao_id == Importacao.id)
            .filter(Importacao.user_id == user_id, Pagamento.status.in_(statuses))
            .scalar()
        )
        return Decimal(total or 0)

    def count_for_user(self, db: Session, user_id: int, statuses: Optional[List[str]] = None) -> int:
        query = (
            db.query(Pagamento)
            .join(Importacao, Pagamento.importacao_id == Importacao.id)
            .filter(Importacao.user_id == user_id)
        )
        if statuses:
            query = query.filter(Pagamento.status.in_(statuses))
        return query.count()

    def next_due_for_user(self, db: Session, user_id: int) -> Optional[Pagamento]:
        return (
            self.query_filtered(db, user_id=user_id)
            .filter(Pagamento.status.in_(PaymentStatus.OPEN))
            .first()
        )


pagamento_repository = PagamentoRepository()
