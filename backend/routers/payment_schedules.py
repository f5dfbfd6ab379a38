"""
Router do cronograma de pagamentos.

O importador vê e paga as parcelas das próprias importações; admin e
financeira listam todas. Confirmação e recusa ficam em /admin/payments.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import get_current_active_user
from config import Messages
from database import get_db
from logging_config import get_logger, log_action
from models.pagamento import Pagamento
from models.usuario import UserRole, Usuario
from repositories.pagamento_repository import pagamento_repository
from routers.base import AuthenticatedRouter
from schemas import PaginatedPaymentResponse, PaymentResponse
from schemas.pagamento import PaymentPay, PaymentUpdate
from services import payment_schedule
from utils.http_helpers import ensure_owner_or_roles
from utils.pagination import PaginationParams, paginate_query

logger = get_logger("routers.payment_schedules")
router = AuthenticatedRouter(prefix="/payment-schedules", tags=["Pagamentos"])

READ_ROLES = (UserRole.ADMIN, UserRole.FINANCEIRA)


def _get_payment(db: Session, pagamento_id: int, user: Usuario, roles=()) -> Pagamento:
    pagamento = pagamento_repository.get_by_id(db, pagamento_id)
    if not pagamento:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.PAYMENT_NOT_FOUND)
    ensure_owner_or_roles(user, pagamento.importacao.user_id, roles)
    return pagamento


@router.get("", response_model=PaginatedPaymentResponse)
def list_payments(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    importacao_id: Optional[int] = Query(None),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Lista parcelas, marcando antes como vencidas as pendentes em atraso."""
    payment_schedule.refresh_overdue(db)
    user_id = None if current_user.role in READ_ROLES else current_user.id
    query = pagamento_repository.query_filtered(
        db, user_id=user_id, status=status_filter, importacao_id=importacao_id,
    )
    return paginate_query(query, pagination, PaginatedPaymentResponse)


@router.get("/{pagamento_id}", response_model=PaymentResponse)
def get_payment(
    pagamento_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return _get_payment(db, pagamento_id, current_user, READ_ROLES)


@router.put("/{pagamento_id}", response_model=PaymentResponse)
def update_payment(
    pagamento_id: int,
    dados: PaymentUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    pagamento = _get_payment(db, pagamento_id, current_user)
    return payment_schedule.update_payment(db, pagamento, dados.model_dump(exclude_unset=True))


@router.post("/{pagamento_id}/pay", response_model=PaymentResponse)
def pay_installment(
    pagamento_id: int,
    dados: PaymentPay,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    pagamento = _get_payment(db, pagamento_id, current_user)
    pagamento = payment_schedule.pay(
        db, pagamento, dados.metodo_pagamento, dados.comprovante, dados.observacoes,
    )
    log_action(
        logger, "payment_paid",
        user_id=current_user.id,
        resource_type="payment",
        resource_id=pagamento.id,
        metodo=dados.metodo_pagamento,
    )
    return pagamento
