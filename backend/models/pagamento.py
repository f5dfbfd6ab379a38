from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.importacao import Importacao


class PaymentType:
    DOWN_PAYMENT = "down_payment"
    INSTALLMENT = "installment"
    ALL = [DOWN_PAYMENT, INSTALLMENT]


class PaymentStatus:
    PENDING = "pending"
    PAID = "paid"
    CONFIRMED = "confirmed"
    OVERDUE = "overdue"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    ALL = [PENDING, PAID, CONFIRMED, OVERDUE, REJECTED, CANCELLED]
    # Ainda devidos pelo importador
    OPEN = [PENDING, OVERDUE, REJECTED]
    PAYABLE = [PENDING, OVERDUE, REJECTED]

    LABELS = {
        PENDING: "Pendente",
        PAID: "Pago",
        CONFIRMED: "Confirmado",
        OVERDUE: "Vencido",
        REJECTED: "Rejeitado",
        CANCELLED: "Cancelado",
    }


class PaymentMethod:
    PIX = "pix"
    TED = "ted"
    BOLETO = "boleto"
    WIRE = "wire_transfer"
    ALL = [PIX, TED, BOLETO, WIRE]


class Pagamento(Base):
    """Parcela (entrada ou prestação) do cronograma de uma importação."""

    __tablename__ = "cronograma_pagamentos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    importacao_id: Mapped[int] = mapped_column(
        ForeignKey("importacoes.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    tipo: Mapped[str] = mapped_column(String(20), nullable=False)
    valor: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    moeda: Mapped[str] = mapped_column(String(3), default="USD")
    vencimento: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    numero_parcela: Mapped[int] = mapped_column(Integer, default=0)
    total_parcelas: Mapped[int] = mapped_column(Integer, default=0)

    status: Mapped[str] = mapped_column(String(20), default=PaymentStatus.PENDING, index=True)
    pago_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    metodo_pagamento: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    comprovante: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    confirmado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    confirmado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    motivo_rejeicao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    importacao: Mapped["Importacao"] = relationship("Importacao", back_populates="pagamentos")

    __table_args__ = (
        Index("ix_pagamentos_status_vencimento", "status", "vencimento"),
    )
