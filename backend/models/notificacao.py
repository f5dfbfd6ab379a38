from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.usuario import Usuario


class NotificacaoTipo:
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    ALL = [SUCCESS, INFO, WARNING, ERROR]


class NotificacaoPrioridade:
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"
    ALL = [LOW, NORMAL, HIGH, URGENT]


class Notificacao(Base):
    """Notificação in-app para o usuário."""

    __tablename__ = "notificacoes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    mensagem: Mapped[str] = mapped_column(Text, nullable=False)
    tipo: Mapped[str] = mapped_column(String(20), nullable=False, default=NotificacaoTipo.INFO)
    prioridade: Mapped[str] = mapped_column(
        String(10), nullable=False, default=NotificacaoPrioridade.NORMAL,
    )
    link: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    lida: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    lida_em: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    referencia_tipo: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    referencia_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    usuario: Mapped["Usuario"] = relationship("Usuario")

    __table_args__ = (
        Index("ix_notificacoes_user_lida", "user_id", "lida"),
        Index("ix_notificacoes_user_created", "user_id", "created_at"),
    )
