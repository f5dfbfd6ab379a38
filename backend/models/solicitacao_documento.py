from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.credito import SolicitacaoCredito


class DocumentRequestStatus:
    PENDING = "pending"
    UPLOADED = "uploaded"
    CANCELLED = "cancelled"
    ALL = [PENDING, UPLOADED, CANCELLED]


class SolicitacaoDocumento(Base):
    """Pedido de documento complementar feito ao importador."""

    __tablename__ = "solicitacoes_documento"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    solicitacao_credito_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("solicitacoes_credito.id", ondelete="CASCADE"), nullable=True, index=True,
    )
    solicitado_por: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False,
    )
    solicitado_de: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    tipo_documento: Mapped[str] = mapped_column(String(50), nullable=False)
    nome_documento: Mapped[str] = mapped_column(String(255), nullable=False)
    descricao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default=DocumentRequestStatus.PENDING)
    arquivo_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    nome_arquivo: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    enviado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    solicitacao_credito: Mapped[Optional["SolicitacaoCredito"]] = relationship("SolicitacaoCredito")

    __table_args__ = (
        Index("ix_solicitacoes_documento_de_status", "solicitado_de", "status"),
    )
