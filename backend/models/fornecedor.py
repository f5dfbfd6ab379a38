from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.usuario import Usuario


class Fornecedor(Base):
    """Fornecedor estrangeiro cadastrado pelo importador."""

    __tablename__ = "fornecedores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    nome_empresa: Mapped[str] = mapped_column(String(255), nullable=False)
    contato: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    telefone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    pais: Mapped[str] = mapped_column(String(100), nullable=False)
    cidade: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    endereco: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    produtos: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    usuario: Mapped["Usuario"] = relationship("Usuario", back_populates="fornecedores")

    __table_args__ = (
        Index("ix_fornecedores_user_nome", "user_id", "nome_empresa"),
    )
