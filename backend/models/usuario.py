from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.credito import SolicitacaoCredito
    from models.fornecedor import Fornecedor
    from models.importacao import Importacao


class UserRole:
    IMPORTER = "importer"
    ADMIN = "admin"
    FINANCEIRA = "financeira"
    CUSTOMS_BROKER = "customs_broker"
    ALL = [IMPORTER, ADMIN, FINANCEIRA, CUSTOMS_BROKER]

    LABELS = {
        IMPORTER: "Importador",
        ADMIN: "Administrador",
        FINANCEIRA: "Financeira",
        CUSTOMS_BROKER: "Despachante Aduaneiro",
    }


class Usuario(Base):
    """Usuário do sistema (importador, admin, financeira ou despachante)."""
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    razao_social: Mapped[str] = mapped_column(String(255), nullable=False)
    cnpj: Mapped[str] = mapped_column(String(14), unique=True, index=True, nullable=False)
    telefone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    senha_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.IMPORTER, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)

    # Bloqueio por tentativas de login
    failed_login_attempts: Mapped[int] = mapped_column(Integer, default=0)
    locked_until: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_by: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    # Relacionamentos
    solicitacoes_credito: Mapped[List["SolicitacaoCredito"]] = relationship(
        "SolicitacaoCredito", back_populates="usuario",
        foreign_keys="SolicitacaoCredito.user_id", cascade="all, delete-orphan",
    )
    importacoes: Mapped[List["Importacao"]] = relationship(
        "Importacao", back_populates="usuario", foreign_keys="Importacao.user_id",
        cascade="all, delete-orphan",
    )
    fornecedores: Mapped[List["Fornecedor"]] = relationship(
        "Fornecedor", back_populates="usuario", cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('ix_usuarios_role_active', 'role', 'is_active'),
    )
