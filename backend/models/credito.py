from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database import Base

if TYPE_CHECKING:
    from models.importacao import Importacao
    from models.usuario import Usuario

# === Constantes ===


class CreditStatus:
    """Status principal da solicitação de crédito."""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    NEEDS_DOCUMENTS = "needs_documents"
    PRE_APPROVED = "pre_approved"
    SUBMITTED_TO_FINANCIAL = "submitted_to_financial"
    APPROVED = "approved"
    ADMIN_FINALIZED = "admin_finalized"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    ALL = [
        PENDING, UNDER_REVIEW, NEEDS_DOCUMENTS, PRE_APPROVED,
        SUBMITTED_TO_FINANCIAL, APPROVED, ADMIN_FINALIZED, REJECTED, CANCELLED,
    ]
    # Crédito liberado para uso em importações
    USABLE = [APPROVED, ADMIN_FINALIZED]
    # Visíveis para a financeira
    FINANCIAL_SCOPE = [PRE_APPROVED, SUBMITTED_TO_FINANCIAL, APPROVED, ADMIN_FINALIZED]


class PreAnalysisStatus:
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    PRE_APPROVED = "pre_approved"
    NEEDS_DOCUMENTS = "needs_documents"
    NEEDS_CLARIFICATION = "needs_clarification"
    SUBMITTED_TO_FINANCIAL = "submitted_to_financial"
    ALL = [
        PENDING, UNDER_REVIEW, PRE_APPROVED, NEEDS_DOCUMENTS,
        NEEDS_CLARIFICATION, SUBMITTED_TO_FINANCIAL,
    ]


class FinancialStatus:
    PENDING_FINANCIAL = "pending_financial"
    UNDER_REVIEW_FINANCIAL = "under_review_financial"
    APPROVED = "approved"
    REJECTED = "rejected"
    NEEDS_DOCUMENTS_FINANCIAL = "needs_documents_financial"
    ALL = [
        PENDING_FINANCIAL, UNDER_REVIEW_FINANCIAL, APPROVED, REJECTED,
        NEEDS_DOCUMENTS_FINANCIAL,
    ]


class AdminStatus:
    PENDING_ADMIN = "pending_admin"
    ADMIN_FINALIZED = "admin_finalized"
    ALL = [PENDING_ADMIN, ADMIN_FINALIZED]


class CreditUsageStatus:
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    RELEASED = "released"
    ALL = [RESERVED, CONFIRMED, RELEASED]
    # Consomem limite
    ACTIVE = [RESERVED, CONFIRMED]


# === Models ===


class SolicitacaoCredito(Base):
    """Solicitação de limite de crédito para importações."""

    __tablename__ = "solicitacoes_credito"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )

    # Dados da empresa no momento da solicitação
    razao_social: Mapped[str] = mapped_column(String(255), nullable=False)
    cnpj: Mapped[str] = mapped_column(String(14), nullable=False)

    valor_solicitado: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    moeda: Mapped[str] = mapped_column(String(3), default="USD")
    finalidade: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prazos_solicitados: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    produtos: Mapped[Optional[List[Any]]] = mapped_column(JSON, nullable=True)
    volume_mensal_estimado: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)

    # Documentos enviados: {tipo: [{arquivo, caminho, pontuacao, enviado_em}]}
    documentos: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    # Workflow
    status: Mapped[str] = mapped_column(String(30), default=CreditStatus.PENDING, index=True)
    pre_analysis_status: Mapped[str] = mapped_column(String(30), default=PreAnalysisStatus.PENDING)
    financial_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    admin_status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Análise do admin (pré-análise)
    analise_admin: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    analisado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    analisado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Análise da financeira
    limite_credito: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    prazos_aprovados: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    notas_financeiras: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    analisado_financeira_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    enviado_financeira_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    aprovado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Finalização pelo admin
    limite_final: Mapped[Optional[Decimal]] = mapped_column(Numeric(14, 2), nullable=True)
    prazos_finais: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    percentual_entrada: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    taxa_administrativa: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    finalizado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    motivo_rejeicao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    # Relationships
    usuario: Mapped["Usuario"] = relationship(
        "Usuario", back_populates="solicitacoes_credito", foreign_keys=[user_id],
    )
    importacoes: Mapped[List["Importacao"]] = relationship(
        "Importacao", back_populates="solicitacao_credito",
    )
    usos: Mapped[List["UsoCredito"]] = relationship(
        "UsoCredito", back_populates="solicitacao_credito", cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_solicitacoes_user_status", "user_id", "status"),
        Index("ix_solicitacoes_status_created", "status", "created_at"),
    )


class UsoCredito(Base):
    """Reserva/consumo de limite por uma importação."""

    __tablename__ = "usos_credito"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    solicitacao_credito_id: Mapped[int] = mapped_column(
        ForeignKey("solicitacoes_credito.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    importacao_id: Mapped[int] = mapped_column(
        ForeignKey("importacoes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    valor: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default=CreditUsageStatus.RESERVED)

    reservado_em: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    confirmado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    liberado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    solicitacao_credito: Mapped["SolicitacaoCredito"] = relationship(
        "SolicitacaoCredito", back_populates="usos",
    )


class TaxaAdministrativa(Base):
    """Taxa administrativa negociada por importador."""

    __tablename__ = "taxas_administrativas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    percentual: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    ativo: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    criado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
