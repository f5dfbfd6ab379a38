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
    from models.credito import SolicitacaoCredito
    from models.fornecedor import Fornecedor
    from models.pagamento import Pagamento
    from models.usuario import Usuario

# === Constantes ===


class ImportStatus:
    PLANEJAMENTO = "planejamento"
    PRODUCAO = "producao"
    ENTREGUE_AGENTE = "entregue_agente"
    TRANSPORTE_MARITIMO = "transporte_maritimo"
    TRANSPORTE_AEREO = "transporte_aereo"
    DESEMBARACO = "desembaraco"
    TRANSPORTE_NACIONAL = "transporte_nacional"
    CONCLUIDO = "concluido"
    CANCELADO = "cancelado"
    ALL = [
        PLANEJAMENTO, PRODUCAO, ENTREGUE_AGENTE, TRANSPORTE_MARITIMO,
        TRANSPORTE_AEREO, DESEMBARACO, TRANSPORTE_NACIONAL, CONCLUIDO, CANCELADO,
    ]
    # Importações em andamento consomem limite de crédito
    ACTIVE = [
        PLANEJAMENTO, PRODUCAO, ENTREGUE_AGENTE, TRANSPORTE_MARITIMO,
        TRANSPORTE_AEREO, DESEMBARACO, TRANSPORTE_NACIONAL,
    ]
    FINAL = [CONCLUIDO, CANCELADO]
    TRANSPORT = [TRANSPORTE_MARITIMO, TRANSPORTE_AEREO, TRANSPORTE_NACIONAL]

    LABELS = {
        PLANEJAMENTO: "Planejamento",
        PRODUCAO: "Produção",
        ENTREGUE_AGENTE: "Entregue ao Agente",
        TRANSPORTE_MARITIMO: "Transporte Marítimo",
        TRANSPORTE_AEREO: "Transporte Aéreo",
        DESEMBARACO: "Desembaraço",
        TRANSPORTE_NACIONAL: "Transporte Nacional",
        CONCLUIDO: "Concluído",
        CANCELADO: "Cancelado",
    }


class CargoType:
    FCL = "FCL"
    LCL = "LCL"
    ALL = [FCL, LCL]


class TransportMethod:
    MARITIMO = "maritimo"
    AEREO = "aereo"
    ALL = [MARITIMO, AEREO]


class Incoterm:
    FOB = "FOB"
    CIF = "CIF"
    EXW = "EXW"
    ALL = [FOB, CIF, EXW]


class ImportPriority:
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    ALL = [LOW, NORMAL, HIGH]


class ImportDocumentStatus:
    PENDING = "pending"
    UPLOADED = "uploaded"
    VALIDATED = "validated"
    REJECTED = "rejected"
    ALL = [PENDING, UPLOADED, VALIDATED, REJECTED]


# === Models ===


class Importacao(Base):
    """Operação de importação acompanhada pelo pipeline."""

    __tablename__ = "importacoes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("usuarios.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    fornecedor_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("fornecedores.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    solicitacao_credito_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("solicitacoes_credito.id", ondelete="SET NULL"), nullable=True, index=True,
    )
    despachante_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True, index=True,
    )

    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    codigo: Mapped[Optional[str]] = mapped_column(String(30), unique=True, nullable=True)

    tipo_carga: Mapped[str] = mapped_column(String(3), default=CargoType.FCL)
    origem: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    destino: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    modal: Mapped[str] = mapped_column(String(20), default=TransportMethod.MARITIMO)

    valor_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    moeda: Mapped[str] = mapped_column(String(3), default="USD")
    incoterm: Mapped[str] = mapped_column(String(3), default=Incoterm.FOB)

    status: Mapped[str] = mapped_column(String(30), default=ImportStatus.PLANEJAMENTO, index=True)
    prioridade: Mapped[str] = mapped_column(String(10), default=ImportPriority.NORMAL)

    numero_container: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    numero_lacre: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    previsao_chegada: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    chegada_real: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Pipeline: etapa corrente e dados por etapa
    etapa_atual: Mapped[str] = mapped_column(String(30), default="estimativa")
    etapas: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    observacoes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cancelado_em: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(),
    )

    # Relationships
    usuario: Mapped["Usuario"] = relationship(
        "Usuario", back_populates="importacoes", foreign_keys=[user_id],
    )
    despachante: Mapped[Optional["Usuario"]] = relationship(
        "Usuario", foreign_keys=[despachante_id],
    )
    fornecedor: Mapped[Optional["Fornecedor"]] = relationship("Fornecedor")
    solicitacao_credito: Mapped[Optional["SolicitacaoCredito"]] = relationship(
        "SolicitacaoCredito", back_populates="importacoes",
    )
    produtos: Mapped[List["ProdutoImportacao"]] = relationship(
        "ProdutoImportacao", back_populates="importacao", cascade="all, delete-orphan",
        order_by="ProdutoImportacao.id",
    )
    documentos: Mapped[List["DocumentoImportacao"]] = relationship(
        "DocumentoImportacao", back_populates="importacao", cascade="all, delete-orphan",
        order_by="DocumentoImportacao.id",
    )
    historico: Mapped[List["HistoricoImportacao"]] = relationship(
        "HistoricoImportacao", back_populates="importacao", cascade="all, delete-orphan",
        order_by="HistoricoImportacao.id",
    )
    pagamentos: Mapped[List["Pagamento"]] = relationship(
        "Pagamento", back_populates="importacao", cascade="all, delete-orphan",
        order_by="Pagamento.vencimento",
    )

    __table_args__ = (
        Index("ix_importacoes_user_status", "user_id", "status"),
        Index("ix_importacoes_credito_status", "solicitacao_credito_id", "status"),
    )


class ProdutoImportacao(Base):
    """Item (produto) de uma importação."""

    __tablename__ = "produtos_importacao"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    importacao_id: Mapped[int] = mapped_column(
        ForeignKey("importacoes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    nome: Mapped[str] = mapped_column(String(255), nullable=False)
    descricao: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    quantidade: Mapped[int] = mapped_column(Integer, nullable=False)
    preco_unitario: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    valor_total: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    ncm: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    peso_kg: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 3), nullable=True)
    dimensoes: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    importacao: Mapped["Importacao"] = relationship("Importacao", back_populates="produtos")


class DocumentoImportacao(Base):
    """Documento de embarque anexado a uma importação."""

    __tablename__ = "documentos_importacao"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    importacao_id: Mapped[int] = mapped_column(
        ForeignKey("importacoes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    tipo: Mapped[str] = mapped_column(String(50), nullable=False)
    nome_arquivo: Mapped[str] = mapped_column(String(255), nullable=False)
    caminho_arquivo: Mapped[str] = mapped_column(String(500), nullable=False)
    tamanho_bytes: Mapped[int] = mapped_column(Integer, default=0)
    obrigatorio: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), default=ImportDocumentStatus.UPLOADED)
    pontuacao: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    notas: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    enviado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    importacao: Mapped["Importacao"] = relationship("Importacao", back_populates="documentos")


class HistoricoImportacao(Base):
    """Linha do tempo de mudanças de status de uma importação."""

    __tablename__ = "historico_importacoes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    importacao_id: Mapped[int] = mapped_column(
        ForeignKey("importacoes.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    status_anterior: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    alterado_por: Mapped[Optional[int]] = mapped_column(
        ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True,
    )
    notas: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    automatico: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(),
    )

    importacao: Mapped["Importacao"] = relationship("Importacao", back_populates="historico")
