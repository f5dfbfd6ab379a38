from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from models.importacao import (
    CargoType,
    ImportDocumentStatus,
    ImportPriority,
    ImportStatus,
    Incoterm,
    TransportMethod,
)
from schemas.base import PaginatedResponse, reject_none
from schemas.credito import AdminFeeResponse, CreditUsageResponse
from schemas.pagamento import PaymentResponse


def _check_choice(value: Optional[str], choices: List[str], label: str) -> Optional[str]:
    if value is not None and value not in choices:
        raise ValueError(f"{label} inválido: {value}")
    return value


# ============== PRODUTOS ==============


class ProdutoBase(BaseModel):
    nome: str = Field(..., min_length=1, max_length=255)
    descricao: Optional[str] = None
    quantidade: int = Field(..., ge=1)
    preco_unitario: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    ncm: Optional[str] = Field(None, max_length=10)
    peso_kg: Optional[Decimal] = Field(None, ge=0)
    dimensoes: Optional[str] = Field(None, max_length=100)


class ProdutoCreate(ProdutoBase):
    pass


class ProdutoUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=1, max_length=255)
    descricao: Optional[str] = None
    quantidade: Optional[int] = Field(None, ge=1)
    preco_unitario: Optional[Decimal] = Field(None, ge=0, max_digits=14, decimal_places=2)
    ncm: Optional[str] = Field(None, max_length=10)
    peso_kg: Optional[Decimal] = Field(None, ge=0)
    dimensoes: Optional[str] = Field(None, max_length=100)

    @field_validator("nome", "quantidade", "preco_unitario", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_none(v)


class ProdutoResponse(ProdutoBase):
    id: int
    importacao_id: int
    valor_total: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


# ============== IMPORTAÇÃO ==============


class ImportacaoBase(BaseModel):
    nome: str = Field(..., min_length=2, max_length=255)
    tipo_carga: str = Field(default=CargoType.FCL)
    origem: Optional[str] = Field(None, max_length=255)
    destino: Optional[str] = Field(None, max_length=255)
    modal: str = Field(default=TransportMethod.MARITIMO)
    moeda: str = Field(default="USD", min_length=3, max_length=3)
    incoterm: str = Field(default=Incoterm.FOB)
    prioridade: str = Field(default=ImportPriority.NORMAL)
    fornecedor_id: Optional[int] = None
    solicitacao_credito_id: Optional[int] = None
    numero_container: Optional[str] = Field(None, max_length=50)
    numero_lacre: Optional[str] = Field(None, max_length=50)
    previsao_chegada: Optional[datetime] = None
    observacoes: Optional[str] = None

    @field_validator("tipo_carga")
    @classmethod
    def validate_tipo_carga(cls, v: str) -> str:
        return _check_choice(v, CargoType.ALL, "Tipo de carga")

    @field_validator("modal")
    @classmethod
    def validate_modal(cls, v: str) -> str:
        return _check_choice(v, TransportMethod.ALL, "Modal")

    @field_validator("incoterm")
    @classmethod
    def validate_incoterm(cls, v: str) -> str:
        return _check_choice(v, Incoterm.ALL, "Incoterm")

    @field_validator("prioridade")
    @classmethod
    def validate_prioridade(cls, v: str) -> str:
        return _check_choice(v, ImportPriority.ALL, "Prioridade")


class ImportacaoCreate(ImportacaoBase):
    """Sem valor_total informado, o total é a soma dos produtos."""
    valor_total: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    produtos: List[ProdutoCreate] = Field(default_factory=list)


class ImportacaoUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=2, max_length=255)
    tipo_carga: Optional[str] = None
    origem: Optional[str] = Field(None, max_length=255)
    destino: Optional[str] = Field(None, max_length=255)
    modal: Optional[str] = None
    valor_total: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    moeda: Optional[str] = Field(None, min_length=3, max_length=3)
    incoterm: Optional[str] = None
    prioridade: Optional[str] = None
    fornecedor_id: Optional[int] = None
    numero_container: Optional[str] = Field(None, max_length=50)
    numero_lacre: Optional[str] = Field(None, max_length=50)
    previsao_chegada: Optional[datetime] = None
    observacoes: Optional[str] = None

    @field_validator(
        "nome", "tipo_carga", "modal", "valor_total", "moeda", "incoterm", "prioridade",
        mode="before",
    )
    @classmethod
    def not_null(cls, v):
        return reject_none(v)

    @field_validator("tipo_carga")
    @classmethod
    def validate_tipo_carga(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, CargoType.ALL, "Tipo de carga")

    @field_validator("modal")
    @classmethod
    def validate_modal(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, TransportMethod.ALL, "Modal")

    @field_validator("incoterm")
    @classmethod
    def validate_incoterm(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, Incoterm.ALL, "Incoterm")

    @field_validator("prioridade")
    @classmethod
    def validate_prioridade(cls, v: Optional[str]) -> Optional[str]:
        return _check_choice(v, ImportPriority.ALL, "Prioridade")


class ImportStatusUpdate(BaseModel):
    status: str
    notas: Optional[str] = None
    numero_container: Optional[str] = Field(None, max_length=50)
    chegada_real: Optional[datetime] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _check_choice(v, ImportStatus.ALL, "Status")


class PipelineStageUpdate(BaseModel):
    etapa: str
    status: str
    dados: Dict[str, Any] = Field(default_factory=dict)
    avancar: bool = Field(default=True, description="Move a etapa atual para esta etapa")


class CustomsBrokerAssignment(BaseModel):
    despachante_id: Optional[int] = None


class ImportacaoResponse(BaseModel):
    id: int
    user_id: int
    codigo: Optional[str] = None
    nome: str
    tipo_carga: str
    origem: Optional[str] = None
    destino: Optional[str] = None
    modal: str
    valor_total: Decimal
    moeda: str
    incoterm: str
    status: str
    prioridade: str
    fornecedor_id: Optional[int] = None
    solicitacao_credito_id: Optional[int] = None
    despachante_id: Optional[int] = None
    numero_container: Optional[str] = None
    numero_lacre: Optional[str] = None
    previsao_chegada: Optional[datetime] = None
    chegada_real: Optional[datetime] = None
    etapa_atual: str
    etapas: Optional[Dict[str, Any]] = None
    observacoes: Optional[str] = None
    cancelado_em: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ImportacaoDetailResponse(ImportacaoResponse):
    produtos: List[ProdutoResponse] = Field(default_factory=list)


class PaginatedImportacaoResponse(PaginatedResponse[ImportacaoResponse]):
    pass


# ============== PIPELINE / TIMELINE ==============


class PipelineStageResponse(BaseModel):
    etapa: str
    label: str
    status: str
    dados: Dict[str, Any] = Field(default_factory=dict)
    atual: bool = False


class PipelineResponse(BaseModel):
    importacao_id: int
    etapa_atual: str
    progresso: float
    etapas: List[PipelineStageResponse]


class HistoricoResponse(BaseModel):
    id: int
    importacao_id: int
    status: str
    status_anterior: Optional[str] = None
    alterado_por: Optional[int] = None
    notas: Optional[str] = None
    automatico: bool
    created_at: datetime

    class Config:
        from_attributes = True


# ============== DOCUMENTOS ==============


class DocumentoImportacaoResponse(BaseModel):
    id: int
    importacao_id: int
    tipo: str
    nome_arquivo: str
    tamanho_bytes: int
    obrigatorio: bool
    status: str
    pontuacao: Optional[int] = None
    notas: Optional[str] = None
    enviado_por: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class DocumentoImportacaoStatusUpdate(BaseModel):
    status: str
    notas: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        return _check_choice(
            v, [ImportDocumentStatus.VALIDATED, ImportDocumentStatus.REJECTED], "Status",
        )


class DocumentoTipoInfo(BaseModel):
    tipo: str
    label: str
    obrigatorio: bool


# ============== RESUMO FINANCEIRO ==============


class ImportFinancialSummary(BaseModel):
    importacao_id: int
    taxa: AdminFeeResponse
    uso_credito: Optional[CreditUsageResponse] = None
    total_pago: Decimal
    total_pendente: Decimal
    pagamentos: List[PaymentResponse] = Field(default_factory=list)
