from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from config.credit import DEFAULT_PAYMENT_TERMS
from models.credito import PreAnalysisStatus
from schemas.base import PaginatedResponse, reject_none
from utils.documentos_br import is_valid_cnpj, only_digits


def _check_terms(value: Optional[str]) -> Optional[str]:
    """Prazos no formato '30,60,90' (dias, inteiros positivos)."""
    if value is None:
        return value
    parts = [p.strip() for p in value.split(",") if p.strip()]
    if not parts or not all(p.isdigit() and int(p) > 0 for p in parts):
        raise ValueError("Prazos devem ser dias separados por vírgula (ex: 30,60,90)")
    return ",".join(parts)


# ============== SOLICITAÇÃO (IMPORTADOR) ==============


class CreditApplicationBase(BaseModel):
    valor_solicitado: Decimal = Field(..., gt=0, max_digits=14, decimal_places=2)
    moeda: str = Field(default="USD", min_length=3, max_length=3)
    finalidade: Optional[str] = None
    prazos_solicitados: Optional[str] = Field(None, max_length=100)
    produtos: Optional[List[Any]] = None
    volume_mensal_estimado: Optional[Decimal] = Field(None, ge=0)

    @field_validator("prazos_solicitados")
    @classmethod
    def validate_prazos(cls, v: Optional[str]) -> Optional[str]:
        return _check_terms(v)


class CreditApplicationCreate(CreditApplicationBase):
    """Razão social e CNPJ vêm do cadastro quando omitidos."""
    razao_social: Optional[str] = Field(None, max_length=255)
    cnpj: Optional[str] = None

    @field_validator("cnpj")
    @classmethod
    def validate_cnpj(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        cnpj = only_digits(v)
        if not is_valid_cnpj(cnpj):
            raise ValueError("CNPJ inválido")
        return cnpj


class CreditApplicationUpdate(BaseModel):
    valor_solicitado: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    moeda: Optional[str] = Field(None, min_length=3, max_length=3)
    finalidade: Optional[str] = None
    prazos_solicitados: Optional[str] = Field(None, max_length=100)
    produtos: Optional[List[Any]] = None
    volume_mensal_estimado: Optional[Decimal] = Field(None, ge=0)

    @field_validator("valor_solicitado", "moeda", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_none(v)

    @field_validator("prazos_solicitados")
    @classmethod
    def validate_prazos(cls, v: Optional[str]) -> Optional[str]:
        return _check_terms(v)


class CreditApplicationResponse(BaseModel):
    id: int
    user_id: int
    razao_social: str
    cnpj: str
    valor_solicitado: Decimal
    moeda: str
    finalidade: Optional[str] = None
    prazos_solicitados: Optional[str] = None
    produtos: Optional[List[Any]] = None
    volume_mensal_estimado: Optional[Decimal] = None
    documentos: Optional[Dict[str, Any]] = None

    status: str
    pre_analysis_status: str
    financial_status: Optional[str] = None
    admin_status: Optional[str] = None
    analise_admin: Optional[Dict[str, Any]] = None

    limite_credito: Optional[Decimal] = None
    prazos_aprovados: Optional[str] = None
    notas_financeiras: Optional[str] = None
    limite_final: Optional[Decimal] = None
    prazos_finais: Optional[str] = None
    percentual_entrada: Optional[Decimal] = None
    taxa_administrativa: Optional[Decimal] = None
    motivo_rejeicao: Optional[str] = None

    analisado_em: Optional[datetime] = None
    enviado_financeira_em: Optional[datetime] = None
    aprovado_em: Optional[datetime] = None
    finalizado_em: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginatedCreditApplicationResponse(PaginatedResponse[CreditApplicationResponse]):
    pass


# ============== AÇÕES DO ADMIN ==============


class PreApprovalRequest(BaseModel):
    limite_credito: Optional[Decimal] = Field(None, gt=0)
    prazos_aprovados: Optional[str] = Field(None, max_length=100)
    notas: Optional[str] = None

    @field_validator("prazos_aprovados")
    @classmethod
    def validate_prazos(cls, v: Optional[str]) -> Optional[str]:
        return _check_terms(v)


class RejectionRequest(BaseModel):
    motivo: str = Field(..., min_length=3)


class AnalysisUpdate(BaseModel):
    analise: Dict[str, Any] = Field(default_factory=dict)
    pre_analysis_status: Optional[str] = None

    @field_validator("pre_analysis_status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in PreAnalysisStatus.ALL:
            raise ValueError(f"Status de pré-análise inválido: {v}")
        return v


class FinalizationRequest(BaseModel):
    limite_final: Decimal = Field(..., gt=0)
    prazos_finais: str = Field(default=DEFAULT_PAYMENT_TERMS, max_length=100)
    percentual_entrada: Decimal = Field(default=Decimal("30"), ge=0, le=100)
    taxa_administrativa: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    @field_validator("prazos_finais")
    @classmethod
    def validate_prazos(cls, v: str) -> str:
        return _check_terms(v)


# ============== AÇÕES DA FINANCEIRA ==============


class FinancialApprovalRequest(BaseModel):
    limite_credito: Optional[Decimal] = Field(None, gt=0)
    prazos_aprovados: str = Field(default=DEFAULT_PAYMENT_TERMS, max_length=100)
    notas_financeiras: Optional[str] = None

    @field_validator("prazos_aprovados")
    @classmethod
    def validate_prazos(cls, v: str) -> str:
        return _check_terms(v)


class FinancialStatusAction:
    APPROVED = "approved_financial"
    REJECTED = "rejected_financial"
    NEEDS_DOCUMENTS = "needs_documents_financial"
    ALL = [APPROVED, REJECTED, NEEDS_DOCUMENTS]


class FinancialStatusUpdate(BaseModel):
    status: str
    limite_credito: Optional[Decimal] = Field(None, gt=0)
    prazos_aprovados: Optional[str] = Field(None, max_length=100)
    notas_financeiras: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in FinancialStatusAction.ALL:
            raise ValueError(f"Status inválido: {v}")
        return v

    @field_validator("prazos_aprovados")
    @classmethod
    def validate_prazos(cls, v: Optional[str]) -> Optional[str]:
        return _check_terms(v)


class FinancialDataUpdate(BaseModel):
    limite_credito: Optional[Decimal] = Field(None, gt=0)
    prazos_aprovados: Optional[str] = Field(None, max_length=100)
    notas_financeiras: Optional[str] = None

    @field_validator("prazos_aprovados")
    @classmethod
    def validate_prazos(cls, v: Optional[str]) -> Optional[str]:
        return _check_terms(v)


# ============== USO DE CRÉDITO / WORKFLOW ==============


class CreditUsageResponse(BaseModel):
    solicitacao_id: int
    limite: Decimal
    usado: Decimal
    disponivel: Decimal
    percentual_usado: float
    importacoes_ativas: int


class WorkflowResponse(BaseModel):
    solicitacao_id: int
    status: str
    status_label: str
    etapa: str
    proximos_status: List[str]
    pre_analysis_status: str
    financial_status: Optional[str] = None
    admin_status: Optional[str] = None


class AdminFeeResponse(BaseModel):
    valor_importacao: Decimal
    percentual_entrada: Decimal
    valor_entrada: Decimal
    valor_financiado: Decimal
    percentual_taxa: Decimal
    valor_taxa: Decimal
    valor_total: Decimal


class TaxaAdministrativaCreate(BaseModel):
    user_id: int
    percentual: Decimal = Field(..., ge=0, le=100)


class TaxaAdministrativaResponse(BaseModel):
    id: int
    user_id: int
    percentual: Decimal
    ativo: bool
    criado_por: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
