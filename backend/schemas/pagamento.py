from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.pagamento import PaymentMethod
from schemas.base import PaginatedResponse, reject_none


class PaymentUpdate(BaseModel):
    """Edição permitida apenas em parcelas pendentes."""
    valor: Optional[Decimal] = Field(None, gt=0, max_digits=14, decimal_places=2)
    vencimento: Optional[datetime] = None
    observacoes: Optional[str] = None

    @field_validator("valor", "vencimento", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_none(v)


class PaymentPay(BaseModel):
    metodo_pagamento: str
    comprovante: Optional[str] = Field(None, max_length=500)
    observacoes: Optional[str] = None

    @field_validator("metodo_pagamento")
    @classmethod
    def validate_metodo(cls, v: str) -> str:
        if v not in PaymentMethod.ALL:
            raise ValueError(f"Método de pagamento inválido: {v}")
        return v


class PaymentRejection(BaseModel):
    motivo: str = Field(..., min_length=3)


class PaymentResponse(BaseModel):
    id: int
    importacao_id: int
    tipo: str
    valor: Decimal
    moeda: str
    vencimento: datetime
    numero_parcela: int
    total_parcelas: int
    status: str
    pago_em: Optional[datetime] = None
    metodo_pagamento: Optional[str] = None
    comprovante: Optional[str] = None
    confirmado_por: Optional[int] = None
    confirmado_em: Optional[datetime] = None
    motivo_rejeicao: Optional[str] = None
    observacoes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedPaymentResponse(PaginatedResponse[PaymentResponse]):
    pass
