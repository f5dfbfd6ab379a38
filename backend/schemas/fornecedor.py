from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from schemas.base import PaginatedResponse, reject_none


class FornecedorBase(BaseModel):
    nome_empresa: str = Field(..., min_length=2, max_length=255)
    contato: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=30)
    pais: str = Field(..., min_length=2, max_length=100)
    cidade: Optional[str] = Field(None, max_length=100)
    endereco: Optional[str] = None
    produtos: Optional[str] = None


class FornecedorCreate(FornecedorBase):
    pass


class FornecedorUpdate(BaseModel):
    nome_empresa: Optional[str] = Field(None, min_length=2, max_length=255)
    contato: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=30)
    pais: Optional[str] = Field(None, min_length=2, max_length=100)
    cidade: Optional[str] = Field(None, max_length=100)
    endereco: Optional[str] = None
    produtos: Optional[str] = None
    ativo: Optional[bool] = None

    @field_validator("nome_empresa", "pais", "ativo", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_none(v)


class FornecedorResponse(FornecedorBase):
    id: int
    user_id: int
    email: Optional[str] = None
    ativo: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PaginatedFornecedorResponse(PaginatedResponse[FornecedorResponse]):
    pass
