from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from models.usuario import UserRole
from schemas.base import PaginatedResponse, reject_none
from utils.documentos_br import is_valid_cnpj, only_digits


def _clean_cnpj(value: str) -> str:
    cnpj = only_digits(value)
    if not is_valid_cnpj(cnpj):
        raise ValueError("CNPJ inválido")
    return cnpj


def _check_role(value: str) -> str:
    if value not in UserRole.ALL:
        raise ValueError(f"Papel inválido: {value}")
    return value


class UsuarioBase(BaseModel):
    email: EmailStr
    nome: str = Field(..., min_length=2, max_length=255)
    razao_social: str = Field(..., min_length=2, max_length=255)
    cnpj: str
    telefone: Optional[str] = Field(None, max_length=20)

    @field_validator("cnpj")
    @classmethod
    def validate_cnpj(cls, v: str) -> str:
        return _clean_cnpj(v)


class UsuarioCreate(UsuarioBase):
    """Cadastro de importador."""
    senha: str
    confirmacao_senha: str

    @model_validator(mode="after")
    def check_passwords_match(self) -> "UsuarioCreate":
        if self.senha != self.confirmacao_senha:
            raise ValueError("As senhas não conferem")
        return self


class AdminUsuarioCreate(UsuarioBase):
    """Criação de usuário de qualquer papel pelo admin."""
    senha: str
    role: str = UserRole.IMPORTER

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        return _check_role(v)


class UsuarioUpdate(BaseModel):
    nome: Optional[str] = Field(None, min_length=2, max_length=255)
    razao_social: Optional[str] = Field(None, min_length=2, max_length=255)
    telefone: Optional[str] = Field(None, max_length=20)

    @field_validator("nome", "razao_social", mode="before")
    @classmethod
    def not_null(cls, v):
        return reject_none(v)


class PasswordChange(BaseModel):
    senha_atual: str
    nova_senha: str
    confirmacao_senha: str

    @model_validator(mode="after")
    def check_passwords_match(self) -> "PasswordChange":
        if self.nova_senha != self.confirmacao_senha:
            raise ValueError("As senhas não conferem")
        return self


class RoleUpdate(BaseModel):
    role: str

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: str) -> str:
        return _check_role(v)


class UsuarioResponse(BaseModel):
    id: int
    email: str
    nome: str
    razao_social: str
    cnpj: str
    telefone: Optional[str] = None
    role: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class UsuarioAdminResponse(UsuarioResponse):
    failed_login_attempts: int = 0
    locked_until: Optional[datetime] = None
    created_by: Optional[int] = None


class PaginatedUsuarioResponse(PaginatedResponse[UsuarioAdminResponse]):
    pass
