from typing import List

from pydantic import BaseModel, EmailStr


class Token(BaseModel):
    access_token: str
    token_type: str


class LoginRequest(BaseModel):
    email: EmailStr
    senha: str


class PasswordPolicy(BaseModel):
    """Política de senha estruturada para validação no cliente."""
    min_length: int
    require_uppercase: bool
    require_lowercase: bool
    require_digit: bool
    require_special: bool


class PasswordRequirementsResponse(BaseModel):
    requisitos: List[str]
    policy: PasswordPolicy
