# Utilitários do backend
from .documentos_br import (
    format_cnpj,
    format_cpf,
    is_valid_cnpj,
    is_valid_cpf,
    normalize_cnpj,
    only_digits,
)
from .password_validator import get_password_policy, get_password_requirements, validate_password

__all__ = [
    "only_digits",
    "is_valid_cnpj",
    "is_valid_cpf",
    "format_cnpj",
    "format_cpf",
    "normalize_cnpj",
    "validate_password",
    "get_password_requirements",
    "get_password_policy",
]
