"""
Política de complexidade de senha.

As regras vêm de config.security e podem ser desligadas por ambiente
(PASSWORD_REQUIRE_*).
"""
import re
from typing import List, Tuple

from config.security import (
    PASSWORD_MIN_LENGTH,
    PASSWORD_REQUIRE_DIGIT,
    PASSWORD_REQUIRE_LOWERCASE,
    PASSWORD_REQUIRE_SPECIAL,
    PASSWORD_REQUIRE_UPPERCASE,
)

# (chave da política, regex, erro, requisito exibido)
_RULES = [
    ("require_uppercase", r"[A-Z]",
     "Senha deve conter pelo menos uma letra maiúscula", "Pelo menos uma letra maiúscula"),
    ("require_lowercase", r"[a-z]",
     "Senha deve conter pelo menos uma letra minúscula", "Pelo menos uma letra minúscula"),
    ("require_digit", r"\d",
     "Senha deve conter pelo menos um número", "Pelo menos um número"),
    ("require_special", r"[!@#$%^&*(),.?\":{}|<>_\-+=\[\]\;'`~]",
     "Senha deve conter pelo menos um caractere especial", "Pelo menos um caractere especial (!@#$%...)"),
]


class PasswordValidator:
    """Valida senhas contra a política configurada."""

    def __init__(
        self,
        min_length: int = PASSWORD_MIN_LENGTH,
        require_uppercase: bool = PASSWORD_REQUIRE_UPPERCASE,
        require_lowercase: bool = PASSWORD_REQUIRE_LOWERCASE,
        require_digit: bool = PASSWORD_REQUIRE_DIGIT,
        require_special: bool = PASSWORD_REQUIRE_SPECIAL,
    ):
        self.min_length = min_length
        self.require_uppercase = require_uppercase
        self.require_lowercase = require_lowercase
        self.require_digit = require_digit
        self.require_special = require_special

    def _active_rules(self):
        return [rule for rule in _RULES if getattr(self, rule[0])]

    def validate(self, password: str) -> Tuple[bool, List[str]]:
        """Retorna (valida, erros)."""
        errors = []
        if len(password) < self.min_length:
            errors.append(f"Senha deve ter no mínimo {self.min_length} caracteres")

        for _, pattern, error, _ in self._active_rules():
            if not re.search(pattern, password):
                errors.append(error)

        return not errors, errors

    def get_requirements(self) -> List[str]:
        requirements = [f"Mínimo {self.min_length} caracteres"]
        requirements.extend(rule[3] for rule in self._active_rules())
        return requirements

    def get_policy(self) -> dict:
        policy = {"min_length": self.min_length}
        policy.update({rule[0]: getattr(self, rule[0]) for rule in _RULES})
        return policy


password_validator = PasswordValidator()


def validate_password(password: str) -> Tuple[bool, List[str]]:
    return password_validator.validate(password)


def get_password_requirements() -> List[str]:
    return password_validator.get_requirements()


def get_password_policy() -> dict:
    return password_validator.get_policy()
