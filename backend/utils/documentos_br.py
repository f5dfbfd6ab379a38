"""
Validação e formatação de CNPJ e CPF.

Os dígitos verificadores seguem o módulo 11 da Receita Federal:
resto menor que 2 vira 0, senão 11 - resto.
"""
import re
from typing import List, Optional

_NON_DIGITS = re.compile(r"\D")

CNPJ_WEIGHTS_FIRST = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
CNPJ_WEIGHTS_SECOND = [6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
CPF_WEIGHTS_FIRST = list(range(10, 1, -1))
CPF_WEIGHTS_SECOND = list(range(11, 1, -1))


def only_digits(value: Optional[str]) -> str:
    """Remove tudo que não for dígito."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", value)


def _check_digit(digits: str, weights: List[int]) -> int:
    total = sum(int(d) * w for d, w in zip(digits, weights))
    remainder = total % 11
    return 0 if remainder < 2 else 11 - remainder


def is_valid_cnpj(value: Optional[str]) -> bool:
    cnpj = only_digits(value)
    if len(cnpj) != 14 or cnpj == cnpj[0] * 14:
        return False

    first = _check_digit(cnpj[:12], CNPJ_WEIGHTS_FIRST)
    if first != int(cnpj[12]):
        return False
    second = _check_digit(cnpj[:13], CNPJ_WEIGHTS_SECOND)
    return second == int(cnpj[13])


def is_valid_cpf(value: Optional[str]) -> bool:
    cpf = only_digits(value)
    if len(cpf) != 11 or cpf == cpf[0] * 11:
        return False

    first = _check_digit(cpf[:9], CPF_WEIGHTS_FIRST)
    if first != int(cpf[9]):
        return False
    second = _check_digit(cpf[:10], CPF_WEIGHTS_SECOND)
    return second == int(cpf[10])


def format_cnpj(value: Optional[str]) -> str:
    """Formata como XX.XXX.XXX/XXXX-XX. Entradas incompletas voltam sem máscara."""
    cnpj = only_digits(value)
    if len(cnpj) != 14:
        return cnpj
    return f"{cnpj[:2]}.{cnpj[2:5]}.{cnpj[5:8]}/{cnpj[8:12]}-{cnpj[12:]}"


def format_cpf(value: Optional[str]) -> str:
    """Formata como XXX.XXX.XXX-XX."""
    cpf = only_digits(value)
    if len(cpf) != 11:
        return cpf
    return f"{cpf[:3]}.{cpf[3:6]}.{cpf[6:9]}-{cpf[9:]}"


def normalize_cnpj(value: Optional[str]) -> str:
    """
    Retorna o CNPJ só com dígitos.

    Raises:
        ValueError: se o CNPJ for inválido
    """
    cnpj = only_digits(value)
    if not is_valid_cnpj(cnpj):
        raise ValueError("CNPJ inválido")
    return cnpj
