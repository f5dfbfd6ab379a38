"""
Testes de validação e formatação de CNPJ/CPF.
"""
import pytest

from utils.documentos_br import (
    format_cnpj,
    format_cpf,
    is_valid_cnpj,
    is_valid_cpf,
    normalize_cnpj,
    only_digits,
)


class TestOnlyDigits:

    def test_strips_mask(self):
        assert only_digits("11.222.333/0001-81") == "11222333000181"

    def test_empty_values(self):
        assert only_digits(None) == ""
        assert only_digits("") == ""


class TestCnpj:

    @pytest.mark.parametrize("cnpj", [
        "11222333000181",
        "11.222.333/0001-81",
        "11444777000161",
        "00000000000191",
    ])
    def test_valid(self, cnpj):
        assert is_valid_cnpj(cnpj) is True

    @pytest.mark.parametrize("cnpj", [
        "11222333000182",   # segundo dígito errado
        "11222333000191",   # primeiro dígito errado
        "1122233300018",    # 13 dígitos
        "11111111111111",   # todos iguais
        "",
        None,
    ])
    def test_invalid(self, cnpj):
        assert is_valid_cnpj(cnpj) is False

    def test_format(self):
        assert format_cnpj("11222333000181") == "11.222.333/0001-81"

    def test_format_incomplete_returns_digits(self):
        assert format_cnpj("11.222") == "11222"

    def test_normalize(self):
        assert normalize_cnpj("11.222.333/0001-81") == "11222333000181"

    def test_normalize_invalid_raises(self):
        with pytest.raises(ValueError):
            normalize_cnpj("11.222.333/0001-00")


class TestCpf:

    @pytest.mark.parametrize("cpf", ["52998224725", "529.982.247-25", "11144477735"])
    def test_valid(self, cpf):
        assert is_valid_cpf(cpf) is True

    @pytest.mark.parametrize("cpf", ["52998224724", "00000000000", "1234567890", None])
    def test_invalid(self, cpf):
        assert is_valid_cpf(cpf) is False

    def test_format(self):
        assert format_cpf("52998224725") == "529.982.247-25"
