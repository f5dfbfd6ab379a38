"""
Testes para o validador de senha.
"""
import pytest

from utils.password_validator import (
    PasswordValidator,
    get_password_policy,
    get_password_requirements,
    validate_password,
)


def _strict(**overrides) -> PasswordValidator:
    options = dict(
        min_length=8,
        require_uppercase=True,
        require_lowercase=True,
        require_digit=True,
        require_special=False,
    )
    options.update(overrides)
    return PasswordValidator(**options)


class TestPasswordValidator:
    """Testes da classe PasswordValidator."""

    def test_valid_password_passes(self):
        is_valid, errors = _strict().validate("Senha123")
        assert is_valid is True
        assert errors == []

    @pytest.mark.parametrize("senha,trecho", [
        ("Abc123", "mínimo 8"),
        ("senha123", "maiúscula"),
        ("SENHA123", "minúscula"),
        ("SenhaABC", "número"),
    ])
    def test_single_rule_failures(self, senha, trecho):
        is_valid, errors = _strict().validate(senha)
        assert is_valid is False
        assert any(trecho in e.lower() for e in errors)

    def test_special_required(self):
        validator = _strict(require_special=True)
        assert validator.validate("Senha123")[0] is False
        assert validator.validate("Senha123!")[0] is True

    def test_multiple_errors_returned(self):
        is_valid, errors = _strict().validate("a")
        assert is_valid is False
        assert len(errors) == 3

    def test_rules_can_be_disabled(self):
        validator = PasswordValidator(
            min_length=4,
            require_uppercase=False,
            require_lowercase=False,
            require_digit=False,
            require_special=False,
        )
        assert validator.validate("abcd") == (True, [])

    def test_get_requirements(self):
        requirements = _strict().get_requirements()
        assert len(requirements) == 4
        assert requirements[0] == "Mínimo 8 caracteres"

    def test_get_policy(self):
        policy = _strict(min_length=10).get_policy()
        assert policy == {
            "min_length": 10,
            "require_uppercase": True,
            "require_lowercase": True,
            "require_digit": True,
            "require_special": False,
        }


class TestDefaultPolicy:
    """A política padrão aceita a senha usada nos fixtures."""

    def test_fixture_password(self):
        assert validate_password("Senha123") == (True, [])

    def test_module_helpers(self):
        assert get_password_requirements()
        assert get_password_policy()["min_length"] >= 8


class TestSpecialCharacters:

    @pytest.mark.parametrize("special_char", list("!@#$%^&*(),.?:{}|<>_-+=[];'`~"))
    def test_various_special_characters(self, special_char):
        is_valid, errors = _strict(require_special=True).validate(f"Senha12{special_char}")
        assert is_valid is True, f"Char {special_char} should be accepted. Errors: {errors}"
