"""
Testes para o pacote de configuração.
"""
from decimal import Decimal

import pytest

from config import (
    DEFAULT_DOWN_PAYMENT_PERCENT,
    DEFAULT_PAYMENT_TERMS,
    DOCUMENT_REQUIREMENTS,
    IMPORT_DOCUMENT_TYPES,
    MANDATORY_IMPORT_DOCUMENTS,
    Messages,
    env_bool,
    env_float,
    env_int,
    get_cors_origins,
    get_file_extension,
    get_requirement,
    is_allowed_extension,
)


class TestEnvHelpers:

    @pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("off", False), ("talvez", True)])
    def test_env_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("FLAG_TESTE", raw)
        assert env_bool("FLAG_TESTE", default=True) is expected

    def test_env_int_and_float_fallback(self, monkeypatch):
        monkeypatch.setenv("NUM_TESTE", "abc")
        assert env_int("NUM_TESTE", 7) == 7
        assert env_float("NUM_TESTE", 1.5) == 1.5
        monkeypatch.setenv("NUM_TESTE", "12")
        assert env_int("NUM_TESTE") == 12


class TestFileExtensions:

    def test_office_and_pdf_allowed(self):
        assert is_allowed_extension("Balanco.XLSX") is True
        assert is_allowed_extension("contrato.pdf") is True
        assert is_allowed_extension("setup.exe") is False

    def test_get_file_extension(self):
        assert get_file_extension("DI.PDF") == ".pdf"
        assert get_file_extension("sem_extensao") == ""


class TestCors:

    def test_custom_origins(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "https://app.sparkcomex.com.br, https://admin.sparkcomex.com.br")
        assert get_cors_origins() == ["https://app.sparkcomex.com.br", "https://admin.sparkcomex.com.br"]

    def test_production_without_origins(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "")
        monkeypatch.setenv("ENVIRONMENT", "production")
        assert get_cors_origins() == []


class TestCreditDefaults:

    def test_defaults(self):
        assert DEFAULT_DOWN_PAYMENT_PERCENT == Decimal("30.0")
        assert DEFAULT_PAYMENT_TERMS == "30,60,90,120"


class TestDocumentCatalog:

    def test_mandatory_import_documents_are_known(self):
        for tipos in MANDATORY_IMPORT_DOCUMENTS.values():
            assert set(tipos) <= set(IMPORT_DOCUMENT_TYPES)

    def test_requirement_lookup(self):
        assert get_requirement("cnpj_certificate") is DOCUMENT_REQUIREMENTS["cnpj_certificate"]
        assert "xlsx" in get_requirement("commercial_invoice").allowed_types
        assert get_requirement("commercial_invoice").max_size_mb == 10
        with pytest.raises(KeyError):
            get_requirement("selfie")

    def test_messages_are_strings(self):
        for name in ("CREDIT_NOT_FOUND", "IMPORT_NOT_FOUND", "PAYMENT_NOT_FOUND", "SUPPLIER_IN_USE"):
            assert isinstance(getattr(Messages, name), str)
