"""
Testes dos validadores de documentos (pontuação por regras).
"""
import pytest

from services.document_validation import (
    DocumentValidator,
    SmartDocumentValidator,
    ValidationResult,
    score_message,
)

KB = 1024
MB = 1024 * 1024
PDF_HEADER = b"%PDF-1.7\n"
PNG_HEADER = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def validator() -> DocumentValidator:
    return DocumentValidator()


@pytest.fixture
def smart() -> SmartDocumentValidator:
    return SmartDocumentValidator()


# =============================================================================
# DocumentValidator
# =============================================================================

class TestDocumentValidatorScore:

    def test_valid_pdf_scores_100(self, validator):
        result = validator.validate("cartao_cnpj.pdf", 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.is_valid is True
        assert result.score == 100
        assert result.confidence == 1.0
        assert result.errors == []
        assert result.warnings == []
        assert result.message == "Documento válido e de alta qualidade"

    def test_extension_not_allowed(self, validator):
        result = validator.validate("cartao_cnpj.docx", 200 * KB, "cnpj_certificate", b"PK\x03\x04")
        assert result.score == 70
        assert result.is_valid is False
        assert any("Tipo de arquivo não permitido" in e for e in result.errors)
        assert result.confidence == 0.6
        assert result.message == "Documento com problemas que precisam ser corrigidos"

    def test_file_above_max_size(self, validator):
        result = validator.validate("cartao_cnpj.pdf", 4 * MB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 80
        assert result.is_valid is False
        assert any("muito grande" in e for e in result.errors)

    def test_file_near_max_size_is_warning(self, validator):
        result = validator.validate("cartao_cnpj.pdf", int(2.5 * MB), "cnpj_certificate", PDF_HEADER)
        assert result.score == 95
        assert result.is_valid is True
        assert any("próximo ao limite" in w for w in result.warnings)

    def test_file_too_small(self, validator):
        result = validator.validate("cartao_cnpj.pdf", 1 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 75
        assert result.is_valid is False
        assert any("muito pequeno" in e for e in result.errors)

    def test_long_filename_warning(self, validator):
        name = "cnpj_" + "a" * 100 + ".pdf"
        result = validator.validate(name, 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 98
        assert any("muito longo" in w for w in result.warnings)

    def test_special_characters_in_name(self, validator):
        result = validator.validate("cartão cnpj.pdf", 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 97
        assert result.is_valid is True
        assert any("caracteres especiais" in w for w in result.warnings)

    def test_unknown_document_type(self, validator):
        result = validator.validate("qualquer.pdf", 200 * KB, "tipo_inexistente", PDF_HEADER)
        assert result.is_valid is False
        assert result.score == 0
        assert result.confidence == 0.0
        assert result.errors == ["Tipo de documento não reconhecido"]

    def test_score_is_clamped_at_zero(self, validator):
        result = validator.validate("virus.exe", 10, "cnpj_certificate", None)
        assert result.score == 0
        assert result.confidence == 0.0
        assert result.is_valid is False
        assert result.message == "Documento rejeitado - muitos problemas encontrados"


class TestDocumentValidatorIntegrity:

    def test_missing_header_is_warning(self, validator):
        result = validator.validate("cartao_cnpj.pdf", 200 * KB, "cnpj_certificate", None)
        assert result.score == 95
        assert result.is_valid is True
        assert result.confidence == 0.9

    def test_pdf_without_signature(self, validator):
        result = validator.validate("cartao_cnpj.pdf", 200 * KB, "cnpj_certificate", b"<html>")
        assert result.score == 70
        assert result.is_valid is False
        assert "Arquivo corrompido ou não é um PDF válido." in result.errors

    def test_jpeg_without_marker(self, validator):
        result = validator.validate("cartao_cnpj.jpg", 200 * KB, "cnpj_certificate", b"\xff\xd8\xff\xdb")
        assert result.score == 90
        assert result.is_valid is True
        assert any("JPEG" in w for w in result.warnings)

    def test_jpeg_with_jfif_marker(self, validator):
        header = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"
        result = validator.validate("cartao_cnpj.jpg", 200 * KB, "cnpj_certificate", header)
        assert result.score == 100

    def test_png_signature(self, validator):
        ok = validator.validate("cartao_cnpj.png", 200 * KB, "cnpj_certificate", PNG_HEADER)
        bad = validator.validate("cartao_cnpj.png", 200 * KB, "cnpj_certificate", b"GIF89a")
        assert ok.score == 100
        assert bad.score == 90


class TestDocumentValidatorContent:

    def test_required_text_missing(self, validator):
        result = validator.validate("documento.pdf", 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 85
        assert result.is_valid is True
        assert any("Texto esperado não encontrado" in w for w in result.warnings)
        assert result.suggestions

    def test_required_text_is_case_insensitive(self, validator):
        result = validator.validate("Comprovante_CNPJ.pdf", 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 100
        assert "Documento parece conter o conteúdo esperado." in result.suggestions

    def test_type_without_required_text(self, validator):
        result = validator.validate("qualquer_coisa.pdf", 200 * KB, "additional_documents", PDF_HEADER)
        assert result.score == 100

    def test_import_document_type_uses_generic_rules(self, validator):
        result = validator.validate("invoice.xlsx", 200 * KB, "commercial_invoice", b"PK\x03\x04")
        assert result.is_valid is True
        assert result.score == 100

    def test_executable_pattern_in_name(self, validator):
        result = validator.validate("cnpj.exe.pdf", 200 * KB, "cnpj_certificate", PDF_HEADER)
        assert result.score == 50
        assert result.is_valid is False
        assert "Tipo de arquivo potencialmente perigoso detectado." in result.errors


# =============================================================================
# SmartDocumentValidator
# =============================================================================

class TestSmartDocumentValidator:

    def test_pdf_gets_high_confidence(self, smart):
        result = smart.validate("cnpj_receita.pdf", 200 * KB, "cnpj_certificate")
        assert result.is_valid is True
        assert result.score == 100
        assert result.confidence == 0.9

    def test_image_confidence(self, smart):
        result = smart.validate("foto.png", 200 * KB, "additional_documents")
        assert result.is_valid is True
        assert result.confidence == 0.75

    def test_unsupported_extension(self, smart):
        result = smart.validate("planilha.txt", 200 * KB, "additional_documents")
        assert result.score == 60
        assert result.is_valid is False
        assert result.confidence == 0.6

    def test_file_too_large(self, smart):
        result = smart.validate("cnpj.pdf", 11 * MB, "cnpj_certificate")
        assert result.is_valid is False
        assert result.score == 80

    def test_small_doc_file_penalized(self, smart):
        result = smart.validate("carta.doc", 10 * KB, "additional_documents")
        assert result.score == 95
        assert result.is_valid is True
        assert any("baixa resolução" in w for w in result.warnings)

    def test_suspicious_name_is_error(self, smart):
        result = smart.validate("script_cnpj.pdf", 200 * KB, "cnpj_certificate")
        assert result.is_valid is False
        assert "Arquivo pode conter conteúdo suspeito" in result.errors

    def test_executable_is_error(self, smart):
        result = smart.validate("setup.exe", 200 * KB, "additional_documents")
        assert result.is_valid is False
        assert "Arquivos executáveis não são permitidos" in result.errors

    def test_cnpj_certificate_name_warning(self, smart):
        result = smart.validate("documento.pdf", 200 * KB, "cnpj_certificate")
        assert "Nome do arquivo não indica ser um comprovante de CNPJ" in result.warnings

    def test_bank_reference_name_warning(self, smart):
        result = smart.validate("carta.pdf", 200 * KB, "bank_reference")
        assert "Nome do arquivo não indica ser uma referência bancária" in result.warnings
        ok = smart.validate("carta_banco.pdf", 200 * KB, "bank_reference")
        assert ok.warnings == []

    def test_small_financial_statement_warning(self, smart):
        result = smart.validate("balanco.pdf", 60 * KB, "financial_statement")
        assert any("demonstrativo financeiro" in w for w in result.warnings)

    def test_custom_max_size(self):
        result = SmartDocumentValidator(max_size_mb=1).validate("cnpj.pdf", 2 * MB, "cnpj_certificate")
        assert result.is_valid is False


class TestScoreMessage:

    @pytest.mark.parametrize("score,valid,expected", [
        (95, True, "Documento válido e de alta qualidade"),
        (70, True, "Documento válido com algumas observações"),
        (85, False, "Documento com problemas que precisam ser corrigidos"),
        (20, False, "Documento rejeitado - muitos problemas encontrados"),
    ])
    def test_bands(self, score, valid, expected):
        assert score_message(score, valid) == expected

    def test_result_to_dict(self):
        result = ValidationResult(is_valid=True, score=90, confidence=0.9)
        data = result.to_dict()
        assert data["score"] == 90
        assert data["errors"] == []
