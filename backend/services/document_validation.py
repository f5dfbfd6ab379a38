"""
Validação de documentos por regras sobre os metadados do arquivo.

Nenhum conteúdo é interpretado: a pontuação considera extensão, tamanho,
nome do arquivo e os primeiros bytes (assinatura do formato). Há dois
validadores:

- DocumentValidator: usa DOCUMENT_REQUIREMENTS do tipo de documento e é
  aplicado nos uploads das solicitações de crédito e das importações.
- SmartDocumentValidator: regras genéricas (10 MB, pdf/imagem/doc) com
  verificações específicas para alguns tipos, usado pela validação avulsa.
"""
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from config.documents import DocumentRequirement, get_requirement

MB = 1024 * 1024
KB = 1024

PDF_MAGIC = b"%PDF"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
SAFE_STEM = re.compile(r"^[A-Za-z0-9._-]+$")
SUSPICIOUS_EXTENSIONS = (".exe", ".bat", ".cmd", ".scr", ".vbs", ".js")


@dataclass
class ValidationResult:
    is_valid: bool
    score: int
    confidence: float
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def _stem(filename: str) -> str:
    return filename.rsplit(".", 1)[0] if "." in filename else filename


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def score_message(score: int, is_valid: bool) -> str:
    if score >= 80 and is_valid:
        return "Documento válido e de alta qualidade"
    if is_valid:
        return "Documento válido com algumas observações"
    if score >= 40:
        return "Documento com problemas que precisam ser corrigidos"
    return "Documento rejeitado - muitos problemas encontrados"


class DocumentValidator:
    """
    Pontua um arquivo de 0 a 100 para um tipo de documento.

    Parte de 100 e desconta penalidades por extensão, tamanho, nome,
    integridade (assinatura), textos esperados/proibidos no nome e
    padrões perigosos. É válido sem erros e com pontuação >= 60.
    """

    MIN_VALID_SCORE = 60

    def validate(
        self,
        filename: str,
        size_bytes: int,
        document_type: str,
        header: Optional[bytes] = None,
    ) -> ValidationResult:
        try:
            requirement = get_requirement(document_type)
        except KeyError:
            return ValidationResult(
                is_valid=False,
                score=0,
                confidence=0.0,
                errors=["Tipo de documento não reconhecido"],
                message=score_message(0, False),
            )

        errors: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []
        penalty = 0

        penalty += self._check_basic(filename, size_bytes, requirement, errors, warnings)
        penalty += self._check_integrity(filename, header, errors, warnings)
        penalty += self._check_content(filename, requirement, errors, warnings, suggestions)
        penalty += self._check_security(filename, size_bytes, errors, warnings)

        score = int(_clamp(100 - penalty, 0, 100))
        is_valid = not errors and score >= self.MIN_VALID_SCORE
        confidence = _clamp(score / 100 - 0.1 * len(errors) - 0.05 * len(warnings), 0.0, 1.0)
        return ValidationResult(
            is_valid=is_valid,
            score=score,
            confidence=round(confidence, 2),
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            message=score_message(score, is_valid),
        )

    def _check_basic(self, filename, size_bytes, requirement: DocumentRequirement, errors, warnings) -> int:
        penalty = 0
        size_mb = size_bytes / MB

        if _extension(filename) not in requirement.allowed_types:
            errors.append(
                "Tipo de arquivo não permitido. Tipos aceitos: " + ", ".join(requirement.allowed_types)
            )
            penalty += 30

        if size_mb > requirement.max_size_mb:
            errors.append(
                f"Arquivo muito grande ({size_mb:.1f}MB). Tamanho máximo: {requirement.max_size_mb:g}MB"
            )
            penalty += 20
        elif size_mb > requirement.max_size_mb * 0.8:
            warnings.append(
                f"Arquivo próximo ao limite de tamanho ({size_mb:.1f}MB/{requirement.max_size_mb:g}MB)"
            )
            penalty += 5

        if len(filename) > 100:
            warnings.append("Nome do arquivo muito longo. Considere renomear para algo mais curto.")
            penalty += 2

        if not SAFE_STEM.match(_stem(filename)):
            warnings.append(
                "Nome do arquivo contém caracteres especiais. Use apenas letras, números, "
                "pontos, hífens e underscores."
            )
            penalty += 3

        if size_mb < 0.01:
            errors.append("Arquivo muito pequeno. Verifique se o documento está completo.")
            penalty += 25
        return penalty

    def _check_integrity(self, filename, header: Optional[bytes], errors, warnings) -> int:
        if header is None:
            warnings.append("Não foi possível verificar a integridade do arquivo.")
            return 5

        extension = _extension(filename)
        if extension == "pdf" and not header.startswith(PDF_MAGIC):
            errors.append("Arquivo corrompido ou não é um PDF válido.")
            return 30
        if extension in ("jpg", "jpeg") and b"JFIF" not in header and b"Exif" not in header:
            warnings.append("Possível problema com o arquivo JPEG. Verifique se está corrompido.")
            return 10
        if extension == "png" and not header.startswith(PNG_MAGIC):
            warnings.append("Possível problema com o arquivo PNG. Verifique se está corrompido.")
            return 10
        return 0

    def _check_content(self, filename, requirement: DocumentRequirement, errors, warnings, suggestions) -> int:
        name = filename.lower()
        penalty = 0

        if requirement.required_text:
            if any(text.lower() in name for text in requirement.required_text):
                suggestions.append("Documento parece conter o conteúdo esperado.")
            else:
                warnings.append(
                    "Texto esperado não encontrado: " + ", ".join(requirement.required_text)
                    + ". Verifique se o documento está correto."
                )
                suggestions.append(
                    "Certifique-se de que o documento contém as informações necessárias e está legível."
                )
                penalty += 15

        if any(text.lower() in name for text in requirement.forbidden_text):
            errors.append("Conteúdo não permitido detectado: " + ", ".join(requirement.forbidden_text))
            penalty += 25
        return penalty

    def _check_security(self, filename, size_bytes, errors, warnings) -> int:
        penalty = 0
        if any(pattern in filename.lower() for pattern in SUSPICIOUS_EXTENSIONS):
            errors.append("Tipo de arquivo potencialmente perigoso detectado.")
            penalty += 50
        if size_bytes / MB > 50:
            warnings.append("Arquivo muito grande. Pode levar mais tempo para processar.")
            penalty += 5
        return penalty


class SmartDocumentValidator:
    """Validação genérica com verificações por tipo; válido com pontuação >= 70."""

    MIN_VALID_SCORE = 70
    ACCEPTED_EXTENSIONS = ("pdf", "jpg", "jpeg", "png", "doc", "docx")
    IMAGE_EXTENSIONS = ("jpg", "jpeg", "png")
    EXECUTABLE_EXTENSIONS = ("exe", "bat", "com", "scr", "vbs")
    SUSPICIOUS_NAMES = ("script", "malware", "virus")

    def __init__(self, max_size_mb: float = 10):
        self.max_size_mb = max_size_mb

    def validate(self, filename: str, size_bytes: int, document_type: str) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []
        suggestions: List[str] = []
        score = 100
        extension = _extension(filename)
        name = filename.lower()

        if size_bytes > self.max_size_mb * MB:
            errors.append(f"Arquivo muito grande. Máximo permitido: {self.max_size_mb:g}MB")
            score -= 30

        if extension not in self.ACCEPTED_EXTENSIONS:
            errors.append(
                "Formato não suportado. Formatos aceitos: "
                + ", ".join(f".{ext}" for ext in self.ACCEPTED_EXTENSIONS)
            )
            score -= 40

        if document_type == "cnpj_certificate":
            if "cnpj" not in name and "receita" not in name:
                warnings.append("Nome do arquivo não indica ser um comprovante de CNPJ")
            suggestions.append("Certifique-se de que o documento é atualizado (menos de 90 dias)")
        elif document_type == "financial_statement":
            if size_bytes < 100 * KB:
                warnings.append("Arquivo muito pequeno para ser um demonstrativo financeiro completo")
            suggestions.append("Demonstrativos financeiros devem incluir balanço patrimonial e DRE")
        elif document_type == "business_license":
            suggestions.append("Verifique se a licença está dentro do prazo de validade")
        elif document_type == "bank_reference":
            if "banco" not in name and "bank" not in name:
                warnings.append("Nome do arquivo não indica ser uma referência bancária")
        else:
            suggestions.append("Certifique-se de que o documento está legível e completo")

        if any(pattern in name for pattern in self.SUSPICIOUS_NAMES):
            errors.append("Arquivo pode conter conteúdo suspeito")
        if extension in self.EXECUTABLE_EXTENSIONS:
            errors.append("Arquivos executáveis não são permitidos")

        if extension == "pdf":
            confidence, bonus = 0.9, 10
        elif extension in self.IMAGE_EXTENSIONS:
            confidence, bonus = 0.75, 5
            suggestions.append("PDFs geralmente têm melhor qualidade para documentos oficiais")
        else:
            confidence, bonus = 0.6, 0
            warnings.append("Formato do arquivo pode afetar a qualidade da análise")

        if size_bytes < 50 * KB:
            warnings.append("Arquivo muito pequeno - pode estar com baixa resolução")
            bonus -= 5
        elif size_bytes > 5 * MB:
            suggestions.append("Considere comprimir o arquivo para upload mais rápido")

        score = int(_clamp(score + bonus, 0, 100))
        is_valid = not errors and score >= self.MIN_VALID_SCORE
        return ValidationResult(
            is_valid=is_valid,
            score=score,
            confidence=confidence,
            errors=errors,
            warnings=warnings,
            suggestions=suggestions,
            message=score_message(score, is_valid),
        )


document_validator = DocumentValidator()
smart_document_validator = SmartDocumentValidator()
