"""
Exceções específicas do Spark Comex.

Services levantam estas exceções; os handlers registrados em main.py
as convertem em respostas HTTP com a mensagem em `detail`.
"""

from typing import Any, Optional


class SparkComexError(Exception):
    """Exceção base para todas as exceções do Spark Comex."""

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(self.message)


# === Exceções de Configuração ===

class ConfigurationError(SparkComexError):
    """Serviço externo ou parâmetro obrigatório não configurado."""
    pass


class CreditBureauNotConfiguredError(ConfigurationError):
    """Token do bureau de crédito (DirectData) ausente."""

    def __init__(self):
        super().__init__(
            "Consulta de crédito não configurada. Defina DIRECTD_API_TOKEN."
        )


# === Exceções de Validação e Regras de Negócio ===

class ValidationError(SparkComexError):
    """Erro de validação de dados ou arquivos."""
    pass


class InvalidDocumentNumberError(ValidationError):
    """CNPJ ou CPF com dígito verificador inválido."""

    def __init__(self, kind: str = "CNPJ"):
        super().__init__(f"{kind} inválido")


class DocumentRejectedError(ValidationError):
    """Arquivo reprovado pelo validador de documentos."""

    def __init__(self, filename: str, errors: Optional[list] = None):
        self.errors = errors or []
        detail = "; ".join(self.errors) if self.errors else None
        super().__init__(f"Documento '{filename}' reprovado na validação", detail)


class BusinessRuleError(SparkComexError):
    """Operação não permitida no estado atual do registro."""
    pass


class InvalidStatusTransitionError(BusinessRuleError):
    """Transição de status fora do fluxo permitido."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(
            f"Transição de status inválida: {current} -> {target}"
        )


class InsufficientCreditError(BusinessRuleError):
    """Valor da importação excede o crédito disponível."""

    def __init__(self, requested: Any, available: Any):
        self.requested = requested
        self.available = available
        super().__init__(
            "Crédito disponível insuficiente para esta importação",
            f"Solicitado: {requested} / Disponível: {available}",
        )


class PermissionDeniedError(SparkComexError):
    """Usuário sem permissão sobre o recurso."""

    def __init__(self, message: str = "Acesso negado"):
        super().__init__(message)


# === Exceções de API Externa ===

class ExternalAPIError(SparkComexError):
    """Erro ao comunicar com API externa."""
    pass


class CreditBureauError(ExternalAPIError):
    """Falha na consulta ao bureau de crédito."""

    def __init__(self, details: Optional[str] = None):
        super().__init__("Erro ao consultar bureau de crédito", details)


# === Exceções de Banco de Dados ===

class DatabaseError(SparkComexError):
    """Erro base para operações de banco de dados."""
    pass


class RecordNotFoundError(DatabaseError):
    """Registro não encontrado no banco de dados."""

    def __init__(self, entity: str, identifier: Any = None):
        if identifier:
            message = f"{entity} com ID '{identifier}' não encontrado"
        else:
            message = f"{entity} não encontrado"
        super().__init__(message)


class DuplicateRecordError(DatabaseError):
    """Tentativa de inserir registro duplicado."""

    def __init__(self, entity: str, field: Optional[str] = None):
        if field:
            message = f"{entity} com este {field} já existe"
        else:
            message = f"{entity} já existe no sistema"
        super().__init__(message)
