"""
Package de schemas Pydantic.

Re-exporta os schemas mais usados: `from schemas import Mensagem, Token, ...`
"""
from schemas.admin import AuditLogResponse, CreditBureauResponse, PaginatedAuditLogResponse
from schemas.auth import LoginRequest, PasswordPolicy, PasswordRequirementsResponse, Token
from schemas.base import Mensagem, PaginatedResponse
from schemas.credito import (
    AdminFeeResponse,
    CreditApplicationCreate,
    CreditApplicationResponse,
    CreditApplicationUpdate,
    CreditUsageResponse,
    PaginatedCreditApplicationResponse,
    WorkflowResponse,
)
from schemas.documento import (
    DocumentRequestCreate,
    DocumentRequestResponse,
    DocumentValidationResponse,
    UploadQueueResponse,
)
from schemas.fornecedor import (
    FornecedorCreate,
    FornecedorResponse,
    FornecedorUpdate,
    PaginatedFornecedorResponse,
)
from schemas.importacao import (
    ImportacaoCreate,
    ImportacaoDetailResponse,
    ImportacaoResponse,
    ImportacaoUpdate,
    PaginatedImportacaoResponse,
    ProdutoCreate,
    ProdutoResponse,
    ProdutoUpdate,
)
from schemas.notificacao import (
    NotificacaoCountResponse,
    NotificacaoResponse,
    PaginatedNotificacaoResponse,
)
from schemas.pagamento import PaginatedPaymentResponse, PaymentResponse
from schemas.usuario import (
    PaginatedUsuarioResponse,
    UsuarioAdminResponse,
    UsuarioCreate,
    UsuarioResponse,
    UsuarioUpdate,
)

__all__ = [
    "Mensagem",
    "PaginatedResponse",
    "Token",
    "LoginRequest",
    "PasswordPolicy",
    "PasswordRequirementsResponse",
    "UsuarioCreate",
    "UsuarioUpdate",
    "UsuarioResponse",
    "UsuarioAdminResponse",
    "PaginatedUsuarioResponse",
    "CreditApplicationCreate",
    "CreditApplicationUpdate",
    "CreditApplicationResponse",
    "PaginatedCreditApplicationResponse",
    "CreditUsageResponse",
    "WorkflowResponse",
    "AdminFeeResponse",
    "ImportacaoCreate",
    "ImportacaoUpdate",
    "ImportacaoResponse",
    "ImportacaoDetailResponse",
    "PaginatedImportacaoResponse",
    "ProdutoCreate",
    "ProdutoUpdate",
    "ProdutoResponse",
    "FornecedorCreate",
    "FornecedorUpdate",
    "FornecedorResponse",
    "PaginatedFornecedorResponse",
    "PaymentResponse",
    "PaginatedPaymentResponse",
    "NotificacaoResponse",
    "NotificacaoCountResponse",
    "PaginatedNotificacaoResponse",
    "DocumentValidationResponse",
    "UploadQueueResponse",
    "DocumentRequestCreate",
    "DocumentRequestResponse",
    "AuditLogResponse",
    "PaginatedAuditLogResponse",
    "CreditBureauResponse",
]
