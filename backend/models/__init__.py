"""
Package de modelos SQLAlchemy.

Re-exporta os modelos e constantes de domínio:
`from models import Usuario, Importacao, CreditStatus, ...`
"""
from models.audit_log import AuditLog
from models.credito import (
    AdminStatus,
    CreditStatus,
    CreditUsageStatus,
    FinancialStatus,
    PreAnalysisStatus,
    SolicitacaoCredito,
    TaxaAdministrativa,
    UsoCredito,
)
from models.fornecedor import Fornecedor
from models.importacao import (
    CargoType,
    DocumentoImportacao,
    HistoricoImportacao,
    ImportDocumentStatus,
    Importacao,
    ImportPriority,
    ImportStatus,
    Incoterm,
    ProdutoImportacao,
    TransportMethod,
)
from models.notificacao import Notificacao, NotificacaoPrioridade, NotificacaoTipo
from models.pagamento import Pagamento, PaymentMethod, PaymentStatus, PaymentType
from models.solicitacao_documento import DocumentRequestStatus, SolicitacaoDocumento
from models.usuario import UserRole, Usuario

__all__ = [
    "Usuario",
    "UserRole",
    "AuditLog",
    "SolicitacaoCredito",
    "CreditStatus",
    "PreAnalysisStatus",
    "FinancialStatus",
    "AdminStatus",
    "UsoCredito",
    "CreditUsageStatus",
    "TaxaAdministrativa",
    "Importacao",
    "ImportStatus",
    "CargoType",
    "TransportMethod",
    "Incoterm",
    "ImportPriority",
    "ProdutoImportacao",
    "DocumentoImportacao",
    "ImportDocumentStatus",
    "HistoricoImportacao",
    "Fornecedor",
    "Pagamento",
    "PaymentType",
    "PaymentStatus",
    "PaymentMethod",
    "SolicitacaoDocumento",
    "DocumentRequestStatus",
    "Notificacao",
    "NotificacaoTipo",
    "NotificacaoPrioridade",
]
