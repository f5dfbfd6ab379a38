"""
Serviço de auditoria das ações administrativas e da financeira.

Cada ação relevante (aprovação de crédito, mudança de papel, confirmação
de pagamento etc.) gera uma linha em `audit_logs`.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from logging_config import get_logger
from models import AuditLog

logger = get_logger(__name__)


class AuditAction:
    """Tipos de ação registrados na auditoria."""
    # Usuários
    USER_CREATED = "user_created"
    USER_ROLE_CHANGED = "user_role_changed"
    USER_DEACTIVATED = "user_deactivated"

    # Crédito
    CREDIT_PRE_APPROVED = "credit_pre_approved"
    CREDIT_REJECTED = "credit_rejected"
    CREDIT_ANALYSIS_UPDATED = "credit_analysis_updated"
    CREDIT_SUBMITTED_FINANCIAL = "credit_submitted_financial"
    CREDIT_APPROVED = "credit_approved"
    CREDIT_FINANCIAL_STATUS = "credit_financial_status"
    CREDIT_FINANCIAL_UPDATED = "credit_financial_updated"
    CREDIT_FINALIZED = "credit_finalized"
    CREDIT_BUREAU_QUERY = "credit_bureau_query"

    # Importações
    IMPORT_STATUS_CHANGED = "import_status_changed"
    IMPORT_BROKER_ASSIGNED = "import_broker_assigned"
    IMPORT_DOCUMENT_REVIEWED = "import_document_reviewed"

    # Pagamentos e taxas
    PAYMENT_CONFIRMED = "payment_confirmed"
    PAYMENT_REJECTED = "payment_rejected"
    ADMIN_FEE_SET = "admin_fee_set"

    # Documentos
    DOCUMENT_REQUESTED = "document_requested"

    # Login
    LOGIN_SUCCESS = "login_success"
    LOGIN_FAILED = "login_failed"
    LOGIN_BLOCKED = "login_blocked"


class AuditService:
    """
    Registra e consulta logs de auditoria.

    Uso:
        audit_service.log_action(
            db=db,
            user_id=admin.id,
            action=AuditAction.CREDIT_PRE_APPROVED,
            resource_type="credit_application",
            resource_id=solicitacao.id,
            details={"limite": "50000.00"},
            ip_address=get_client_ip_safe(request),
        )
    """

    def log_action(
        self,
        db: Session,
        user_id: int,
        action: str,
        resource_type: str,
        resource_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None
    ) -> AuditLog:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details,
            ip_address=ip_address,
        )
        db.add(entry)
        db.commit()
        db.refresh(entry)

        logger.info(
            f"Audit: user={user_id} action={action} "
            f"resource={resource_type}:{resource_id} ip={ip_address}"
        )
        return entry

    def _base_query(self, db: Session):
        return db.query(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc())

    def query_logs(
        self,
        db: Session,
        user_id: Optional[int] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
    ):
        """Query filtrável usada pela listagem paginada do admin."""
        query = self._base_query(db)
        if user_id is not None:
            query = query.filter(AuditLog.user_id == user_id)
        if action:
            query = query.filter(AuditLog.action == action)
        if resource_type:
            query = query.filter(AuditLog.resource_type == resource_type)
        return query

    def get_logs_for_resource(
        self,
        db: Session,
        resource_type: str,
        resource_id: int,
        limit: int = 50
    ) -> List[AuditLog]:
        return self._base_query(db).filter(
            AuditLog.resource_type == resource_type,
            AuditLog.resource_id == resource_id,
        ).limit(limit).all()


audit_service = AuditService()
