"""
Ações sobre solicitações de crédito (importador, admin e financeira).

Toda mudança do status principal passa por credit_workflow e dispara a
notificação correspondente ao importador. Auditoria fica nos routers,
que têm o IP da requisição.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from config.credit import DEFAULT_PAYMENT_TERMS
from config.messages import Messages
from exceptions import BusinessRuleError
from logging_config import get_logger
from models.credito import (
    AdminStatus,
    CreditStatus,
    FinancialStatus,
    PreAnalysisStatus,
    SolicitacaoCredito,
)
from models.usuario import Usuario
from repositories.credito_repository import credito_repository
from schemas.credito import (
    CreditApplicationCreate,
    CreditApplicationUpdate,
    FinalizationRequest,
    FinancialStatusAction,
)
from services import credit_workflow
from services.credit_workflow import Workflow
from services.metrics import record_credit_event
from services.notification import notification_service
from utils.dates import utcnow

logger = get_logger("services.credit_application")


def _change_status(solicitacao: SolicitacaoCredito, novo_status: str) -> str:
    """Valida e aplica a transição do status principal; devolve o anterior (sem commit)."""
    anterior = solicitacao.status
    credit_workflow.validate_transition(anterior, novo_status)
    solicitacao.status = novo_status
    return anterior


def _commit_and_notify(db: Session, solicitacao: SolicitacaoCredito, anterior: str, event: str) -> SolicitacaoCredito:
    db.commit()
    db.refresh(solicitacao)
    record_credit_event(event)
    notification_service.notify_credit_status_change(db, solicitacao, anterior, solicitacao.status)
    logger.info(f"Solicitação {solicitacao.id}: {anterior} -> {solicitacao.status}")
    return solicitacao


# === Importador ===

def create_application(db: Session, user: Usuario, data: CreditApplicationCreate) -> SolicitacaoCredito:
    """Cria a solicitação em `pending`; razão social e CNPJ caem no cadastro do usuário."""
    payload = data.model_dump(exclude={"razao_social", "cnpj"})
    solicitacao = SolicitacaoCredito(
        user_id=user.id,
        razao_social=data.razao_social or user.razao_social,
        cnpj=data.cnpj or user.cnpj,
        status=CreditStatus.PENDING,
        pre_analysis_status=PreAnalysisStatus.PENDING,
        documentos={},
        **payload,
    )
    solicitacao = credito_repository.create(db, solicitacao)
    record_credit_event("created")
    return solicitacao


def update_application(
    db: Session, solicitacao: SolicitacaoCredito, data: CreditApplicationUpdate,
) -> SolicitacaoCredito:
    if solicitacao.status != CreditStatus.PENDING:
        raise BusinessRuleError(Messages.CREDIT_ONLY_PENDING_EDIT)
    return credito_repository.update(db, solicitacao, data.model_dump(exclude_unset=True))


def cancel_application(db: Session, solicitacao: SolicitacaoCredito) -> SolicitacaoCredito:
    if solicitacao.status != CreditStatus.PENDING:
        raise BusinessRuleError(Messages.CREDIT_ONLY_PENDING_CANCEL)
    anterior = _change_status(solicitacao, CreditStatus.CANCELLED)
    return _commit_and_notify(db, solicitacao, anterior, "cancelled")


def accepts_documents(solicitacao: SolicitacaoCredito) -> bool:
    return not credit_workflow.is_terminal(solicitacao.status)


def add_documents(
    db: Session, solicitacao: SolicitacaoCredito, document_type: str, arquivos: List[Dict[str, Any]],
) -> SolicitacaoCredito:
    """
    Anexa arquivos já gravados ao JSON `documentos`, agrupados por tipo.

    Cada item de `arquivos` tem arquivo, caminho e pontuacao.
    """
    if not arquivos:
        return solicitacao
    documentos = dict(solicitacao.documentos or {})
    enviados = list(documentos.get(document_type, []))
    agora = utcnow().isoformat()
    for item in arquivos:
        enviados.append({**item, "enviado_em": agora})
    documentos[document_type] = enviados
    solicitacao.documentos = documentos
    db.commit()
    db.refresh(solicitacao)
    return solicitacao


# === Admin ===

def pre_approve(
    db: Session,
    solicitacao: SolicitacaoCredito,
    admin_id: int,
    limite_credito: Optional[Decimal] = None,
    prazos_aprovados: Optional[str] = None,
    notas: Optional[str] = None,
) -> SolicitacaoCredito:
    anterior = _change_status(solicitacao, CreditStatus.PRE_APPROVED)
    solicitacao.pre_analysis_status = PreAnalysisStatus.PRE_APPROVED
    if limite_credito is not None:
        solicitacao.limite_credito = limite_credito
    if prazos_aprovados:
        solicitacao.prazos_aprovados = prazos_aprovados
    if notas:
        analise = dict(solicitacao.analise_admin or {})
        analise["notas"] = notas
        solicitacao.analise_admin = analise
    solicitacao.analisado_por = admin_id
    solicitacao.analisado_em = utcnow()
    return _commit_and_notify(db, solicitacao, anterior, "pre_approved")


def reject(db: Session, solicitacao: SolicitacaoCredito, motivo: str) -> SolicitacaoCredito:
    anterior = _change_status(solicitacao, CreditStatus.REJECTED)
    solicitacao.motivo_rejeicao = motivo
    return _commit_and_notify(db, solicitacao, anterior, "rejected")


def update_analysis(
    db: Session,
    solicitacao: SolicitacaoCredito,
    admin_id: int,
    analise: Dict[str, Any],
    pre_analysis_status: Optional[str] = None,
) -> SolicitacaoCredito:
    """
    Salva a análise do admin e move o status de pré-análise.

    Mover a pré-análise para `under_review` ou `needs_documents` também
    move o status principal quando a transição existe.
    """
    if pre_analysis_status and pre_analysis_status != solicitacao.pre_analysis_status:
        credit_workflow.validate_transition(
            solicitacao.pre_analysis_status, pre_analysis_status, Workflow.PRE_ANALYSIS,
        )
        solicitacao.pre_analysis_status = pre_analysis_status

    anterior = solicitacao.status
    mirrored = {
        PreAnalysisStatus.UNDER_REVIEW: CreditStatus.UNDER_REVIEW,
        PreAnalysisStatus.NEEDS_DOCUMENTS: CreditStatus.NEEDS_DOCUMENTS,
    }.get(pre_analysis_status or "")
    if mirrored and credit_workflow.is_valid_transition(anterior, mirrored):
        solicitacao.status = mirrored

    solicitacao.analise_admin = {**(solicitacao.analise_admin or {}), **analise}
    solicitacao.analisado_por = admin_id
    solicitacao.analisado_em = utcnow()
    return _commit_and_notify(db, solicitacao, anterior, "analysis_updated")


def submit_to_financial(db: Session, solicitacao: SolicitacaoCredito) -> SolicitacaoCredito:
    anterior = _change_status(solicitacao, CreditStatus.SUBMITTED_TO_FINANCIAL)
    solicitacao.pre_analysis_status = PreAnalysisStatus.SUBMITTED_TO_FINANCIAL
    solicitacao.financial_status = FinancialStatus.PENDING_FINANCIAL
    solicitacao.enviado_financeira_em = utcnow()
    return _commit_and_notify(db, solicitacao, anterior, "submitted_financial")


def finalize(db: Session, solicitacao: SolicitacaoCredito, data: FinalizationRequest) -> SolicitacaoCredito:
    """Admin define limite, prazos, entrada e taxa finais e libera o crédito."""
    anterior = _change_status(solicitacao, CreditStatus.ADMIN_FINALIZED)
    credit_workflow.validate_transition(
        solicitacao.admin_status or AdminStatus.PENDING_ADMIN, AdminStatus.ADMIN_FINALIZED, Workflow.ADMIN,
    )
    solicitacao.admin_status = AdminStatus.ADMIN_FINALIZED
    solicitacao.limite_final = data.limite_final
    solicitacao.prazos_finais = data.prazos_finais
    solicitacao.percentual_entrada = data.percentual_entrada
    solicitacao.taxa_administrativa = data.taxa_administrativa
    solicitacao.finalizado_em = utcnow()
    return _commit_and_notify(db, solicitacao, anterior, "finalized")


# === Financeira ===

def in_financial_scope(solicitacao: SolicitacaoCredito) -> bool:
    return solicitacao.status in CreditStatus.FINANCIAL_SCOPE


def _ensure_submitted(solicitacao: SolicitacaoCredito) -> None:
    """Solicitação pré-aprovada é encaminhada à financeira ao ser analisada por ela."""
    if solicitacao.status == CreditStatus.PRE_APPROVED:
        credit_workflow.validate_transition(solicitacao.status, CreditStatus.SUBMITTED_TO_FINANCIAL)
        solicitacao.status = CreditStatus.SUBMITTED_TO_FINANCIAL
        solicitacao.pre_analysis_status = PreAnalysisStatus.SUBMITTED_TO_FINANCIAL
        solicitacao.enviado_financeira_em = solicitacao.enviado_financeira_em or utcnow()


def _move_financial(solicitacao: SolicitacaoCredito, target: str) -> None:
    """Abre a análise (under_review_financial) se preciso e valida o destino."""
    atual = solicitacao.financial_status or FinancialStatus.PENDING_FINANCIAL
    if atual in (FinancialStatus.PENDING_FINANCIAL, FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL):
        credit_workflow.validate_transition(atual, FinancialStatus.UNDER_REVIEW_FINANCIAL, Workflow.FINANCIAL)
        atual = FinancialStatus.UNDER_REVIEW_FINANCIAL
    credit_workflow.validate_transition(atual, target, Workflow.FINANCIAL)
    solicitacao.financial_status = target


def financial_approve(
    db: Session,
    solicitacao: SolicitacaoCredito,
    financeira_id: int,
    limite_credito: Optional[Decimal] = None,
    prazos_aprovados: Optional[str] = None,
    notas_financeiras: Optional[str] = None,
) -> SolicitacaoCredito:
    """Aprovação da financeira: exige limite (informado ou já registrado)."""
    limite = limite_credito if limite_credito is not None else solicitacao.limite_credito
    if not limite:
        raise BusinessRuleError(Messages.CREDIT_LIMIT_REQUIRED)

    anterior = solicitacao.status
    _ensure_submitted(solicitacao)
    credit_workflow.validate_transition(solicitacao.status, CreditStatus.APPROVED)
    _move_financial(solicitacao, FinancialStatus.APPROVED)

    solicitacao.status = CreditStatus.APPROVED
    solicitacao.admin_status = AdminStatus.PENDING_ADMIN
    solicitacao.limite_credito = limite
    solicitacao.prazos_aprovados = prazos_aprovados or solicitacao.prazos_aprovados or DEFAULT_PAYMENT_TERMS
    if notas_financeiras is not None:
        solicitacao.notas_financeiras = notas_financeiras
    solicitacao.analisado_financeira_por = financeira_id
    solicitacao.aprovado_em = utcnow()
    return _commit_and_notify(db, solicitacao, _notified_from(anterior), "approved")


def financial_reject(
    db: Session, solicitacao: SolicitacaoCredito, financeira_id: int, motivo: str,
) -> SolicitacaoCredito:
    anterior = solicitacao.status
    _ensure_submitted(solicitacao)
    credit_workflow.validate_transition(solicitacao.status, CreditStatus.REJECTED)
    _move_financial(solicitacao, FinancialStatus.REJECTED)
    solicitacao.status = CreditStatus.REJECTED
    solicitacao.motivo_rejeicao = motivo
    solicitacao.analisado_financeira_por = financeira_id
    return _commit_and_notify(db, solicitacao, anterior, "rejected")


def _notified_from(anterior: str) -> str:
    # pre_approved -> approved passa implicitamente por submitted_to_financial
    if anterior == CreditStatus.PRE_APPROVED:
        return CreditStatus.SUBMITTED_TO_FINANCIAL
    return anterior


def set_financial_status(
    db: Session,
    solicitacao: SolicitacaoCredito,
    financeira_id: int,
    action: str,
    limite_credito: Optional[Decimal] = None,
    prazos_aprovados: Optional[str] = None,
    notas_financeiras: Optional[str] = None,
) -> SolicitacaoCredito:
    """
    approved_financial e rejected_financial equivalem a aprovar/rejeitar;
    needs_documents_financial muda só o status financeiro.
    """
    if action == FinancialStatusAction.APPROVED:
        return financial_approve(
            db, solicitacao, financeira_id, limite_credito, prazos_aprovados, notas_financeiras,
        )
    if action == FinancialStatusAction.REJECTED:
        return financial_reject(
            db, solicitacao, financeira_id, notas_financeiras or "Rejeitado pela financeira",
        )
    if action != FinancialStatusAction.NEEDS_DOCUMENTS:
        raise BusinessRuleError(Messages.INVALID_STATUS)

    _ensure_submitted(solicitacao)
    _move_financial(solicitacao, FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL)
    if notas_financeiras is not None:
        solicitacao.notas_financeiras = notas_financeiras
    solicitacao.analisado_financeira_por = financeira_id
    db.commit()
    db.refresh(solicitacao)
    return solicitacao


def update_financial_data(
    db: Session, solicitacao: SolicitacaoCredito, financeira_id: int, data: Dict[str, Any],
) -> SolicitacaoCredito:
    """Edita limite, prazos e notas sem mexer no status."""
    data = {k: v for k, v in data.items() if k in ("limite_credito", "prazos_aprovados", "notas_financeiras")}
    data["analisado_financeira_por"] = financeira_id
    return credito_repository.update(db, solicitacao, data)
