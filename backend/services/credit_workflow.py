"""
Regras de transição de status das solicitações de crédito.

Existem quatro máquinas de estado: o status principal da solicitação e as
trilhas auxiliares de pré-análise (admin), análise financeira (financeira)
e finalização (admin). Toda mudança de status passa por
`validate_transition`, que levanta InvalidStatusTransitionError quando o
destino não é permitido a partir do status atual.
"""
from typing import Dict, List, Optional

from exceptions import InvalidStatusTransitionError
from models.credito import (
    AdminStatus,
    CreditStatus,
    FinancialStatus,
    PreAnalysisStatus,
    SolicitacaoCredito,
)


class Workflow:
    MAIN = "main"
    PRE_ANALYSIS = "pre_analysis"
    FINANCIAL = "financial"
    ADMIN = "admin"
    ALL = [MAIN, PRE_ANALYSIS, FINANCIAL, ADMIN]


class WorkflowStage:
    DRAFT = "draft"
    PENDING_ADMIN = "pending_admin"
    PENDING_FINANCIAL = "pending_financial"
    PENDING_FINAL_ADMIN = "pending_final_admin"
    COMPLETED = "completed"
    REJECTED = "rejected"


CREDIT_TRANSITIONS: Dict[str, List[str]] = {
    CreditStatus.PENDING: [
        CreditStatus.UNDER_REVIEW, CreditStatus.NEEDS_DOCUMENTS,
        CreditStatus.PRE_APPROVED, CreditStatus.REJECTED, CreditStatus.CANCELLED,
    ],
    CreditStatus.UNDER_REVIEW: [
        CreditStatus.NEEDS_DOCUMENTS, CreditStatus.PRE_APPROVED, CreditStatus.REJECTED,
    ],
    CreditStatus.NEEDS_DOCUMENTS: [CreditStatus.UNDER_REVIEW, CreditStatus.CANCELLED],
    CreditStatus.PRE_APPROVED: [CreditStatus.SUBMITTED_TO_FINANCIAL, CreditStatus.REJECTED],
    CreditStatus.SUBMITTED_TO_FINANCIAL: [CreditStatus.APPROVED, CreditStatus.REJECTED],
    CreditStatus.APPROVED: [CreditStatus.ADMIN_FINALIZED],
    CreditStatus.ADMIN_FINALIZED: [],
    CreditStatus.REJECTED: [],
    CreditStatus.CANCELLED: [],
}

PRE_ANALYSIS_TRANSITIONS: Dict[str, List[str]] = {
    PreAnalysisStatus.PENDING: [
        PreAnalysisStatus.UNDER_REVIEW, PreAnalysisStatus.NEEDS_DOCUMENTS,
        PreAnalysisStatus.NEEDS_CLARIFICATION,
    ],
    PreAnalysisStatus.UNDER_REVIEW: [
        PreAnalysisStatus.PRE_APPROVED, PreAnalysisStatus.NEEDS_DOCUMENTS,
        PreAnalysisStatus.NEEDS_CLARIFICATION,
    ],
    PreAnalysisStatus.PRE_APPROVED: [PreAnalysisStatus.SUBMITTED_TO_FINANCIAL],
    PreAnalysisStatus.NEEDS_DOCUMENTS: [PreAnalysisStatus.UNDER_REVIEW],
    PreAnalysisStatus.NEEDS_CLARIFICATION: [PreAnalysisStatus.UNDER_REVIEW],
    PreAnalysisStatus.SUBMITTED_TO_FINANCIAL: [],
}

FINANCIAL_TRANSITIONS: Dict[str, List[str]] = {
    FinancialStatus.PENDING_FINANCIAL: [FinancialStatus.UNDER_REVIEW_FINANCIAL],
    FinancialStatus.UNDER_REVIEW_FINANCIAL: [
        FinancialStatus.APPROVED, FinancialStatus.REJECTED,
        FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL,
    ],
    FinancialStatus.APPROVED: [],
    FinancialStatus.REJECTED: [],
    FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL: [FinancialStatus.UNDER_REVIEW_FINANCIAL],
}

ADMIN_TRANSITIONS: Dict[str, List[str]] = {
    AdminStatus.PENDING_ADMIN: [AdminStatus.ADMIN_FINALIZED],
    AdminStatus.ADMIN_FINALIZED: [],
}

_TABLES: Dict[str, Dict[str, List[str]]] = {
    Workflow.MAIN: CREDIT_TRANSITIONS,
    Workflow.PRE_ANALYSIS: PRE_ANALYSIS_TRANSITIONS,
    Workflow.FINANCIAL: FINANCIAL_TRANSITIONS,
    Workflow.ADMIN: ADMIN_TRANSITIONS,
}

STATUS_LABELS: Dict[str, str] = {
    CreditStatus.PENDING: "Pendente",
    CreditStatus.UNDER_REVIEW: "Em Análise",
    CreditStatus.NEEDS_DOCUMENTS: "Documentos Pendentes",
    CreditStatus.PRE_APPROVED: "Pré-Aprovado",
    CreditStatus.SUBMITTED_TO_FINANCIAL: "Em Análise Financeira",
    CreditStatus.APPROVED: "Aprovado",
    CreditStatus.ADMIN_FINALIZED: "Crédito Liberado",
    CreditStatus.REJECTED: "Rejeitado",
    CreditStatus.CANCELLED: "Cancelado",
    PreAnalysisStatus.NEEDS_CLARIFICATION: "Esclarecimentos Necessários",
    FinancialStatus.PENDING_FINANCIAL: "Aguardando Financeira",
    FinancialStatus.UNDER_REVIEW_FINANCIAL: "Em Análise pela Financeira",
    FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL: "Documentos Solicitados pela Financeira",
    AdminStatus.PENDING_ADMIN: "Aguardando Finalização",
}


def get_status_label(status: Optional[str]) -> str:
    if not status:
        return ""
    return STATUS_LABELS.get(status, status)


def get_allowed_transitions(current: Optional[str], workflow: str = Workflow.MAIN) -> List[str]:
    return list(_TABLES[workflow].get(current or "", []))


def is_valid_transition(current: Optional[str], target: str, workflow: str = Workflow.MAIN) -> bool:
    return target in _TABLES[workflow].get(current or "", [])


def validate_transition(current: Optional[str], target: str, workflow: str = Workflow.MAIN) -> None:
    """Levanta InvalidStatusTransitionError se `current -> target` não é permitido."""
    if not is_valid_transition(current, target, workflow):
        raise InvalidStatusTransitionError(current or "-", target)


def is_terminal(status: str) -> bool:
    return not CREDIT_TRANSITIONS.get(status)


def get_workflow_stage(solicitacao: SolicitacaoCredito) -> str:
    """Etapa macro em que a solicitação se encontra, para exibição."""
    if not solicitacao.status:
        return WorkflowStage.DRAFT
    if solicitacao.status in (CreditStatus.REJECTED, CreditStatus.CANCELLED):
        return WorkflowStage.REJECTED
    if (
        solicitacao.admin_status == AdminStatus.ADMIN_FINALIZED
        or solicitacao.status == CreditStatus.ADMIN_FINALIZED
    ):
        return WorkflowStage.COMPLETED
    if solicitacao.financial_status == FinancialStatus.APPROVED:
        return WorkflowStage.PENDING_FINAL_ADMIN
    if (
        solicitacao.pre_analysis_status == PreAnalysisStatus.SUBMITTED_TO_FINANCIAL
        or solicitacao.status == CreditStatus.SUBMITTED_TO_FINANCIAL
    ):
        return WorkflowStage.PENDING_FINANCIAL
    return WorkflowStage.PENDING_ADMIN


def describe(solicitacao: SolicitacaoCredito) -> dict:
    """Resumo usado por GET /credit/applications/{id}/workflow."""
    return {
        "solicitacao_id": solicitacao.id,
        "status": solicitacao.status,
        "status_label": get_status_label(solicitacao.status),
        "etapa": get_workflow_stage(solicitacao),
        "proximos_status": get_allowed_transitions(solicitacao.status),
        "pre_analysis_status": solicitacao.pre_analysis_status,
        "financial_status": solicitacao.financial_status,
        "admin_status": solicitacao.admin_status,
    }
