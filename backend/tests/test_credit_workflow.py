"""
Testes das tabelas de transição de status do crédito.
"""
import pytest

from exceptions import BusinessRuleError, InvalidStatusTransitionError
from models.credito import (
    AdminStatus,
    CreditStatus,
    FinancialStatus,
    PreAnalysisStatus,
    SolicitacaoCredito,
)
from services import credit_workflow
from services.credit_workflow import Workflow, WorkflowStage


class TestMainWorkflow:

    @pytest.mark.parametrize("current,target", [
        (CreditStatus.PENDING, CreditStatus.UNDER_REVIEW),
        (CreditStatus.PENDING, CreditStatus.PRE_APPROVED),
        (CreditStatus.PENDING, CreditStatus.CANCELLED),
        (CreditStatus.UNDER_REVIEW, CreditStatus.NEEDS_DOCUMENTS),
        (CreditStatus.NEEDS_DOCUMENTS, CreditStatus.UNDER_REVIEW),
        (CreditStatus.PRE_APPROVED, CreditStatus.SUBMITTED_TO_FINANCIAL),
        (CreditStatus.SUBMITTED_TO_FINANCIAL, CreditStatus.APPROVED),
        (CreditStatus.APPROVED, CreditStatus.ADMIN_FINALIZED),
    ])
    def test_allowed(self, current, target):
        assert credit_workflow.is_valid_transition(current, target) is True
        credit_workflow.validate_transition(current, target)

    @pytest.mark.parametrize("current,target", [
        (CreditStatus.PENDING, CreditStatus.APPROVED),
        (CreditStatus.UNDER_REVIEW, CreditStatus.CANCELLED),
        (CreditStatus.PRE_APPROVED, CreditStatus.APPROVED),
        (CreditStatus.APPROVED, CreditStatus.REJECTED),
        (CreditStatus.REJECTED, CreditStatus.PENDING),
        (CreditStatus.CANCELLED, CreditStatus.PENDING),
    ])
    def test_refused(self, current, target):
        with pytest.raises(InvalidStatusTransitionError):
            credit_workflow.validate_transition(current, target)

    def test_invalid_transition_is_business_rule_error(self):
        with pytest.raises(BusinessRuleError):
            credit_workflow.validate_transition(CreditStatus.ADMIN_FINALIZED, CreditStatus.APPROVED)

    @pytest.mark.parametrize("status", [
        CreditStatus.ADMIN_FINALIZED, CreditStatus.REJECTED, CreditStatus.CANCELLED,
    ])
    def test_terminal_statuses(self, status):
        assert credit_workflow.is_terminal(status) is True
        assert credit_workflow.get_allowed_transitions(status) == []

    def test_pending_is_not_terminal(self):
        assert credit_workflow.is_terminal(CreditStatus.PENDING) is False

    def test_every_status_has_a_table_entry(self):
        assert set(credit_workflow.CREDIT_TRANSITIONS) == set(CreditStatus.ALL)


class TestSideWorkflows:

    def test_pre_analysis(self):
        assert credit_workflow.is_valid_transition(
            PreAnalysisStatus.PENDING, PreAnalysisStatus.NEEDS_CLARIFICATION, Workflow.PRE_ANALYSIS,
        )
        assert not credit_workflow.is_valid_transition(
            PreAnalysisStatus.PENDING, PreAnalysisStatus.PRE_APPROVED, Workflow.PRE_ANALYSIS,
        )

    def test_financial(self):
        assert credit_workflow.is_valid_transition(
            FinancialStatus.UNDER_REVIEW_FINANCIAL, FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL, Workflow.FINANCIAL,
        )
        with pytest.raises(InvalidStatusTransitionError):
            credit_workflow.validate_transition(
                FinancialStatus.PENDING_FINANCIAL, FinancialStatus.APPROVED, Workflow.FINANCIAL,
            )

    def test_admin(self):
        credit_workflow.validate_transition(AdminStatus.PENDING_ADMIN, AdminStatus.ADMIN_FINALIZED, Workflow.ADMIN)
        with pytest.raises(InvalidStatusTransitionError):
            credit_workflow.validate_transition(
                AdminStatus.ADMIN_FINALIZED, AdminStatus.PENDING_ADMIN, Workflow.ADMIN,
            )


class TestWorkflowStage:

    def _app(self, **kwargs) -> SolicitacaoCredito:
        return SolicitacaoCredito(**kwargs)

    def test_draft(self):
        assert credit_workflow.get_workflow_stage(self._app(status=None)) == WorkflowStage.DRAFT

    def test_pending_admin(self):
        app = self._app(status=CreditStatus.PENDING, pre_analysis_status=PreAnalysisStatus.PENDING)
        assert credit_workflow.get_workflow_stage(app) == WorkflowStage.PENDING_ADMIN

    def test_pending_financial(self):
        app = self._app(
            status=CreditStatus.SUBMITTED_TO_FINANCIAL,
            pre_analysis_status=PreAnalysisStatus.SUBMITTED_TO_FINANCIAL,
            financial_status=FinancialStatus.PENDING_FINANCIAL,
        )
        assert credit_workflow.get_workflow_stage(app) == WorkflowStage.PENDING_FINANCIAL

    def test_pending_final_admin(self):
        app = self._app(
            status=CreditStatus.APPROVED,
            financial_status=FinancialStatus.APPROVED,
            admin_status=AdminStatus.PENDING_ADMIN,
        )
        assert credit_workflow.get_workflow_stage(app) == WorkflowStage.PENDING_FINAL_ADMIN

    def test_completed(self):
        app = self._app(status=CreditStatus.ADMIN_FINALIZED, admin_status=AdminStatus.ADMIN_FINALIZED)
        assert credit_workflow.get_workflow_stage(app) == WorkflowStage.COMPLETED

    @pytest.mark.parametrize("status", [CreditStatus.REJECTED, CreditStatus.CANCELLED])
    def test_rejected(self, status):
        assert credit_workflow.get_workflow_stage(self._app(status=status)) == WorkflowStage.REJECTED

    def test_describe(self):
        app = self._app(id=7, status=CreditStatus.PENDING, pre_analysis_status=PreAnalysisStatus.PENDING)
        info = credit_workflow.describe(app)
        assert info["solicitacao_id"] == 7
        assert info["status_label"] == "Pendente"
        assert info["etapa"] == WorkflowStage.PENDING_ADMIN
        assert CreditStatus.CANCELLED in info["proximos_status"]


class TestLabels:

    def test_every_main_status_has_label(self):
        for status in CreditStatus.ALL:
            assert credit_workflow.get_status_label(status) != status

    def test_unknown_status_returns_itself(self):
        assert credit_workflow.get_status_label("desconhecido") == "desconhecido"
        assert credit_workflow.get_status_label(None) == ""
