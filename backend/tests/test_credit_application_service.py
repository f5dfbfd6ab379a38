"""
Testes do fluxo das solicitações de crédito (importador, admin, financeira).
"""
from decimal import Decimal

import pytest
from sqlalchemy.orm import Session

from config.messages import Messages
from exceptions import BusinessRuleError, InvalidStatusTransitionError
from models import (
    AdminStatus,
    CreditStatus,
    FinancialStatus,
    Notificacao,
    PreAnalysisStatus,
    SolicitacaoCredito,
    Usuario,
)
from schemas.credito import (
    CreditApplicationCreate,
    CreditApplicationUpdate,
    FinalizationRequest,
    FinancialStatusAction,
)
from services import credit_application_service as service
from conftest import make_application


def _titles(db: Session, user: Usuario):
    return [n.titulo for n in db.query(Notificacao).filter(Notificacao.user_id == user.id).all()]


# =============================================================================
# Importador
# =============================================================================

class TestImporterActions:

    def test_create_uses_user_company_data(self, db_session: Session, test_user: Usuario):
        data = CreditApplicationCreate(valor_solicitado=Decimal("80000"), finalidade="Capital de giro")

        solicitacao = service.create_application(db_session, test_user, data)

        assert solicitacao.id is not None
        assert solicitacao.status == CreditStatus.PENDING
        assert solicitacao.pre_analysis_status == PreAnalysisStatus.PENDING
        assert solicitacao.razao_social == test_user.razao_social
        assert solicitacao.cnpj == test_user.cnpj
        assert solicitacao.documentos == {}

    def test_update_only_while_pending(self, db_session: Session, test_user: Usuario):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.UNDER_REVIEW)
        with pytest.raises(BusinessRuleError) as exc:
            service.update_application(db_session, solicitacao, CreditApplicationUpdate(finalidade="x"))
        assert exc.value.message == Messages.CREDIT_ONLY_PENDING_EDIT

    def test_update_pending(self, db_session: Session, pending_application: SolicitacaoCredito):
        updated = service.update_application(
            db_session, pending_application, CreditApplicationUpdate(valor_solicitado=Decimal("120000")),
        )
        assert updated.valor_solicitado == Decimal("120000")

    def test_cancel_pending(self, db_session: Session, pending_application: SolicitacaoCredito):
        cancelled = service.cancel_application(db_session, pending_application)
        assert cancelled.status == CreditStatus.CANCELLED
        assert service.accepts_documents(cancelled) is False

    def test_cancel_refused_after_pending(self, db_session: Session, test_user: Usuario):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.PRE_APPROVED)
        with pytest.raises(BusinessRuleError) as exc:
            service.cancel_application(db_session, solicitacao)
        assert exc.value.message == Messages.CREDIT_ONLY_PENDING_CANCEL

    def test_add_documents_groups_by_type(self, db_session: Session, pending_application: SolicitacaoCredito):
        service.add_documents(db_session, pending_application, "cnpj_certificate", [
            {"arquivo": "cnpj.pdf", "caminho": "users/1/credito/1/a.pdf", "pontuacao": 100},
        ])
        service.add_documents(db_session, pending_application, "cnpj_certificate", [
            {"arquivo": "cnpj2.pdf", "caminho": "users/1/credito/1/b.pdf", "pontuacao": 95},
        ])

        db_session.refresh(pending_application)
        enviados = pending_application.documentos["cnpj_certificate"]
        assert [d["arquivo"] for d in enviados] == ["cnpj.pdf", "cnpj2.pdf"]
        assert "enviado_em" in enviados[0]

    def test_add_documents_ignores_empty_batch(self, db_session: Session, pending_application):
        result = service.add_documents(db_session, pending_application, "cnpj_certificate", [])
        assert result.documentos == {}


# =============================================================================
# Admin
# =============================================================================

class TestAdminActions:

    def test_pre_approve_notifies_importer(
        self, db_session: Session, test_user: Usuario, admin_user: Usuario, pending_application,
    ):
        result = service.pre_approve(
            db_session, pending_application, admin_user.id,
            limite_credito=Decimal("50000"), prazos_aprovados="30,60", notas="Bom histórico",
        )

        assert result.status == CreditStatus.PRE_APPROVED
        assert result.pre_analysis_status == PreAnalysisStatus.PRE_APPROVED
        assert result.limite_credito == Decimal("50000")
        assert result.prazos_aprovados == "30,60"
        assert result.analise_admin["notas"] == "Bom histórico"
        assert result.analisado_por == admin_user.id
        assert "Crédito Pré-Aprovado" in _titles(db_session, test_user)

    def test_reject_from_pending(self, db_session: Session, test_user: Usuario, pending_application):
        result = service.reject(db_session, pending_application, "Documentação insuficiente")
        assert result.status == CreditStatus.REJECTED
        assert result.motivo_rejeicao == "Documentação insuficiente"
        assert "Solicitação Rejeitada" in _titles(db_session, test_user)

    def test_reject_refused_when_terminal(self, db_session: Session, test_user: Usuario):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.CANCELLED)
        with pytest.raises(InvalidStatusTransitionError):
            service.reject(db_session, solicitacao, "motivo")

    def test_update_analysis_mirrors_main_status(
        self, db_session: Session, admin_user: Usuario, pending_application,
    ):
        result = service.update_analysis(
            db_session, pending_application, admin_user.id,
            {"faturamento": "ok"}, PreAnalysisStatus.UNDER_REVIEW,
        )
        assert result.pre_analysis_status == PreAnalysisStatus.UNDER_REVIEW
        assert result.status == CreditStatus.UNDER_REVIEW
        assert result.analise_admin == {"faturamento": "ok"}

    def test_update_analysis_rejects_invalid_pre_analysis_move(
        self, db_session: Session, admin_user: Usuario, pending_application,
    ):
        with pytest.raises(InvalidStatusTransitionError):
            service.update_analysis(
                db_session, pending_application, admin_user.id, {},
                PreAnalysisStatus.SUBMITTED_TO_FINANCIAL,
            )

    def test_needs_clarification_keeps_main_status(
        self, db_session: Session, admin_user: Usuario, pending_application,
    ):
        result = service.update_analysis(
            db_session, pending_application, admin_user.id, {}, PreAnalysisStatus.NEEDS_CLARIFICATION,
        )
        assert result.pre_analysis_status == PreAnalysisStatus.NEEDS_CLARIFICATION
        assert result.status == CreditStatus.PENDING

    def test_submit_to_financial(self, db_session: Session, test_user: Usuario):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.PRE_APPROVED)
        result = service.submit_to_financial(db_session, solicitacao)
        assert result.status == CreditStatus.SUBMITTED_TO_FINANCIAL
        assert result.financial_status == FinancialStatus.PENDING_FINANCIAL
        assert result.enviado_financeira_em is not None
        assert "Enviado para Análise Final" in _titles(db_session, test_user)

    def test_submit_requires_pre_approval(self, db_session: Session, pending_application):
        with pytest.raises(InvalidStatusTransitionError):
            service.submit_to_financial(db_session, pending_application)

    def test_finalize_approved(self, db_session: Session, test_user: Usuario, approved_application):
        data = FinalizationRequest(
            limite_final=Decimal("45000"), prazos_finais="30,60",
            percentual_entrada=Decimal("20"), taxa_administrativa=Decimal("2.5"),
        )
        result = service.finalize(db_session, approved_application, data)

        assert result.status == CreditStatus.ADMIN_FINALIZED
        assert result.admin_status == AdminStatus.ADMIN_FINALIZED
        assert result.limite_final == Decimal("45000")
        assert result.percentual_entrada == Decimal("20")
        assert "Crédito Disponível" in _titles(db_session, test_user)

    def test_finalize_requires_approved(self, db_session: Session, pending_application):
        data = FinalizationRequest(limite_final=Decimal("1000"))
        with pytest.raises(InvalidStatusTransitionError):
            service.finalize(db_session, pending_application, data)


# =============================================================================
# Financeira
# =============================================================================

class TestFinanceiraActions:

    def test_approve_from_pre_approved(
        self, db_session: Session, test_user: Usuario, financeira_user: Usuario,
    ):
        solicitacao = make_application(
            db_session, test_user, status=CreditStatus.PRE_APPROVED, limite_credito=Decimal("60000"),
        )

        result = service.financial_approve(db_session, solicitacao, financeira_user.id)

        assert result.status == CreditStatus.APPROVED
        assert result.financial_status == FinancialStatus.APPROVED
        assert result.admin_status == AdminStatus.PENDING_ADMIN
        assert result.pre_analysis_status == PreAnalysisStatus.SUBMITTED_TO_FINANCIAL
        assert result.prazos_aprovados == "30,60,90,120"
        assert result.analisado_financeira_por == financeira_user.id
        assert "Crédito Aprovado" in _titles(db_session, test_user)

    def test_approve_requires_limit(self, db_session: Session, test_user: Usuario, financeira_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL)
        with pytest.raises(BusinessRuleError) as exc:
            service.financial_approve(db_session, solicitacao, financeira_user.id)
        assert exc.value.message == Messages.CREDIT_LIMIT_REQUIRED

    def test_approve_with_explicit_limit_and_terms(self, db_session: Session, test_user, financeira_user):
        solicitacao = make_application(
            db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL,
            financial_status=FinancialStatus.PENDING_FINANCIAL,
        )
        result = service.financial_approve(
            db_session, solicitacao, financeira_user.id, Decimal("30000"), "45,90", "Aprovado",
        )
        assert result.limite_credito == Decimal("30000")
        assert result.prazos_aprovados == "45,90"
        assert result.notas_financeiras == "Aprovado"

    def test_approve_refused_from_pending(self, db_session: Session, financeira_user, pending_application):
        with pytest.raises(InvalidStatusTransitionError):
            service.financial_approve(db_session, pending_application, financeira_user.id, Decimal("1000"))

    def test_reject(self, db_session: Session, test_user: Usuario, financeira_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL)
        result = service.financial_reject(db_session, solicitacao, financeira_user.id, "Risco alto")
        assert result.status == CreditStatus.REJECTED
        assert result.financial_status == FinancialStatus.REJECTED
        assert result.motivo_rejeicao == "Risco alto"

    def test_needs_documents_keeps_main_status(self, db_session: Session, test_user, financeira_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL)
        result = service.set_financial_status(
            db_session, solicitacao, financeira_user.id, FinancialStatusAction.NEEDS_DOCUMENTS,
            notas_financeiras="Enviar balanço 2024",
        )
        assert result.status == CreditStatus.SUBMITTED_TO_FINANCIAL
        assert result.financial_status == FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL
        assert result.notas_financeiras == "Enviar balanço 2024"

    def test_approve_after_needs_documents(self, db_session: Session, test_user, financeira_user):
        solicitacao = make_application(
            db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL,
            financial_status=FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL, limite_credito=Decimal("10000"),
        )
        result = service.set_financial_status(
            db_session, solicitacao, financeira_user.id, FinancialStatusAction.APPROVED,
        )
        assert result.status == CreditStatus.APPROVED

    def test_unknown_financial_action(self, db_session: Session, test_user, financeira_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL)
        with pytest.raises(BusinessRuleError):
            service.set_financial_status(db_session, solicitacao, financeira_user.id, "qualquer")

    def test_update_financial_data_ignores_other_fields(self, db_session: Session, test_user, financeira_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.SUBMITTED_TO_FINANCIAL)
        result = service.update_financial_data(db_session, solicitacao, financeira_user.id, {
            "limite_credito": Decimal("25000"),
            "status": CreditStatus.APPROVED,
        })
        assert result.limite_credito == Decimal("25000")
        assert result.status == CreditStatus.SUBMITTED_TO_FINANCIAL
        assert result.analisado_financeira_por == financeira_user.id

    def test_financial_scope(self, db_session: Session, test_user, pending_application):
        assert service.in_financial_scope(pending_application) is False
        pre = make_application(db_session, test_user, status=CreditStatus.PRE_APPROVED)
        assert service.in_financial_scope(pre) is True
