"""
Testes para o router da financeira.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from config import Messages
from conftest import make_application
from models import AuditLog, CreditStatus, FinancialStatus

API = "/api/financeira"


@pytest.fixture
def pre_approved(db_session, test_user):
    return make_application(
        db_session, test_user,
        status=CreditStatus.PRE_APPROVED,
        limite_credito=Decimal("40000.00"),
    )


class TestScope:

    def test_only_financeira(self, client: TestClient, admin_auth_headers, auth_headers):
        assert client.get(f"{API}/credit/applications", headers=admin_auth_headers).status_code == 403
        assert client.get(f"{API}/credit/applications", headers=auth_headers).status_code == 403

    def test_lists_from_pre_approval(self, client: TestClient, financeira_headers, pending_application, pre_approved):
        data = client.get(f"{API}/credit/applications", headers=financeira_headers).json()
        assert [item["id"] for item in data["items"]] == [pre_approved.id]

    def test_pending_out_of_scope(self, client: TestClient, financeira_headers, pending_application):
        response = client.get(f"{API}/credit/applications/{pending_application.id}", headers=financeira_headers)
        assert response.status_code == 403
        assert response.json()["detail"] == Messages.CREDIT_NOT_IN_FINANCIAL_SCOPE


class TestDecision:

    def test_approve_pre_approved(self, client: TestClient, financeira_headers, pre_approved, db_session):
        response = client.post(
            f"{API}/credit/applications/{pre_approved.id}/approve",
            json={"prazos_aprovados": "30,60,90", "notas_financeiras": "Garantias ok"},
            headers=financeira_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == CreditStatus.APPROVED
        assert data["financial_status"] == FinancialStatus.APPROVED
        assert data["admin_status"] == "pending_admin"
        assert Decimal(data["limite_credito"]) == Decimal("40000")
        assert data["aprovado_em"] is not None
        assert db_session.query(AuditLog).filter(AuditLog.action == "credit_approved").count() == 1

    def test_approve_requires_limit(self, client: TestClient, financeira_headers, db_session, test_user):
        solicitacao = make_application(db_session, test_user, status=CreditStatus.PRE_APPROVED)
        response = client.post(
            f"{API}/credit/applications/{solicitacao.id}/approve", json={}, headers=financeira_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.CREDIT_LIMIT_REQUIRED

    def test_reject(self, client: TestClient, financeira_headers, pre_approved):
        response = client.post(
            f"{API}/credit/applications/{pre_approved.id}/reject",
            json={"motivo": "Endividamento alto"},
            headers=financeira_headers,
        )
        data = response.json()
        assert data["status"] == CreditStatus.REJECTED
        assert data["financial_status"] == FinancialStatus.REJECTED

    def test_needs_documents(self, client: TestClient, financeira_headers, pre_approved):
        response = client.patch(
            f"{API}/credit/applications/{pre_approved.id}/financial-status",
            json={"status": "needs_documents_financial", "notas_financeiras": "Enviar balanço 2024"},
            headers=financeira_headers,
        )
        data = response.json()
        assert data["status"] == CreditStatus.SUBMITTED_TO_FINANCIAL
        assert data["financial_status"] == FinancialStatus.NEEDS_DOCUMENTS_FINANCIAL

    def test_status_action_approve(self, client: TestClient, financeira_headers, pre_approved):
        response = client.patch(
            f"{API}/credit/applications/{pre_approved.id}/financial-status",
            json={"status": "approved_financial", "limite_credito": "35000"},
            headers=financeira_headers,
        )
        assert response.json()["status"] == CreditStatus.APPROVED
        assert Decimal(response.json()["limite_credito"]) == Decimal("35000")

    def test_invalid_status_action(self, client: TestClient, financeira_headers, pre_approved):
        response = client.patch(
            f"{API}/credit/applications/{pre_approved.id}/financial-status",
            json={"status": "talvez"},
            headers=financeira_headers,
        )
        assert response.status_code == 422

    def test_update_financial_data(self, client: TestClient, financeira_headers, pre_approved, financeira_user):
        response = client.put(
            f"{API}/credit/applications/{pre_approved.id}/financial-data",
            json={"limite_credito": "45000", "prazos_aprovados": "30, 60"},
            headers=financeira_headers,
        )
        data = response.json()
        assert data["status"] == CreditStatus.PRE_APPROVED
        assert Decimal(data["limite_credito"]) == Decimal("45000")
        assert data["prazos_aprovados"] == "30,60"


class TestOverview:

    def test_dashboard(self, client: TestClient, financeira_headers, pre_approved, approved_application):
        data = client.get(f"{API}/dashboard", headers=financeira_headers).json()
        assert data["aprovadas"] == 1
        assert Decimal(data["volume_solicitado"]) == Decimal("200000")

    def test_imports_and_suppliers(self, client: TestClient, financeira_headers, auth_headers):
        client.post("/api/imports", json={"nome": "Têxteis", "valor_total": "800"}, headers=auth_headers)
        client.post("/api/suppliers", json={"nome_empresa": "Dhaka Textiles", "pais": "Bangladesh"},
                    headers=auth_headers)

        assert client.get(f"{API}/imports", headers=financeira_headers).json()["total"] == 1
        assert client.get(f"{API}/suppliers", headers=financeira_headers).json()["total"] == 1

    def test_credit_bureau_not_configured(self, client: TestClient, financeira_headers):
        response = client.get(f"{API}/credit-bureau/11222333000181", headers=financeira_headers)
        assert response.status_code == 503
