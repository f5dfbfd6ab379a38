"""
Testes para o router de administração.

Usuários, análise de crédito, importações, taxas, pagamentos, bureau de
crédito e auditoria.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from config import Messages
from exceptions import CreditBureauError
from models import AuditLog, CreditStatus, PaymentStatus, PreAnalysisStatus, UserRole, Usuario

API = "/api/admin"
PDF = b"%PDF-1.4\n" + b"0" * (20 * 1024)

DOSSIE = {
    "retorno": {
        "entidadeJuridica": {
            "dadosCadastrais": {"razaoSocial": "IMPORTADORA EXEMPLO LTDA", "situacaoCadastral": "ATIVA"},
            "scoreEntidades": {"entidadeJuridica": {"score": 820}},
            "pendenciaFinanceira": {"protestos": [], "acoesJudiciais": [], "recuperacoesJudiciaisFalencia": []},
        },
    },
}


class FakeBureauClient:
    def __init__(self, dossie=None, error=None):
        self.dossie = dossie
        self.error = error
        self.calls = []

    async def consultar_dossie(self, cnpj: str):
        self.calls.append(cnpj)
        if self.error:
            raise self.error
        return self.dossie


def _create_import(client: TestClient, headers: dict, **overrides) -> dict:
    payload = {"nome": "Componentes", "valor_total": "1000.00"}
    payload.update(overrides)
    response = client.post("/api/imports", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAdminAccess:

    def test_requires_auth(self, client: TestClient):
        assert client.get(f"{API}/users").status_code == 401

    @pytest.mark.parametrize("headers_fixture", ["auth_headers", "financeira_headers", "broker_headers"])
    def test_non_admin_forbidden(self, client: TestClient, request, headers_fixture):
        headers = request.getfixturevalue(headers_fixture)
        assert client.get(f"{API}/users", headers=headers).status_code == 403


class TestUsers:

    def test_list_with_role_filter(self, client: TestClient, admin_auth_headers, test_user, financeira_user):
        data = client.get(f"{API}/users?role={UserRole.FINANCEIRA}", headers=admin_auth_headers).json()
        assert [u["email"] for u in data["items"]] == [financeira_user.email]

    def test_create_user(self, client: TestClient, admin_auth_headers, admin_user, db_session):
        response = client.post(
            f"{API}/users",
            json={
                "email": "despachante2@exemplo.com",
                "nome": "João Despachante",
                "razao_social": "Despachos Aduaneiros LTDA",
                "cnpj": "11.222.333/0001-81",
                "senha": "Senha123",
                "role": UserRole.CUSTOMS_BROKER,
            },
            headers=admin_auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["role"] == UserRole.CUSTOMS_BROKER
        usuario = db_session.query(Usuario).filter(Usuario.email == "despachante2@exemplo.com").one()
        assert usuario.created_by == admin_user.id
        assert db_session.query(AuditLog).filter(AuditLog.action == "user_created").count() == 1

    def test_create_user_weak_password(self, client: TestClient, admin_auth_headers):
        response = client.post(
            f"{API}/users",
            json={"email": "x@exemplo.com", "nome": "Xis", "razao_social": "Xis LTDA",
                  "cnpj": "11222333000181", "senha": "fraca"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 400

    def test_create_user_duplicate_email(self, client: TestClient, admin_auth_headers, test_user):
        response = client.post(
            f"{API}/users",
            json={"email": test_user.email, "nome": "Xis", "razao_social": "Xis LTDA",
                  "cnpj": "11222333000181", "senha": "Senha123"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.EMAIL_EXISTS

    def test_change_role(self, client: TestClient, admin_auth_headers, test_user):
        response = client.patch(
            f"{API}/users/{test_user.id}/role", json={"role": UserRole.FINANCEIRA}, headers=admin_auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["role"] == UserRole.FINANCEIRA

    def test_cannot_change_own_role(self, client: TestClient, admin_auth_headers, admin_user):
        response = client.patch(
            f"{API}/users/{admin_user.id}/role", json={"role": UserRole.IMPORTER}, headers=admin_auth_headers,
        )
        assert response.status_code == 400

    def test_invalid_role(self, client: TestClient, admin_auth_headers, test_user):
        response = client.patch(
            f"{API}/users/{test_user.id}/role", json={"role": "superusuario"}, headers=admin_auth_headers,
        )
        assert response.status_code == 422

    def test_deactivate(self, client: TestClient, admin_auth_headers, test_user):
        response = client.post(f"{API}/users/{test_user.id}/deactivate", headers=admin_auth_headers)
        assert response.json()["sucesso"] is True

        login = client.post("/api/auth/login", json={"email": test_user.email, "senha": "Senha123"})
        assert login.status_code == 403

    def test_cannot_deactivate_self(self, client: TestClient, admin_auth_headers, admin_user):
        response = client.post(f"{API}/users/{admin_user.id}/deactivate", headers=admin_auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.CANNOT_DEACTIVATE_SELF

    def test_unknown_user(self, client: TestClient, admin_auth_headers):
        response = client.post(f"{API}/users/9999/deactivate", headers=admin_auth_headers)
        assert response.status_code == 404


class TestCreditActions:

    def test_list_all(self, client: TestClient, admin_auth_headers, pending_application, approved_application):
        data = client.get(f"{API}/credit/applications", headers=admin_auth_headers).json()
        assert data["total"] == 2
        pendentes = client.get(f"{API}/credit/applications?status=pending", headers=admin_auth_headers).json()
        assert pendentes["total"] == 1

    def test_pre_approve(self, client: TestClient, admin_auth_headers, pending_application, db_session):
        response = client.post(
            f"{API}/credit/applications/{pending_application.id}/approve",
            json={"limite_credito": "80000", "prazos_aprovados": "30,60", "notas": "Bom histórico"},
            headers=admin_auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == CreditStatus.PRE_APPROVED
        assert data["pre_analysis_status"] == PreAnalysisStatus.PRE_APPROVED
        assert Decimal(data["limite_credito"]) == Decimal("80000")
        assert data["analise_admin"]["notas"] == "Bom histórico"
        assert db_session.query(AuditLog).filter(AuditLog.action == "credit_pre_approved").count() == 1

    def test_reject(self, client: TestClient, admin_auth_headers, pending_application):
        response = client.post(
            f"{API}/credit/applications/{pending_application.id}/reject",
            json={"motivo": "Documentação inconsistente"},
            headers=admin_auth_headers,
        )
        assert response.json()["status"] == CreditStatus.REJECTED
        assert response.json()["motivo_rejeicao"] == "Documentação inconsistente"

    def test_reject_requires_reason(self, client: TestClient, admin_auth_headers, pending_application):
        response = client.post(
            f"{API}/credit/applications/{pending_application.id}/reject",
            json={"motivo": "x"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 422

    def test_invalid_transition(self, client: TestClient, admin_auth_headers, approved_application):
        response = client.post(
            f"{API}/credit/applications/{approved_application.id}/approve", json={}, headers=admin_auth_headers,
        )
        assert response.status_code == 400

    def test_analysis_mirrors_main_status(self, client: TestClient, admin_auth_headers, pending_application):
        response = client.put(
            f"{API}/credit/applications/{pending_application.id}/analysis",
            json={"analise": {"faturamento": "ok"}, "pre_analysis_status": PreAnalysisStatus.UNDER_REVIEW},
            headers=admin_auth_headers,
        )

        data = response.json()
        assert data["status"] == CreditStatus.UNDER_REVIEW
        assert data["analise_admin"]["faturamento"] == "ok"

    def test_submit_then_finalize(
        self, client: TestClient, admin_auth_headers, financeira_headers, pending_application,
    ):
        url = f"{API}/credit/applications/{pending_application.id}"
        client.post(f"{url}/approve", json={"limite_credito": "80000"}, headers=admin_auth_headers)

        submitted = client.post(f"{url}/submit-financial", headers=admin_auth_headers).json()
        assert submitted["status"] == CreditStatus.SUBMITTED_TO_FINANCIAL
        assert submitted["financial_status"] == "pending_financial"

        early = client.post(f"{url}/finalize", json={"limite_final": "70000"}, headers=admin_auth_headers)
        assert early.status_code == 400

        client.post(
            f"/api/financeira/credit/applications/{pending_application.id}/approve",
            json={}, headers=financeira_headers,
        )
        finalized = client.post(
            f"{url}/finalize",
            json={"limite_final": "70000", "prazos_finais": "30,60", "percentual_entrada": "20",
                  "taxa_administrativa": "1.5"},
            headers=admin_auth_headers,
        )
        assert finalized.status_code == 200
        data = finalized.json()
        assert data["status"] == CreditStatus.ADMIN_FINALIZED
        assert data["admin_status"] == "admin_finalized"
        assert Decimal(data["limite_final"]) == Decimal("70000")


class TestImports:

    def test_list_and_filter(self, client: TestClient, admin_auth_headers, auth_headers, other_headers, test_user):
        _create_import(client, auth_headers)
        _create_import(client, other_headers)

        assert client.get(f"{API}/imports", headers=admin_auth_headers).json()["total"] == 2
        data = client.get(f"{API}/imports?user_id={test_user.id}", headers=admin_auth_headers).json()
        assert data["total"] == 1

    def test_change_status(self, client: TestClient, admin_auth_headers, auth_headers, db_session):
        importacao = _create_import(client, auth_headers)
        response = client.patch(
            f"{API}/imports/{importacao['id']}/status", json={"status": "producao"}, headers=admin_auth_headers,
        )
        assert response.json()["status"] == "producao"
        assert db_session.query(AuditLog).filter(AuditLog.action == "import_status_changed").count() == 1

    def test_assign_broker(self, client: TestClient, admin_auth_headers, auth_headers, broker_user, test_user):
        importacao = _create_import(client, auth_headers)
        url = f"{API}/imports/{importacao['id']}/customs-broker"

        response = client.put(url, json={"despachante_id": broker_user.id}, headers=admin_auth_headers)
        assert response.json()["despachante_id"] == broker_user.id

        invalid = client.put(url, json={"despachante_id": test_user.id}, headers=admin_auth_headers)
        assert invalid.status_code == 400

        removed = client.put(url, json={"despachante_id": None}, headers=admin_auth_headers)
        assert removed.json()["despachante_id"] is None

    def test_review_document(self, client: TestClient, admin_auth_headers, auth_headers):
        importacao = _create_import(client, auth_headers)
        documento = client.post(
            f"/api/imports/{importacao['id']}/documents",
            data={"tipo": "commercial_invoice"},
            files={"file": ("invoice.pdf", PDF, "application/pdf")},
            headers=auth_headers,
        ).json()

        response = client.patch(
            f"{API}/imports/{importacao['id']}/documents/{documento['id']}",
            json={"status": "validated", "notas": "Conferido"},
            headers=admin_auth_headers,
        )
        assert response.json()["status"] == "validated"
        assert response.json()["notas"] == "Conferido"

    def test_review_missing_document(self, client: TestClient, admin_auth_headers, auth_headers):
        importacao = _create_import(client, auth_headers)
        response = client.patch(
            f"{API}/imports/{importacao['id']}/documents/999", json={"status": "validated"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 404

    def test_list_suppliers(self, client: TestClient, admin_auth_headers, auth_headers):
        client.post("/api/suppliers", json={"nome_empresa": "Shenzhen Parts", "pais": "China"}, headers=auth_headers)
        assert client.get(f"{API}/suppliers", headers=admin_auth_headers).json()["total"] == 1


class TestAdminFees:

    def test_set_and_get(self, client: TestClient, admin_auth_headers, test_user):
        first = client.post(
            f"{API}/admin-fees", json={"user_id": test_user.id, "percentual": "1.5"}, headers=admin_auth_headers,
        )
        assert first.status_code == 201
        client.post(f"{API}/admin-fees", json={"user_id": test_user.id, "percentual": "2"}, headers=admin_auth_headers)

        atual = client.get(f"{API}/admin-fees/{test_user.id}", headers=admin_auth_headers).json()
        assert Decimal(atual["percentual"]) == Decimal("2")
        assert atual["ativo"] is True

    def test_fee_only_for_importers(self, client: TestClient, admin_auth_headers, financeira_user):
        response = client.post(
            f"{API}/admin-fees", json={"user_id": financeira_user.id, "percentual": "1"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 400

    def test_no_fee(self, client: TestClient, admin_auth_headers, test_user):
        assert client.get(f"{API}/admin-fees/{test_user.id}", headers=admin_auth_headers).status_code == 404

    def test_fee_reflected_in_simulation(self, client: TestClient, admin_auth_headers, auth_headers,
                                         test_user, approved_application):
        client.post(f"{API}/admin-fees", json={"user_id": test_user.id, "percentual": "2"}, headers=admin_auth_headers)
        data = client.get(
            f"/api/credit/applications/{approved_application.id}/admin-fee?valor=10000", headers=auth_headers,
        ).json()
        assert Decimal(data["valor_taxa"]) == Decimal("140")


class TestPayments:

    @pytest.fixture
    def paid_installment(self, client: TestClient, auth_headers, approved_application) -> dict:
        importacao = _create_import(client, auth_headers, solicitacao_credito_id=approved_application.id)
        pagamentos = client.get(f"/api/imports/{importacao['id']}/payments", headers=auth_headers).json()
        return client.post(
            f"/api/payment-schedules/{pagamentos[0]['id']}/pay",
            json={"metodo_pagamento": "pix"}, headers=auth_headers,
        ).json()

    def test_list(self, client: TestClient, admin_auth_headers, paid_installment):
        data = client.get(f"{API}/payments?status={PaymentStatus.PAID}", headers=admin_auth_headers).json()
        assert [p["id"] for p in data["items"]] == [paid_installment["id"]]

    def test_confirm(self, client: TestClient, admin_auth_headers, admin_user, paid_installment):
        response = client.post(f"{API}/payments/{paid_installment['id']}/confirm", headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json()["status"] == PaymentStatus.CONFIRMED
        assert response.json()["confirmado_por"] == admin_user.id

    def test_reject(self, client: TestClient, admin_auth_headers, paid_installment):
        response = client.post(
            f"{API}/payments/{paid_installment['id']}/reject",
            json={"motivo": "Comprovante ilegível"},
            headers=admin_auth_headers,
        )
        assert response.json()["status"] == PaymentStatus.REJECTED
        assert response.json()["motivo_rejeicao"] == "Comprovante ilegível"

    def test_confirm_unpaid(self, client: TestClient, admin_auth_headers, auth_headers, approved_application):
        importacao = _create_import(client, auth_headers, solicitacao_credito_id=approved_application.id)
        pagamentos = client.get(f"/api/imports/{importacao['id']}/payments", headers=auth_headers).json()

        response = client.post(f"{API}/payments/{pagamentos[1]['id']}/confirm", headers=admin_auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.PAYMENT_NOT_PAID


class TestDashboardAndAudit:

    def test_dashboard(self, client: TestClient, admin_auth_headers, test_user, pending_application):
        data = client.get(f"{API}/dashboard", headers=admin_auth_headers).json()
        assert data["usuarios_por_papel"][UserRole.IMPORTER] == 1
        assert data["solicitacoes_por_status"] == {CreditStatus.PENDING: 1}
        assert Decimal(data["volume_solicitado"]) == Decimal("100000")

    def test_audit_logs_filter(self, client: TestClient, admin_auth_headers, pending_application):
        client.post(
            f"{API}/credit/applications/{pending_application.id}/reject",
            json={"motivo": "Sem faturamento"}, headers=admin_auth_headers,
        )
        data = client.get(f"{API}/audit-logs?action=credit_rejected", headers=admin_auth_headers).json()
        assert data["total"] == 1
        assert data["items"][0]["details"]["motivo"] == "Sem faturamento"


class TestCreditBureau:

    def test_lookup(self, client: TestClient, admin_auth_headers, isolated_services, db_session):
        fake = FakeBureauClient(dossie=DOSSIE)
        isolated_services.set_bureau_client(fake)

        response = client.get(f"{API}/credit-bureau/11.222.333-0001.81", headers=admin_auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["cnpj"] == "11222333000181"
        assert data["score"] == 820
        assert data["nivel_risco"] == "BAIXO"
        assert fake.calls == ["11222333000181"]
        assert db_session.query(AuditLog).filter(AuditLog.action == "credit_bureau_query").count() == 1

    def test_invalid_cnpj(self, client: TestClient, admin_auth_headers, isolated_services):
        isolated_services.set_bureau_client(FakeBureauClient(dossie=DOSSIE))
        response = client.get(f"{API}/credit-bureau/11222333000100", headers=admin_auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.INVALID_CNPJ

    def test_not_configured(self, client: TestClient, admin_auth_headers):
        response = client.get(f"{API}/credit-bureau/11222333000181", headers=admin_auth_headers)
        assert response.status_code == 503

    def test_bureau_failure(self, client: TestClient, admin_auth_headers, isolated_services):
        isolated_services.set_bureau_client(FakeBureauClient(error=CreditBureauError("HTTP 500")))
        response = client.get(f"{API}/credit-bureau/11222333000181", headers=admin_auth_headers)
        assert response.status_code == 502
