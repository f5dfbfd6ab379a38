"""
Testes para o router de pedidos de documentos.
"""
import pytest
from fastapi.testclient import TestClient

from config import Messages
from models import AuditLog, Notificacao, SolicitacaoCredito

API = "/api/document-requests"
PDF = b"%PDF-1.4\n" + b"0" * (50 * 1024)


@pytest.fixture
def pedido(client: TestClient, admin_auth_headers, pending_application) -> dict:
    response = client.post(
        API,
        json={
            "solicitacao_credito_id": pending_application.id,
            "tipo_documento": "bank_statements",
            "nome_documento": "Extrato bancário dos últimos 3 meses",
        },
        headers=admin_auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateRequest:

    def test_create_notifies_importer(self, pedido, db_session, test_user):
        assert pedido["status"] == "pending"
        assert pedido["solicitado_de"] == test_user.id

        notificacao = db_session.query(Notificacao).filter(Notificacao.user_id == test_user.id).one()
        assert notificacao.titulo == "Documento Solicitado"
        assert db_session.query(AuditLog).filter(AuditLog.action == "document_requested").count() == 1

    def test_importer_cannot_request(self, client: TestClient, auth_headers, pending_application):
        response = client.post(
            API,
            json={"solicitacao_credito_id": pending_application.id, "tipo_documento": "bank_statements",
                  "nome_documento": "Extrato"},
            headers=auth_headers,
        )
        assert response.status_code == 403

    def test_unknown_type(self, client: TestClient, financeira_headers, pending_application):
        response = client.post(
            API,
            json={"solicitacao_credito_id": pending_application.id, "tipo_documento": "selfie",
                  "nome_documento": "Selfie"},
            headers=financeira_headers,
        )
        assert response.status_code == 400

    def test_unknown_application(self, client: TestClient, admin_auth_headers):
        response = client.post(
            API,
            json={"solicitacao_credito_id": 999, "tipo_documento": "bank_statements", "nome_documento": "Extrato"},
            headers=admin_auth_headers,
        )
        assert response.status_code == 404


class TestListAndRead:

    def test_recipient_lists(self, client: TestClient, auth_headers, other_headers, pedido):
        assert client.get(API, headers=auth_headers).json()["total"] == 1
        assert client.get(API, headers=other_headers).json()["total"] == 0

    def test_other_importer_forbidden(self, client: TestClient, other_headers, pedido):
        assert client.get(f"{API}/{pedido['id']}", headers=other_headers).status_code == 403

    def test_staff_filters_by_application(self, client: TestClient, financeira_headers, pedido, pending_application):
        data = client.get(f"{API}?solicitacao_credito_id={pending_application.id}", headers=financeira_headers).json()
        assert data["total"] == 1


class TestUpload:

    def test_upload(self, client: TestClient, auth_headers, pedido, db_session, admin_user, pending_application):
        response = client.post(
            f"{API}/{pedido['id']}/upload",
            files={"file": ("extrato_banco.pdf", PDF, "application/pdf")},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "uploaded"
        assert data["nome_arquivo"] == "extrato_banco.pdf"

        aviso = db_session.query(Notificacao).filter(Notificacao.user_id == admin_user.id).one()
        assert aviso.titulo == "Documento Enviado"

        solicitacao = db_session.get(SolicitacaoCredito, pending_application.id)
        db_session.refresh(solicitacao)
        assert solicitacao.documentos["bank_statements"][0]["arquivo"] == "extrato_banco.pdf"

    def test_invalid_file(self, client: TestClient, auth_headers, pedido):
        response = client.post(
            f"{API}/{pedido['id']}/upload",
            files={"file": ("extrato_banco.exe", PDF, "application/octet-stream")},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"]["valido"] is False

    def test_upload_twice(self, client: TestClient, auth_headers, pedido):
        url = f"{API}/{pedido['id']}/upload"
        client.post(url, files={"file": ("extrato_banco.pdf", PDF, "application/pdf")}, headers=auth_headers)

        response = client.post(url, files={"file": ("extrato_banco.pdf", PDF, "application/pdf")}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == Messages.DOCUMENT_REQUEST_CLOSED

    def test_only_recipient_uploads(self, client: TestClient, other_headers, pedido):
        response = client.post(
            f"{API}/{pedido['id']}/upload",
            files={"file": ("extrato_banco.pdf", PDF, "application/pdf")},
            headers=other_headers,
        )
        assert response.status_code == 403


class TestCancel:

    def test_requester_cancels(self, client: TestClient, admin_auth_headers, pedido):
        response = client.delete(f"{API}/{pedido['id']}", headers=admin_auth_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_recipient_cannot_cancel(self, client: TestClient, auth_headers, pedido):
        assert client.delete(f"{API}/{pedido['id']}", headers=auth_headers).status_code == 403
