"""
Testes para o router do despachante aduaneiro.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from models import ImportStatus

API = "/api/customs-broker"


@pytest.fixture
def assigned(client: TestClient, auth_headers, admin_auth_headers, broker_user) -> dict:
    importacao = client.post(
        "/api/imports", json={"nome": "Autopeças", "valor_total": "2500.00"}, headers=auth_headers,
    ).json()
    client.put(
        f"/api/admin/imports/{importacao['id']}/customs-broker",
        json={"despachante_id": broker_user.id},
        headers=admin_auth_headers,
    )
    return importacao


class TestCustomsBroker:

    def test_only_brokers(self, client: TestClient, auth_headers):
        assert client.get(f"{API}/imports", headers=auth_headers).status_code == 403

    def test_lists_assigned(self, client: TestClient, broker_headers, auth_headers, assigned):
        client.post("/api/imports", json={"nome": "Não atribuída", "valor_total": "10"}, headers=auth_headers)

        data = client.get(f"{API}/imports", headers=broker_headers).json()
        assert [item["id"] for item in data["items"]] == [assigned["id"]]

    def test_reads_assigned_import(self, client: TestClient, broker_headers, assigned):
        assert client.get(f"/api/imports/{assigned['id']}", headers=broker_headers).status_code == 200
        assert client.get(f"/api/imports/{assigned['id']}/pipeline", headers=broker_headers).status_code == 200

    def test_cannot_change_status(self, client: TestClient, broker_headers, assigned):
        response = client.patch(
            f"/api/imports/{assigned['id']}/status", json={"status": "producao"}, headers=broker_headers,
        )
        assert response.status_code == 403

    def test_unassigned_import_forbidden(self, client: TestClient, broker_headers, auth_headers):
        outra = client.post("/api/imports", json={"nome": "Outra", "valor_total": "10"}, headers=auth_headers).json()
        assert client.get(f"/api/imports/{outra['id']}", headers=broker_headers).status_code == 403

    def test_dashboard(self, client: TestClient, broker_headers, admin_auth_headers, assigned):
        client.patch(
            f"/api/admin/imports/{assigned['id']}/status",
            json={"status": ImportStatus.DESEMBARACO},
            headers=admin_auth_headers,
        )

        data = client.get(f"{API}/dashboard", headers=broker_headers).json()
        assert data["importacoes_atribuidas"] == 1
        assert data["em_desembaraco"] == 1
        assert Decimal(data["valor_total"]) == Decimal("2500")
