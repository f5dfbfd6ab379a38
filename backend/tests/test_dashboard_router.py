"""
Testes para o painel do importador.
"""
from decimal import Decimal

from fastapi.testclient import TestClient

from models import CreditStatus, ImportStatus

API = "/api/dashboard/importer"


class TestImporterDashboard:

    def test_empty(self, client: TestClient, auth_headers):
        data = client.get(API, headers=auth_headers).json()

        assert data["status_credito"] is None
        assert data["total_importacoes"] == 0
        assert data["proximo_pagamento"] is None

    def test_pending_credit_status(self, client: TestClient, auth_headers, pending_application):
        data = client.get(API, headers=auth_headers).json()
        assert data["status_credito"] == CreditStatus.PENDING
        assert Decimal(data["limite_credito"]) == Decimal("0")

    def test_with_credit_and_import(self, client: TestClient, auth_headers, approved_application):
        client.post(
            "/api/imports",
            json={"nome": "Máquinas", "valor_total": "10000.00", "solicitacao_credito_id": approved_application.id},
            headers=auth_headers,
        )
        client.post("/api/suppliers", json={"nome_empresa": "Foshan Machinery", "pais": "China"}, headers=auth_headers)

        data = client.get(API, headers=auth_headers).json()
        assert Decimal(data["limite_credito"]) == Decimal("50000")
        assert Decimal(data["credito_usado"]) == Decimal("10000")
        assert Decimal(data["credito_disponivel"]) == Decimal("40000")
        assert data["importacoes_ativas"] == 1
        assert data["importacoes_por_status"] == {ImportStatus.PLANEJAMENTO: 1}
        assert data["total_fornecedores"] == 1
        assert data["pagamentos_pendentes"] == 4
        assert Decimal(data["valor_pagamentos_pendentes"]) == Decimal("10000")
        assert Decimal(data["proximo_pagamento"]["valor"]) == Decimal("3000")

    def test_only_importers(self, client: TestClient, admin_auth_headers):
        assert client.get(API, headers=admin_auth_headers).status_code == 403
