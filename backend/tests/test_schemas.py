"""
Testes de validação dos schemas Pydantic.
"""
from decimal import Decimal

import pytest
from pydantic import ValidationError

from schemas import ImportacaoCreate, UsuarioCreate
from schemas.credito import CreditApplicationCreate, FinancialApprovalRequest
from schemas.importacao import ImportacaoUpdate, ProdutoUpdate
from schemas.pagamento import PaymentPay
from schemas.usuario import AdminUsuarioCreate


def _usuario(**overrides):
    data = {
        "email": "compras@importadora.com.br",
        "nome": "Maria Souza",
        "razao_social": "Importadora Souza Ltda",
        "cnpj": "11.222.333/0001-81",
        "senha": "Senha123",
        "confirmacao_senha": "Senha123",
    }
    data.update(overrides)
    return data


class TestUsuarioSchemas:

    def test_cnpj_normalized(self):
        assert UsuarioCreate(**_usuario()).cnpj == "11222333000181"

    def test_invalid_cnpj(self):
        with pytest.raises(ValidationError):
            UsuarioCreate(**_usuario(cnpj="11.222.333/0001-80"))

    def test_passwords_must_match(self):
        with pytest.raises(ValidationError):
            UsuarioCreate(**_usuario(confirmacao_senha="Outra123"))

    def test_admin_create_role(self):
        data = _usuario(role="customs_broker")
        data.pop("confirmacao_senha")
        assert AdminUsuarioCreate(**data).role == "customs_broker"
        with pytest.raises(ValidationError):
            AdminUsuarioCreate(**{**data, "role": "auditor"})


class TestCreditSchemas:

    def test_terms_normalized(self):
        dados = CreditApplicationCreate(valor_solicitado=Decimal("1000"), prazos_solicitados=" 30, 60 ,90")
        assert dados.prazos_solicitados == "30,60,90"

    @pytest.mark.parametrize("prazos", ["30;60", "0,30", "trinta", ","])
    def test_invalid_terms(self, prazos):
        with pytest.raises(ValidationError):
            CreditApplicationCreate(valor_solicitado=Decimal("1000"), prazos_solicitados=prazos)

    def test_financial_approval_defaults(self):
        dados = FinancialApprovalRequest()
        assert dados.limite_credito is None
        assert dados.prazos_aprovados == "30,60,90,120"


class TestImportSchemas:

    def test_defaults(self):
        dados = ImportacaoCreate(nome="Eletrônicos")
        assert (dados.modal, dados.incoterm, dados.tipo_carga) == ("maritimo", "FOB", "FCL")
        assert dados.produtos == []

    @pytest.mark.parametrize("campo, valor", [("modal", "ferroviario"), ("incoterm", "XYZ"), ("prioridade", "máxima")])
    def test_invalid_choices(self, campo, valor):
        with pytest.raises(ValidationError):
            ImportacaoCreate(nome="Eletrônicos", **{campo: valor})

    def test_update_omitted_vs_null(self):
        assert ProdutoUpdate(nome="Placa").model_dump(exclude_unset=True) == {"nome": "Placa"}
        assert ImportacaoUpdate(observacoes=None).observacoes is None
        with pytest.raises(ValidationError):
            ProdutoUpdate(quantidade=None)
        with pytest.raises(ValidationError):
            ImportacaoUpdate(nome=None)

    def test_product_quantity_positive(self):
        with pytest.raises(ValidationError):
            ImportacaoCreate(nome="Eletrônicos", produtos=[{"nome": "Placa", "quantidade": 0, "preco_unitario": "1"}])


class TestPaymentSchemas:

    def test_payment_method(self):
        assert PaymentPay(metodo_pagamento="wire_transfer").metodo_pagamento == "wire_transfer"
        with pytest.raises(ValidationError):
            PaymentPay(metodo_pagamento="cheque")
