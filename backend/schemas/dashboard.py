from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ProximoPagamento(BaseModel):
    id: int
    importacao_id: int
    valor: Decimal
    vencimento: datetime
    status: str


class ImporterDashboardResponse(BaseModel):
    limite_credito: Decimal = Decimal("0")
    credito_usado: Decimal = Decimal("0")
    credito_disponivel: Decimal = Decimal("0")
    status_credito: Optional[str] = None
    total_importacoes: int = 0
    importacoes_ativas: int = 0
    importacoes_por_status: Dict[str, int] = Field(default_factory=dict)
    valor_total_importado: Decimal = Decimal("0")
    total_fornecedores: int = 0
    pagamentos_pendentes: int = 0
    valor_pagamentos_pendentes: Decimal = Decimal("0")
    proximo_pagamento: Optional[ProximoPagamento] = None


class AdminDashboardResponse(BaseModel):
    usuarios_por_papel: Dict[str, int] = Field(default_factory=dict)
    solicitacoes_por_status: Dict[str, int] = Field(default_factory=dict)
    importacoes_por_status: Dict[str, int] = Field(default_factory=dict)
    volume_solicitado: Decimal = Decimal("0")
    volume_aprovado: Decimal = Decimal("0")
    volume_importacoes: Decimal = Decimal("0")
    pagamentos_vencidos: int = 0


class FinanceiraDashboardResponse(BaseModel):
    aguardando_analise: int = 0
    aprovadas: int = 0
    rejeitadas: int = 0
    volume_solicitado: Decimal = Decimal("0")
    limites_aprovados: Decimal = Decimal("0")
    importacoes_financiadas: int = 0


class CustomsBrokerDashboardResponse(BaseModel):
    importacoes_atribuidas: int = 0
    em_desembaraco: int = 0
    concluidas: int = 0
    valor_total: Decimal = Decimal("0")
    importacoes_por_status: Dict[str, int] = Field(default_factory=dict)
