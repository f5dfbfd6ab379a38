from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from schemas.base import PaginatedResponse


class AuditLogResponse(BaseModel):
    id: int
    user_id: int
    action: str
    resource_type: str
    resource_id: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedAuditLogResponse(PaginatedResponse[AuditLogResponse]):
    pass


class CreditBureauResponse(BaseModel):
    """Resultado da consulta ao bureau com a análise de risco."""
    cnpj: str
    razao_social: Optional[str] = None
    score: Optional[int] = None
    categoria_score: str
    nivel_risco: str
    pontos_risco: int
    protestos: int = 0
    acoes_judiciais: int = 0
    recuperacoes_judiciais: int = 0
    dados: Dict[str, Any] = Field(default_factory=dict)
