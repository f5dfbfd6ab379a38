from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from schemas.base import PaginatedResponse


class NotificacaoResponse(BaseModel):
    id: int
    user_id: int
    titulo: str
    mensagem: str
    tipo: str
    prioridade: str
    link: Optional[str] = None
    lida: bool
    lida_em: Optional[datetime] = None
    referencia_tipo: Optional[str] = None
    referencia_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class NotificacaoCountResponse(BaseModel):
    count: int


class PaginatedNotificacaoResponse(PaginatedResponse[NotificacaoResponse]):
    pass
