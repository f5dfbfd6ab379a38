"""
Router para notificações in-app.

Endpoints:
    GET    /notifications                 - Listar notificações (paginado)
    GET    /notifications/unread-count    - Contagem de não lidas
    POST   /notifications/read-all        - Marcar todas como lidas
    PATCH  /notifications/{id}/read       - Marcar uma como lida
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import get_current_active_user
from config import Messages
from database import get_db
from models.usuario import Usuario
from repositories.notificacao_repository import notificacao_repository
from routers.base import AuthenticatedRouter
from schemas import (
    Mensagem,
    NotificacaoCountResponse,
    NotificacaoResponse,
    PaginatedNotificacaoResponse,
)
from utils.pagination import PaginationParams, paginate_query

router = AuthenticatedRouter(prefix="/notifications", tags=["Notificações"])


@router.get("/unread-count", response_model=NotificacaoCountResponse)
def count_unread(
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    count = notificacao_repository.count_nao_lidas(db, current_user.id)
    return NotificacaoCountResponse(count=count)


@router.post("/read-all", response_model=Mensagem)
def mark_all_read(
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    count = notificacao_repository.marcar_todas_lidas(db, current_user.id)
    return Mensagem(
        mensagem=f"{Messages.TODAS_LIDAS} ({count})",
        sucesso=True,
    )


@router.get("", response_model=PaginatedNotificacaoResponse)
def list_notifications(
    pagination: PaginationParams = Depends(),
    lida: Optional[bool] = Query(None),
    tipo: Optional[str] = Query(None),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Notificações do usuário, mais recentes primeiro."""
    query = notificacao_repository.get_filtered(
        db, current_user.id, lida=lida, tipo=tipo,
    )
    return paginate_query(query, pagination, PaginatedNotificacaoResponse)


@router.patch("/{notificacao_id}/read", response_model=NotificacaoResponse)
def mark_read(
    notificacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    notificacao = notificacao_repository.get_by_id_for_user(
        db, notificacao_id, current_user.id,
    )
    if not notificacao:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=Messages.NOTIFICACAO_NOT_FOUND,
        )
    return notificacao_repository.marcar_lida(db, notificacao)
