"""
Router de fornecedores do importador.

Admin e financeira listam e consultam todos; alterações ficam com o dono.
"""
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from auth import get_current_active_user
from config import Messages
from database import get_db
from logging_config import get_logger, log_action
from models.fornecedor import Fornecedor
from models.usuario import UserRole, Usuario
from repositories.fornecedor_repository import fornecedor_repository
from repositories.importacao_repository import importacao_repository
from routers.base import AuthenticatedRouter
from schemas import (
    FornecedorCreate,
    FornecedorResponse,
    FornecedorUpdate,
    Mensagem,
    PaginatedFornecedorResponse,
)
from utils.http_helpers import ensure_owner_or_roles
from utils.pagination import PaginationParams, paginate_query

logger = get_logger("routers.suppliers")
router = AuthenticatedRouter(prefix="/suppliers", tags=["Fornecedores"])

READ_ROLES = (UserRole.ADMIN, UserRole.FINANCEIRA)


def _get_supplier(db: Session, fornecedor_id: int, user: Usuario, roles=()) -> Fornecedor:
    fornecedor = fornecedor_repository.get_by_id(db, fornecedor_id)
    if not fornecedor:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.SUPPLIER_NOT_FOUND)
    ensure_owner_or_roles(user, fornecedor.user_id, roles)
    return fornecedor


@router.get("", response_model=PaginatedFornecedorResponse)
def list_suppliers(
    pagination: PaginationParams = Depends(),
    pais: Optional[str] = Query(None),
    ativo: Optional[bool] = Query(None),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    user_id = None if current_user.role in READ_ROLES else current_user.id
    query = fornecedor_repository.query_filtered(db, user_id=user_id, pais=pais, ativo=ativo, busca=busca)
    return paginate_query(query, pagination, PaginatedFornecedorResponse)


@router.post("", response_model=FornecedorResponse, status_code=201)
def create_supplier(
    dados: FornecedorCreate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    fornecedor = fornecedor_repository.create(db, Fornecedor(**dados.model_dump(), user_id=current_user.id))
    log_action(
        logger, "supplier_created",
        user_id=current_user.id,
        resource_type="supplier",
        resource_id=fornecedor.id,
    )
    return fornecedor


@router.get("/{fornecedor_id}", response_model=FornecedorResponse)
def get_supplier(
    fornecedor_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return _get_supplier(db, fornecedor_id, current_user, READ_ROLES)


@router.put("/{fornecedor_id}", response_model=FornecedorResponse)
def update_supplier(
    fornecedor_id: int,
    dados: FornecedorUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    fornecedor = _get_supplier(db, fornecedor_id, current_user)
    return fornecedor_repository.update(db, fornecedor, dados.model_dump(exclude_unset=True))


@router.delete("/{fornecedor_id}", response_model=Mensagem)
def delete_supplier(
    fornecedor_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Remove o fornecedor; recusado se alguma importação o referencia."""
    fornecedor = _get_supplier(db, fornecedor_id, current_user)
    if importacao_repository.count_for_supplier(db, fornecedor.id) > 0:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.SUPPLIER_IN_USE)

    fornecedor_repository.delete(db, fornecedor)
    log_action(
        logger, "supplier_deleted",
        user_id=current_user.id,
        resource_type="supplier",
        resource_id=fornecedor_id,
    )
    return Mensagem(mensagem=Messages.SUPPLIER_DELETED, sucesso=True)
