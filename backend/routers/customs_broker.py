"""
Router do despachante aduaneiro: importações atribuídas e painel.

O detalhe, o pipeline e os documentos de cada importação atribuída são
lidos pelos endpoints de /imports.
"""
from typing import Optional

from fastapi import Depends, Query
from sqlalchemy.orm import Session

from auth import get_current_customs_broker_user
from database import get_db
from models.usuario import Usuario
from repositories.importacao_repository import importacao_repository
from routers.base import CustomsBrokerRouter
from schemas import PaginatedImportacaoResponse
from schemas.dashboard import CustomsBrokerDashboardResponse
from services import dashboard_service
from utils.pagination import PaginationParams, paginate_query

router = CustomsBrokerRouter(prefix="/customs-broker", tags=["Despachante"])


@router.get("/imports", response_model=PaginatedImportacaoResponse)
def list_assigned_imports(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_customs_broker_user),
    db: Session = Depends(get_db),
):
    query = importacao_repository.query_filtered(
        db, despachante_id=current_user.id, status=status_filter, busca=busca,
    )
    return paginate_query(query, pagination, PaginatedImportacaoResponse)


@router.get("/dashboard", response_model=CustomsBrokerDashboardResponse)
def customs_broker_dashboard(
    current_user: Usuario = Depends(get_current_customs_broker_user),
    db: Session = Depends(get_db),
):
    """Atribuídas, em desembaraço, concluídas e valor total."""
    return dashboard_service.customs_broker_dashboard(db, current_user.id)
