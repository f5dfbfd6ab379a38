"""
Painel do importador.

Os painéis de admin, financeira e despachante ficam nos routers de cada
papel.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from auth import require_roles
from database import get_db
from models.usuario import UserRole, Usuario
from routers.base import AuthenticatedRouter
from schemas.dashboard import ImporterDashboardResponse
from services import dashboard_service, payment_schedule

router = AuthenticatedRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/importer", response_model=ImporterDashboardResponse)
def importer_dashboard(
    current_user: Usuario = Depends(require_roles(UserRole.IMPORTER)),
    db: Session = Depends(get_db),
):
    """Crédito, importações por status, pagamentos em aberto e próximo vencimento."""
    payment_schedule.refresh_overdue(db)
    return dashboard_service.importer_dashboard(db, current_user.id)
