"""
Repositório para operações de Usuario.
"""
from typing import Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from models import Usuario

from .base import BaseRepository


class UsuarioRepository(BaseRepository[Usuario]):

    def __init__(self):
        super().__init__(Usuario)

    def get_by_email(self, db: Session, email: str) -> Optional[Usuario]:
        return db.query(Usuario).filter(Usuario.email == email.lower()).first()

    def get_by_cnpj(self, db: Session, cnpj: str) -> Optional[Usuario]:
        return db.query(Usuario).filter(Usuario.cnpj == cnpj).first()

    def query_filtered(
        self,
        db: Session,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        busca: Optional[str] = None,
    ) -> Query:
        """Listagem para o admin, filtrável por papel, atividade e texto."""
        query = self.query(db, role=role, is_active=is_active)
        if busca:
            pattern = f"%{busca}%"
            query = query.filter(
                Usuario.nome.ilike(pattern)
                | Usuario.email.ilike(pattern)
                | Usuario.razao_social.ilike(pattern)
            )
        return query

    def count_by_role(self, db: Session) -> Dict[str, int]:
        rows = db.query(Usuario.role, func.count(Usuario.id)).group_by(Usuario.role).all()
        return {role: count for role, count in rows}

    def deactivate(self, db: Session, usuario: Usuario) -> Usuario:
        usuario.is_active = False
        db.commit()
        db.refresh(usuario)
        return usuario


usuario_repository = UsuarioRepository()
