"""
Repositório de fornecedores.
"""
from typing import Optional

from sqlalchemy.orm import Query, Session

from models.fornecedor import Fornecedor

from .base import BaseRepository


class FornecedorRepository(BaseRepository[Fornecedor]):

    def __init__(self):
        super().__init__(Fornecedor)

    def query_filtered(
        self,
        db: Session,
        user_id: Optional[int] = None,
        pais: Optional[str] = None,
        ativo: Optional[bool] = None,
        busca: Optional[str] = None,
    ) -> Query:
        query = self.query(db, user_id=user_id, pais=pais, ativo=ativo)
        if busca:
            query = query.filter(Fornecedor.nome_empresa.ilike(f"%{busca}%"))
        return query


fornecedor_repository = FornecedorRepository()
