"""
Repositório de importações, produtos, documentos e histórico.
"""
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Query, Session, selectinload

from models.importacao import (
    DocumentoImportacao,
    HistoricoImportacao,
    Importacao,
    ImportStatus,
    ProdutoImportacao,
)

from .base import BaseRepository


class ImportacaoRepository(BaseRepository[Importacao]):

    def __init__(self):
        super().__init__(Importacao)

    def get_with_products(self, db: Session, id: int) -> Optional[Importacao]:
        return (
            db.query(Importacao)
            .options(selectinload(Importacao.produtos))
            .filter(Importacao.id == id)
            .first()
        )

    def query_filtered(
        self,
        db: Session,
        user_id: Optional[int] = None,
        status: Optional[str] = None,
        despachante_id: Optional[int] = None,
        statuses: Optional[List[str]] = None,
        busca: Optional[str] = None,
    ) -> Query:
        query = self.query(db, user_id=user_id, status=status, despachante_id=despachante_id)
        if statuses:
            query = query.filter(Importacao.status.in_(statuses))
        if busca:
            pattern = f"%{busca}%"
            query = query.filter(Importacao.nome.ilike(pattern) | Importacao.codigo.ilike(pattern))
        return query

    def sum_active_for_credit(
        self, db: Session, solicitacao_credito_id: int, exclude_id: Optional[int] = None,
    ) -> Decimal:
        """Soma de valor_total das importações ativas vinculadas à solicitação."""
        query = db.query(func.coalesce(func.sum(Importacao.valor_total), 0)).filter(
            Importacao.solicitacao_credito_id == solicitacao_credito_id,
            Importacao.status.in_(ImportStatus.ACTIVE),
        )
        if exclude_id is not None:
            query = query.filter(Importacao.id != exclude_id)
        return Decimal(query.scalar() or 0)

    def count_active_for_credit(self, db: Session, solicitacao_credito_id: int) -> int:
        return db.query(Importacao).filter(
            Importacao.solicitacao_credito_id == solicitacao_credito_id,
            Importacao.status.in_(ImportStatus.ACTIVE),
        ).count()

    def sum_value(self, db: Session, *criteria) -> Decimal:
        total = db.query(func.coalesce(func.sum(Importacao.valor_total), 0)).filter(*criteria).scalar()
        return Decimal(total or 0)

    def count_for_supplier(self, db: Session, fornecedor_id: int) -> int:
        return db.query(Importacao).filter(Importacao.fornecedor_id == fornecedor_id).count()


class ProdutoImportacaoRepository(BaseRepository[ProdutoImportacao]):

    def __init__(self):
        super().__init__(ProdutoImportacao)

    def get_for_import(self, db: Session, importacao_id: int, produto_id: int) -> Optional[ProdutoImportacao]:
        return db.query(ProdutoImportacao).filter(
            ProdutoImportacao.id == produto_id,
            ProdutoImportacao.importacao_id == importacao_id,
        ).first()


class DocumentoImportacaoRepository(BaseRepository[DocumentoImportacao]):

    def __init__(self):
        super().__init__(DocumentoImportacao)

    def list_for_import(self, db: Session, importacao_id: int) -> List[DocumentoImportacao]:
        return (
            db.query(DocumentoImportacao)
            .filter(DocumentoImportacao.importacao_id == importacao_id)
            .order_by(DocumentoImportacao.created_at.desc(), DocumentoImportacao.id.desc())
            .all()
        )

    def get_for_import(self, db: Session, importacao_id: int, documento_id: int) -> Optional[DocumentoImportacao]:
        return db.query(DocumentoImportacao).filter(
            DocumentoImportacao.id == documento_id,
            DocumentoImportacao.importacao_id == importacao_id,
        ).first()


class HistoricoImportacaoRepository(BaseRepository[HistoricoImportacao]):

    def __init__(self):
        super().__init__(HistoricoImportacao)

    def list_for_import(self, db: Session, importacao_id: int) -> List[HistoricoImportacao]:
        return (
            db.query(HistoricoImportacao)
            .filter(HistoricoImportacao.importacao_id == importacao_id)
            .order_by(HistoricoImportacao.id.asc())
            .all()
        )


importacao_repository = ImportacaoRepository()
produto_repository = ProdutoImportacaoRepository()
documento_importacao_repository = DocumentoImportacaoRepository()
historico_repository = HistoricoImportacaoRepository()
