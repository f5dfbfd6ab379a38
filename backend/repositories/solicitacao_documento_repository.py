"""
Repositório de solicitações de documentos.
"""
from typing import Optional

from sqlalchemy.orm import Query, Session

from models.solicitacao_documento import SolicitacaoDocumento

from .base import BaseRepository


class SolicitacaoDocumentoRepository(BaseRepository[SolicitacaoDocumento]):

    def __init__(self):
        super().__init__(SolicitacaoDocumento)

    def query_for_recipient(self, db: Session, user_id: int, status: Optional[str] = None) -> Query:
        return self.query(db, solicitado_de=user_id, status=status)


solicitacao_documento_repository = SolicitacaoDocumentoRepository()
