"""
Repositórios para acesso a dados.
"""
from .base import BaseRepository
from .credito_repository import (
    CreditoRepository,
    credito_repository,
    taxa_repository,
    uso_credito_repository,
)
from .fornecedor_repository import FornecedorRepository, fornecedor_repository
from .importacao_repository import (
    ImportacaoRepository,
    documento_importacao_repository,
    historico_repository,
    importacao_repository,
    produto_repository,
)
from .notificacao_repository import NotificacaoRepository, notificacao_repository
from .pagamento_repository import PagamentoRepository, pagamento_repository
from .solicitacao_documento_repository import solicitacao_documento_repository
from .usuario_repository import UsuarioRepository, usuario_repository

__all__ = [
    'BaseRepository',
    'CreditoRepository',
    'credito_repository',
    'uso_credito_repository',
    'taxa_repository',
    'ImportacaoRepository',
    'importacao_repository',
    'produto_repository',
    'documento_importacao_repository',
    'historico_repository',
    'FornecedorRepository',
    'fornecedor_repository',
    'NotificacaoRepository',
    'notificacao_repository',
    'PagamentoRepository',
    'pagamento_repository',
    'solicitacao_documento_repository',
    'UsuarioRepository',
    'usuario_repository',
]
