"""
Router das importações.

Endpoints:
    POST   /imports                                  - Criar importação (importador)
    GET    /imports                                  - Listar (próprias; todas p/ admin e financeira;
                                                       atribuídas p/ despachante)
    GET    /imports/document-types                   - Tipos de documento de embarque
    GET    /imports/{id}                             - Detalhe com produtos
    PUT    /imports/{id}                             - Editar (apenas em planejamento)
    DELETE /imports/{id}                             - Cancelar
    PATCH  /imports/{id}/status                      - Mudar status operacional
    GET    /imports/{id}/pipeline                    - Etapas do pipeline
    PUT    /imports/{id}/pipeline                    - Atualizar uma etapa
    GET    /imports/{id}/timeline                    - Linha do tempo de status
    GET    /imports/{id}/products                    - Produtos
    POST   /imports/{id}/products                    - Adicionar produto
    PUT    /imports/{id}/products/{produto_id}       - Editar produto
    DELETE /imports/{id}/products/{produto_id}       - Remover produto
    GET    /imports/{id}/documents                   - Documentos de embarque
    POST   /imports/{id}/documents                   - Enviar um documento
    POST   /imports/{id}/documents/batch             - Enviar lote pela fila sequencial
    DELETE /imports/{id}/documents/{documento_id}    - Remover documento
    GET    /imports/{id}/financial-summary           - Taxa, crédito e pagamentos
    GET    /imports/{id}/payments                    - Cronograma de pagamentos
"""
from typing import List, Optional

from fastapi import Depends, File, Form, HTTPException, Query, UploadFile, status
from sqlalchemy.orm import Session

from auth import get_current_active_user, require_roles
from config import IMPORT_DOCUMENT_TYPES, MANDATORY_IMPORT_DOCUMENTS, Messages
from database import get_db
from dependencies import get_upload_queue, get_upload_service
from exceptions import BusinessRuleError
from logging_config import get_logger, log_action
from models.importacao import Importacao, ImportStatus
from models.usuario import UserRole, Usuario
from repositories.importacao_repository import (
    documento_importacao_repository,
    historico_repository,
    importacao_repository,
)
from repositories.pagamento_repository import pagamento_repository
from routers.base import AuthenticatedRouter
from schemas import (
    ImportacaoCreate,
    ImportacaoDetailResponse,
    ImportacaoResponse,
    ImportacaoUpdate,
    Mensagem,
    PaginatedImportacaoResponse,
    PaymentResponse,
    ProdutoCreate,
    ProdutoResponse,
    ProdutoUpdate,
    UploadQueueResponse,
)
from schemas.importacao import (
    DocumentoImportacaoResponse,
    DocumentoTipoInfo,
    HistoricoResponse,
    ImportFinancialSummary,
    ImportStatusUpdate,
    PipelineResponse,
    PipelineStageUpdate,
)
from services import import_pipeline, import_service, payment_schedule
from services.file_upload_service import FileUploadService
from services.upload_queue import SequentialUploadQueue
from utils.http_helpers import ensure_owner_or_roles
from utils.pagination import PaginationParams, paginate_query
from utils.router_helpers import drain_to_storage, queue_response, validate_or_400

logger = get_logger("routers.imports")
router = AuthenticatedRouter(prefix="/imports", tags=["Importações"])

READ_ROLES = (UserRole.ADMIN, UserRole.FINANCEIRA)
WRITE_ROLES = (UserRole.ADMIN,)


def _get_import(db: Session, importacao_id: int) -> Importacao:
    importacao = importacao_repository.get_with_products(db, importacao_id)
    if not importacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.IMPORT_NOT_FOUND)
    return importacao


def _get_readable(db: Session, importacao_id: int, user: Usuario) -> Importacao:
    """Dono, admin, financeira ou o despachante atribuído."""
    importacao = _get_import(db, importacao_id)
    if user.role == UserRole.CUSTOMS_BROKER and importacao.despachante_id == user.id:
        return importacao
    ensure_owner_or_roles(user, importacao.user_id, READ_ROLES)
    return importacao


def _get_writable(db: Session, importacao_id: int, user: Usuario) -> Importacao:
    importacao = _get_import(db, importacao_id)
    ensure_owner_or_roles(user, importacao.user_id, WRITE_ROLES)
    return importacao


def _check_import_document_type(tipo: str) -> None:
    if tipo not in IMPORT_DOCUMENT_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.DOCUMENTO_INVALID_TYPE)


@router.post("", response_model=ImportacaoDetailResponse, status_code=201)
def create_import(
    dados: ImportacaoCreate,
    current_user: Usuario = Depends(require_roles(UserRole.IMPORTER)),
    db: Session = Depends(get_db),
):
    """
    Cria a importação em `planejamento`.

    Com `solicitacao_credito_id`, o valor total é reservado no limite da
    solicitação e o cronograma de pagamentos é gerado a partir dos prazos
    aprovados.
    """
    importacao = import_service.create_import(db, current_user.id, dados)
    log_action(
        logger, "import_created",
        user_id=current_user.id,
        resource_type="import",
        resource_id=importacao.id,
    )
    return importacao


@router.get("", response_model=PaginatedImportacaoResponse)
def list_imports(
    pagination: PaginationParams = Depends(),
    status_filter: Optional[str] = Query(None, alias="status"),
    busca: Optional[str] = Query(None, max_length=100),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    if current_user.role in READ_ROLES:
        query = importacao_repository.query_filtered(db, status=status_filter, busca=busca)
    elif current_user.role == UserRole.CUSTOMS_BROKER:
        query = importacao_repository.query_filtered(
            db, despachante_id=current_user.id, status=status_filter, busca=busca,
        )
    else:
        query = importacao_repository.query_filtered(
            db, user_id=current_user.id, status=status_filter, busca=busca,
        )
    return paginate_query(query, pagination, PaginatedImportacaoResponse)


@router.get("/document-types", response_model=List[DocumentoTipoInfo])
def list_document_types(modal: Optional[str] = Query(None)):
    """Tipos aceitos; `obrigatorio` considera o modal informado."""
    obrigatorios = MANDATORY_IMPORT_DOCUMENTS.get(modal, []) if modal else []
    return [
        DocumentoTipoInfo(tipo=tipo, label=label, obrigatorio=tipo in obrigatorios)
        for tipo, label in IMPORT_DOCUMENT_TYPES.items()
    ]


@router.get("/{importacao_id}", response_model=ImportacaoDetailResponse)
def get_import(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return _get_readable(db, importacao_id, current_user)


@router.put("/{importacao_id}", response_model=ImportacaoDetailResponse)
def update_import(
    importacao_id: int,
    dados: ImportacaoUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    importacao = import_service.update_import(db, importacao, dados)
    log_action(
        logger, "import_updated",
        user_id=current_user.id,
        resource_type="import",
        resource_id=importacao.id,
    )
    return importacao


@router.delete("/{importacao_id}", response_model=ImportacaoResponse)
def cancel_import(
    importacao_id: int,
    motivo: Optional[str] = Query(None, max_length=500),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    """Cancela a importação, libera o crédito e cancela as parcelas em aberto."""
    importacao = _get_writable(db, importacao_id, current_user)
    return import_service.cancel_import(db, importacao, current_user.id, motivo)


@router.patch("/{importacao_id}/status", response_model=ImportacaoResponse)
def update_status(
    importacao_id: int,
    dados: ImportStatusUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    return import_service.change_status(
        db, importacao, dados.status, current_user.id,
        notas=dados.notas,
        numero_container=dados.numero_container,
        chegada_real=dados.chegada_real,
    )


# === Pipeline e linha do tempo ===


@router.get("/{importacao_id}/pipeline", response_model=PipelineResponse)
def get_pipeline(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_readable(db, importacao_id, current_user)
    return import_pipeline.build_pipeline(importacao)


@router.put("/{importacao_id}/pipeline", response_model=PipelineResponse)
def update_pipeline_stage(
    importacao_id: int,
    dados: PipelineStageUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    if importacao.status in ImportStatus.FINAL:
        raise BusinessRuleError(Messages.IMPORT_PIPELINE_CLOSED)
    import_pipeline.update_stage(importacao, dados.etapa, dados.status, dados.dados, dados.avancar)
    db.commit()
    db.refresh(importacao)
    log_action(
        logger, "import_stage_updated",
        user_id=current_user.id,
        resource_type="import",
        resource_id=importacao.id,
        etapa=dados.etapa,
        status=dados.status,
    )
    return import_pipeline.build_pipeline(importacao)


@router.get("/{importacao_id}/timeline", response_model=List[HistoricoResponse])
def get_timeline(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_readable(db, importacao_id, current_user)
    return historico_repository.list_for_import(db, importacao.id)


# === Produtos ===


@router.get("/{importacao_id}/products", response_model=List[ProdutoResponse])
def list_products(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    return _get_readable(db, importacao_id, current_user).produtos


@router.post("/{importacao_id}/products", response_model=ProdutoResponse, status_code=201)
def add_product(
    importacao_id: int,
    dados: ProdutoCreate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    return import_service.add_product(db, importacao, dados)


@router.put("/{importacao_id}/products/{produto_id}", response_model=ProdutoResponse)
def update_product(
    importacao_id: int,
    produto_id: int,
    dados: ProdutoUpdate,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    return import_service.update_product(db, importacao, produto_id, dados)


@router.delete("/{importacao_id}/products/{produto_id}", response_model=Mensagem)
def delete_product(
    importacao_id: int,
    produto_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_writable(db, importacao_id, current_user)
    import_service.delete_product(db, importacao, produto_id)
    return Mensagem(mensagem=Messages.PRODUCT_DELETED, sucesso=True)


# === Documentos de embarque ===


@router.get("/{importacao_id}/documents", response_model=List[DocumentoImportacaoResponse])
def list_documents(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_readable(db, importacao_id, current_user)
    return documento_importacao_repository.list_for_import(db, importacao.id)


@router.post("/{importacao_id}/documents", response_model=DocumentoImportacaoResponse, status_code=201)
async def upload_document(
    importacao_id: int,
    tipo: str = Form(...),
    file: UploadFile = File(...),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    upload_service: FileUploadService = Depends(get_upload_service),
):
    """
    Envia um documento de embarque.

    O arquivo é validado (extensão, tamanho, assinatura do conteúdo) antes
    de ir para o storage; reprovado, a resposta é 400 com os erros.
    """
    importacao = _get_writable(db, importacao_id, current_user)
    _check_import_document_type(tipo)

    queued = await upload_service.read(file, tipo)
    result = validate_or_400(queued)

    caminho = upload_service.store(queued, current_user.id, f"importacoes/{importacao.id}", "import")
    documento = import_service.add_document(
        db, importacao, current_user.id, tipo, queued.filename, caminho, queued.size, result.score,
    )
    log_action(
        logger, "import_document_uploaded",
        user_id=current_user.id,
        resource_type="import",
        resource_id=importacao.id,
        tipo=tipo,
    )
    return documento


@router.post("/{importacao_id}/documents/batch", response_model=UploadQueueResponse)
async def upload_documents_batch(
    importacao_id: int,
    tipo: str = Form(...),
    files: List[UploadFile] = File(...),
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    upload_service: FileUploadService = Depends(get_upload_service),
    queue: SequentialUploadQueue = Depends(get_upload_queue),
):
    importacao = _get_writable(db, importacao_id, current_user)
    _check_import_document_type(tipo)

    result = await drain_to_storage(
        files, tipo, current_user.id, f"importacoes/{importacao.id}",
        upload_service, queue, upload_type="import",
    )
    for item in result.uploaded:
        queued = item["file"]
        import_service.add_document(
            db, importacao, current_user.id, tipo, queued.filename, item["stored"],
            queued.size, item["validation"].score,
        )
    return queue_response(result)


@router.delete("/{importacao_id}/documents/{documento_id}", response_model=Mensagem)
def delete_document(
    importacao_id: int,
    documento_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
    upload_service: FileUploadService = Depends(get_upload_service),
):
    importacao = _get_writable(db, importacao_id, current_user)
    documento = documento_importacao_repository.get_for_import(db, importacao.id, documento_id)
    if not documento:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=Messages.DOCUMENTO_NOT_FOUND)

    if not upload_service.delete(documento.caminho_arquivo):
        logger.warning(f"Arquivo do documento {documento.id} não encontrado no storage")
    documento_importacao_repository.delete(db, documento)
    log_action(
        logger, "import_document_deleted",
        user_id=current_user.id,
        resource_type="import",
        resource_id=importacao.id,
        documento_id=documento_id,
    )
    return Mensagem(mensagem=Messages.DOCUMENTO_DELETED, sucesso=True)


# === Financeiro ===


@router.get("/{importacao_id}/financial-summary", response_model=ImportFinancialSummary)
def get_financial_summary(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_readable(db, importacao_id, current_user)
    return import_service.financial_summary(db, importacao)


@router.get("/{importacao_id}/payments", response_model=List[PaymentResponse])
def list_import_payments(
    importacao_id: int,
    current_user: Usuario = Depends(get_current_active_user),
    db: Session = Depends(get_db),
):
    importacao = _get_readable(db, importacao_id, current_user)
    payment_schedule.refresh_overdue(db)
    return pagamento_repository.list_for_import(db, importacao.id)
