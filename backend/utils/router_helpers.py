"""
Funções auxiliares reutilizáveis para routers.

Centraliza o envio de lotes de documentos pela fila sequencial e a
conversão dos resultados de validação para os schemas de resposta.
A consulta ao bureau de crédito é compartilhada por admin e financeira.
"""
from typing import Any, Dict, List

from fastapi import HTTPException, Request, UploadFile, status
from sqlalchemy.orm import Session

from config.messages import Messages
from logging_config import get_logger
from schemas.documento import (
    DocumentValidationResponse,
    FailedUploadResponse,
    UploadedFileResponse,
    UploadQueueResponse,
)
from services.audit_service import AuditAction, audit_service
from services.credit_bureau import DirectDataClient, analyze_dossie
from services.document_validation import ValidationResult, document_validator
from services.file_upload_service import FileUploadService
from services.metrics import record_document_validation, record_upload
from services.upload_queue import QueuedFile, SequentialUploadQueue, UploadQueueResult
from utils.documentos_br import is_valid_cnpj, only_digits
from utils.http_helpers import get_client_ip_safe

logger = get_logger('utils.router_helpers')


def validation_response(
    filename: str, document_type: str, result: ValidationResult,
) -> DocumentValidationResponse:
    return DocumentValidationResponse(
        nome_arquivo=filename,
        tipo_documento=document_type,
        valido=result.is_valid,
        pontuacao=result.score,
        confianca=result.confidence,
        erros=result.errors,
        avisos=result.warnings,
        sugestoes=result.suggestions,
        mensagem=result.message,
    )


def queue_response(result: UploadQueueResult) -> UploadQueueResponse:
    """Converte o resultado da fila para UploadQueueResponse."""
    return UploadQueueResponse(
        enviados=[
            UploadedFileResponse(
                nome_arquivo=item["file"].filename,
                caminho=item["stored"],
                pontuacao=item["validation"].score,
            )
            for item in result.uploaded
        ],
        invalidos=[
            validation_response(item["file"].filename, item["file"].document_type, item["validation"])
            for item in result.invalid
        ],
        falhas=[
            FailedUploadResponse(nome_arquivo=item["file"].filename, erro=item["error"])
            for item in result.failed
        ],
    )


async def drain_to_storage(
    files: List[UploadFile],
    document_type: str,
    user_id: int,
    subfolder: str,
    upload_service: FileUploadService,
    queue: SequentialUploadQueue,
    upload_type: str = "credit",
) -> UploadQueueResult:
    """
    Lê o lote, valida todos os arquivos e grava os válidos um a um.

    Arquivos acima do limite global de upload interrompem a requisição
    com ValidationError antes de qualquer gravação.
    """
    queued_files = await upload_service.read_many(files, document_type)

    async def upload(queued: QueuedFile, validation: ValidationResult) -> str:
        return upload_service.store(queued, user_id, subfolder, upload_type)

    result = await queue.drain(queued_files, upload)
    for _ in result.invalid:
        record_upload(upload_type, "invalid")
    logger.info(
        f"[UPLOAD] Lote de {len(queued_files)} arquivo(s) tipo={document_type} "
        f"enviados={len(result.uploaded)} invalidos={len(result.invalid)} falhas={len(result.failed)}"
    )
    return result


def validate_or_400(queued: QueuedFile) -> ValidationResult:
    """Valida um arquivo avulso; reprovado, levanta 400 com pontuação e erros."""
    result = document_validator.validate(
        queued.filename, queued.size, queued.document_type, queued.header,
    )
    record_document_validation(queued.document_type, result.is_valid)
    if not result.is_valid:
        detail = validation_response(queued.filename, queued.document_type, result)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail.model_dump())
    return result


async def bureau_lookup(
    db: Session,
    request: Request,
    user_id: int,
    cnpj: str,
    client: DirectDataClient,
) -> Dict[str, Any]:
    """Consulta o dossiê do CNPJ, analisa o risco e registra a consulta na auditoria."""
    if not is_valid_cnpj(cnpj):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=Messages.INVALID_CNPJ)
    cnpj = only_digits(cnpj)
    dossie = await client.consultar_dossie(cnpj)
    resultado = analyze_dossie(cnpj, dossie)
    audit_service.log_action(
        db=db,
        user_id=user_id,
        action=AuditAction.CREDIT_BUREAU_QUERY,
        resource_type="credit_bureau",
        details={"cnpj": cnpj, "nivel_risco": resultado["nivel_risco"], "score": resultado["score"]},
        ip_address=get_client_ip_safe(request),
    )
    return resultado
