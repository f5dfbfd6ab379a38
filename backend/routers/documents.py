"""
Validação de documentos sem envio ao storage.

O frontend chama /documents/validate antes do upload para mostrar a
pontuação, os erros e as sugestões ao importador.
"""
from typing import List

from fastapi import Depends, File, Form, Query, UploadFile

from auth import get_current_active_user
from config import DOCUMENT_REQUIREMENTS
from dependencies import get_upload_service
from models.usuario import Usuario
from routers.base import AuthenticatedRouter
from schemas import DocumentValidationResponse
from schemas.documento import DocumentRequirementInfo
from services.document_validation import document_validator, smart_document_validator
from services.file_upload_service import FileUploadService
from services.metrics import record_document_validation
from utils.router_helpers import validation_response

router = AuthenticatedRouter(prefix="/documents", tags=["Documentos"])


@router.get("/requirements", response_model=List[DocumentRequirementInfo])
def list_requirements():
    """Extensões e tamanho máximo aceitos por tipo de documento de crédito."""
    return [
        DocumentRequirementInfo(
            tipo=tipo,
            extensoes=list(req.allowed_types),
            tamanho_maximo_mb=req.max_size_mb,
        )
        for tipo, req in DOCUMENT_REQUIREMENTS.items()
    ]


@router.post("/validate", response_model=DocumentValidationResponse)
async def validate_document(
    document_type: str = Form(...),
    file: UploadFile = File(...),
    completo: bool = Query(False, description="Usa as regras do tipo e a assinatura do conteúdo"),
    current_user: Usuario = Depends(get_current_active_user),
    upload_service: FileUploadService = Depends(get_upload_service),
):
    """
    Pontua o arquivo sem gravá-lo.

    Por padrão usa a validação genérica (extensão, tamanho, nome); com
    `completo=true` aplica as regras do tipo de documento e confere a
    assinatura dos primeiros bytes.
    """
    queued = await upload_service.read(file, document_type)
    if completo:
        result = document_validator.validate(queued.filename, queued.size, document_type, queued.header)
    else:
        result = smart_document_validator.validate(queued.filename, queued.size, document_type)
    record_document_validation(document_type, result.is_valid)
    return validation_response(queued.filename, document_type, result)

