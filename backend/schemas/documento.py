from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from schemas.base import PaginatedResponse

# ============== VALIDAÇÃO ==============


class DocumentValidationResponse(BaseModel):
    nome_arquivo: str
    tipo_documento: str
    valido: bool
    pontuacao: int
    confianca: float
    erros: List[str] = Field(default_factory=list)
    avisos: List[str] = Field(default_factory=list)
    sugestoes: List[str] = Field(default_factory=list)
    mensagem: Optional[str] = None


class DocumentRequirementInfo(BaseModel):
    tipo: str
    extensoes: List[str]
    tamanho_maximo_mb: float


# ============== FILA DE UPLOAD ==============


class UploadedFileResponse(BaseModel):
    nome_arquivo: str
    caminho: str
    pontuacao: int


class FailedUploadResponse(BaseModel):
    nome_arquivo: str
    erro: str


class UploadQueueResponse(BaseModel):
    enviados: List[UploadedFileResponse] = Field(default_factory=list)
    invalidos: List[DocumentValidationResponse] = Field(default_factory=list)
    falhas: List[FailedUploadResponse] = Field(default_factory=list)


# ============== SOLICITAÇÃO DE DOCUMENTOS ==============


class DocumentRequestCreate(BaseModel):
    solicitacao_credito_id: int
    tipo_documento: str = Field(..., max_length=50)
    nome_documento: str = Field(..., min_length=2, max_length=255)
    descricao: Optional[str] = None


class DocumentRequestResponse(BaseModel):
    id: int
    solicitacao_credito_id: Optional[int] = None
    solicitado_por: int
    solicitado_de: int
    tipo_documento: str
    nome_documento: str
    descricao: Optional[str] = None
    status: str
    arquivo_url: Optional[str] = None
    nome_arquivo: Optional[str] = None
    enviado_em: Optional[datetime] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedDocumentRequestResponse(PaginatedResponse[DocumentRequestResponse]):
    pass
