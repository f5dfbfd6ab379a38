"""
Serviço de upload de documentos.

Lê os arquivos multipart recebidos, aplica os limites globais de upload
e grava os aprovados no storage com nome único.
"""
import io
import uuid
from typing import List, Optional

from fastapi import UploadFile

from config import MAX_UPLOAD_SIZE_BYTES, get_file_extension
from config.messages import Messages
from exceptions import ValidationError
from logging_config import get_logger
from services.metrics import record_upload
from services.storage_service import StorageBackend, build_storage_path, get_storage
from services.upload_queue import QueuedFile

logger = get_logger('services.file_upload')


class FileUploadService:
    """
    Uso:
        queued = await upload_service.read(file, "cnpj_certificate")
        path = upload_service.store(queued, user_id, "credito/12")
    """

    def __init__(self, storage: Optional[StorageBackend] = None):
        self._storage = storage

    @property
    def storage(self) -> StorageBackend:
        return self._storage or get_storage()

    async def read(self, file: UploadFile, document_type: str) -> QueuedFile:
        """Lê o upload inteiro; recusa arquivo sem nome ou acima do limite global."""
        if not file.filename:
            raise ValidationError(Messages.FILE_REQUIRED)
        content = await file.read(MAX_UPLOAD_SIZE_BYTES + 1)
        if len(content) > MAX_UPLOAD_SIZE_BYTES:
            raise ValidationError(
                f"Arquivo muito grande. Tamanho máximo permitido: {MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)}MB"
            )
        return QueuedFile(
            filename=file.filename,
            content=content,
            document_type=document_type,
            content_type=file.content_type,
        )

    async def read_many(self, files: List[UploadFile], document_type: str) -> List[QueuedFile]:
        return [await self.read(f, document_type) for f in files]

    def store(self, queued: QueuedFile, user_id: int, subfolder: str, upload_type: str = "credit") -> str:
        """Grava o arquivo com nome UUID e devolve o caminho de storage."""
        filename = f"{uuid.uuid4().hex}{get_file_extension(queued.filename)}"
        path = build_storage_path(user_id, subfolder, filename)
        try:
            stored = self.storage.upload(
                io.BytesIO(queued.content), path, queued.content_type or "application/octet-stream",
            )
        except Exception:
            record_upload(upload_type, "failed")
            raise
        record_upload(upload_type, "success", queued.size)
        logger.info(f"[UPLOAD] {queued.filename} salvo em {stored}")
        return stored

    def delete(self, path: str) -> bool:
        return self.storage.delete(path)

