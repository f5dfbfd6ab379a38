"""
Envio sequencial de lotes de documentos.

Primeiro valida todos os arquivos do lote; depois envia os válidos um a
um, aguardando cada envio e uma pausa fixa entre eles. Uma falha de envio
é registrada e o lote segue. Não há nova tentativa nem cancelamento.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from config.base import HEADER_SIZE, UPLOAD_QUEUE_DELAY_SECONDS
from logging_config import get_logger
from services.document_validation import DocumentValidator, ValidationResult, document_validator
from services.metrics import record_document_validation

logger = get_logger("services.upload_queue")


@dataclass
class QueuedFile:
    """Arquivo recebido aguardando validação e envio."""
    filename: str
    content: bytes
    document_type: str
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def header(self) -> bytes:
        return self.content[:HEADER_SIZE]


@dataclass
class UploadQueueResult:
    uploaded: List[Dict[str, Any]] = field(default_factory=list)
    invalid: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.uploaded) + len(self.invalid) + len(self.failed)


UploadFn = Callable[[QueuedFile, ValidationResult], Awaitable[Any]]


class SequentialUploadQueue:
    """
    Uso:
        queue = SequentialUploadQueue()
        result = await queue.drain(files, upload)

    `upload(file, validation)` recebe cada arquivo válido e devolve o que
    deve constar em `uploaded[i]["stored"]` (caminho, id etc.).
    """

    def __init__(
        self,
        validator: Optional[DocumentValidator] = None,
        delay_seconds: float = UPLOAD_QUEUE_DELAY_SECONDS,
    ):
        self.validator = validator or document_validator
        self.delay_seconds = delay_seconds

    def validate_all(self, files: List[QueuedFile]):
        """Separa (válidos, inválidos) mantendo a ordem de chegada."""
        valid, invalid = [], []
        for queued in files:
            result = self.validator.validate(
                queued.filename, queued.size, queued.document_type, queued.header,
            )
            record_document_validation(queued.document_type, result.is_valid)
            if result.is_valid:
                valid.append((queued, result))
            else:
                invalid.append({"file": queued, "validation": result})
        return valid, invalid

    async def drain(self, files: List[QueuedFile], upload: UploadFn) -> UploadQueueResult:
        valid, invalid = self.validate_all(files)
        result = UploadQueueResult(invalid=invalid)
        if invalid:
            logger.info(f"Fila de upload: {len(invalid)} arquivo(s) reprovado(s) na validação")

        for queued, validation in valid:
            try:
                stored = await upload(queued, validation)
                result.uploaded.append({"file": queued, "validation": validation, "stored": stored})
            except Exception as e:
                logger.warning(f"Falha no upload de {queued.filename}: {e}")
                result.failed.append({"file": queued, "error": str(e)})
            await asyncio.sleep(self.delay_seconds)

        logger.info(
            f"Fila de upload concluída: {len(result.uploaded)} enviados, "
            f"{len(result.invalid)} inválidos, {len(result.failed)} falhas"
        )
        return result
