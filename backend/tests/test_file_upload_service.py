"""
Testes para o serviço de upload de documentos.
"""
import io
from unittest.mock import MagicMock, patch

import pytest
from fastapi import UploadFile

from config.messages import Messages
from exceptions import ValidationError
from services.file_upload_service import FileUploadService
from services.storage_service import LocalStorageBackend
from services.upload_queue import QueuedFile

PDF = b"%PDF-1.4\n" + b"0" * 2048


def _upload(content: bytes, filename="balanco.pdf") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


@pytest.fixture
def service(tmp_path):
    return FileUploadService(LocalStorageBackend(str(tmp_path / "files")))


class TestRead:

    @pytest.mark.asyncio
    async def test_reads_content(self, service):
        queued = await service.read(_upload(PDF), "financial_statements")

        assert queued.filename == "balanco.pdf"
        assert queued.document_type == "financial_statements"
        assert queued.size == len(PDF)

    @pytest.mark.asyncio
    async def test_requires_filename(self, service):
        with pytest.raises(ValidationError) as exc:
            await service.read(_upload(PDF, filename=""), "cnpj_certificate")
        assert exc.value.message == Messages.FILE_REQUIRED

    @pytest.mark.asyncio
    async def test_global_size_limit(self, service):
        with patch("services.file_upload_service.MAX_UPLOAD_SIZE_BYTES", 100):
            with pytest.raises(ValidationError):
                await service.read(_upload(PDF), "cnpj_certificate")

    @pytest.mark.asyncio
    async def test_read_many(self, service):
        queued = await service.read_many([_upload(PDF, "a.pdf"), _upload(PDF, "b.pdf")], "invoice")
        assert [q.filename for q in queued] == ["a.pdf", "b.pdf"]


class TestStore:

    def test_unique_name_keeps_extension(self, service):
        queued = QueuedFile(filename="Contrato Social.PDF", content=PDF, document_type="social_contract")

        first = service.store(queued, 3, "credito/9")
        second = service.store(queued, 3, "credito/9")

        assert first.startswith("users/3/credito/9/")
        assert first.endswith(".pdf")
        assert first != second
        assert service.storage.download(first) == PDF

    def test_delete(self, service):
        path = service.store(QueuedFile("a.pdf", PDF, "invoice"), 1, "importacoes/1")
        assert service.delete(path) is True
        assert service.storage.exists(path) is False

    def test_storage_failure_propagates(self):
        storage = MagicMock()
        storage.upload.side_effect = OSError("disco cheio")

        with pytest.raises(OSError):
            FileUploadService(storage).store(QueuedFile("a.pdf", PDF, "invoice"), 1, "importacoes/1")
