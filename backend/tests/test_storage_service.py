"""
Testes para o armazenamento local de arquivos.
"""
import io

import pytest

from services.storage_service import (
    LocalStorageBackend,
    PathTraversalError,
    build_storage_path,
    validate_storage_path,
)


@pytest.fixture
def storage(tmp_path):
    return LocalStorageBackend(str(tmp_path / "files"))


class TestValidateStoragePath:

    def test_normalizes_separators(self):
        assert validate_storage_path("users\\3\\credito\\a.pdf") == "users/3/credito/a.pdf"
        assert validate_storage_path("/users/3//a.pdf") == "users/3/a.pdf"

    @pytest.mark.parametrize("path", [
        "users/3/../4/a.pdf",
        "../etc/passwd",
        "uploads/3/a.pdf",
        "",
    ])
    def test_rejects(self, path):
        with pytest.raises(PathTraversalError):
            validate_storage_path(path)

    def test_build_path(self):
        assert build_storage_path(7, "importacoes/2", "x.pdf") == "users/7/importacoes/2/x.pdf"


class TestLocalStorageBackend:

    def test_upload_download_delete(self, storage, tmp_path):
        path = storage.upload(io.BytesIO(b"%PDF-1.4 conteudo"), "users/1/credito/5/a.pdf")

        assert path == "users/1/credito/5/a.pdf"
        assert (tmp_path / "files" / path).exists()
        assert storage.download(path) == b"%PDF-1.4 conteudo"

        assert storage.delete(path) is True
        assert storage.exists(path) is False

    def test_missing_file(self, storage):
        assert storage.download("users/1/nada.pdf") is None
        assert storage.delete("users/1/nada.pdf") is True

    def test_traversal_blocked(self, storage):
        with pytest.raises(PathTraversalError):
            storage.upload(io.BytesIO(b"x"), "users/1/../../fora.txt")
