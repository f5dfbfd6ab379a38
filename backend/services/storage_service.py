"""
Armazenamento de arquivos enviados.

Os caminhos seguem o formato "users/{user_id}/{subpasta}/{arquivo}" e são
relativos à raiz do backend. Hoje há apenas o backend em disco local.
"""
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO, Optional

from config import UPLOAD_DIR
from logging_config import get_logger

logger = get_logger('services.storage')


class PathTraversalError(ValueError):
    """Caminho de storage com '..' ou fora de users/."""


def validate_storage_path(path: str) -> str:
    """Normaliza o caminho e recusa travessia de diretório."""
    segments = path.replace("\\", "/").split("/")
    if ".." in segments:
        logger.warning(f"[SECURITY] Path traversal bloqueado: {path}")
        raise PathTraversalError(f"Caminho inválido: {path}")
    normalized = "/".join(s for s in segments if s)
    if not normalized.startswith("users/"):
        logger.warning(f"[SECURITY] Path fora de users/: {path}")
        raise PathTraversalError(f"Caminho fora do escopo permitido: {path}")
    return normalized


def build_storage_path(user_id: int, subfolder: str, filename: str) -> str:
    return f"users/{user_id}/{subfolder}/{filename}"


class StorageBackend(ABC):
    """Interface dos backends de armazenamento."""

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str = "application/octet-stream") -> str:
        """Grava o arquivo e devolve o caminho de storage."""

    @abstractmethod
    def download(self, path: str) -> Optional[bytes]:
        """Conteúdo do arquivo ou None se não existir."""

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove o arquivo; True se removido ou inexistente."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...


class LocalStorageBackend(StorageBackend):
    """Arquivos gravados em UPLOAD_DIR."""

    CHUNK_SIZE = 1024 * 1024

    def __init__(self, base_dir: str = UPLOAD_DIR):
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"[STORAGE] Usando storage local: {self.base_dir}")

    def _full_path(self, path: str) -> Path:
        return self.base_dir / validate_storage_path(path)

    def upload(self, file: BinaryIO, path: str, content_type: str = "application/octet-stream") -> str:
        full_path = self._full_path(path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        with open(full_path, 'wb') as target:
            shutil.copyfileobj(file, target, length=self.CHUNK_SIZE)
        logger.debug(f"[STORAGE] Arquivo salvo: {full_path}")
        return validate_storage_path(path)

    def download(self, path: str) -> Optional[bytes]:
        full_path = self._full_path(path)
        if not full_path.exists():
            return None
        return full_path.read_bytes()

    def delete(self, path: str) -> bool:
        full_path = self._full_path(path)
        try:
            if full_path.exists():
                full_path.unlink()
                logger.debug(f"[STORAGE] Arquivo removido: {full_path}")
            return True
        except OSError as e:
            logger.warning(f"[STORAGE] Erro ao remover {full_path}: {e}")
            return False

    def exists(self, path: str) -> bool:
        return self._full_path(path).exists()


_storage_instance: Optional[StorageBackend] = None


def get_storage() -> StorageBackend:
    global _storage_instance
    if _storage_instance is None:
        _storage_instance = LocalStorageBackend(UPLOAD_DIR)
    return _storage_instance


def set_storage(storage: Optional[StorageBackend]) -> None:
    """Substitui o backend global (usado nos testes)."""
    global _storage_instance
    _storage_instance = storage


def reset_storage() -> None:
    set_storage(None)
