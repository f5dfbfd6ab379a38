"""
Container de dependências do Spark Comex.
Centraliza o acesso aos serviços com estado (storage, upload, bureau)
e permite substituí-los nos testes.
"""
from typing import Optional

from services.credit_bureau.client import DirectDataClient
from services.file_upload_service import FileUploadService
from services.storage_service import StorageBackend
from services.upload_queue import SequentialUploadQueue


class ServiceContainer:
    """
    Container singleton para serviços da aplicação.
    Lazy-loading: serviços são instanciados apenas quando necessários.
    """
    _instance: Optional['ServiceContainer'] = None

    def __init__(self):
        self._upload_service: Optional[FileUploadService] = None
        self._upload_queue: Optional[SequentialUploadQueue] = None
        self._bureau_client: Optional[DirectDataClient] = None

    @classmethod
    def get(cls) -> 'ServiceContainer':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reseta o container (útil para testes)."""
        cls._instance = None

    @property
    def upload_service(self) -> FileUploadService:
        if self._upload_service is None:
            self._upload_service = FileUploadService()
        return self._upload_service

    @property
    def upload_queue(self) -> SequentialUploadQueue:
        if self._upload_queue is None:
            self._upload_queue = SequentialUploadQueue()
        return self._upload_queue

    @property
    def bureau_client(self) -> DirectDataClient:
        if self._bureau_client is None:
            self._bureau_client = DirectDataClient()
        return self._bureau_client

    def set_storage(self, storage: StorageBackend) -> None:
        """Injeta backend de storage (útil para testes)."""
        self._upload_service = FileUploadService(storage)

    def set_upload_queue(self, queue: SequentialUploadQueue) -> None:
        self._upload_queue = queue

    def set_bureau_client(self, client: DirectDataClient) -> None:
        self._bureau_client = client


def get_services() -> ServiceContainer:
    """
    Dependency injection para FastAPI.
    Uso: services: ServiceContainer = Depends(get_services)
    """
    return ServiceContainer.get()


def get_upload_service() -> FileUploadService:
    return ServiceContainer.get().upload_service


def get_upload_queue() -> SequentialUploadQueue:
    return ServiceContainer.get().upload_queue


def get_bureau_client() -> DirectDataClient:
    return ServiceContainer.get().bureau_client
