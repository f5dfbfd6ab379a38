"""
Cache chave/valor com TTL.

Usa Redis quando REDIS_URL está configurado e acessível; caso contrário,
cai para um cache em memória com evição LRU. Hoje é usado para guardar
consultas ao bureau de crédito, que são pagas por chamada.
"""

import json
import os
import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Dict, Optional, Tuple

from logging_config import get_logger

logger = get_logger('services.cache')

DEFAULT_MAX_ENTRIES = 500


class MemoryCache:
    """Cache em memória, thread-safe, com TTL por chave."""

    def __init__(self, max_size: int = DEFAULT_MAX_ENTRIES):
        self._entries: "OrderedDict[str, Tuple[Any, Optional[float]]]" = OrderedDict()
        self._lock = Lock()
        self._max_size = max_size

    def _expired(self, expires_at: Optional[float], now: float) -> bool:
        return expires_at is not None and now > expires_at

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._expired(expires_at, time.time()):
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        with self._lock:
            self._entries.pop(key, None)
            if len(self._entries) >= self._max_size:
                self._purge_expired()
            while len(self._entries) >= self._max_size:
                self._entries.popitem(last=False)
            self._entries[key] = (value, time.time() + ttl if ttl else None)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_by_prefix(self, prefix: str) -> int:
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge_expired(self) -> None:
        now = time.time()
        for key in [k for k, (_, exp) in self._entries.items() if self._expired(exp, now)]:
            del self._entries[key]

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "backend": "memory",
                "total_keys": len(self._entries),
                "max_size": self._max_size,
            }


class RedisCache:
    """Cache em Redis; valores serializados em JSON."""

    def __init__(self, redis_url: str):
        self._client = None
        try:
            import redis
            client = redis.from_url(redis_url, decode_responses=True)
            client.ping()
            self._client = client
            logger.info("Redis cache conectado")
        except Exception as e:
            logger.warning(f"Redis indisponível, usando memória: {e}")

    @property
    def available(self) -> bool:
        return self._client is not None

    def get(self, key: str) -> Optional[Any]:
        try:
            raw = self._client.get(key)
            return json.loads(raw) if raw is not None else None
        except Exception as e:
            logger.error(f"Erro ao ler do Redis: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        try:
            payload = json.dumps(value, default=str)
            if ttl:
                self._client.setex(key, ttl, payload)
            else:
                self._client.set(key, payload)
        except Exception as e:
            logger.error(f"Erro ao escrever no Redis: {e}")

    def delete(self, key: str) -> bool:
        try:
            return self._client.delete(key) > 0
        except Exception as e:
            logger.error(f"Erro ao remover do Redis: {e}")
            return False

    def delete_by_prefix(self, prefix: str) -> int:
        removed = 0
        try:
            for key in self._client.scan_iter(match=f"{prefix}*", count=100):
                removed += self._client.delete(key)
        except Exception as e:
            logger.error(f"Erro ao remover prefixo {prefix} do Redis: {e}")
        return removed

    def clear(self) -> None:
        try:
            self._client.flushdb()
        except Exception as e:
            logger.error(f"Erro ao limpar Redis: {e}")

    def stats(self) -> Dict[str, Any]:
        try:
            return {"backend": "redis", "total_keys": self._client.dbsize()}
        except Exception as e:
            logger.debug(f"Erro ao obter estatísticas do Redis: {e}")
            return {"backend": "redis", "available": False}


class CacheManager:
    """Escolhe o backend na inicialização e delega as operações."""

    def __init__(self, redis_url: Optional[str] = None):
        redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL")
        self._backend: Any = MemoryCache()
        if redis_url:
            redis_cache = RedisCache(redis_url)
            if redis_cache.available:
                self._backend = redis_cache
        logger.info(f"Cache inicializado com backend: {self.backend}")

    @property
    def backend(self) -> str:
        return "redis" if isinstance(self._backend, RedisCache) else "memory"

    def get(self, key: str) -> Optional[Any]:
        return self._backend.get(key)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        self._backend.set(key, value, ttl)

    def delete(self, key: str) -> bool:
        return self._backend.delete(key)

    def delete_by_prefix(self, prefix: str) -> int:
        return self._backend.delete_by_prefix(prefix)

    def clear(self) -> None:
        self._backend.clear()

    def stats(self) -> Dict[str, Any]:
        return self._backend.stats()


_cache_manager: Optional[CacheManager] = None


def get_cache() -> CacheManager:
    """Instância global do cache, criada no primeiro uso."""
    global _cache_manager
    if _cache_manager is None:
        _cache_manager = CacheManager()
    return _cache_manager


def reset_cache() -> None:
    """Descarta a instância global (usado nos testes)."""
    global _cache_manager
    _cache_manager = None
