# src/api_client/core/cache.py
"""
In-memory кэш ответов GET запросов.

Один event loop: все операции синхронные и атомарны между точками await,
поэтому блокировки не нужны. Вытеснения по размеру нет, только ленивая
проверка TTL.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .config import DEFAULT_CACHE_TTL_MS

logger = logging.getLogger(__name__)


def normalize_endpoint(endpoint: str) -> str:
    """Endpoint без ведущего и завершающего '/'."""
    return endpoint.strip().strip("/")


def stable_serialize(value: Any) -> str:
    """JSON с отсортированными на всех уровнях ключами."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def generate_cache_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Детерминированный ключ кэша.

    Учитывает только endpoint и query параметры; порядок ключей не важен.

    Examples:
        >>> generate_cache_key("resources", {"type": "book", "page": 2})
        'resources:{"params":{"page":2,"type":"book"}}'
        >>> generate_cache_key("/resources/")
        'resources:{}'
    """
    stable_options: Dict[str, Any] = {}
    if params:
        stable_options["params"] = dict(params)
    return f"{normalize_endpoint(endpoint)}:{stable_serialize(stable_options)}"


@dataclass(frozen=True)
class CacheEntry:
    """Запись кэша. Заменяется целиком, не изменяется."""
    key: str
    value: Any
    stored_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at < ttl_seconds


class CacheStore:
    """
    Хранилище key -> CacheEntry с TTL.

    Example:
        >>> store = CacheStore(ttl_ms=60_000)
        >>> entry = store.set("resources:{}", {"resources": []})
        >>> store.get("resources:{}").value
        {'resources': []}
        >>> store.invalidate("resources")
        1
    """

    def __init__(self, ttl_ms: int = DEFAULT_CACHE_TTL_MS, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            ttl_ms: Время жизни записи (мс)
            clock: Источник времени в секундах (для тестов)
        """
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[CacheEntry]:
        """Запись, если она есть и не устарела. Устаревшие не удаляются."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_fresh(self._clock(), self.ttl_ms / 1000):
            return None
        return entry

    def is_valid(self, key: str) -> bool:
        return self.get(key) is not None

    def set(self, key: str, value: Any) -> CacheEntry:
        """Сохранить значение, заменив прежнюю запись."""
        entry = CacheEntry(key=key, value=value, stored_at=self._clock())
        self._entries[key] = entry
        return entry

    def invalidate(self, prefix: Optional[str] = None) -> int:
        """
        Удалить записи, ключ которых начинается с prefix (без учёта регистра).

        Без prefix очищает всё хранилище.

        Returns:
            Количество удалённых записей
        """
        if prefix is None:
            removed = len(self._entries)
            self._entries.clear()
            logger.debug("Entire cache cleared", extra={"removed": removed})
            return removed

        normalized = normalize_endpoint(prefix).lower()
        matching = [key for key in self._entries if key.lower().startswith(normalized)]
        for key in matching:
            del self._entries[key]

        logger.debug(f"Cache cleared for prefix: {prefix}", extra={"removed": len(matching)})
        return len(matching)

    def reset(self) -> None:
        """Полный сброс (для изоляции тестов)."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.is_valid(key)
