"""
Кэш с TTL и вытеснением наименее недавно использованных записей
"""

import time
import threading
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Запись кэша"""
    value: T
    created_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl

class TTLCache(Generic[T]):
    """Потокобезопасный LRU кэш с TTL"""

    def __init__(self, max_size: int = 10, ttl_seconds: float = 3600,
                 clock: Callable[[], float] = time.monotonic):
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> Optional[T]:
        """Значение, если оно есть и не устарело; иначе промах"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self.misses += 1
                return None

            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def put(self, key: Hashable, value: T) -> None:
        """Добавить или перезаписать значение"""
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self.max_size:
                self._evict_lru()
            self._entries[key] = CacheEntry(value=value, created_at=self._clock(), ttl=self.ttl_seconds)

    def _evict_lru(self) -> None:
        lru_key, _ = self._entries.popitem(last=False)
        self.evictions += 1
        logger.debug("Evicted cache entry %r", lru_key)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Очистить кэш"""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())

    def get_stats(self) -> Dict[str, Any]:
        """Получить статистику кэша"""
        with self._lock:
            return {
                'size': len(self._entries),
                'max_size': self.max_size,
                'ttl_seconds': self.ttl_seconds,
                'hits': self.hits,
                'misses': self.misses,
                'evictions': self.evictions
            }
