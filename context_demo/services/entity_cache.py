"""Entity detail cache"""
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Hashable, Optional, TypeVar

from context_demo.core.errors import EntityLookupError
from context_demo.services.query_service import EntityQueryType, QueryService

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    written_at: float


class TTLCache(Generic[K, V]):
    """
    Loading cache bounded by age and size.

    - entries expire ``ttl_seconds`` after they were written
    - beyond ``max_size`` entries, the least recently used one is evicted
    - on a miss, ``loader`` computes the value; if it raises, nothing is stored
      and the next ``get`` tries again

    Meant for a single caller thread.
    """

    def __init__(
        self,
        loader: Callable[[K], V],
        ttl_seconds: float,
        max_size: int,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.loader = loader
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[K, CacheEntry[V]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry[V], now: float) -> bool:
        return now - entry.written_at >= self.ttl_seconds

    def get_if_present(self, key: K) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._is_expired(entry, self._clock()):
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry.value

    def get(self, key: K) -> V:
        cached = self.get_if_present(key)
        if cached is not None:
            logger.debug(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}")
        value = self.loader(key)
        self.put(key, value)
        return value

    def put(self, key: K, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, written_at=self._clock())
        self._entries.move_to_end(key)
        self._evict()

    def _evict(self) -> None:
        now = self._clock()
        expired = [k for k, entry in self._entries.items() if self._is_expired(entry, now)]
        for k in expired:
            del self._entries[k]
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def invalidate(self, key: K) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


class EntityDetailCache:
    """Entity details by entity id, loaded through DDS on demand."""

    def __init__(
        self,
        query_service: QueryService,
        ttl_seconds: float = 10 * 60,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.query_service = query_service
        self._cache: TTLCache[str, Dict[str, Any]] = TTLCache(
            self._load, ttl_seconds=ttl_seconds, max_size=max_size, clock=clock
        )

    def __len__(self) -> int:
        return len(self._cache)

    def _load(self, entity_id: str) -> Dict[str, Any]:
        results = self.query_service.query_entities(entity_id, EntityQueryType.ENTITY_ID, 1)
        if len(results) != 1 or not isinstance(results[0], dict):
            raise EntityLookupError(f"Querying {entity_id} did not yield exactly 1 result")
        return results[0]

    def get(self, entity_id: str) -> Dict[str, Any]:
        return self._cache.get(entity_id)
