"""Explicit read cache: key -> {data, error, updated_at}, prefix invalidation, in-flight de-duplication."""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Iterable, Mapping, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_STALE_TIME = 60 * 5

CacheKey = Tuple[Hashable, ...]


def _freeze(value: Any) -> Hashable:
    if isinstance(value, Mapping):
        return tuple(sorted((str(k), _freeze(v)) for k, v in value.items()))
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    return value


def make_key(key: Iterable[Any], params: Optional[Mapping[str, Any]] = None) -> CacheKey:
    """Build a hashable cache key; query params become the last element."""
    if isinstance(key, str):
        key = (key,)
    frozen = tuple(_freeze(part) for part in key)
    if params:
        frozen = frozen + (_freeze(params),)
    return frozen


def key_startswith(key: CacheKey, prefix: CacheKey) -> bool:
    return key[: len(prefix)] == prefix


@dataclass
class CacheEntry:
    data: Any = None
    error: Optional[Exception] = None
    updated_at: Optional[float] = None
    invalidated: bool = False


class QueryCache:
    def __init__(self, stale_time: float = DEFAULT_STALE_TIME, clock: Callable[[], float] = time.monotonic):
        self.stale_time = stale_time
        self._clock = clock
        self._entries: Dict[CacheKey, CacheEntry] = {}
        self._generations: Dict[CacheKey, int] = {}
        self._in_flight: Dict[CacheKey, Future] = {}
        self._lock = threading.Lock()

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        with self._lock:
            return self._entries.get(key)

    def generation(self, key: CacheKey) -> int:
        """Counter bumped by every invalidation of ``key``; taken before a fetch starts."""
        with self._lock:
            return self._generations.setdefault(key, 0)

    def is_fresh(self, key: CacheKey, stale_time: Optional[float] = None) -> bool:
        window = self.stale_time if stale_time is None else stale_time
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.updated_at is None:
                return False
            if entry.error is not None or entry.invalidated:
                return False
            return (self._clock() - entry.updated_at) < window

    def set_data(self, key: CacheKey, data: Any, generation: Optional[int] = None) -> None:
        """Store ``data``; it stays stale if ``key`` was invalidated after ``generation`` was taken."""
        with self._lock:
            outdated = generation is not None and self._generations.get(key, 0) != generation
            self._entries[key] = CacheEntry(data=data, error=None, updated_at=self._clock(), invalidated=outdated)

    def set_error(self, key: CacheKey, error: Exception) -> None:
        with self._lock:
            entry = self._entries.setdefault(key, CacheEntry())
            entry.error = error

    def invalidate(self, prefix: Iterable[Any]) -> int:
        """Mark every entry whose key is or starts with ``prefix`` as stale."""
        prefix = make_key(prefix)
        count = 0
        with self._lock:
            for key in set(self._entries) | set(self._generations):
                if not key_startswith(key, prefix):
                    continue
                self._generations[key] = self._generations.get(key, 0) + 1
                entry = self._entries.get(key)
                if entry is not None:
                    entry.invalidated = True
                    count += 1
        log.debug(f"Invalidated {count} cache entries under {prefix}")
        return count

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for key in self._generations:
                self._generations[key] += 1

    def dedupe(self, key: CacheKey, fetch: Callable[[], Any]) -> Any:
        """Run ``fetch`` unless an identical one is in flight, in which case join it."""
        with self._lock:
            future = self._in_flight.get(key)
            owner = future is None
            if owner:
                future = Future()
                self._in_flight[key] = future

        if not owner:
            return future.result()

        try:
            result = fetch()
        except BaseException as e:
            future.set_exception(e)
            raise
        else:
            future.set_result(result)
            return result
        finally:
            with self._lock:
                if self._in_flight.get(key) is future:
                    del self._in_flight[key]
