from __future__ import annotations

import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from threading import Event, Lock, Thread, current_thread
from typing import Any, Callable, Generic, Optional, TypeVar

from ..config import LRUCacheConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


@dataclass(slots=True)
class CacheEntry:
    value: Any
    created_at: float
    expires_at: Optional[float]
    access_count: int = 1

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


@dataclass(frozen=True)
class CacheMetrics:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return (self.hits / total) * 100.0 if total else 0.0


@dataclass(frozen=True)
class CacheStats:
    size: int
    max_size: int
    utilization: float
    oldest_entry_age: Optional[float]
    newest_entry_age: Optional[float]
    average_age: float


class ExpirySweeper:
    """Calls `callback` every `interval` seconds on a daemon thread until stopped."""

    def __init__(self, interval: float, callback: Callable[[], object], name: str = "cache-sweeper") -> None:
        self.interval = interval
        self._callback = callback
        self._stopped = Event()
        self._thread = Thread(target=self._run, name=name, daemon=True)

    def start(self) -> None:
        self._thread.start()

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def stop(self, timeout: float = 1.0) -> None:
        self._stopped.set()
        if self._thread.is_alive() and self._thread is not current_thread():
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            try:
                self._callback()
            except Exception:
                logger.exception("Expiry sweep failed")


class LRUCache(Generic[T]):
    """
    In-memory LRU cache with per-entry TTL.

    A single lock guards the entry map, the recency order and the counters;
    it is only held for in-memory bookkeeping so contention stays short.
    TTLs are in seconds and a TTL of 0 never expires.
    """

    def __init__(self, config: Optional[LRUCacheConfig] = None, clock: Clock = time.monotonic) -> None:
        self.config = config or LRUCacheConfig()
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._sweeper: Optional[ExpirySweeper] = None
        if self.config.cleanup_interval > 0:
            self._sweeper = ExpirySweeper(self.config.cleanup_interval, self.cleanup)
            self._sweeper.start()

    def __enter__(self) -> "LRUCache[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    @property
    def max_size(self) -> int:
        return self.config.max_size

    def get(self, key: str) -> Optional[T]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._record_miss()
                return None
            if entry.expired(self._clock()):
                del self._entries[key]
                self._record_miss()
                return None
            self._entries.move_to_end(key)
            entry.access_count += 1
            self._record_hit()
            return entry.value

    def set(self, key: str, value: T, ttl: Optional[float] = None) -> None:
        effective_ttl = self.config.default_ttl if ttl is None else ttl
        now = self._clock()
        entry = CacheEntry(
            value=value,
            created_at=now,
            expires_at=now + effective_ttl if effective_ttl > 0 else None,
        )
        with self._lock:
            if key in self._entries:
                self._entries[key] = entry
                self._entries.move_to_end(key)
                return
            if len(self._entries) >= self.config.max_size:
                self._evict_lru()
            self._entries[key] = entry

    def has(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False
            if entry.expired(self._clock()):
                del self._entries[key]
                return False
            return True

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def delete_where(self, predicate: Callable[[str, T], bool]) -> int:
        with self._lock:
            doomed = [key for key, entry in self._entries.items() if predicate(key, entry.value)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = self._misses = self._evictions = 0

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._entries.keys())

    def access_count(self, key: str) -> int:
        with self._lock:
            entry = self._entries.get(key)
            return entry.access_count if entry else 0

    def cleanup(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Removed %d expired cache entries", len(expired))
        return len(expired)

    def metrics(self) -> CacheMetrics:
        with self._lock:
            return CacheMetrics(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
            )

    def reset_metrics(self) -> None:
        with self._lock:
            self._hits = self._misses = self._evictions = 0

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            ages = [now - entry.created_at for entry in self._entries.values()]
        size = len(ages)
        return CacheStats(
            size=size,
            max_size=self.config.max_size,
            utilization=(size / self.config.max_size) * 100.0,
            oldest_entry_age=max(ages) if ages else None,
            newest_entry_age=min(ages) if ages else None,
            average_age=sum(ages) / size if size else 0.0,
        )

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and self._sweeper.running

    def close(self) -> None:
        if self._sweeper is not None:
            self._sweeper.stop()
            self._sweeper = None
        self.clear()

    def _evict_lru(self) -> None:
        if not self._entries:
            return
        self._entries.popitem(last=False)
        self._evictions += 1

    def _record_hit(self) -> None:
        if self.config.enable_metrics:
            self._hits += 1

    def _record_miss(self) -> None:
        if self.config.enable_metrics:
            self._misses += 1
