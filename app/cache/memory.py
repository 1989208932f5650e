"""In-memory cache backend implementation."""

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any, NamedTuple

from app.core.cache import CacheBackend

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    """Cache entry with value and creation time."""

    value: Any
    created_at: float


class MemoryCacheBackend(CacheBackend):
    """
    Time-boxed in-memory cache with a soft size cap.

    Entries older than ``ttl`` seconds are never returned; they are dropped
    when next read. When an insert pushes the size past ``max_entries`` the
    single oldest-inserted entry is evicted (insertion order, not access
    order).
    """

    def __init__(
        self,
        ttl: float = 30.0,
        max_entries: int = 100,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize memory cache backend.

        Args:
            ttl: Entry lifetime in seconds.
            max_entries: Size above which the oldest entry is evicted.
            clock: Monotonic time source, replaceable in tests.
        """
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: str) -> Any | None:
        """Retrieve a fresh value from memory."""
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if self._clock() - entry.created_at >= self._ttl:
                del self._store[key]
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, evicting the oldest entry if over capacity."""
        with self._lock:
            # An overwrite counts as a fresh insertion
            self._store.pop(key, None)
            self._store[key] = CacheEntry(value=value, created_at=self._clock())
            if len(self._store) > self._max_entries:
                oldest, _ = self._store.popitem(last=False)
                logger.debug(f"Cache full, evicted {oldest}")

    def delete(self, key: str) -> bool:
        """Delete a key from memory."""
        with self._lock:
            return self._store.pop(key, None) is not None

    def clear(self) -> None:
        """Clear the in-memory store."""
        with self._lock:
            self._store.clear()

    def keys(self) -> list[str]:
        """Current keys, oldest first."""
        with self._lock:
            return list(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
