"""Small read-through cache with expiry and a size bound.

Used in front of queries that dashboards hit repeatedly (stock items for
expiry alerts). Writers call :meth:`TTLCache.invalidate` after committing.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from typing import Any

logger = logging.getLogger(__name__)


class TTLCache:
    """Entries expire *ttl_seconds* after being stored; the oldest entry is
    evicted first once *max_entries* is reached."""

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 128,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._ttl = ttl_seconds
        self._max = max_entries
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            self._purge_expired()
            return len(self._entries)

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            stored_at, value = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[key]
                return default
            return value

    def set(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._entries.pop(key, None)
            self._purge_expired()
            while len(self._entries) >= self._max:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Cache full, evicted %r", evicted)
            self._entries[key] = (self._clock(), value)

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """Return the cached value for *key*, calling *loader* on a miss."""
        sentinel = object()
        value = self.get(key, sentinel)
        if value is sentinel:
            value = loader()
            self.set(key, value)
        return value

    def invalidate(self, key: Hashable | None = None) -> None:
        """Drop *key*, or every entry when *key* is None."""
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (t, _) in self._entries.items() if now - t >= self._ttl]
        for k in expired:
            del self._entries[k]
