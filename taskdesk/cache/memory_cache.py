"""In-process cache for taskdesk.

A single-process key/value store with per-entry expiration. There is no
cross-process coherence; one instance is created per application process
and injected wherever it is needed.
"""

import logging
import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import BaseModel

from taskdesk.models.constants import CACHE_KEY_PREFIX

logger = logging.getLogger(__name__)


def task_cache_key(task_id: int) -> str:
    """Cache key for a task ID."""
    return f"{CACHE_KEY_PREFIX}{task_id}"


def _detached(value: Any) -> Any:
    # Pydantic models are mutable; never hand out the stored instance
    if isinstance(value, BaseModel):
        return value.model_copy(deep=True)
    return value


class MemoryCache:
    """Thread-safe TTL cache backed by a dict.

    Expired entries are dropped lazily on read, and swept in bulk from
    ``set()`` at most once every ``sweep_interval``, so keys that are never
    read again do not pile up.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: timedelta = timedelta(minutes=1),
    ):
        self._clock = clock
        self._sweep_every = sweep_interval.total_seconds()
        self._next_sweep = clock() + self._sweep_every
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= self._clock():
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None
            return _detached(value)

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        seconds = ttl.total_seconds()
        if seconds <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl}")
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                swept = self._drop_expired(now)
                self._next_sweep = now + self._sweep_every
                if swept:
                    logger.debug(f"Swept {swept} expired cache entries")
            self._entries[key] = (now + seconds, _detached(value))

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _drop_expired(self, now: float) -> int:
        # Caller holds the lock
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            return self._drop_expired(now)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
