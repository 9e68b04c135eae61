"""Caching for taskdesk."""

from taskdesk.cache.memory_cache import MemoryCache, task_cache_key

__all__ = [
    "MemoryCache",
    "task_cache_key",
]
