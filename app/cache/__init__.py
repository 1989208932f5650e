"""Cache implementations package."""

from app.cache.memory import CacheEntry, MemoryCacheBackend

__all__ = [
    "CacheEntry",
    "MemoryCacheBackend",
]
