"""Cache backend implementations for Storefront-CacheX."""

from .base import BaseCacheBackend
from .memory import MemoryBackend

__all__ = [
    "BaseCacheBackend",
    "MemoryBackend",
]
