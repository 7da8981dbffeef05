from abc import ABC
from abc import abstractmethod
from typing import Any
from typing import Optional


class BaseCacheBackend(ABC):
    """Base class for all cache backends."""

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Retrieve a cached value, or None when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a value in the cache, overwriting any existing entry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a value from the cache."""

    @abstractmethod
    async def clear(self) -> None:
        """Clear all cached values."""
