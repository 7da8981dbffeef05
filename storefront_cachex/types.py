"""Type definitions and type aliases for Storefront-CacheX."""

from dataclasses import asdict
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any

from .exceptions import CatalogError

# Separates the operation prefix from the serialized parameters in a cache key
CACHE_KEY_SEPARATOR = "-"


class Operation(str, Enum):
    """Logical catalog operations; each has its own TTL and provider chain."""

    LIST_ALL = "list_all"
    GET_BY_ID = "get_by_id"
    CATEGORIES = "categories"
    BY_CATEGORY = "by_category"


@dataclass(frozen=True)
class QueryDescriptor:
    """The (operation, parameters) pair that identifies a logical fetch."""

    operation: Operation
    key: str


@dataclass
class CacheItem:
    """Cache item with optional expiry time.

    Args:
        value: The cached payload
        expiry: Epoch timestamp when this cache item expires (None = never expires)
    """

    value: Any
    expiry: float | None = None

    def is_valid(self, now: float) -> bool:
        return self.expiry is None or now < self.expiry


@dataclass
class Product:
    """Canonical product record, whichever provider served it."""

    id: str
    name: str
    price: float
    description: str
    category: str
    stock: int
    images: list[str]
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "description": self.description,
            "category": self.category,
            "stock": self.stock,
            "images": list(self.images),
            "createdAt": self.created_at,
        }


@dataclass
class ProductPage:
    """A normalized list of products plus the provider's total, if it reported one."""

    items: list[Product]
    total: int | None = None


@dataclass
class FetchResult:
    """Result envelope wrapping every fetcher return value.

    ``success=True`` with empty ``data`` means "no matches";
    ``success=False`` means the answer could not be determined.
    """

    success: bool
    data: Any = None
    total: int | None = None
    error: str | None = None
    message: str | None = None
    exception: CatalogError | None = field(default=None, repr=False, compare=False)

    @classmethod
    def ok(cls, data: Any, total: int | None = None) -> "FetchResult":
        return cls(success=True, data=data, total=total)

    @classmethod
    def failure(cls, exc: CatalogError, data: Any = None) -> "FetchResult":
        return cls(success=False, data=data, error=exc.message, exception=exc)

    def raise_for_error(self) -> None:
        """Raise the terminal catalog error carried by a failed result."""
        if not self.success and self.exception is not None:
            raise self.exception

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire envelope, omitting unset optional fields."""
        body: dict[str, Any] = {"success": self.success, "data": _dump(self.data)}
        if self.total is not None:
            body["total"] = self.total
        if self.error is not None:
            body["error"] = self.error
        if self.message is not None:
            body["message"] = self.message
        return body


def _dump(data: Any) -> Any:
    if isinstance(data, Product):
        return data.to_dict()
    if isinstance(data, list):
        return [_dump(item) for item in data]
    if hasattr(data, "__dataclass_fields__"):
        return asdict(data)
    return data
