"""Catalog fetcher configuration settings."""

from pydantic import BaseModel
from pydantic import Field

from .normalize import PLACEHOLDER_IMAGE_URL
from .types import Operation


class OperationTTL(BaseModel):
    """Per-operation cache lifetime in seconds."""

    list_all: float = Field(
        default=300,
        gt=0,
        description="TTL for catalog-wide product listings (default: 5 minutes)",
    )
    get_by_id: float = Field(
        default=600,
        gt=0,
        description="TTL for single product details (default: 10 minutes)",
    )
    categories: float = Field(
        default=1800,
        gt=0,
        description="TTL for the category list (default: 30 minutes)",
    )
    by_category: float = Field(
        default=600,
        gt=0,
        description="TTL for per-category product listings (default: 10 minutes)",
    )


class CatalogConfig(BaseModel):
    """Catalog fetcher configuration settings."""

    # Upstream providers
    primary_base_url: str = Field(
        default="https://fakestoreapi.com",
        description="Base URL of the primary product provider",
    )
    secondary_base_url: str = Field(
        default="https://dummyjson.com",
        description="Base URL of the secondary product provider",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Per-request upstream timeout in seconds",
    )
    secondary_page_size: int = Field(
        default=20,
        ge=1,
        description="Page size sent to the secondary provider when no limit is given",
    )

    # Normalization
    currency_multiplier: float = Field(
        default=30.0,
        gt=0,
        description="Fixed multiplier converting upstream prices to the store currency",
    )
    placeholder_image_url: str = Field(
        default=PLACEHOLDER_IMAGE_URL,
        description="Image used when a provider item carries no image at all",
    )

    # Cache policy
    ttl_by_operation: OperationTTL = Field(
        default_factory=OperationTTL,
        description="Cache lifetime per catalog operation",
    )
    coalesce_inflight: bool = Field(
        default=False,
        description="Share one upstream fetch between concurrent misses on the same key",
    )
    cleanup_interval: float = Field(
        default=60,
        gt=0,
        description="Seconds between background sweeps of expired cache entries",
    )

    # Search and prefetch
    search_min_length: int = Field(
        default=3,
        ge=1,
        description="Minimum query length before searching or prefetching",
    )
    prefetch_suffixes: tuple[str, ...] = Field(
        default=("s", "es", "ing", "ed"),
        description="Suffixes appended to the current query to warm likely follow-ups",
    )

    def ttl_for(self, operation: Operation) -> float:
        """Return the configured TTL in seconds for ``operation``."""
        return getattr(self.ttl_by_operation, Operation(operation).value)
