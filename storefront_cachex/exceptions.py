class StorefrontCacheXError(Exception):
    """Base class for all exceptions in Storefront-CacheX."""


class FetcherNotFoundError(StorefrontCacheXError):
    """Exception raised when no catalog fetcher has been configured."""


class ProviderError(StorefrontCacheXError):
    """A single upstream provider call failed.

    Covers transport errors, timeouts, non-2xx responses and bodies that do
    not match the provider's documented shape.
    """

    def __init__(
        self, provider: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status_code = status_code


class CatalogError(StorefrontCacheXError):
    """Every fallback tier of a catalog operation has been exhausted."""

    default_message = "Catalog operation failed"

    def __init__(self, message: str | None = None, operation: str = "") -> None:
        self.message = message or self.default_message
        self.operation = operation
        super().__init__(self.message)


class ProductsUnavailable(CatalogError):
    default_message = "Products could not be fetched"


class ProductNotFound(CatalogError):
    default_message = "Product details could not be found"


class CategoriesUnavailable(CatalogError):
    default_message = "Categories could not be fetched"


class CategoryProductsUnavailable(CatalogError):
    default_message = "Category products could not be fetched"
