"""Storefront-CacheX: cached, provider-resilient access to a product catalog."""

from .config import CatalogConfig as CatalogConfig
from .config import OperationTTL as OperationTTL
from .dependencies import get_catalog_fetcher as get_catalog_fetcher
from .dependencies import get_search_service as get_search_service
from .fetcher import CatalogFetcher as CatalogFetcher
from .fetcher import first_success as first_success
from .proxy import CatalogProxy as CatalogProxy
from .routes import add_routes as add_routes
from .search import SearchService as SearchService
from .types import FetchResult as FetchResult
from .types import Product as Product

__all__ = [
    "CatalogConfig",
    "CatalogFetcher",
    "CatalogProxy",
    "FetchResult",
    "OperationTTL",
    "Product",
    "SearchService",
    "add_routes",
    "first_success",
    "get_catalog_fetcher",
    "get_search_service",
]
