"""Upstream catalog providers for Storefront-CacheX."""

from .base import HttpProvider
from .base import ProductProvider
from .dummyjson import DummyJSONProvider
from .fakestore import FakeStoreProvider
from .static import DEFAULT_CATEGORIES
from .static import StaticCategories

__all__ = [
    "DEFAULT_CATEGORIES",
    "DummyJSONProvider",
    "FakeStoreProvider",
    "HttpProvider",
    "ProductProvider",
    "StaticCategories",
]
