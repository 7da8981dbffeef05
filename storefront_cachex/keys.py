"""Cache key construction for catalog queries.

Keys are ``<prefix>-<detail>``, where list-style queries serialize their
parameters as compact JSON with sorted keys so equal parameter sets always
produce the same key, e.g. ``products-all-{"limit":15,"skip":0}``.
"""

import json
from typing import Any

from .types import CACHE_KEY_SEPARATOR
from .types import Operation
from .types import QueryDescriptor

PRODUCTS_ALL = "products-all"
PRODUCT_DETAIL = "product"
CATEGORIES = "categories"
PRODUCTS_BY_CATEGORY = "products-category"
PRODUCTS_SEARCH = "products-search"


def serialize_params(params: dict[str, Any]) -> str:
    """Deterministically serialize query parameters, dropping unset values."""
    present = {k: v for k, v in params.items() if v is not None}
    return json.dumps(present, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def list_all_query(
    limit: int | None = None, skip: int | None = None, category: str | None = None
) -> QueryDescriptor:
    params = serialize_params({"limit": limit, "skip": skip, "category": category})
    return QueryDescriptor(
        Operation.LIST_ALL, f"{PRODUCTS_ALL}{CACHE_KEY_SEPARATOR}{params}"
    )


def get_by_id_query(product_id: str | int) -> QueryDescriptor:
    return QueryDescriptor(
        Operation.GET_BY_ID, f"{PRODUCT_DETAIL}{CACHE_KEY_SEPARATOR}{product_id}"
    )


def categories_query() -> QueryDescriptor:
    return QueryDescriptor(Operation.CATEGORIES, CATEGORIES)


def by_category_query(display_name: str) -> QueryDescriptor:
    return QueryDescriptor(
        Operation.BY_CATEGORY,
        f"{PRODUCTS_BY_CATEGORY}{CACHE_KEY_SEPARATOR}{display_name}",
    )


def normalize_search_query(query: str) -> str:
    return query.strip().lower()


def search_query(query: str) -> QueryDescriptor:
    """Search results share the list-all TTL, so they carry its operation."""
    params = serialize_params({"q": normalize_search_query(query)})
    return QueryDescriptor(
        Operation.LIST_ALL, f"{PRODUCTS_SEARCH}{CACHE_KEY_SEPARATOR}{params}"
    )
