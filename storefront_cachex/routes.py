"""Catalog and cache monitoring routes."""

from typing import Any
from typing import Optional

from fastapi import APIRouter
from fastapi import FastAPI
from fastapi import Query
from fastapi.responses import JSONResponse
from starlette.status import HTTP_200_OK
from starlette.status import HTTP_404_NOT_FOUND
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from .backends import MemoryBackend
from .dependencies import Fetcher
from .dependencies import Search
from .exceptions import ProductNotFound
from .search import SortKey
from .types import FetchResult


def _respond(result: FetchResult) -> JSONResponse:
    if result.success:
        status = HTTP_200_OK
    elif isinstance(result.exception, ProductNotFound):
        status = HTTP_404_NOT_FOUND
    else:
        status = HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=result.to_dict(), status_code=status)


async def _describe_entries(backend: Any) -> dict[str, Any]:
    entries: list[dict[str, Any]] = []
    # Only the memory backend can enumerate its keys
    if isinstance(backend, MemoryBackend):
        now = backend.clock()
        for key, item in sorted(await backend.entries(), key=lambda pair: pair[0]):
            entries.append(
                {
                    "key": key,
                    "expires_at": item.expiry,
                    "ttl_remaining": (
                        max(0.0, item.expiry - now) if item.expiry is not None else None
                    ),
                    "is_expired": not item.is_valid(now),
                }
            )
    valid_count = sum(1 for entry in entries if not entry["is_expired"])
    return {
        "entries": entries,
        "total_entries": len(entries),
        "valid_entries": valid_count,
        "expired_entries": len(entries) - valid_count,
    }


def create_router() -> APIRouter:
    router = APIRouter(tags=["catalog"])

    @router.get("/products")
    async def list_products(
        fetcher: Fetcher,
        limit: Optional[int] = Query(default=None, ge=1),
        skip: Optional[int] = Query(default=None, ge=0),
        category: Optional[str] = None,
    ) -> JSONResponse:
        return _respond(await fetcher.list_all(limit=limit, skip=skip, category=category))

    @router.get("/products/categories")
    async def list_categories(fetcher: Fetcher) -> JSONResponse:
        return _respond(await fetcher.list_categories())

    @router.get("/products/category/{name}")
    async def list_by_category(name: str, fetcher: Fetcher) -> JSONResponse:
        return _respond(await fetcher.list_by_category(name))

    @router.get("/products/search")
    async def search_products(
        search: Search,
        q: str = "",
        min_price: Optional[float] = Query(default=None, ge=0),
        max_price: Optional[float] = Query(default=None, ge=0),
        sort_by: SortKey = "default",
    ) -> JSONResponse:
        return _respond(
            await search.search(
                q, min_price=min_price, max_price=max_price, sort_by=sort_by
            )
        )

    @router.get("/products/{product_id}")
    async def get_product(product_id: str, fetcher: Fetcher) -> JSONResponse:
        return _respond(await fetcher.get_by_id(product_id))

    @router.delete("/cache")
    async def clear_cache(fetcher: Fetcher) -> JSONResponse:
        return _respond(await fetcher.clear_cache())

    @router.get("/cache/entries")
    async def cache_entries(fetcher: Fetcher) -> dict[str, Any]:
        return await _describe_entries(fetcher.backend)

    return router


def add_routes(app: FastAPI, prefix: str = "/api") -> None:
    """Mount the catalog routes on ``app`` under ``prefix``."""
    app.include_router(create_router(), prefix=prefix)
