"""FastAPI dependencies resolving the configured catalog services."""

from typing import Annotated

from fastapi import Depends
from fastapi import HTTPException
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from .exceptions import FetcherNotFoundError
from .fetcher import CatalogFetcher
from .proxy import CatalogProxy
from .search import SearchService


async def get_catalog_fetcher() -> CatalogFetcher:
    try:
        fetcher = CatalogProxy.get_fetcher()
    except FetcherNotFoundError as exc:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    fetcher.start()
    return fetcher


async def get_search_service() -> SearchService:
    try:
        search = CatalogProxy.get_search()
    except FetcherNotFoundError as exc:
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc
    search.fetcher.start()
    return search


Fetcher = Annotated[CatalogFetcher, Depends(get_catalog_fetcher)]
Search = Annotated[SearchService, Depends(get_search_service)]
