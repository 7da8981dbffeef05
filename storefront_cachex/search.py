"""Product search with speculative prefetching of likely follow-up queries.

A search answers from the cached catalog listing, so its matches are cached
under the search key with the list-all TTL. After each search long enough to
run, the service warms the cache for the query extended by each configured
suffix (``"lap"`` -> ``"laps"``, ``"lapes"``, ...). Those prefetches run as
background tasks that never delay the caller's result.
"""

import asyncio
from collections.abc import Iterable
from logging import getLogger
from typing import Literal
from typing import Optional

from .exceptions import ProductsUnavailable
from .fetcher import CatalogFetcher
from .keys import normalize_search_query
from .keys import search_query
from .types import FetchResult
from .types import Operation
from .types import Product

logger = getLogger(__name__)

SortKey = Literal["default", "price-asc", "price-desc", "name-asc", "name-desc"]


def matches_query(product: Product, term: str) -> bool:
    """Case-insensitive substring match on name, description and category."""
    term = term.lower()
    return (
        term in product.name.lower()
        or term in product.description.lower()
        or term in product.category.lower()
    )


def refine_products(
    products: Iterable[Product],
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort_by: SortKey = "default",
) -> list[Product]:
    """Apply the storefront listing's price range and sort order."""
    refined = [
        p
        for p in products
        if (min_price is None or p.price >= min_price)
        and (max_price is None or p.price <= max_price)
    ]
    if sort_by == "price-asc":
        refined.sort(key=lambda p: p.price)
    elif sort_by == "price-desc":
        refined.sort(key=lambda p: p.price, reverse=True)
    elif sort_by == "name-asc":
        refined.sort(key=lambda p: p.name.casefold())
    elif sort_by == "name-desc":
        refined.sort(key=lambda p: p.name.casefold(), reverse=True)
    return refined


class SearchService:
    def __init__(self, fetcher: CatalogFetcher) -> None:
        self.fetcher = fetcher
        self.config = fetcher.config
        self._prefetch_tasks: set[asyncio.Task[None]] = set()

    async def search(
        self,
        query: str,
        *,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        sort_by: SortKey = "default",
        prefetch: bool = True,
    ) -> FetchResult:
        """Search the catalog; queries shorter than the minimum match nothing."""
        term = normalize_search_query(query)
        if len(term) < self.config.search_min_length:
            return FetchResult.ok([], total=0)

        result = await self._search(term)
        if prefetch:
            self.prefetch(term)

        if not result.success or (
            min_price is None and max_price is None and sort_by == "default"
        ):
            return result
        # The cached envelope is shared, so refinements build a new one.
        refined = refine_products(result.data, min_price, max_price, sort_by)
        return FetchResult.ok(refined, total=len(refined))

    async def _search(self, term: str) -> FetchResult:
        async def load() -> FetchResult:
            listing = await self.fetcher.list_all()
            if not listing.success:
                raise ProductsUnavailable(operation=Operation.LIST_ALL.value)
            matches = [p for p in listing.data if matches_query(p, term)]
            return FetchResult.ok(matches, total=len(matches))

        return await self.fetcher.fetch(search_query(term), load)

    def prefetch(self, term: str) -> list[asyncio.Task[None]]:
        """Schedule cache warm-up for ``term`` extended by every suffix.

        The tasks run in the background and their failures are only logged.
        """
        term = normalize_search_query(term)
        if len(term) < self.config.search_min_length:
            return []
        tasks = []
        for suffix in self.config.prefetch_suffixes:
            task = asyncio.create_task(self._prefetch_one(term + suffix))
            self._prefetch_tasks.add(task)
            task.add_done_callback(self._forget_prefetch)
            tasks.append(task)
        return tasks

    async def _prefetch_one(self, candidate: str) -> None:
        if await self.fetcher.is_cached(search_query(candidate).key):
            return
        await self._search(candidate)

    def _forget_prefetch(self, task: asyncio.Task[None]) -> None:
        self._prefetch_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.debug("Discarding failed prefetch: %r", exc)

    @property
    def pending_prefetches(self) -> int:
        return len(self._prefetch_tasks)

    async def drain(self) -> None:
        """Wait for every scheduled prefetch to settle."""
        while self._prefetch_tasks:
            await asyncio.gather(*list(self._prefetch_tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel pending prefetches, then close the underlying fetcher."""
        for task in list(self._prefetch_tasks):
            task.cancel()
        await self.drain()
        await self.fetcher.aclose()
