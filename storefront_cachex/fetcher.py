"""Resilient, cached access to the product catalog.

Each catalog operation is an ordered chain of provider tiers. The first tier
that answers wins; its normalized result is wrapped in a ``FetchResult`` and
cached under the key of the requested query with the operation's TTL. When
every tier fails the operation's ``CatalogError`` is reported as a failed
envelope and nothing is cached, so the next call retries the whole chain.
"""

import asyncio
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from logging import getLogger
from typing import Optional
from typing import TypeVar

import httpx

from .backends import BaseCacheBackend
from .backends import MemoryBackend
from .config import CatalogConfig
from .exceptions import CatalogError
from .exceptions import CategoriesUnavailable
from .exceptions import CategoryProductsUnavailable
from .exceptions import ProductNotFound
from .exceptions import ProductsUnavailable
from .exceptions import ProviderError
from .keys import by_category_query
from .keys import categories_query
from .keys import get_by_id_query
from .keys import list_all_query
from .normalize import matches_category
from .providers import DummyJSONProvider
from .providers import FakeStoreProvider
from .providers import ProductProvider
from .providers import StaticCategories
from .types import FetchResult
from .types import Operation
from .types import Product
from .types import QueryDescriptor

logger = getLogger(__name__)

T = TypeVar("T")

async def first_success(
    tiers: Sequence[tuple[str, Callable[[], Awaitable[T]]]],
    error_cls: type[CatalogError],
    operation: Operation,
) -> T:
    """Await each tier in order and return the first result that does not fail.

    Only ``ProviderError`` advances the chain; anything else propagates.

    Raises:
        CatalogError: ``error_cls``, chained to the last provider error, when
            every tier failed.
    """
    last_error: Optional[ProviderError] = None
    for name, call in tiers:
        try:
            result = await call()
        except ProviderError as exc:
            logger.warning("%s tier '%s' failed: %s", operation.value, name, exc)
            last_error = exc
            continue
        logger.debug("%s served by tier '%s'", operation.value, name)
        return result
    raise error_cls(operation=operation.value) from last_error


class CatalogFetcher:
    """Cached catalog reads with provider fallback.

    One instance wired through the application's composition root gives the
    process-wide shared cache; tests construct their own.
    """

    def __init__(
        self,
        primary: ProductProvider,
        secondary: ProductProvider,
        *,
        backend: BaseCacheBackend | None = None,
        config: CatalogConfig | None = None,
        static_categories: StaticCategories | None = None,
    ) -> None:
        self.config = config or CatalogConfig()
        self.primary = primary
        self.secondary = secondary
        self.static_categories = static_categories or StaticCategories()
        self.backend = backend or MemoryBackend(
            cleanup_interval=self.config.cleanup_interval
        )
        self._inflight: dict[str, asyncio.Task[FetchResult]] = {}

    @classmethod
    def from_config(
        cls,
        config: CatalogConfig | None = None,
        *,
        backend: BaseCacheBackend | None = None,
        http: httpx.AsyncClient | None = None,
    ) -> "CatalogFetcher":
        """Build a fetcher over the FakeStore (primary) and DummyJSON (secondary) APIs."""
        config = config or CatalogConfig()
        primary = FakeStoreProvider(
            config.primary_base_url,
            currency_multiplier=config.currency_multiplier,
            placeholder_image_url=config.placeholder_image_url,
            timeout=config.request_timeout,
            http=http,
        )
        secondary = DummyJSONProvider(
            config.secondary_base_url,
            currency_multiplier=config.currency_multiplier,
            placeholder_image_url=config.placeholder_image_url,
            page_size=config.secondary_page_size,
            timeout=config.request_timeout,
            http=http,
        )
        return cls(primary, secondary, backend=backend, config=config)

    def start(self) -> None:
        """Start the backend's periodic expiry sweep, if it has one."""
        if isinstance(self.backend, MemoryBackend):
            self.backend.start_cleanup()

    def stop(self) -> None:
        if isinstance(self.backend, MemoryBackend):
            self.backend.stop_cleanup()

    async def aclose(self) -> None:
        self.stop()
        await self.primary.aclose()
        await self.secondary.aclose()

    # ---------------------------- Cache plumbing ----------------------------- #

    async def is_cached(self, key: str) -> bool:
        return await self.backend.get(key) is not None

    async def fetch(
        self, query: QueryDescriptor, load: Callable[[], Awaitable[FetchResult]]
    ) -> FetchResult:
        """Return the cached result for ``query`` or run ``load`` and cache it.

        A ``CatalogError`` from ``load`` becomes a failed envelope that is
        never cached.
        """
        try:
            return await self._cached(query, load)
        except CatalogError as exc:
            logger.error("%s exhausted every tier for %s: %s", exc.operation, query.key, exc)
            return FetchResult.failure(exc)

    async def _cached(
        self, query: QueryDescriptor, load: Callable[[], Awaitable[FetchResult]]
    ) -> FetchResult:
        cached = await self.backend.get(query.key)
        if cached is not None:
            logger.debug("Cache hit for %s", query.key)
            return cached
        logger.debug("Cache miss for %s", query.key)

        if not self.config.coalesce_inflight:
            return await self._load_and_store(query, load)

        task = self._inflight.get(query.key)
        if task is None:
            task = asyncio.ensure_future(self._load_and_store(query, load))
            self._inflight[query.key] = task
            task.add_done_callback(lambda t: self._forget_inflight(query.key, t))
        return await asyncio.shield(task)

    async def _load_and_store(
        self, query: QueryDescriptor, load: Callable[[], Awaitable[FetchResult]]
    ) -> FetchResult:
        try:
            result = await load()
            await self.backend.set(
                query.key, result, ttl=self.config.ttl_for(query.operation)
            )
            return result
        finally:
            # Cleared before the task settles so a later caller starts afresh
            self._inflight.pop(query.key, None)

    def _forget_inflight(self, key: str, task: asyncio.Task[FetchResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    # ------------------------------ Operations ------------------------------- #

    async def list_all(
        self,
        limit: Optional[int] = None,
        skip: Optional[int] = None,
        category: Optional[str] = None,
    ) -> FetchResult:
        """List products; ``category`` narrows the fetched page by display name."""
        query = list_all_query(limit=limit, skip=skip, category=category)

        async def load() -> FetchResult:
            page = await first_success(
                [
                    (self.primary.name, lambda: self.primary.list_products(limit, skip)),
                    (
                        self.secondary.name,
                        lambda: self.secondary.list_products(limit, skip),
                    ),
                ],
                ProductsUnavailable,
                Operation.LIST_ALL,
            )
            if category:
                items = [p for p in page.items if matches_category(p, category)]
                return FetchResult.ok(items, total=len(items))
            return FetchResult.ok(page.items, total=page.total)

        return await self.fetch(query, load)

    async def get_by_id(self, product_id: str | int) -> FetchResult:
        query = get_by_id_query(product_id)
        product_id = str(product_id)

        async def load() -> FetchResult:
            product = await first_success(
                [
                    (self.primary.name, lambda: self.primary.get_product(product_id)),
                    (self.secondary.name, lambda: self.secondary.get_product(product_id)),
                ],
                ProductNotFound,
                Operation.GET_BY_ID,
            )
            return FetchResult.ok(product)

        return await self.fetch(query, load)

    async def list_categories(self) -> FetchResult:
        """List category display names; degrades to the static defaults."""

        async def load() -> FetchResult:
            categories = await first_success(
                [
                    (self.primary.name, self.primary.list_categories),
                    (self.secondary.name, self.secondary.list_categories),
                    (self.static_categories.name, self.static_categories.list_categories),
                ],
                CategoriesUnavailable,
                Operation.CATEGORIES,
            )
            return FetchResult.ok(categories)

        return await self.fetch(categories_query(), load)

    async def list_by_category(self, display_name: str) -> FetchResult:
        """List a category's products; degrades to filtering the full listing."""

        async def load() -> FetchResult:
            items = await first_success(
                [
                    (
                        self.primary.name,
                        lambda: self.primary.list_by_category(display_name),
                    ),
                    (
                        self.secondary.name,
                        lambda: self.secondary.list_by_category(display_name),
                    ),
                    ("local-filter", lambda: self._filter_listing(display_name)),
                ],
                CategoryProductsUnavailable,
                Operation.BY_CATEGORY,
            )
            return FetchResult.ok(items, total=len(items))

        return await self.fetch(by_category_query(display_name), load)

    async def _filter_listing(self, display_name: str) -> list[Product]:
        listing = await self.list_all()
        if not listing.success:
            logger.warning(
                "No listing available to filter for category '%s'", display_name
            )
            return []
        return [p for p in listing.data if matches_category(p, display_name)]

    async def clear_cache(self) -> FetchResult:
        """Drop every cached entry so the next read of any key goes upstream."""
        await self.backend.clear()
        logger.info("Catalog cache cleared")
        return FetchResult(success=True, message="API cache cleared")
