import asyncio
from collections import Counter
from typing import Optional

import pytest

from storefront_cachex.backends.memory import MemoryBackend
from storefront_cachex.config import CatalogConfig
from storefront_cachex.exceptions import ProviderError
from storefront_cachex.fetcher import CatalogFetcher
from storefront_cachex.providers.base import ProductProvider
from storefront_cachex.types import Product
from storefront_cachex.types import ProductPage


def make_product(
    product_id: str, name: str, category: str, price: float = 300.0
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price=price,
        description=f"{name} description",
        category=category,
        stock=10,
        images=[f"https://img.example/{product_id}.jpg"],
        created_at="2026-01-01T00:00:00+00:00",
    )


class FakeClock:
    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeProvider(ProductProvider):
    """In-memory provider that counts calls and can be told to fail."""

    def __init__(
        self,
        name: str,
        products: list[Product],
        categories: Optional[list[str]] = None,
        fail: bool = False,
        delay: float = 0.0,
    ) -> None:
        self.name = name
        self.products = products
        self.categories = categories or sorted({p.category for p in products})
        self.fail = fail
        self.delay = delay
        self.calls: Counter[str] = Counter()
        self.closed = False

    async def _enter(self, method: str) -> None:
        self.calls[method] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise ProviderError(self.name, f"{method} failed", status_code=500)

    async def list_products(
        self, limit: Optional[int] = None, skip: Optional[int] = None
    ) -> ProductPage:
        await self._enter("list_products")
        start = skip or 0
        items = self.products[start : start + limit if limit else None]
        return ProductPage(items=items, total=len(self.products))

    async def get_product(self, product_id: str) -> Product:
        await self._enter("get_product")
        for product in self.products:
            if product.id == product_id:
                return product
        raise ProviderError(self.name, "not found", status_code=404)

    async def list_categories(self) -> list[str]:
        await self._enter("list_categories")
        return list(self.categories)

    async def list_by_category(self, display_name: str) -> list[Product]:
        await self._enter("list_by_category")
        return [p for p in self.products if p.category == display_name]

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def catalog() -> list[Product]:
    return [
        make_product("1", "Laptop Pro", "Elektronik", price=900.0),
        make_product("2", "Lapel Pin", "Takı ve Mücevher", price=120.0),
        make_product("3", "Running Shoes", "Spor", price=450.0),
        make_product("4", "Lapis Necklace", "Takı ve Mücevher", price=600.0),
        make_product("5", "Headphones", "elektronik", price=250.0),
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def backend(clock: FakeClock) -> MemoryBackend:
    return MemoryBackend(clock=clock)


@pytest.fixture
def primary(catalog: list[Product]) -> FakeProvider:
    return FakeProvider("primary", catalog)


@pytest.fixture
def secondary(catalog: list[Product]) -> FakeProvider:
    return FakeProvider("secondary", list(reversed(catalog)))


@pytest.fixture
def fetcher(
    primary: FakeProvider, secondary: FakeProvider, backend: MemoryBackend
) -> CatalogFetcher:
    return CatalogFetcher(primary, secondary, backend=backend, config=CatalogConfig())
