"""Primary provider: the FakeStore REST API."""

import random
from typing import Any
from typing import Optional

import httpx

from storefront_cachex.normalize import build_product
from storefront_cachex.normalize import convert_price
from storefront_cachex.normalize import PLACEHOLDER_IMAGE_URL
from storefront_cachex.normalize import ensure_images
from storefront_cachex.normalize import placeholder_stock
from storefront_cachex.normalize import translate
from storefront_cachex.types import Product
from storefront_cachex.types import ProductPage

from .base import HttpProvider

CATEGORY_NAMES: dict[str, str] = {
    "electronics": "Elektronik",
    "jewelery": "Takı ve Mücevher",
    "men's clothing": "Erkek Giyim",
    "women's clothing": "Kadın Giyim",
}

CATEGORY_TOKENS: dict[str, str] = {name: slug for slug, name in CATEGORY_NAMES.items()}


class FakeStoreProvider(HttpProvider):
    """FakeStore reports no stock, so a placeholder is synthesized per item."""

    name = "fakestore"

    def __init__(
        self,
        base_url: str = "https://fakestoreapi.com",
        *,
        currency_multiplier: float = 30.0,
        placeholder_image_url: str = PLACEHOLDER_IMAGE_URL,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, http=http)
        self.currency_multiplier = currency_multiplier
        self.placeholder_image_url = placeholder_image_url
        self._rng = rng

    def _to_product(self, item: dict[str, Any], category: Optional[str] = None) -> Product:
        return build_product(
            item_id=item["id"],
            name=item["title"],
            price=convert_price(item["price"], self.currency_multiplier),
            description=item.get("description"),
            category=category or translate(item["category"], CATEGORY_NAMES),
            stock=placeholder_stock(self._rng),
            images=ensure_images(
                [item.get("image"), f"{self.base_url}/img/{item['id']}"],
                self.placeholder_image_url,
            ),
        )

    def _to_products(self, raw: Any, category: Optional[str] = None) -> list[Product]:
        if not isinstance(raw, list):
            raise TypeError("expected a JSON array of products")
        return [self._to_product(item, category) for item in raw]

    async def list_products(
        self, limit: Optional[int] = None, skip: Optional[int] = None
    ) -> ProductPage:
        raw = await self._get_json("/products", {"limit": limit, "skip": skip})
        items = self._normalize("product list", self._to_products, raw)
        return ProductPage(items=items, total=len(items))

    async def get_product(self, product_id: str) -> Product:
        raw = await self._get_json(f"/products/{product_id}")
        return self._normalize("product", self._to_product, raw)

    async def list_categories(self) -> list[str]:
        raw = await self._get_json("/products/categories")
        return self._normalize("category list", _to_categories, raw)

    async def list_by_category(self, display_name: str) -> list[Product]:
        token = translate(display_name, CATEGORY_TOKENS)
        raw = await self._get_json(f"/products/category/{token}")
        return self._normalize(
            "category products",
            lambda data: self._to_products(data, category=display_name),
            raw,
        )


def _to_categories(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        raise TypeError("expected a JSON array of categories")
    return [translate(str(slug), CATEGORY_NAMES) for slug in raw]
