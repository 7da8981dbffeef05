"""Secondary provider: the DummyJSON REST API.

DummyJSON paginates with ``limit``/``skip``, wraps product lists in a
``{"products": [...], "total": N}`` object and uses hyphenated category
slugs.
"""

from typing import Any
from typing import Optional

import httpx

from storefront_cachex.normalize import build_product
from storefront_cachex.normalize import convert_price
from storefront_cachex.normalize import PLACEHOLDER_IMAGE_URL
from storefront_cachex.normalize import ensure_images
from storefront_cachex.normalize import slugify_category
from storefront_cachex.normalize import translate
from storefront_cachex.types import Product
from storefront_cachex.types import ProductPage

from .base import HttpProvider

# Stock reported when an item carries none
DEFAULT_STOCK = 10

CATEGORY_NAMES: dict[str, str] = {
    "smartphones": "Akıllı Telefonlar",
    "laptops": "Dizüstü Bilgisayarlar",
    "fragrances": "Parfümler",
    "skincare": "Cilt Bakımı",
    "groceries": "Market Ürünleri",
    "home-decoration": "Ev Dekorasyonu",
    "furniture": "Mobilya",
    "tops": "Üst Giyim",
    "womens-dresses": "Kadın Elbiseleri",
    "womens-shoes": "Kadın Ayakkabıları",
    "mens-shirts": "Erkek Gömlekleri",
    "mens-shoes": "Erkek Ayakkabıları",
    "mens-watches": "Erkek Saatleri",
    "womens-watches": "Kadın Saatleri",
    "womens-bags": "Kadın Çantaları",
    "womens-jewellery": "Kadın Takıları",
    "sunglasses": "Güneş Gözlükleri",
    "automotive": "Otomotiv",
    "motorcycle": "Motosiklet",
    "lighting": "Aydınlatma",
}

CATEGORY_SLUGS: dict[str, str] = {name: slug for slug, name in CATEGORY_NAMES.items()}


def category_slug(display_name: str) -> str:
    """Known display names map back to their slug; others are slugified."""
    return CATEGORY_SLUGS.get(display_name) or slugify_category(display_name)


class DummyJSONProvider(HttpProvider):
    name = "dummyjson"

    def __init__(
        self,
        base_url: str = "https://dummyjson.com",
        *,
        currency_multiplier: float = 30.0,
        placeholder_image_url: str = PLACEHOLDER_IMAGE_URL,
        page_size: int = 20,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, http=http)
        self.currency_multiplier = currency_multiplier
        self.placeholder_image_url = placeholder_image_url
        self.page_size = page_size

    def _to_product(self, item: dict[str, Any], category: Optional[str] = None) -> Product:
        return build_product(
            item_id=item["id"],
            name=item["title"],
            price=convert_price(item["price"], self.currency_multiplier),
            description=item.get("description"),
            category=category or translate(str(item["category"]), CATEGORY_NAMES),
            stock=item.get("stock") or DEFAULT_STOCK,
            images=ensure_images(
                [*(item.get("images") or []), item.get("thumbnail")],
                self.placeholder_image_url,
            ),
        )

    def _to_page(self, raw: Any, category: Optional[str] = None) -> ProductPage:
        products = raw["products"]
        if not isinstance(products, list):
            raise TypeError("expected 'products' to be a JSON array")
        items = [self._to_product(item, category) for item in products]
        total = raw.get("total")
        return ProductPage(
            items=items, total=total if isinstance(total, int) else len(items)
        )

    async def list_products(
        self, limit: Optional[int] = None, skip: Optional[int] = None
    ) -> ProductPage:
        params = {"limit": limit or self.page_size, "skip": skip or 0}
        raw = await self._get_json("/products", params)
        return self._normalize("product list", self._to_page, raw)

    async def get_product(self, product_id: str) -> Product:
        raw = await self._get_json(f"/products/{product_id}")
        return self._normalize("product", self._to_product, raw)

    async def list_categories(self) -> list[str]:
        raw = await self._get_json("/products/categories")
        return self._normalize("category list", _to_categories, raw)

    async def list_by_category(self, display_name: str) -> list[Product]:
        raw = await self._get_json(f"/products/category/{category_slug(display_name)}")
        page = self._normalize(
            "category products",
            lambda data: self._to_page(data, category=display_name),
            raw,
        )
        return page.items


def _to_categories(raw: Any) -> list[str]:
    # Newer API versions return {"slug", "name", "url"} objects instead of slugs
    if not isinstance(raw, list):
        raise TypeError("expected a JSON array of categories")
    slugs = [entry["slug"] if isinstance(entry, dict) else str(entry) for entry in raw]
    return [translate(slug, CATEGORY_NAMES) for slug in slugs]
