"""Helpers shared by every provider when mapping upstream items to ``Product``."""

import random
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import datetime
from datetime import timezone
from typing import Any

from .types import Product

# Range of the placeholder stock synthesized for providers that report none
PLACEHOLDER_STOCK_MIN = 5
PLACEHOLDER_STOCK_MAX = 24

PLACEHOLDER_IMAGE_URL = "https://placehold.co/600x600?text=No+Image"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def convert_price(raw: Any, multiplier: float) -> float:
    """Convert an upstream price into the store currency."""
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        raise ValueError(f"price is not numeric: {raw!r}")
    return round(float(raw) * multiplier, 2)


def placeholder_stock(rng: random.Random | None = None) -> int:
    return (rng or random).randint(PLACEHOLDER_STOCK_MIN, PLACEHOLDER_STOCK_MAX)


def ensure_images(candidates: Iterable[Any], fallback: str, limit: int = 3) -> list[str]:
    """Keep up to ``limit`` non-empty image URLs; never return an empty list."""
    images = [str(url) for url in candidates if isinstance(url, str) and url]
    return images[:limit] or [fallback]


def translate(value: str, table: Mapping[str, str]) -> str:
    """Look ``value`` up in a static dictionary, falling back to identity."""
    return table.get(value, value)


def slugify_category(display_name: str) -> str:
    """Lower-case a display name and join its words with hyphens."""
    return "-".join(display_name.lower().split())


def build_product(
    *,
    item_id: Any,
    name: Any,
    price: float,
    description: Any,
    category: str,
    stock: int,
    images: list[str],
) -> Product:
    if item_id is None or name is None:
        raise ValueError("item is missing id or name")
    return Product(
        id=str(item_id),
        name=str(name),
        price=price,
        description=str(description or ""),
        category=category,
        stock=int(stock),
        images=images,
        created_at=utc_now_iso(),
    )


def matches_category(product: Product, display_name: str) -> bool:
    return product.category.strip().lower() == display_name.strip().lower()
