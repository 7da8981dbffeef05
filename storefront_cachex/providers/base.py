"""Provider interface and the shared httpx transport for upstream catalogs."""

from abc import ABC
from abc import abstractmethod
from collections.abc import Callable
from collections.abc import Mapping
from logging import getLogger
from typing import Any
from typing import Optional
from typing import TypeVar

import httpx

from storefront_cachex.exceptions import ProviderError
from storefront_cachex.types import Product
from storefront_cachex.types import ProductPage

logger = getLogger(__name__)

T = TypeVar("T")

_DEFAULT_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class ProductProvider(ABC):
    """An upstream catalog that answers the four catalog operations.

    Every method returns data already normalized to the canonical shape and
    raises ``ProviderError`` on any failure.
    """

    name: str = "provider"

    @abstractmethod
    async def list_products(
        self, limit: Optional[int] = None, skip: Optional[int] = None
    ) -> ProductPage:
        """Fetch one page of the catalog."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product:
        """Fetch the detail record of one product."""

    @abstractmethod
    async def list_categories(self) -> list[str]:
        """Fetch category display names."""

    @abstractmethod
    async def list_by_category(self, display_name: str) -> list[Product]:
        """Fetch the products of the category shown as ``display_name``."""

    async def aclose(self) -> None:
        return None


class HttpProvider(ProductProvider):
    """Provider backed by a JSON REST API reached through ``httpx``."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        http: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=timeout, headers=_DEFAULT_HEADERS.copy()
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_json(
        self, path: str, params: Mapping[str, Any] | None = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        try:
            response = await self._client.get(url, params=query, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise ProviderError(self.name, f"timed out requesting {path}") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(self.name, f"request to {path} failed: {exc}") from exc

        if not response.is_success:
            raise ProviderError(
                self.name,
                f"{path} answered HTTP {response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(
                self.name,
                f"{path} returned a malformed body",
                status_code=response.status_code,
            ) from exc

    def _normalize(self, what: str, mapper: Callable[[Any], T], raw: Any) -> T:
        """Run ``mapper`` on ``raw``, reporting shape mismatches as provider errors."""
        try:
            return mapper(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            logger.debug("%s sent an unexpected %s shape: %r", self.name, what, exc)
            raise ProviderError(self.name, f"unexpected {what} shape") from exc
