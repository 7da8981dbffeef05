"""Composition root holding the process-wide catalog fetcher."""

import asyncio
from logging import getLogger

from .exceptions import FetcherNotFoundError
from .fetcher import CatalogFetcher
from .search import SearchService

_default_fetcher: CatalogFetcher | None = None
_default_search: SearchService | None = None
logger = getLogger(__name__)


class CatalogProxy:
    """Storefront CacheX proxy for catalog fetcher management."""

    @staticmethod
    def get_fetcher() -> CatalogFetcher:
        """Get the current catalog fetcher instance.

        Returns:
            The current catalog fetcher

        Raises:
            FetcherNotFoundError: If no fetcher has been set
        """
        if _default_fetcher is None:
            msg = "Fetcher is not set. Please set the fetcher first."
            raise FetcherNotFoundError(msg)

        return _default_fetcher

    @staticmethod
    def get_search() -> SearchService:
        """Get the search service bound to the current fetcher.

        Raises:
            FetcherNotFoundError: If no fetcher has been set
        """
        if _default_search is None:
            msg = "Fetcher is not set. Please set the fetcher first."
            raise FetcherNotFoundError(msg)

        return _default_search

    @staticmethod
    def set_fetcher(fetcher: CatalogFetcher | None) -> None:
        """Set the fetcher shared by every call site.

        Args:
            fetcher: The fetcher to use, or None to clear the current one.
                The previous fetcher's expiry sweep is stopped and the new
                one's is started.
        """
        global _default_fetcher, _default_search
        logger.info(
            "Setting fetcher to: <%s> with backend <%s>",
            fetcher.__class__.__name__ if fetcher else "None",
            fetcher.backend.__class__.__name__ if fetcher else "None",
        )
        if _default_fetcher is not None and _default_fetcher is not fetcher:
            _default_fetcher.stop()
        _default_fetcher = fetcher
        _default_search = SearchService(fetcher) if fetcher else None
        # Without a running loop the sweep starts on the first request instead
        if fetcher is not None and _loop_is_running():
            fetcher.start()


def _loop_is_running() -> bool:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True
