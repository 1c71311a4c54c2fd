from __future__ import annotations

from functools import lru_cache

from backend.app.parsers.url_builder import PicknPullCatalog
from backend.app.services.inventory_search import InventorySearchService


@lru_cache(maxsize=1)
def get_catalog() -> PicknPullCatalog:
    return PicknPullCatalog.from_yaml()


@lru_cache(maxsize=1)
def get_search_service() -> InventorySearchService:
    return InventorySearchService(catalog=get_catalog())


async def close_search_service() -> None:
    """Close the shared search service's HTTP client, if one was created."""
    if get_search_service.cache_info().currsize == 0:
        return
    service = get_search_service()
    get_search_service.cache_clear()
    await service.aclose()
