from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from backend.app.core.settings import settings
from backend.app.parsers.pick_n_pull import parse_inventory
from backend.app.parsers.url_builder import PicknPullCatalog
from backend.app.services.firecrawl_client import FirecrawlClient

logger = logging.getLogger(__name__)


class SearchValidationError(ValueError):
    """Raised when a search request is internally inconsistent."""


class SearchRequest(BaseModel):
    make: str
    model: str
    year_min: int = Field(ge=0)
    year_max: int = Field(ge=0)
    zip_code: str
    distance: Optional[int] = Field(default=None, ge=0)


class InventorySearchService:
    """Build the Pick-n-Pull search URL, scrape it and parse the results."""

    def __init__(
        self,
        firecrawl: Optional[FirecrawlClient] = None,
        catalog: Optional[PicknPullCatalog] = None,
    ):
        self.firecrawl = firecrawl or FirecrawlClient()
        self.catalog = catalog or PicknPullCatalog.from_yaml()

    async def aclose(self) -> None:
        await self.firecrawl.aclose()

    def build_url(self, request: SearchRequest) -> str:
        if request.year_min > request.year_max:
            raise SearchValidationError("year_min cannot be greater than year_max")
        distance = request.distance if request.distance is not None else settings.default_distance
        return self.catalog.search_url(
            request.make,
            request.model,
            request.zip_code,
            distance,
            (request.year_min, request.year_max),
        )

    async def search(self, request: SearchRequest) -> Dict[str, Any]:
        url = self.build_url(request)
        logger.info("Searching %s %s near %s: %s", request.make, request.model, request.zip_code, url)

        result = await self.firecrawl.fetch(url)
        vehicles = parse_inventory(result.markdown, url) if result.markdown else []

        return {
            "success": True,
            "vehicles": [vehicle.to_dict() for vehicle in vehicles],
            "search_params": request.model_dump(),
            "total_found": len(vehicles),
        }


__all__ = ["InventorySearchService", "SearchRequest", "SearchValidationError"]
