from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from backend.app.api.deps import get_search_service
from backend.app.parsers.url_builder import CatalogLookupError
from backend.app.services.firecrawl_client import FirecrawlError
from backend.app.services.inventory_search import (
    InventorySearchService,
    SearchRequest,
    SearchValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


async def _perform_search(service: InventorySearchService, request: SearchRequest):
    try:
        return await service.search(request)
    except (SearchValidationError, CatalogLookupError) as exc:
        return _error(400, str(exc))
    except FirecrawlError as exc:
        logger.warning("Crawl failed for %s %s: %s", request.make, request.model, exc)
        return _error(500, f"Failed to crawl webpage: {exc}")


@router.post("")
async def search_vehicles(
    body: SearchRequest,
    service: InventorySearchService = Depends(get_search_service),
):
    return await _perform_search(service, body)


def _query_u32(value: Optional[str]) -> Optional[int]:
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


@router.get("")
async def search_vehicles_get(
    request: Request,
    service: InventorySearchService = Depends(get_search_service),
):
    params = request.query_params

    make = params.get("make")
    if make is None:
        return _error(400, "Missing 'make' parameter")
    model = params.get("model")
    if model is None:
        return _error(400, "Missing 'model' parameter")
    year_min = _query_u32(params.get("year_min"))
    if year_min is None:
        return _error(400, "Missing or invalid 'year_min' parameter")
    year_max = _query_u32(params.get("year_max"))
    if year_max is None:
        return _error(400, "Missing or invalid 'year_max' parameter")
    zip_code = params.get("zip_code")
    if zip_code is None:
        return _error(400, "Missing 'zip_code' parameter")

    search_request = SearchRequest(
        make=make,
        model=model,
        year_min=year_min,
        year_max=year_max,
        zip_code=zip_code,
        # An unreadable distance falls back to the default radius.
        distance=_query_u32(params.get("distance")),
    )
    return await _perform_search(service, search_request)
