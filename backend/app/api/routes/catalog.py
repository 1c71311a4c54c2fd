from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from backend.app.api.deps import get_catalog
from backend.app.parsers.url_builder import PicknPullCatalog

router = APIRouter()

@router.get("/supported-makes")
async def supported_makes(catalog: PicknPullCatalog = Depends(get_catalog)):
    return {"success": True, "makes": catalog.supported_makes()}

@router.get("/supported-models")
async def supported_models(make: Optional[str] = None, catalog: PicknPullCatalog = Depends(get_catalog)):
    if make is None:
        return JSONResponse(status_code=400, content={"success": False, "error": "Missing 'make' parameter"})
    return {"success": True, "make": make, "models": catalog.supported_models(make)}
