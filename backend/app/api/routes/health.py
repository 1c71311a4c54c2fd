from datetime import datetime, timezone

from fastapi import APIRouter

from backend.app.parsers._inventory_common import format_utc

router = APIRouter()

@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": "junkyard-tracker-api",
        "timestamp": format_utc(datetime.now(timezone.utc)),
    }
