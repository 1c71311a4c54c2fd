from pathlib import Path
import os

from pydantic import BaseModel

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[3] / "data" / "catalog.yaml"

class Settings(BaseModel):
    firecrawl_api_key: str | None = os.getenv("FIRECRAWL_API_KEY")
    firecrawl_base_url: str = os.getenv("FIRECRAWL_BASE_URL", "https://api.firecrawl.dev")
    firecrawl_timeout: float = float(os.getenv("FIRECRAWL_TIMEOUT", "25.0"))
    firecrawl_wait_ms: int = int(os.getenv("FIRECRAWL_WAIT_MS", "2000"))
    picknpull_search_url: str = os.getenv(
        "PICKNPULL_SEARCH_URL", "https://www.picknpull.com/check-inventory/vehicle-search"
    )
    catalog_path: str = os.getenv("PICKNPULL_CATALOG_PATH", str(DEFAULT_CATALOG_PATH))
    default_distance: int = int(os.getenv("DEFAULT_SEARCH_DISTANCE", "50"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = int(os.getenv("PORT", "3000"))

settings = Settings()
