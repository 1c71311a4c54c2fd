from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .deps import close_search_service
from .routes import catalog, health, search


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_search_service()


app = FastAPI(title="Junkyard Tracker API", version="0.1.0", lifespan=lifespan)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid '{field}' parameter: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"success": False, "error": message})


app.include_router(search.router, prefix="/search", tags=["search"])
app.include_router(catalog.router, tags=["catalog"])
app.include_router(health.router, tags=["health"])
