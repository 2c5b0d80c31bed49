import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from pipa_lookup.config import settings
from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.routers.health import router as health_router
from pipa_lookup.routers.tags import router as tags_router
from pipa_lookup.services.cache import build_cache
from pipa_lookup.services.tag_lookup import TagLookupService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


# LIFESPAN: one HTTP client and one cache store per process
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.APP_ENV})")
    client = PipaClient(config=settings)
    cache = build_cache(settings)
    app.state.pipa_client = client
    app.state.tag_cache = cache
    app.state.tag_lookup = TagLookupService(client, cache)
    try:
        yield
    finally:
        logger.info(f"Shutting down {settings.APP_NAME}...")
        await client.aclose()
        if cache is not None:
            cache.close()


# FASTAPI APPLICATION CONFIGURATION
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=[{"name": "Health"}, {"name": "Tags"}],
    lifespan=lifespan,
)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])


# EXCEPTION HANDLERS
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(status_code=422, content={"error": "Request validation failed"})
    err = errors[0]
    field = ".".join(str(part) for part in err.get("loc", []) if part not in ("query", "path"))
    return JSONResponse(status_code=422, content={"error": f"Invalid {field}: {err.get('msg', '')}"})


# REGISTER ROUTERS
app.include_router(health_router)   # Health
app.include_router(tags_router)     # Tags


# RUN WITH UVICORN
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pipa_lookup.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
