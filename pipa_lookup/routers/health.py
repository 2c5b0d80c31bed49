"""
Health Check Router - PIPA Tag Lookup
pipa_lookup/routers/health.py
"""
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from pipa_lookup.core.dependencies import get_tag_cache
from pipa_lookup.core.exceptions import CacheException
from pipa_lookup.services.cache import TagCache

router = APIRouter(tags=["Health"])


class CacheStatusResponse(BaseModel):
    backend: str
    connected: bool
    host: Optional[str] = None
    ttl_seconds: Optional[int] = None
    error: Optional[str] = None
    timestamp: datetime


@router.get("/health", summary="Health check")
async def health_check() -> dict:
    return {"status": "ok"}


@router.get(
    "/health/cache",
    response_model=CacheStatusResponse,
    summary="Cache backend status",
)
async def cache_status(cache: Optional[TagCache] = Depends(get_tag_cache)) -> CacheStatusResponse:
    now = datetime.now(timezone.utc)
    if cache is None:
        return CacheStatusResponse(
            backend="none",
            connected=False,
            error="Cache disabled or unreachable",
            timestamp=now,
        )
    try:
        connected = cache.ping()
        error = None
    except CacheException as e:
        connected = False
        error = e.message
    return CacheStatusResponse(
        backend=cache.backend,
        connected=connected,
        host=cache.host,
        ttl_seconds=cache.ttl_seconds,
        error=error,
        timestamp=now,
    )
