"""
Dependencies - PIPA Tag Lookup
pipa_lookup/core/dependencies.py

FastAPI dependency injection. The client and cache are created by the
application lifespan and stored on ``app.state``.
"""

from typing import Optional

from fastapi import Request

from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.services.cache import TagCache
from pipa_lookup.services.tag_lookup import TagLookupService


def get_pipa_client(request: Request) -> PipaClient:
    return request.app.state.pipa_client


def get_tag_cache(request: Request) -> Optional[TagCache]:
    return getattr(request.app.state, "tag_cache", None)


def get_tag_lookup_service(request: Request) -> TagLookupService:
    return request.app.state.tag_lookup
