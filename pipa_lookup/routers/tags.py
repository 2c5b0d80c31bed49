"""
Tag Router - PIPA Tag Lookup
pipa_lookup/routers/tags.py

Tag and report lookups. Lookup failures are part of the payload
(``found: false`` plus ``error``), so these routes always answer 200.
"""
import time
import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from pipa_lookup.config import settings
from pipa_lookup.core.dependencies import get_pipa_client, get_tag_lookup_service
from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.services.tag_lookup import TagLookupService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tags"])


@router.get(
    "/tag/{tag_id}",
    summary="Look up a PIPA tag",
    description="Search a tag by its numeric ID. Served from cache when a fresh entry exists.",
)
async def get_tag(
    tag_id: str,
    use_cache: bool = Query(True, description="Read the cache before fetching"),
    details: bool = Query(
        default=settings.INCLUDE_REPORT_DETAILS,
        description="Fetch each annual report's detail page",
    ),
    service: TagLookupService = Depends(get_tag_lookup_service),
) -> JSONResponse:
    start = time.perf_counter()
    record = await service.search_tag_with_cache(
        tag_id,
        use_cache=use_cache,
        include_report_details=details,
    )
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"GET /tag/{tag_id} found={record.found} from_cache={record.from_cache} in {elapsed_ms:.1f}ms")
    return JSONResponse(content=record.to_payload())


@router.get(
    "/report",
    summary="Fetch a single inspection report",
    description="Fetch and parse a report page on the PIPA hub. PDF reports are reported, not parsed.",
)
async def get_report(
    url: str = Query(..., description="Report URL on the PIPA hub"),
    client: PipaClient = Depends(get_pipa_client),
) -> JSONResponse:
    report = await client.fetch_report(url)
    return JSONResponse(content=report.to_payload())
