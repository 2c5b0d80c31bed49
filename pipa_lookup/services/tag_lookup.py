"""
Tag Lookup Service - PIPA Tag Lookup
pipa_lookup/services/tag_lookup.py

Decides per request whether to serve a cached tag record, enrich a cached
record with missing report details, or fetch everything fresh, and keeps
the cache up to date.
"""

import asyncio
import logging
from typing import Optional

from pipa_lookup.core.exceptions import CacheException, InvalidTagIdException
from pipa_lookup.models.tag import ReportSummary, TagRecord
from pipa_lookup.pipelines.pipa_client import PipaClient
from pipa_lookup.pipelines.utils import is_all_numbers
from pipa_lookup.services.cache import TagCache

logger = logging.getLogger(__name__)

REPORT_NOT_RECOGNISED = "Report page not recognised"


class TagLookupService:
    """Cache-aware tag lookup with per-report detail enrichment."""

    def __init__(self, client: PipaClient, cache: Optional[TagCache] = None):
        self.client = client
        self.cache = cache

    # ------------------------------------------------------------------
    # Report detail enrichment
    # ------------------------------------------------------------------

    async def fetch_report_details(self, report: ReportSummary) -> ReportSummary:
        """Attach the parsed report page, or the reason it is missing."""
        if not report.url:
            return report.model_copy(update={"details": None, "details_error": "No report URL"})

        details = await self.client.fetch_report(report.url)
        if not details.found:
            error = details.error or REPORT_NOT_RECOGNISED
            return report.model_copy(update={"details": None, "details_error": error})

        return report.model_copy(update={"details": details, "details_error": None})

    async def fetch_all_report_details(self, record: TagRecord) -> TagRecord:
        """
        Fetch every annual report's page concurrently.

        Results keep the input order. A failure on one report is recorded in
        that report's ``details_error`` and does not affect the others.
        """
        if not record.found or not record.annual_reports:
            return record

        reports = record.annual_reports
        results = await asyncio.gather(
            *(self.fetch_report_details(report) for report in reports),
            return_exceptions=True,
        )

        detailed = []
        for report, result in zip(reports, results):
            # CancelledError is a BaseException, not an Exception
            if isinstance(result, BaseException):
                logger.error(f"Report details failed for {report.url}: {result!r}")
                error = str(result) or type(result).__name__
                result = report.model_copy(update={"details": None, "details_error": error})
            detailed.append(result)

        failed = sum(1 for r in detailed if r.details is None)
        logger.info(f"Tag {record.tag_id}: fetched details for {len(detailed) - failed}/{len(detailed)} reports")
        return record.model_copy(update={"annual_reports": detailed})

    async def search_tag_with_reports(self, tag_id: str, include_report_details: bool = False) -> TagRecord:
        """Uncached search, optionally with report details."""
        record = await self.client.search_tag(tag_id)
        if not record.found or not include_report_details:
            return record
        return await self.fetch_all_report_details(record)

    # ------------------------------------------------------------------
    # Cache handling
    # ------------------------------------------------------------------

    def _read_cache(self, tag_id: str) -> Optional[TagRecord]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(tag_id)
        except CacheException as e:
            logger.warning(f"Cache read failed for {tag_id}, treating as miss: {e.message}")
            return None

    def _write_cache(self, tag_id: str, record: TagRecord) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(tag_id, record)
        except CacheException as e:
            logger.warning(f"Cache write failed for {tag_id}: {e.message}")

    async def _handle_cache_hit(self, cached: TagRecord, tag_id: str, include_report_details: bool) -> TagRecord:
        # Details are fetched for all reports at once, so checking the
        # first one is enough to know whether a round-trip is needed.
        if include_report_details and cached.needs_report_details():
            logger.info(f"Tag {tag_id}: cached without report details, enriching")
            with_details = await self.fetch_all_report_details(cached)
            self._write_cache(tag_id, with_details)
            return with_details.model_copy(update={"from_cache": False})

        return cached.model_copy(update={"from_cache": True})

    async def _fetch_fresh(self, tag_id: str, include_report_details: bool) -> TagRecord:
        record = await self.search_tag_with_reports(tag_id, include_report_details)
        # Not-found results are never cached
        if record.found:
            self._write_cache(tag_id, record)
        return record

    async def search_tag_with_cache(
        self,
        tag_id: str,
        use_cache: bool = True,
        include_report_details: bool = True,
    ) -> TagRecord:
        """
        Look up a tag, serving from cache when possible.

        Args:
            tag_id: Numeric PIPA tag ID
            use_cache: Read the cache before going to the network
            include_report_details: Fetch each annual report's detail page

        Returns:
            TagRecord; ``from_cache`` is True only when no network call was made
        """
        if not is_all_numbers(tag_id):
            return TagRecord.not_found(error=InvalidTagIdException(tag_id).message)

        if use_cache:
            cached = self._read_cache(tag_id)
            if cached is not None:
                return await self._handle_cache_hit(cached, tag_id, include_report_details)

        return await self._fetch_fresh(tag_id, include_report_details)
