"""
PIPA retrieval client
pipa_lookup/pipelines/pipa_client.py

Fetches tag search results, tag pages and report pages from pipa.org.uk,
classifies the HTTP outcome and hands HTML bodies to the parsers. Every
failure comes back as a ``found=False`` record carrying an ``error``.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlencode, urlparse

import httpx

from pipa_lookup.config import Settings, settings as default_settings
from pipa_lookup.core.exceptions import (
    InvalidReportUrlException,
    InvalidTagIdException,
    LookupException,
    TagNotFoundException,
    UpstreamHTTPException,
)
from pipa_lookup.models.report import ReportRecord
from pipa_lookup.models.tag import TagRecord
from pipa_lookup.pipelines.report_parser import parse_report_page
from pipa_lookup.pipelines.tag_parser import parse_tag_page
from pipa_lookup.pipelines.utils import is_all_numbers

logger = logging.getLogger(__name__)

# async (url, *, headers, follow_redirects) -> httpx.Response
Fetcher = Callable[..., Awaitable[httpx.Response]]

PDF_CONTENT_TYPE = "application/pdf"
PDF_REDIRECT_ERROR = "Report is a PDF download, not an HTML page"
PDF_CONTENT_ERROR = "Report is a PDF, not HTML"


class PipaClient:
    """Tag search and report retrieval against pipa.org.uk.

    Pass ``fetcher`` to replace the network (tests, replays). Otherwise an
    ``httpx.AsyncClient`` is used; one created here is closed by
    :meth:`aclose`, one passed in belongs to the caller.
    """

    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        config: Optional[Settings] = None,
    ):
        self.settings = config or default_settings
        self._owns_client = fetcher is None and http_client is None
        if fetcher is None and http_client is None:
            http_client = httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT_SECONDS)
        self._http_client = http_client
        self._fetcher = fetcher or self._http_fetch
        self.headers = {"User-Agent": self.settings.PIPA_USER_AGENT}

    async def _http_fetch(
        self, url: str, *, headers: Optional[Dict[str, str]] = None, follow_redirects: bool = True
    ) -> httpx.Response:
        return await self._http_client.get(url, headers=headers, follow_redirects=follow_redirects)

    async def _get(self, url: str, follow_redirects: bool = True) -> httpx.Response:
        logger.debug(f"GET {url}")
        response = await self._fetcher(url, headers=self.headers, follow_redirects=follow_redirects)
        logger.debug(f"GET {url} -> {response.status_code}")
        return response

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()

    async def __aenter__(self) -> "PipaClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Tag search
    # ------------------------------------------------------------------

    def build_search_url(self, tag_id: str) -> str:
        query = urlencode({"Tag": tag_id, "PageId": self.settings.PIPA_SEARCH_PAGE_ID})
        return f"{self.settings.search_url}?{query}"

    async def _search_tag(self, tag_id: str) -> TagRecord:
        if not is_all_numbers(tag_id):
            raise InvalidTagIdException(tag_id)

        search_response = await self._get(self.build_search_url(tag_id))
        if not search_response.is_success:
            raise UpstreamHTTPException("Search API", search_response.status_code)

        try:
            search_result: Any = search_response.json()
        except ValueError:
            raise LookupException("Search API error: invalid response body")

        if not isinstance(search_result, dict) or search_result.get("success") != "true":
            raise TagNotFoundException(tag_id)

        tag_path = search_result.get("message")
        if not tag_path:
            raise TagNotFoundException(tag_id)

        tag_response = await self._get(f"{self.settings.PIPA_BASE_URL}{tag_path}")
        if not tag_response.is_success:
            raise UpstreamHTTPException("Tag page", tag_response.status_code)

        return parse_tag_page(tag_response.text, tag_id)

    async def search_tag(self, tag_id: str) -> TagRecord:
        """Search for a tag by its numeric ID and parse its page."""
        try:
            record = await self._search_tag(tag_id)
        except InvalidTagIdException as e:
            logger.info(f"Rejected tag id {tag_id!r}")
            return TagRecord.not_found(error=e.message)
        except LookupException as e:
            logger.warning(f"Tag {tag_id} lookup failed: {e.message}")
            return TagRecord.not_found(tag_id, e.message)
        except httpx.HTTPError as e:
            logger.error(f"Tag {tag_id} request failed: {e}")
            return TagRecord.not_found(tag_id, f"Search request failed: {e}")

        logger.info(
            f"Tag {tag_id}: found={record.found} "
            f"reports={len(record.annual_reports or [])}"
        )
        return record

    # ------------------------------------------------------------------
    # Report pages
    # ------------------------------------------------------------------

    def is_valid_report_url(self, url: Any) -> bool:
        if not isinstance(url, str) or not url:
            return False
        return urlparse(url).hostname == self.settings.PIPA_REPORT_HOST

    async def _fetch_report(self, report_url: str) -> ReportRecord:
        if not self.is_valid_report_url(report_url):
            raise InvalidReportUrlException(report_url)

        # A redirect means the report is served as a PDF download
        response = await self._get(report_url, follow_redirects=False)

        if 300 <= response.status_code < 400:
            return ReportRecord.not_found(
                PDF_REDIRECT_ERROR,
                is_pdf=True,
                redirect_url=response.headers.get("location"),
            )

        if not response.is_success:
            raise UpstreamHTTPException("Report fetch", response.status_code)

        if PDF_CONTENT_TYPE in response.headers.get("content-type", ""):
            return ReportRecord.not_found(PDF_CONTENT_ERROR, is_pdf=True)

        return parse_report_page(response.text)

    async def fetch_report(self, report_url: str) -> ReportRecord:
        """Fetch and parse a report page."""
        try:
            report = await self._fetch_report(report_url)
        except LookupException as e:
            logger.warning(f"Report {report_url} not retrieved: {e.message}")
            return ReportRecord.not_found(e.message)
        except httpx.HTTPError as e:
            logger.error(f"Report {report_url} request failed: {e}")
            return ReportRecord.not_found(f"Report fetch failed: {e}")

        if report.is_pdf:
            logger.info(f"Report {report_url} is a PDF")
        return report
