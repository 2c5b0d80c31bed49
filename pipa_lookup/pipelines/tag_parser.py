"""
PIPA Tag Page Parser
pipa_lookup/pipelines/tag_parser.py

Parses the www.pipa.org.uk tag check page. The page is template-generated
with stable class names, so fields are pulled with regular expressions over
the raw markup rather than a DOM walk.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, List, Optional, Pattern

from pipa_lookup.models.tag import ReportSummary, TagRecord
from pipa_lookup.pipelines.utils import clean_value

logger = logging.getLogger(__name__)

STATUS_BADGE_RE = re.compile(r'check__image-tag--(\w+)"[^>]*>([^<]+)<', re.IGNORECASE)
DETAILS_SECTION_RE = re.compile(r'check__details">([\s\S]*?)</div>\s*<div class="y-spacer')

CERTIFICATE_URL_RE = re.compile(
    r'href="(https://hub\.pipa\.org\.uk/download/reports/certificate/[^"]+)"'
)
REPORT_URL_RE = re.compile(r'href="(https://hub\.pipa\.org\.uk/public/reports/report/[^"]+)"')
IMAGE_URL_RE = re.compile(r'check__image[^>]*>[\s\S]*?<img src="([^"]+)"')


def _detail_pattern(label: str) -> Pattern[str]:
    return re.compile(re.escape(label) + r'</div>\s*<div[^>]*>([^<]+)')


DETAIL_FIELDS = [
    ("unit_reference_no", _detail_pattern("Unit Reference No:")),
    ("type", _detail_pattern("Type:")),
    ("current_operator", _detail_pattern("Current Operator:")),
    ("certificate_expiry_date", _detail_pattern("Certificate Expiry Date:")),
]

# One history row is an anchor block; its fields are matched inside the block
REPORT_BLOCK_RE = re.compile(r'<a class="report report--(\w+)" href="([^"]+)"[^>]*>([\s\S]*?)</a>')
REPORT_DATE_RE = re.compile(r'report__date[\s\S]*?report__value">([^<]+)')
REPORT_NUMBER_RE = re.compile(r'report__number[\s\S]*?report__value">([^<]+)')
REPORT_COMPANY_RE = re.compile(r'report__company[\s\S]*?report__value">([^<]+)')
REPORT_STATUS_RE = re.compile(r'tag tag--small">([^<]+)')


def extract_text(html: str, pattern: Pattern[str]) -> Optional[str]:
    match = pattern.search(html)
    return clean_value(match.group(1)) if match else None


def extract_details(html: str) -> Dict[str, str]:
    """Optional fields from the ``check__details`` block."""
    section_match = DETAILS_SECTION_RE.search(html)
    if not section_match:
        return {}

    section = section_match.group(1)
    details = {}
    for key, pattern in DETAIL_FIELDS:
        value = extract_text(section, pattern)
        if value:
            details[key] = value
    return details


def _parse_report_block(status_class: str, url: str, body: str) -> Optional[ReportSummary]:
    date = extract_text(body, REPORT_DATE_RE)
    report_no = extract_text(body, REPORT_NUMBER_RE)
    inspection_body = extract_text(body, REPORT_COMPANY_RE)
    status = extract_text(body, REPORT_STATUS_RE)
    url = clean_value(url)

    if not all([status_class, url, date, report_no, inspection_body, status]):
        return None

    return ReportSummary(
        status_class=status_class,
        url=url,
        date=date,
        report_no=report_no,
        inspection_body=inspection_body,
        status=status,
    )


def extract_annual_reports(html: str) -> List[ReportSummary]:
    """Report history rows in page order; incomplete rows are dropped whole."""
    reports = []
    for match in REPORT_BLOCK_RE.finditer(html):
        report = _parse_report_block(*match.groups())
        if report is None:
            logger.debug(f"Skipping incomplete report row: {match.group(2)}")
            continue
        reports.append(report)
    return reports


def parse_tag_page(html: Optional[str], tag_id: str) -> TagRecord:
    """Parse the tag page; a page without the status badge is not found."""
    html = html or ""
    status_match = STATUS_BADGE_RE.search(html)
    if not status_match:
        return TagRecord.not_found(tag_id)

    return TagRecord(
        found=True,
        tag_id=tag_id,
        status=clean_value(status_match.group(2)),
        status_class=status_match.group(1),
        **extract_details(html),
        certificate_url=extract_text(html, CERTIFICATE_URL_RE),
        report_url=extract_text(html, REPORT_URL_RE),
        image_url=extract_text(html, IMAGE_URL_RE),
        annual_reports=extract_annual_reports(html),
        fetched_at=datetime.now(timezone.utc),
    )
