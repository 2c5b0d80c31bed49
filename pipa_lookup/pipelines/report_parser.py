"""
PIPA Report Parser
pipa_lookup/pipelines/report_parser.py

Parses detailed inspection report pages from hub.pipa.org.uk into a
ReportRecord. Each extractor reads the document independently and returns
only the fields it could find.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Dict, Optional, Union

from pipa_lookup.models.report import (
    Badge,
    DeviceInfo,
    Dimensions,
    ReportDetails,
    ReportNotes,
    ReportRecord,
    UserLimits,
)
from pipa_lookup.pipelines.extractors import (
    BADGE_SELECTOR,
    decode_badge,
    extract_fields,
    find_badge_by_label,
    find_detail_by_label,
)
from pipa_lookup.pipelines.html_document import DocumentSource, HtmlNode, as_document, parse_html
from pipa_lookup.pipelines.section_segmenter import extract_inspection_sections, find_section_table
from pipa_lookup.pipelines.utils import expand_newline_escapes

logger = logging.getLogger(__name__)

REPORT_MARKERS = ("Inspection Report", "badge badge--")
_REPORT_ID_RE = re.compile(r"Inspection Report\s+(\S+)")
IMAGE_SELECTOR = 'img[src*="hub.pipa.org.uk/content-files"]'

INTRO_FIELDS = [
    ("id", "ID:"),
    ("valid_from", "Inspection Valid from:"),
    ("expiry_date", "Expiry Date:"),
    ("inspection_body", "Inspection Body:"),
    ("tag_no", "Tag No:"),
    ("device_type", "Device Type:"),
    ("serial_number", "Serial Number:"),
]

REPORT_DETAIL_FIELDS = [
    ("creation_date", "Creation Date:"),
    ("inspection_date", "Inspection Date:"),
    ("place_of_inspection", "Place of Inspection:"),
    ("inspector", "Inspector:"),
    ("structure_version", "Structure version:"),
    ("indoor_use_only", "Tested for Indoor Use Only:"),
]

DEVICE_FIELDS = [
    ("pipa_reference_number", "PIPA Reference Number:"),
    ("tag_number", "Tag Number:"),
    ("type", "Type:"),
    ("name", "Name:"),
    ("manufacturer", "Manufacturer:"),
    ("device_serial_number", "Serial Number:"),
    ("date_manufactured", "Date Manufactured:"),
]

DIMENSION_FIELDS = [
    ("length", "Length:"),
    ("width", "Width:"),
    ("height", "Height:"),
]

USER_LIMIT_FIELDS = [
    ("up_to_1_0m", "Max Number of Users of Height up to 1.0m:"),
    ("up_to_1_2m", "Max Number of Users of Height up to 1.2m:"),
    ("up_to_1_5m", "Max Number of Users of Height up to 1.5m:"),
    ("up_to_1_8m", "Max Number of Users of Height up to 1.8m:"),
]

NOTE_FIELDS = [
    ("additional_notes", "Additional Notes:"),
    ("risk_assessment_notes", "Risk Assessment Notes:"),
    ("repairs_needed", "Repairs needed to pass inspection:"),
    ("advisory_items", "Advisory items"),
]

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _leading_int(value: str) -> Optional[int]:
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def extract_report_id(root: HtmlNode) -> Optional[str]:
    h1 = root.select_one("h1")
    if h1 is None:
        return None
    match = _REPORT_ID_RE.search(h1.text.strip())
    return match.group(1) if match else None


def extract_status_badge(root: HtmlNode) -> Dict[str, str]:
    """The first badge on the page is the overall report status."""
    badge = root.select_one(BADGE_SELECTOR)
    if badge is None:
        return {}
    return decode_badge(badge) or {}


def extract_image_url(root: HtmlNode) -> Optional[str]:
    img = root.select_one(IMAGE_SELECTOR)
    if img is None:
        return None
    src = img.attr("src")
    return src.replace("&amp;", "&") if src else None


def extract_intro_fields(source: DocumentSource) -> Dict[str, str]:
    """Header fields: report id, validity, status, tag and device identity."""
    root = as_document(source)
    intro: Dict[str, str] = {}

    report_id = extract_report_id(root)
    if report_id:
        intro["report_id"] = report_id

    intro.update(extract_fields(root, INTRO_FIELDS))
    intro.update(extract_status_badge(root))

    image_url = extract_image_url(root)
    if image_url:
        intro["image_url"] = image_url

    return intro


def extract_report_details(source: DocumentSource) -> ReportDetails:
    root = as_document(source)
    return ReportDetails(**extract_fields(root, REPORT_DETAIL_FIELDS))


def extract_device_info(source: DocumentSource) -> DeviceInfo:
    """
    Device section fields.

    Labels such as "Serial Number:" and "Type:" also appear in the intro
    table, so the lookup is scoped to the Device table when it can be found
    and falls back to the whole page otherwise.
    """
    root = as_document(source)
    search_root = find_section_table(root, "Device") or root
    device = DeviceInfo(**extract_fields(search_root, DEVICE_FIELDS))

    manual = find_badge_by_label(root, "operation manual present")
    if manual:
        device.operation_manual_present = Badge(**manual)

    return device


def extract_dimensions(source: DocumentSource) -> Dimensions:
    root = as_document(source)
    return Dimensions(**extract_fields(root, DIMENSION_FIELDS))


def extract_user_limits(source: DocumentSource) -> UserLimits:
    root = as_document(source)
    limits: Dict[str, Union[int, str]] = {}

    for key, label in USER_LIMIT_FIELDS:
        value = find_detail_by_label(root, label)
        if not value:
            continue
        number = _leading_int(value)
        if number is not None:
            limits[key] = number

    custom = find_detail_by_label(root, "Custom Max User Height:")
    if custom:
        limits["custom_max_height"] = custom

    return UserLimits(**limits)


def extract_notes(source: DocumentSource) -> ReportNotes:
    root = as_document(source)
    notes = {
        key: expand_newline_escapes(value)
        for key, value in extract_fields(root, NOTE_FIELDS).items()
    }
    return ReportNotes(**notes)


def looks_like_report(html: str) -> bool:
    return any(marker in html for marker in REPORT_MARKERS)


def parse_report_page(html: Optional[str]) -> ReportRecord:
    """Parse a complete report page; unrelated pages give ``found=False``."""
    html = html or ""
    if not looks_like_report(html):
        logger.debug("Page has no report markers")
        return ReportRecord.not_found()

    # Extractors only read from the tree, so one parse is shared
    root = parse_html(html)

    return ReportRecord(
        found=True,
        **extract_intro_fields(root),
        report_details=extract_report_details(root),
        device=extract_device_info(root),
        dimensions=extract_dimensions(root),
        user_limits=extract_user_limits(root),
        notes=extract_notes(root),
        inspection_sections=extract_inspection_sections(root),
        fetched_at=datetime.now(timezone.utc),
    )
