"""
Inspection section segmentation
pipa_lookup/pipelines/section_segmenter.py

A report page is a run of tables, each headed by a ``<th colspan>`` naming
the section ("Structure", "Materials", "Area & surround", ...). Every body
row is an inspection point with a label, an optional pass/fail badge, detail
cells and a free-text notes cell.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from pipa_lookup.models.report import InspectionField
from pipa_lookup.pipelines.extractors import extract_badge_from_row
from pipa_lookup.pipelines.html_document import DocumentSource, HtmlNode, as_document
from pipa_lookup.pipelines.utils import (
    EMPTY_PLACEHOLDERS,
    section_name_to_key,
    strip_trailing_colon,
)

logger = logging.getLogger(__name__)

SECTION_HEADER_SELECTOR = "th[colspan]"

# Parsed by the report-details and device extractors instead
SKIP_SECTIONS = frozenset({"Report Details", "Device"})


def find_section_table(root: HtmlNode, header_text: str) -> Optional[HtmlNode]:
    """The ``<tbody>`` of the table headed by ``header_text``, if any."""
    for th in root.select(SECTION_HEADER_SELECTOR):
        if th.text.strip() != header_text:
            continue
        table = th.closest("table")
        if table is not None:
            return table.select_one("tbody")
    return None


def parse_inspection_row(row: HtmlNode) -> Optional[InspectionField]:
    label = row.select_one(".label")
    if label is None:
        return None

    field = InspectionField(label=strip_trailing_colon(label.text.strip()))

    badge = extract_badge_from_row(row)
    if badge:
        field.status_class = badge["status_class"]
        field.status = badge["status"]

    values = [d.text.strip() for d in row.select(".detail")]
    values = [v for v in values if v]
    if values:
        field.value = " ".join(values).strip()

    notes_cell = row.select_one(".text")
    if notes_cell is not None:
        notes = notes_cell.text.strip()
        if notes not in EMPTY_PLACEHOLDERS:
            field.notes = notes

    return field


def process_section(th: HtmlNode) -> Optional[Tuple[str, List[InspectionField]]]:
    section_name = th.text.strip()
    if section_name in SKIP_SECTIONS:
        return None

    table = th.closest("table")
    if table is None:
        logger.debug(f"Section header '{section_name}' is outside any table, skipping")
        return None

    tbody = table.select_one("tbody")
    if tbody is None:
        return None

    fields = []
    for row in tbody.select("tr"):
        field = parse_inspection_row(row)
        if field is not None:
            fields.append(field)

    if not fields:
        return None
    return section_name_to_key(section_name), fields


def extract_inspection_sections(source: DocumentSource) -> Dict[str, List[InspectionField]]:
    """All inspection sections keyed by their folded heading, in page order."""
    root = as_document(source)
    sections: Dict[str, List[InspectionField]] = {}

    for th in root.select(SECTION_HEADER_SELECTOR):
        result = process_section(th)
        if result:
            key, fields = result
            sections[key] = fields

    return sections
