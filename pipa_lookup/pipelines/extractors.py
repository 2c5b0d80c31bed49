"""
Label/value and badge extraction
pipa_lookup/pipelines/extractors.py

The report pages lay fields out as table rows holding a ``.label`` cell and
one or more ``.detail`` cells, or a ``badge badge--<class>`` status pill.
Lookups go by label text, not by row or column position, because the
column layout differs between sections.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from pipa_lookup.pipelines.html_document import HtmlNode

logger = logging.getLogger(__name__)

BADGE_SELECTOR = "[class*='badge badge--']"
_BADGE_CLASS_RE = re.compile(r"badge--(\w+)")


def get_detail_from_label_row(label: HtmlNode) -> Optional[str]:
    """Trimmed text of the first ``.detail`` cell in the label's row."""
    row = label.closest("tr")
    if row is None:
        return None
    detail = row.select_one(".detail")
    if detail is None:
        return None
    return detail.text.strip() or None


def find_detail_by_label(root: HtmlNode, label_text: str) -> Optional[str]:
    """
    Find the value for a label.

    Labels are matched on a case-sensitive prefix of their trimmed text
    (trailing colon included). The first label in document order with a
    non-empty detail cell wins.
    """
    for label in root.select(".label"):
        if not label.text.strip().startswith(label_text):
            continue
        value = get_detail_from_label_row(label)
        if value:
            return value
    return None


def decode_badge(badge: HtmlNode) -> Optional[Dict[str, str]]:
    class_attr = badge.attr("class") or ""
    match = _BADGE_CLASS_RE.search(class_attr)
    if not match:
        logger.debug(f"Unparsable badge class: {class_attr!r}")
        return None
    return {"status_class": match.group(1), "status": badge.text.strip()}


def extract_badge_from_row(row: HtmlNode) -> Optional[Dict[str, str]]:
    """
    Decode the status badge inside a row.

    Returns ``{"status_class", "status"}`` or None when the row has no badge
    or the class token cannot be read.
    """
    badge = row.select_one(BADGE_SELECTOR)
    if badge is None:
        return None
    return decode_badge(badge)


def find_badge_by_label(root: HtmlNode, label_text: str) -> Optional[Dict[str, str]]:
    """Badge from the row of the first label whose text contains ``label_text``."""
    for label in root.select(".label"):
        if label_text not in label.text.strip():
            continue
        row = label.closest("tr")
        if row is None:
            continue
        badge = extract_badge_from_row(row)
        if badge:
            return badge
    return None


def extract_fields(root: HtmlNode, fields) -> Dict[str, str]:
    """Look up each ``(key, label)`` pair, keeping only the labels found."""
    values = {}
    for key, label in fields:
        value = find_detail_by_label(root, label)
        if value:
            values[key] = value
    return values
