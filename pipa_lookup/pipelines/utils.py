"""
Shared text helpers for the PIPA parsers
pipa_lookup/pipelines/utils.py
"""

from __future__ import annotations

import html
import re
from typing import Any, Optional

_DIGITS_RE = re.compile(r"[0-9]+")
_SECTION_STRIP_RE = re.compile(r"[,&]")
_SECTION_FOLD_RE = re.compile(r"\s+(\w)")
_TRAILING_COLON_RE = re.compile(r":$")

# Placeholders the report pages put in otherwise empty cells
EMPTY_PLACEHOLDERS = {"", "&nbsp;", "\xa0"}


def is_all_numbers(value: Any) -> bool:
    """True for a non-empty string of ASCII decimal digits."""
    if not isinstance(value, str) or not value:
        return False
    return _DIGITS_RE.fullmatch(value) is not None


def clean_value(value: Optional[str]) -> Optional[str]:
    """Unescape entities and trim; empty results become None."""
    if value is None:
        return None
    value = html.unescape(value).strip()
    return value or None


def section_name_to_key(name: str) -> str:
    """
    Fold a section heading into a camelCase key.

    "Area & surround" -> "areaSurround", "Structure" -> "structure"
    """
    key = _SECTION_STRIP_RE.sub("", name.lower())
    return _SECTION_FOLD_RE.sub(lambda m: m.group(1).upper(), key)


def strip_trailing_colon(label: str) -> str:
    return _TRAILING_COLON_RE.sub("", label)


def expand_newline_escapes(text: str) -> str:
    """Turn literal ``&#xA;`` sequences left in free text into line breaks."""
    return text.replace("&#xA;", "\n")
