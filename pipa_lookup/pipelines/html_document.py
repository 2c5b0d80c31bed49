"""
Structured document boundary
pipa_lookup/pipelines/html_document.py

Thin wrapper over BeautifulSoup exposing only what the extractors need:
selector queries, ancestor lookup, text and attribute access. Extractors
never touch bs4 directly, so tests can build documents from plain strings.
"""

from __future__ import annotations

from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag

# html.parser keeps malformed markup where it is written (e.g. a <th>
# outside any <table>) instead of re-nesting it like lxml/html5lib do.
_PARSER = "html.parser"


class HtmlNode:
    """A read-only element in a parsed document."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def name(self) -> Optional[str]:
        return self._tag.name

    @property
    def text(self) -> str:
        return self._tag.get_text()

    def attr(self, name: str) -> Optional[str]:
        value = self._tag.get(name)
        if value is None:
            return None
        # bs4 returns multi-valued attributes such as class as lists
        if isinstance(value, list):
            return " ".join(value)
        return value

    def select(self, selector: str) -> List["HtmlNode"]:
        return [HtmlNode(el) for el in self._tag.select(selector)]

    def select_one(self, selector: str) -> Optional["HtmlNode"]:
        el = self._tag.select_one(selector)
        return HtmlNode(el) if el is not None else None

    def closest(self, name: str) -> Optional["HtmlNode"]:
        """Nearest element named ``name``, starting with this one."""
        if self._tag.name == name:
            return self
        parent = self._tag.find_parent(name)
        return HtmlNode(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"HtmlNode(<{self._tag.name}>)"


DocumentSource = Union[str, bytes, HtmlNode]


def parse_html(html: Union[str, bytes]) -> HtmlNode:
    return HtmlNode(BeautifulSoup(html or "", _PARSER))


def as_document(source: DocumentSource) -> HtmlNode:
    """Accept raw markup or an already parsed node."""
    if isinstance(source, HtmlNode):
        return source
    return parse_html(source)
