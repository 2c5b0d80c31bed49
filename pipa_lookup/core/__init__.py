"""
Core Package - PIPA Tag Lookup
pipa_lookup/core/__init__.py

Core infrastructure: exceptions here, FastAPI dependencies in
``pipa_lookup.core.dependencies`` (imported directly to avoid cycles with
the pipeline modules).
"""

from pipa_lookup.core.exceptions import (
    CacheException,
    InvalidReportUrlException,
    InvalidTagIdException,
    LookupException,
    TagNotFoundException,
    UpstreamHTTPException,
)

__all__ = [
    "CacheException",
    "InvalidReportUrlException",
    "InvalidTagIdException",
    "LookupException",
    "TagNotFoundException",
    "UpstreamHTTPException",
]
