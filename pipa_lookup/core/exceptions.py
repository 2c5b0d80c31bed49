"""
Custom Exceptions - PIPA Tag Lookup
pipa_lookup/core/exceptions.py

Exceptions raised inside the retrieval pipeline and cache layer. The
public lookup functions turn these into ``found: false`` records.
"""


class LookupException(Exception):
    """Base exception for tag and report retrieval."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidTagIdException(LookupException):
    """Tag identifier is not made of decimal digits."""

    def __init__(self, tag_id: object = None):
        self.tag_id = tag_id
        super().__init__("Invalid tag ID - must be all numbers")


class InvalidReportUrlException(LookupException):
    """Report URL does not point at the report host."""

    def __init__(self, url: object = None):
        self.url = url
        super().__init__("Invalid report URL")


class UpstreamHTTPException(LookupException):
    """Upstream returned a non-success status."""

    def __init__(self, context: str, status_code: int):
        self.context = context
        self.status_code = status_code
        super().__init__(f"{context} error: {status_code}")


class TagNotFoundException(LookupException):
    """Search endpoint answered but has no record for the tag."""

    def __init__(self, tag_id: str):
        self.tag_id = tag_id
        super().__init__("Tag not found")


class CacheException(Exception):
    """Cache backend failure (connection, serialization, I/O)."""

    def __init__(self, message: str = "Cache operation failed"):
        self.message = message
        super().__init__(message)
