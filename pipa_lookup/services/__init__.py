"""
Services module for the PIPA Tag Lookup.
"""

from pipa_lookup.services.cache import TTL_TAG, TagCache, build_cache
from pipa_lookup.services.file_cache import FileTagCache
from pipa_lookup.services.redis_cache import RedisTagCache
from pipa_lookup.services.tag_lookup import TagLookupService

__all__ = [
    "TTL_TAG",
    "TagCache",
    "build_cache",
    "FileTagCache",
    "RedisTagCache",
    "TagLookupService",
]
