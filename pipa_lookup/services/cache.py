"""
Tag Cache - PIPA Tag Lookup
pipa_lookup/services/cache.py

Cache contract for tag records plus the factory that builds the configured
backend. Entries are keyed by (host, tag id) and expire on read once they
are older than the freshness window.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from pipa_lookup.config import Settings
from pipa_lookup.core.exceptions import CacheException
from pipa_lookup.models.cache import CacheEntry
from pipa_lookup.models.tag import TagRecord

logger = logging.getLogger(__name__)

# Freshness window for tag records (in seconds)
TTL_TAG = 86400  # 24 hours


class TagCache(ABC):
    """Stores TagRecords inside a host/id/cached envelope."""

    backend = "abstract"

    def __init__(self, host: str, ttl_seconds: int = TTL_TAG):
        self.host = host
        self.ttl_seconds = ttl_seconds

    @abstractmethod
    def read_entry(self, tag_id: str) -> Optional[CacheEntry]:
        """Raw envelope for a tag, ignoring age. Raises CacheException."""

    @abstractmethod
    def write_entry(self, entry: CacheEntry) -> None:
        """Persist an envelope, replacing any previous one. Raises CacheException."""

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass

    def is_fresh(self, entry: CacheEntry, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return entry.age_seconds(now) <= self.ttl_seconds

    def get(self, tag_id: str, now: Optional[datetime] = None) -> Optional[TagRecord]:
        """Cached record marked ``from_cache``; None when absent or stale."""
        entry = self.read_entry(tag_id)
        if entry is None:
            logger.debug(f"Cache MISS {self.host}:{tag_id}")
            return None
        if not self.is_fresh(entry, now):
            logger.info(f"Cache EXPIRED {self.host}:{tag_id} (cached {entry.cached.isoformat()})")
            return None
        logger.debug(f"Cache HIT {self.host}:{tag_id}")
        return entry.record.model_copy(update={"from_cache": True})

    def set(self, tag_id: str, record: TagRecord) -> None:
        stored = record.model_copy(update={"from_cache": None})
        self.write_entry(CacheEntry(host=self.host, id=tag_id, record=stored))
        logger.debug(f"Cache WRITE {self.host}:{tag_id}")


def build_cache(config: Settings) -> Optional[TagCache]:
    """
    Create the configured cache backend.

    Returns None when caching is disabled or Redis is unreachable, so the
    service keeps answering without a cache.
    """
    if config.CACHE_BACKEND == "none":
        return None

    try:
        if config.CACHE_BACKEND == "file":
            from pipa_lookup.services.file_cache import FileTagCache

            cache = FileTagCache(config.CACHE_DIR, host=config.CACHE_HOST, ttl_seconds=config.CACHE_TTL_TAGS)
        else:
            from pipa_lookup.services.redis_cache import RedisTagCache

            cache = RedisTagCache(config.REDIS_URL, host=config.CACHE_HOST, ttl_seconds=config.CACHE_TTL_TAGS)
        if not cache.ping():
            raise CacheException("ping failed")
    except (CacheException, ConnectionError) as e:
        logger.warning(f"{config.CACHE_BACKEND} cache unavailable, continuing without cache: {e}")
        return None
    logger.info(f"Using {cache.backend} cache for host {config.CACHE_HOST}")
    return cache
