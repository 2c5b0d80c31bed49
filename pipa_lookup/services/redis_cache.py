import redis
from typing import Optional
from pydantic import ValidationError

from pipa_lookup.core.exceptions import CacheException
from pipa_lookup.models.cache import CacheEntry
from pipa_lookup.services.cache import TTL_TAG, TagCache


class RedisTagCache(TagCache):
    backend = "redis"

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        host: str = "pipa.org.uk",
        ttl_seconds: int = TTL_TAG,
        client: Optional[redis.Redis] = None,
    ):
        super().__init__(host, ttl_seconds)
        self.client = client or redis.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def key(self, tag_id: str) -> str:
        return f"cache:{self.host}:{tag_id}"

    def read_entry(self, tag_id: str) -> Optional[CacheEntry]:
        """Get cached envelope and deserialize it."""
        try:
            data = self.client.get(self.key(tag_id))
        except redis.RedisError as e:
            raise CacheException(f"Redis read failed: {e}")
        if not data:
            return None
        try:
            return CacheEntry.model_validate_json(data)
        except ValidationError as e:
            raise CacheException(f"Corrupt cache entry for {tag_id}: {e.error_count()} errors")

    def write_entry(self, entry: CacheEntry) -> None:
        """Store envelope; Redis expiry mirrors the freshness window."""
        try:
            self.client.setex(self.key(entry.id), self.ttl_seconds, entry.to_json())
        except redis.RedisError as e:
            raise CacheException(f"Redis write failed: {e}")

    def delete(self, tag_id: str) -> None:
        """Invalidate single cache entry."""
        try:
            self.client.delete(self.key(tag_id))
        except redis.RedisError as e:
            raise CacheException(f"Redis delete failed: {e}")

    def ping(self) -> bool:
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            raise CacheException(f"Redis unreachable: {e}")

    def close(self) -> None:
        self.client.close()
