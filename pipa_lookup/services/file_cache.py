"""
File Cache - PIPA Tag Lookup
pipa_lookup/services/file_cache.py

One JSON file per tag under ``<cache_dir>/<host>/<tag_id>.json``.
"""
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from pipa_lookup.core.exceptions import CacheException
from pipa_lookup.models.cache import CacheEntry
from pipa_lookup.services.cache import TTL_TAG, TagCache

logger = logging.getLogger(__name__)


class FileTagCache(TagCache):
    backend = "file"

    def __init__(
        self,
        cache_dir: Union[str, Path] = "cache",
        host: str = "pipa.org.uk",
        ttl_seconds: int = TTL_TAG,
    ):
        super().__init__(host, ttl_seconds)
        self.cache_dir = Path(cache_dir)

    def path_for(self, tag_id: str) -> Path:
        return self.cache_dir / self.host / f"{tag_id}.json"

    def read_entry(self, tag_id: str) -> Optional[CacheEntry]:
        path = self.path_for(tag_id)
        if not path.exists():
            return None
        try:
            return CacheEntry.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise CacheException(f"Cache read failed for {path}: {e}")
        except ValidationError as e:
            raise CacheException(f"Corrupt cache file {path}: {e.error_count()} errors")

    def write_entry(self, entry: CacheEntry) -> None:
        path = self.path_for(entry.id)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(entry.to_json(), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as e:
            raise CacheException(f"Cache write failed for {path}: {e}")

    def delete(self, tag_id: str) -> None:
        try:
            self.path_for(tag_id).unlink(missing_ok=True)
        except OSError as e:
            raise CacheException(f"Cache delete failed for {tag_id}: {e}")

    def ping(self) -> bool:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheException(f"Cache directory unusable: {e}")
        return os.access(self.cache_dir, os.W_OK)
