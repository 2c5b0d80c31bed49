from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from pipa_lookup.models.tag import TagRecord


class CacheEntry(BaseModel):
    """Persisted envelope: lookup key, write time and the stored record."""

    model_config = ConfigDict(populate_by_name=True)

    host: str
    id: str
    cached: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    record: TagRecord = Field(alias="json")

    def age_seconds(self, now: datetime) -> float:
        cached = self.cached
        if cached.tzinfo is None:
            cached = cached.replace(tzinfo=timezone.utc)
        return (now - cached).total_seconds()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
