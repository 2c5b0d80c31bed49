"""Application configuration with validation."""
from typing import Literal
from functools import lru_cache
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from the environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "PIPA Tag Lookup"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # PIPA upstream
    PIPA_BASE_URL: str = "https://www.pipa.org.uk"
    PIPA_SEARCH_PATH: str = "/umbraco/Surface/searchSurface/SearchTag"
    PIPA_SEARCH_PAGE_ID: int = 1133
    PIPA_REPORT_HOST: str = "hub.pipa.org.uk"
    PIPA_USER_AGENT: str = Field(
        default=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        description="The search endpoint rejects non-browser user agents",
    )
    HTTP_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0, le=300)

    # Cache
    CACHE_BACKEND: Literal["redis", "file", "none"] = "file"
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_DIR: str = "cache"
    CACHE_HOST: str = "pipa.org.uk"
    CACHE_TTL_TAGS: int = Field(default=86400, ge=1)  # 24 hours
    INCLUDE_REPORT_DETAILS: bool = True

    @field_validator("PIPA_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production does not run in debug mode."""
        if self.APP_ENV == "production" and self.DEBUG:
            raise ValueError("DEBUG must be False in production")
        return self

    @property
    def search_url(self) -> str:
        return f"{self.PIPA_BASE_URL}{self.PIPA_SEARCH_PATH}"


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
