"""
Centralized application configuration.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Lead Acquisition Campaigns"
    debug: bool = False
    cors_origins: str = ""

    # Database
    database_url: str = "sqlite:///./lead_campaigns.db"

    # Import pipeline
    import_batch_size: int = 50
    import_preview_rows: int = 5

    # Remote persistence API (used by the httpx lead submitter)
    persistence_api_url: str = ""
    persistence_api_key: str = ""
    persistence_timeout_seconds: float = 30.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def extra_cors_origins(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return the cached application settings."""
    return Settings()
