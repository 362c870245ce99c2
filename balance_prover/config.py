"""
Configuration for Balance Prover.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Prover service settings.

    All settings can be overridden via environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # API Server
    host: str = Field(
        default="127.0.0.1",
        description="API host (127.0.0.1 for local only, 0.0.0.0 for external - set API_TOKEN)",
        alias="HOST",
    )
    port: int = Field(
        default=8081,
        description="API port",
        validation_alias="PORT",
    )
    debug: bool = Field(default=False, description="Enable debug mode (auto-reload)")
    log_level: str = Field(default="info", description="Log level", alias="LOG_LEVEL")

    # Authentication
    # When API_TOKEN is set, proof endpoints require the token via X-API-Key header.
    api_token: Optional[str] = Field(
        default=None,
        description="API token for proof endpoints (required for non-local use)"
    )
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://127.0.0.1:3000"],
        description="CORS allowed origins"
    )

    # Proof cache
    cache_ttl_seconds: int = Field(
        default=60,
        gt=0,
        description="Lifetime of a cached proof, measured from insertion",
        alias="CACHE_TTL_SECONDS",
    )
    cache_lock_timeout: float = Field(
        default=0.1,
        ge=0,
        description="Seconds to wait for the cache lock before treating access as a miss",
        alias="CACHE_LOCK_TIMEOUT",
    )
    cleanup_interval: int = Field(
        default=100,
        gt=0,
        description="Run cache cleanup every N proof requests",
        alias="CLEANUP_INTERVAL",
    )

    # Batch
    max_batch_size: int = Field(
        default=100,
        gt=0,
        description="Maximum number of requests in a batch",
        alias="MAX_BATCH_SIZE",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
