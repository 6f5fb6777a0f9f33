"""Configuration for the cache system."""

from datetime import timedelta

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Settings for the cache system."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNSTORE_CACHE_",
        extra="ignore",
        case_sensitive=False,
    )

    backend: str = Field(
        default="memory",
        description="Cache backend to use (none, memory or redis)",
    )
    key_prefix: str = Field(
        default="learnstore:",
        description="Prefix for all cache keys stored in shared backends",
    )
    ttl_all: int = Field(
        default=3600,  # 1 hour
        description="Time-to-live in seconds for whole-collection entries",
    )
    ttl_single: int = Field(
        default=1800,  # 30 minutes
        description="Time-to-live in seconds for single-entity and predicate entries",
    )
    max_size: int = Field(
        default=1000,
        description="Maximum number of items to store in memory",
    )
    redis_url: str | None = Field(
        default=None,
        description="Redis connection URL (required for the redis backend)",
    )

    @property
    def ttl_all_timedelta(self) -> timedelta:
        return timedelta(seconds=self.ttl_all)

    @property
    def ttl_single_timedelta(self) -> timedelta:
        return timedelta(seconds=self.ttl_single)

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate the cache backend."""
        if v.lower() not in ("none", "memory", "redis"):
            raise ValueError("backend must be one of 'none', 'memory' or 'redis'")
        return v.lower()

    @field_validator("max_size")
    @classmethod
    def validate_max_size(cls, v: int) -> int:
        """Validate the maximum cache size."""
        if v < 1:
            raise ValueError("max_size must be at least 1")
        return v

    @field_validator("ttl_all", "ttl_single")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """Validate the TTL values."""
        if v <= 0:
            raise ValueError("TTL values must be positive integers")
        return v
