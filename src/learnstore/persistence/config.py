"""Configuration for the storage backends."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Settings for the storage backend."""

    model_config = SettingsConfigDict(
        env_prefix="LEARNSTORE_DB_",
        extra="ignore",
        case_sensitive=False,
    )

    url: str = Field(
        default="",
        description=(
            "SQLAlchemy async URL, e.g. postgresql+asyncpg://... or "
            "sqlite+aiosqlite:///path.db; empty selects in-memory storage"
        ),
    )
    echo: bool = Field(default=False, description="Log emitted SQL")
    pool_size: int = Field(default=5, description="Connection pool size (PostgreSQL only)")
    timeout: float | None = Field(
        default=30.0,
        description="Per-operation deadline in seconds; None disables it",
    )

    @property
    def use_memory(self) -> bool:
        return not self.url

    @field_validator("pool_size")
    @classmethod
    def validate_pool_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("pool_size must be at least 1")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeout must be positive")
        return v
