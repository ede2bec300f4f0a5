"""Application configuration helpers."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings sourced from environment variables."""

    profile: bool = Field(
        default=False,
        description="Record project and mojo timings while a build runs",
    )
    profile_lock_stripes: int = Field(
        default=16,
        ge=1,
        description="Number of independent lock shards per timer store.",
    )
    profile_sort: Literal["time", "execution"] = Field(
        default="time",
        description="Report ordering: slowest first, or in the order entries were first seen.",
    )
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


def is_profiling_enabled() -> bool:
    """Default enablement check handed to the timing collector."""

    return get_settings().profile
