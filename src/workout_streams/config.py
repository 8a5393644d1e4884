"""Configuration settings for workout-streams."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .metrics.splits import DISTANCE_TOLERANCE_M


class Settings(BaseSettings):
    """Settings loaded from WORKOUT_STREAMS_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="WORKOUT_STREAMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Splits
    split_distance_m: float = Field(
        default=1000.0,
        gt=DISTANCE_TOLERANCE_M,
        description="Default split distance in meters",
    )

    # Logging
    log_level: str = "INFO"

    # In-memory store used by the CLI
    export_path: Optional[Path] = None
    batch_size: int = Field(default=100, gt=0, description="Samples per delivered batch")
    delivery_delay_s: float = Field(default=0.0, ge=0, description="Delay between delivered batches")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
