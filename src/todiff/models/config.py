"""Configuration models."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are prefixed with TODIFF_ (e.g., TODIFF_SIMILARITY).
    """

    model_config = SettingsConfigDict(
        env_prefix="TODIFF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Matching
    similarity: int = Field(
        default=75,
        ge=0,
        le=100,
        description="Similarity index to consider two tasks identical (in percents)",
    )

    # Output
    color: Literal["auto", "always", "never"] = Field(
        default="auto", description="Colorize output: auto, always or never"
    )

    # Logging
    log_level: str = Field(default="WARNING", description="Log level for diagnostics")

    @property
    def allowed_divergence(self) -> int:
        """Maximum edit distance percentage tolerated between matched subjects."""
        return 100 - self.similarity
