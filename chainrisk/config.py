"""
Configuration management using pydantic-settings.
All settings loaded from environment variables (12-factor app).
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="info", description="Log level")
    log_format: str = Field(default="json", description="Log format (json|console)")

    # Impact tracing defaults (crisis simulation)
    trace_max_depth: int = Field(
        default=10, ge=0, description="Max hop depth for impact propagation"
    )
    trace_weight_threshold: float = Field(
        default=5.0, ge=0.0, description="Edges lighter than this do not propagate impact"
    )
    trace_include_revisits: bool = Field(
        default=True, description="Re-expand nodes reached again at a smaller depth"
    )

    # Path enumeration bounds
    path_max_paths: int = Field(
        default=1000, ge=1, description="Stop path enumeration after this many paths"
    )
    path_max_depth: int = Field(
        default=20, ge=0, description="Max hop count of an enumerated path"
    )
    alternative_path_count: int = Field(
        default=3, ge=1, description="Number of alternative paths offered for highlighting"
    )

    # Development
    dev_mode: bool = Field(default=True, description="Development mode")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses lru_cache to ensure singleton behavior.
    """
    return Settings()
