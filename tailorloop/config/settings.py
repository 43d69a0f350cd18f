"""Configuration settings for tailorloop."""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults and can be overridden via
    environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    db_path: Path = Field(
        default=Path("./data/tailorloop.db"),
        description="Path to the SQLite database holding the profile and applications",
    )
    cache_path: Path = Field(
        default=Path("./data/local_cache.json"),
        description="Path to the local JSON cache mirroring user-editable fields",
    )
    output_dir: Path = Field(
        default=Path("./artifacts"),
        description="Directory for generated documents and compiled PDFs",
    )

    # Document compiler
    compiler_command: str = Field(
        default="tectonic",
        description="Executable used to compile LaTeX documents to PDF",
    )
    compiler_timeout: Annotated[float, Field(gt=0)] = Field(
        default=120.0,
        description="Timeout in seconds for a single compilation",
    )
    compiler_log_limit: Annotated[int, Field(gt=0)] = Field(
        default=1600,
        description="Maximum characters of compiler log returned on failure",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()

    @field_validator("db_path", "cache_path", "output_dir", mode="before")
    @classmethod
    def convert_to_path(cls, v: str | Path) -> Path:
        """Convert string paths to Path objects."""
        if isinstance(v, str):
            return Path(v)
        return v


# Singleton instance for easy import
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
