"""Settings for season wrapped, read from the environment and a .env file.

The analytics functions take their thresholds as arguments; only the
pipeline and the CLI resolve them from here.

Example:
    >>> from season_wrapped.config import get_settings
    >>> settings = get_settings()
    >>> settings.wrapped_season_label
    'Fall 2025'
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Season names a provider session can carry
SEASON_NAMES: tuple[str, ...] = ("Spring", "Summer", "Fall", "Winter")


class Settings(BaseSettings):
    """Season wrapped configuration.

    Each field is read from the environment variable named by its alias,
    falling back to .env and then to the default.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_dir: Directory for log files.
        provider_data_dir: Directory holding exported provider payloads.
        wrapped_season: Season name selected by default for a recap.
        wrapped_season_year: Season year selected by default for a recap.
        wrapped_min_games: Minimum games required to build a recap.
        wrapped_top_archetypes: Number of archetypes shown in a recap.
        wrapped_max_highlights: Maximum highlights on the summary slide.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level",
    )
    log_dir: str = Field(
        default="logs",
        alias="LOG_DIR",
        description="Directory for log files",
    )

    # Provider data
    provider_data_dir: str = Field(
        default="data/provider",
        alias="PROVIDER_DATA_DIR",
        description="Directory of exported league provider payloads",
    )

    # Recap defaults
    wrapped_season: str = Field(
        default="Fall",
        alias="WRAPPED_SEASON",
        description="Default season name for a recap",
    )
    wrapped_season_year: int = Field(
        default=2025,
        alias="WRAPPED_SEASON_YEAR",
        ge=1900,
        le=2999,
        description="Default season year for a recap",
    )
    wrapped_min_games: int = Field(
        default=5,
        alias="WRAPPED_MIN_GAMES",
        ge=1,
        description="Minimum games required to build a recap",
    )
    wrapped_top_archetypes: int = Field(
        default=5,
        alias="WRAPPED_TOP_ARCHETYPES",
        ge=1,
        le=13,
        description="Number of archetypes shown in a recap",
    )
    wrapped_max_highlights: int = Field(
        default=3,
        alias="WRAPPED_MAX_HIGHLIGHTS",
        ge=1,
        description="Maximum highlights on the summary slide",
    )

    @field_validator("log_dir", "provider_data_dir")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject blank directory settings."""
        if not v or v.isspace():
            raise ValueError("Value cannot be empty or whitespace")
        return v

    @field_validator("wrapped_season")
    @classmethod
    def validate_season_name(cls, v: str) -> str:
        """Normalize the season name to its capitalized form, e.g. 'fall' -> 'Fall'."""
        name = v.strip().capitalize()
        if name not in SEASON_NAMES:
            raise ValueError(
                f"Unknown season '{v}'; expected one of {', '.join(SEASON_NAMES)}"
            )
        return name

    @property
    def wrapped_season_label(self) -> str:
        """Default recap season as a 'Season Year' label."""
        return f"{self.wrapped_season} {self.wrapped_season_year}"

    @property
    def log_dir_obj(self) -> Path:
        """Return log directory as Path object."""
        return Path(self.log_dir)

    @property
    def provider_data_dir_obj(self) -> Path:
        """Return provider data directory as Path object."""
        return Path(self.provider_data_dir)

    def ensure_directories(self) -> None:
        """Create required directories if they don't exist."""
        self.log_dir_obj.mkdir(parents=True, exist_ok=True)


# Singleton pattern for settings
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        Settings instance loaded from environment.

    Example:
        >>> settings = get_settings()
        >>> print(settings.wrapped_min_games)
        5
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (useful for testing)."""
    global _settings
    _settings = None
