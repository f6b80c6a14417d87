import logging
from typing import Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # VexDB Configuration
    vexdb_api_base_url: HttpUrl = Field(
        "https://api.vexdb.io/v1", description="Base URL of the VexDB v1 API."
    )
    request_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout applied to every VexDB request."
    )
    max_concurrent_teams: int = Field(
        4,
        ge=1,
        description="How many teams may be fetched at the same time.",
    )
    default_season: str = Field(
        "In The Zone",
        description="Season used when team numbers are given without an event.",
    )

    # Output Configuration
    output_file: str = Field(
        "team_summaries.json", description="Path of the JSON export written by main."
    )

    # Supabase Configuration (optional, rows are only stored when both are set)
    supabase_url: Optional[str] = Field(
        None, description="URL for the Supabase project."
    )
    supabase_key: Optional[str] = Field(
        None, description="Anon key for the Supabase project."
    )
    summary_table: str = Field(
        "team_summaries", description="Supabase table that receives summary rows."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
