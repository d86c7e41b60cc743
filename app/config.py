"""Application settings loaded from the environment."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration.

    Values come from environment variables (case-insensitive) or a local
    ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "WLWV Life Calendar API"
    app_version: str = "3.0.0"
    environment: str = "production"
    database_url: str = "sqlite:///./calendar.db"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Calendar domain
    schools: list[str] = Field(default_factory=lambda: ["wlhs", "wvhs"])
    grade_levels: list[int] = Field(default_factory=lambda: [9, 10, 11, 12])
    departments: list[str] = Field(
        default_factory=lambda: [
            "ASB",
            "Life",
            "Athletics",
            "Art/Theater",
            "Counseling",
            "Testing",
            "Staff",
        ]
    )

    # Bulk import
    undo_window_days: int = 7
    history_limit: int = 20
    default_import_actor: str = "admin"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
