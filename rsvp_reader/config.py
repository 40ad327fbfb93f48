"""Application configuration settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    database_url: str = "sqlite:///./data/rsvp_reader.db"

    # App
    app_name: str = "RSVP Reader"
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Playback
    default_wpm: int = 600
    min_wpm: int = 200
    max_wpm: int = 1200
    seek_step: int = 10
    tick_interval_ms: float = 16.0

    # Reading-state persistence
    persist_debounce_ms: float = 400.0

    # Limits
    max_input_chars: int = 10_000_000
    preview_token_count: int = 12


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""
    return Settings()
