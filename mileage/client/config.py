"""Client-side settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Client configuration loaded from environment variables with MILEAGE_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="MILEAGE_",
        env_file=".env",
        extra="ignore",
    )

    api_url: str = "http://localhost:8000"
    nominatim_url: str = "https://nominatim.openstreetmap.org"
    zippopotam_url: str = "https://api.zippopotam.us"
    user_agent: str = "mighty-mileage-meetup/0.1"

    toast_timeout_seconds: float = 4.0
    http_timeout_seconds: float = 10.0

    # None keeps the session in memory only
    storage_path: str | None = None


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
