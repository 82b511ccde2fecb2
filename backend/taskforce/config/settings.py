"""
Configuration settings for the Taskforce directory service.
Loads environment variables and provides application settings.
"""
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import List

# settings.py is at backend/taskforce/config/settings.py → 4 levels up
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (PostgreSQL in production; SQLite for local experiments)
    database_url: str = f"sqlite:///{_PROJECT_ROOT}/data/taskforce.db"

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    log_level: str = "INFO"

    # Set by the upstream auth proxy for signed-in users
    auth_user_header: str = "X-Authenticated-User"

    # Mapbox geocoding (globe view is disabled without a token)
    mapbox_token: str = ""
    mapbox_base_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocode_timeout_seconds: float = 5.0
    geocode_max_lookups: int = 50

    # Geocode cache
    geocode_cache_backend: str = "memory"  # memory | redis
    geocode_cache_capacity: int = 1024
    geocode_cache_ttl_seconds: int = 7 * 24 * 3600

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    cache_redis_db: int = 2

    # Directory
    filter_options_sample_size: int = 2000
    organisation_marker_limit: int = 250
    organisation_search_limit: int = 10

    @property
    def cors_origins_list(self) -> List[str]:
        """Convert CORS origins string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def globe_enabled(self) -> bool:
        return bool(self.mapbox_token.strip())

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
