"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # App
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    skip_auth: bool = False

    # Record store (spreadsheet web app)
    apps_script_url: str = ""
    use_mock: bool = False
    record_store_timeout_seconds: float = 30.0

    # Cache TTLs
    services_cache_ttl_seconds: int = 5 * 60
    members_cache_ttl_seconds: int = 60
    favorites_cache_ttl_seconds: int = 60

    # Search logs & popularity
    search_log_capacity: int = 1000
    popular_log_window: int = 500
    popular_default_limit: int = 9

    # Access control
    allowed_domain: str = "example.com"
    admin_emails: str = ""  # comma separated
    google_client_id: str | None = None
    google_tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"

    # JWT Configuration
    jwt_secret_key: str = "CHANGE_ME_IN_PRODUCTION_USE_STRONG_SECRET"
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 24 * 60

    # MongoDB (audit sink)
    mongo_uri: str = "mongodb://mongodb:27017"

    # Redis (rate limiting)
    redis_host: str = "redis"
    redis_port: int = 6379

    # Rate Limiting (requests per window)
    rate_limit_window_seconds: int = 60
    rate_limit_default: int = 60
    rate_limit_search: int = 30
    rate_limit_popular: int = 20
    rate_limit_favorites: int = 30
    rate_limit_admin: int = 60

    @model_validator(mode="after")
    def _forbid_skip_auth_in_production(self) -> "Settings":
        if self.is_production and self.skip_auth:
            raise ValueError("SKIP_AUTH cannot be enabled in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def mock_mode(self) -> bool:
        """Serve the in-memory record store instead of the web app."""
        return self.use_mock or not self.apps_script_url

    def get_admin_emails(self) -> set[str]:
        return {e.strip().lower() for e in self.admin_emails.split(",") if e.strip()}

    def rate_limit_for(self, api_name: str) -> int:
        return getattr(self, f"rate_limit_{api_name}", self.rate_limit_default)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
