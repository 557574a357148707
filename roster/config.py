"""Configuration management for the application."""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    mongo_url: str = Field(default="mongodb://localhost:27017")
    mongo_username: str | None = Field(default=None)
    mongo_password: str | None = Field(default=None)
    mongo_database: str = Field(default="roster")
    mongo_max_pool_size: int = Field(default=10, ge=1)
    mongo_timeout_ms: int = Field(default=5000, ge=1)  # server selection / connect

    # Uploaded files
    storage_dir: str = Field(default="storage")

    # Server
    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8000)

    # Rate limiting (0 disables)
    rate_limit_requests: int = Field(default=100, ge=0)
    rate_limit_window_seconds: int = Field(default=60, ge=1)
    # Only enable behind a proxy that overwrites X-Forwarded-For
    rate_limit_trust_forwarded_for: bool = Field(default=False)

    log_level: str = Field(default="INFO")

    # API
    environment: str = Field(default="development")

    @model_validator(mode="after")
    def validate_production_settings(self) -> "Settings":
        """Validate that production has secure settings."""
        if self.environment == "production":
            if "localhost" in self.mongo_url or "127.0.0.1" in self.mongo_url:
                raise ValueError("MONGO_URL should not use localhost in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
