"""Configuration management."""

import logging
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import computed_field


class Settings(BaseSettings):
    """Application settings."""

    # Database (PostgreSQL) - full connection string, e.g. from the hosting platform
    database_url: str = ""
    db_pool_min_size: int = 0
    db_pool_max_size: int = 1  # Requests serialize on a single connection
    db_ssl: str | None = None  # asyncpg ssl mode: "require" encrypts without verifying certs
    db_command_timeout: float | None = None

    # Source tables
    interactions_table: str = "instagram_webhook_analytics"
    llm_analytics_table: str = "llm_analytics"
    llm_calls_table: str = "llm_calls"

    @computed_field
    @property
    def database_url_preview(self) -> str:
        """Truncated connection string, safe to log."""
        if not self.database_url:
            return "not set"
        return f"{self.database_url[:30]}..."

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:3030",
    ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
