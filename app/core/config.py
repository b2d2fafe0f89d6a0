"""Application configuration."""
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./orders.db"

    # Document store
    store_backend: str = "sql"  # sql, memory
    store_seed_file: Optional[str] = None

    # Aggregator webhook
    aggregator_webhook_secret: Optional[str] = None

    # Outbox reconciler
    outbox_reconcile_interval_seconds: float = 60.0
    outbox_grace_seconds: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
