"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # json | sql | memory
    SNAPSHOT_BACKEND: str = "json"
    DATA_FILE: str = "data/state.json"
    DATABASE_URL: str = "sqlite:///./groupchat.db"
    CORS_ORIGINS: str = "http://localhost:4200"

    # Join requests are listable by anyone unless this is switched on
    RESTRICT_INTEREST_LISTING: bool = False
    # Emit groupAdmin/super alongside the canonical role names for older clients
    EMIT_LEGACY_ROLE_TAGS: bool = False

    BOOTSTRAP_SUPER_USERNAME: str = "super"
    BOOTSTRAP_SUPER_PASSWORD: str = "123"
    BOOTSTRAP_SUPER_EMAIL: str = "super@example.com"

    LOG_LEVEL: str = "INFO"


settings = Settings()
