"""Application configuration loaded from environment variables and .env file."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    DATABASE_URL: str = "sqlite:///./terminus.db"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Save slots (keyed storage)
    SAVE_KEY: str = "grand-central-terminus-save"
    BACKUP_SAVE_KEY: str = "grand-central-terminus-save-backup"
    AUTOSAVE_INTERVAL_SECONDS: float = 30.0

    # State mutation policy
    CLAMP_TRUST: bool = True

    # Choice presentation
    DEFAULT_ORDER_VARIANT: str = "gravity_bucket_shuffle"
    CONTENT_HISTORY_LIMIT: int = 5


settings = Settings()
