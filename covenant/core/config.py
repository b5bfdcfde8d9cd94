from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="COVENANT_", env_file=".env", extra="ignore")

    # Messages
    DEFAULT_LOCALE: str | None = None  # None falls back to the process locale
    MESSAGES_DIR: str | None = None    # Directory of messages*.yaml bundles

    # Engine
    MAX_NESTING_DEPTH: int = Field(default=32, ge=1)
    STRICT_ACCESSORS: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
