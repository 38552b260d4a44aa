from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    TIMEZONE: str = "Asia/Manila"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Local database (demo-mode key/value persistence)
    DATABASE_URL: str = "sqlite+aiosqlite:///./merchant_console.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 1800

    # Backendless
    # Leaving the app id or API key empty switches the console to demo mode.
    BACKENDLESS_URL: str = "https://api.backendless.com"
    BACKENDLESS_APP_ID: Optional[str] = None
    BACKENDLESS_API_KEY: Optional[str] = None
    BACKENDLESS_TIMEOUT: float = 15.0
    BACKENDLESS_PAGE_SIZE: int = 100

    # AI
    AI_ENABLED: bool = True
    AI_DEFAULT_MODEL: str = "gemini/gemini-2.5-flash"
    AI_TEMPERATURE: float = 0.7
    AI_MAX_TOKENS: int = 512

    # Domain limits
    DESCRIPTION_MAX_LENGTH: int = 500

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str]) -> str:
        if isinstance(v, str):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+psycopg://", 1)
            if v.startswith("sqlite:///"):
                return v.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return v

    @field_validator("BACKENDLESS_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def backendless_configured(self) -> bool:
        """True when both Backendless credentials are present."""
        return bool(self.BACKENDLESS_APP_ID and self.BACKENDLESS_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
