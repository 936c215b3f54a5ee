"""Application Configuration"""

from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Billed"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Remote store (empty URL = no store, the UI runs disconnected)
    STORE_API_URL: str = ""
    STORE_TIMEOUT: float = 30.0

    # Session persistence
    SESSION_FILE: str = ".billed-session.json"

    # New bill form
    ACCEPTED_FILE_TYPES: str = "image/jpeg,image/jpg,image/png"
    DEFAULT_PCT: int = 20

    # Local bills API (preview server)
    HOST: str = "127.0.0.1"
    PORT: int = 5678
    PUBLIC_FILES_URL: str = "http://localhost:5678/public"
    SECRET_KEY: str = "billed-local-development-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("ACCEPTED_FILE_TYPES")
    @classmethod
    def parse_file_types(cls, v: str) -> List[str]:
        """Parse comma-separated media types into a lowercase list"""
        return [t.strip().lower() for t in v.split(",") if t.strip()]

    @property
    def has_store(self) -> bool:
        """True when a remote store URL is configured"""
        return bool(self.STORE_API_URL.strip())

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.ENVIRONMENT.lower() == "development"


# Global settings instance
settings = Settings()
