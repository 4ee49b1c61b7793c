"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Database (single-file SQLite store)
    DATABASE_URL: str = "sqlite+aiosqlite:///./sources.db"
    DATABASE_ECHO: bool = False

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5001
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = ["*"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Uploads
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024
    MAX_UPLOAD_FILES: int = 5

    # Probing
    MAX_FILE_VIEW_BYTES: int = 10 * 1024 * 1024
    PROBE_DEFAULT_TIMEOUT_MS: int = 10000
    REMOTE_FILE_TIMEOUT_SECONDS: float = 30.0

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
