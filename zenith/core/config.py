import os
from typing import List

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # Application
    PROJECT_NAME: str = "Zenith API"
    PROJECT_DESCRIPTION: str = "Backend API for the Zenith blogging platform"
    VERSION: str = "0.1.0"
    API_V1_PREFIX: str = "/api/v1"

    # Security
    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev_secret_key_change_me_in_production")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))  # 1 hour
    JWT_ALGORITHM: str = "HS256"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # Posts
    READING_WORDS_PER_MINUTE: int = 200

    # Cleanup job
    CLEANUP_ENABLED: bool = os.getenv("CLEANUP_ENABLED", "true").lower() == "true"
    CLEANUP_RETENTION_DAYS: int = int(os.getenv("CLEANUP_RETENTION_DAYS", "30"))
    CLEANUP_RUN_HOUR: int = int(os.getenv("CLEANUP_RUN_HOUR", "0"))  # UTC, midnight by default

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost", "http://localhost:3000", "http://localhost:8080"]

    # Database
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOCAL_DATABASE_URL: str = os.getenv("LOCAL_DATABASE_URL", "sqlite:///./zenith.db")
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    DB_ECHO: bool = os.getenv("DB_ECHO", "false").lower() == "true"

    @property
    def database_url(self) -> str:
        """Get database URL based on environment."""
        if self.ENVIRONMENT == "development":
            url = self.LOCAL_DATABASE_URL
        else:
            url = self.DATABASE_URL

        # Heroku-style URLs are not accepted by SQLAlchemy 1.4+
        if url.startswith("postgres://"):
            return url.replace("postgres://", "postgresql://", 1)
        return url

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
