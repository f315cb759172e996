"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "LumenTask API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    DEBUG: bool = Field(default=False)
    API_V1_STR: str = "/api/v1"

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = Field(default=10, ge=4, le=31)
    # Minimum latency applied before hashing a new password (0 disables it)
    PASSWORD_HASH_DELAY_MS: int = Field(default=200, ge=0)

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Media storage (Cloudinary)
    CLOUDINARY_CLOUD_NAME: str | None = None
    CLOUDINARY_API_KEY: str | None = None
    CLOUDINARY_API_SECRET: str | None = None
    MEDIA_TIMEOUT_SECONDS: float = 30.0

    # Avatar Settings
    AVATAR_FOLDER: str = "avatars"
    AVATAR_APPLY_TRANSFORMATION: bool = False
    AVATAR_SIZE: int = 300  # Width/height of the transformed avatar
    AVATAR_BORDER: str = "2px_solid_white"

    # Email
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str = "noreply@lumentask.app"
    SMTP_FROM_NAME: str = "LumenTask Support Team"
    SMTP_TLS: bool = False
    SMTP_STARTTLS: bool = True
    SUPPORT_EMAIL: str = "support@lumentask.app"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"


# Create global settings instance

load_dotenv()
settings = Settings()  # type: ignore[call-arg]


class Theme:
    """Theme preference constants"""

    LIGHT = "light"
    DARK = "dark"
    VIOLET = "violet"
