"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (backend choice, DB URI, timeouts)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Storage backend
    USER_STORE_BACKEND: Literal["memory", "mongo"] = Field(
        default="memory",
        description="Which user store to use: in-memory list or MongoDB"
    )
    SEED_SAMPLE_USERS: bool = Field(
        default=True,
        description="Seed the in-memory store with two sample users"
    )

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="userdesk",
        description="MongoDB database name"
    )
    MONGODB_USERS_COLLECTION: str = Field(
        default="users",
        description="Collection holding user documents"
    )
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = Field(
        default=5000,
        description="How long the driver waits for a usable server"
    )
    MONGODB_CONNECT_TIMEOUT_MS: int = Field(
        default=10000,
        description="Socket connect timeout"
    )
    MONGODB_SOCKET_TIMEOUT_MS: int = Field(
        default=45000,
        description="Idle socket timeout for operations"
    )
    MONGODB_MAX_POOL_SIZE: int = Field(default=50)
    MONGODB_MIN_POOL_SIZE: int = Field(default=0)
    MONGODB_CONNECT_RETRIES: int = Field(
        default=3,
        description="Connection attempts at startup before giving up"
    )
    MONGODB_RETRY_DELAY_SECONDS: float = Field(
        default=2.0,
        description="Initial delay between connection attempts (doubles each retry)"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    MAX_REQUEST_BODY_BYTES: int = Field(
        default=10 * 1024 * 1024,
        description="Largest accepted request body, checked against Content-Length"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        v = v.strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown LOG_LEVEL: {v}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def uses_mongo(self) -> bool:
        return self.USER_STORE_BACKEND == "mongo"

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings(config: Settings = None):
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    config = config or settings
    errors = []

    if config.uses_mongo:
        if not config.MONGODB_URL:
            errors.append("MONGODB_URL is required for the mongo backend")
        if not config.MONGODB_DB_NAME:
            errors.append("MONGODB_DB_NAME is required for the mongo backend")
        if config.MONGODB_CONNECT_RETRIES < 1:
            errors.append("MONGODB_CONNECT_RETRIES must be at least 1")
        if config.MONGODB_MIN_POOL_SIZE > config.MONGODB_MAX_POOL_SIZE:
            errors.append("MONGODB_MIN_POOL_SIZE cannot exceed MONGODB_MAX_POOL_SIZE")

    if not 0 < config.PORT < 65536:
        errors.append("PORT must be between 1 and 65535")

    if config.MAX_REQUEST_BODY_BYTES < 1:
        errors.append("MAX_REQUEST_BODY_BYTES must be positive")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
