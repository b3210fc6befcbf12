"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes vendor credentials (Appwrite, Plaid, Dwolla)
- Document store identifiers (database / collections)
- Validates configuration on startup
"""

from pydantic import Field, field_validator, ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Vendor credentials are checked by validate_settings() at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # Document store (MongoDB)
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    DATABASE_ID: str = Field(
        default="advanced_bank",
        description="Database holding the user and bank documents"
    )
    USER_COLLECTION_ID: str = Field(
        default="users",
        description="Collection of user profile documents"
    )
    BANK_COLLECTION_ID: str = Field(
        default="banks",
        description="Collection of linked bank account documents"
    )
    MONGODB_MAX_POOL_SIZE: int = Field(default=50, ge=1)
    MONGODB_CONNECT_RETRIES: int = Field(
        default=3,
        ge=1,
        description="Startup connection attempts before giving up"
    )
    MONGODB_RETRY_DELAY_SECONDS: float = Field(
        default=2.0,
        description="Delay before the second attempt, doubled after each failure"
    )

    # Identity backend (Appwrite)
    APPWRITE_ENDPOINT: str = Field(
        default="https://cloud.appwrite.io/v1",
        description="Appwrite API endpoint"
    )
    APPWRITE_PROJECT: Optional[str] = Field(
        default=None,
        description="Appwrite project ID"
    )
    APPWRITE_KEY: Optional[str] = Field(
        default=None,
        description="Appwrite server API key (admin client)"
    )

    # Aggregation API (Plaid)
    PLAID_CLIENT_ID: Optional[str] = Field(default=None, description="Plaid client ID")
    PLAID_SECRET: Optional[str] = Field(default=None, description="Plaid secret")
    PLAID_ENV: Literal["sandbox", "development", "production"] = Field(
        default="sandbox",
        description="Plaid environment"
    )

    # Payment network (Dwolla)
    DWOLLA_KEY: Optional[str] = Field(default=None, description="Dwolla application key")
    DWOLLA_SECRET: Optional[str] = Field(default=None, description="Dwolla application secret")
    DWOLLA_ENV: Literal["sandbox", "production"] = Field(
        default="sandbox",
        description="Dwolla environment"
    )

    EXTERNAL_SERVICE_TIMEOUT: float = Field(
        default=30.0,
        description="Vendor API request timeout in seconds"
    )

    # Pages
    PAGE_CACHE_TTL_SECONDS: int = Field(
        default=60,
        description="Lifetime of cached rendered pages"
    )
    SESSION_COOKIE_SECURE: bool = Field(
        default=True,
        description="Send the session cookie over HTTPS only"
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
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    APP_URL: str = Field(
        default="http://localhost:8000",
        description="Public base URL of the app"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Security
    SECRET_KEY: str = Field(
        default="change-me-in-production",
        description="Application secret key"
    )

    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str, info: ValidationInfo) -> str:
        """Ensure secret key is changed in production."""
        if info.data.get("ENVIRONMENT") == "production" and v == "change-me-in-production":
            raise ValueError("SECRET_KEY must be changed in production environment")
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
    def plaid_base_url(self) -> str:
        return f"https://{self.PLAID_ENV}.plaid.com"

    @property
    def dwolla_base_url(self) -> str:
        if self.DWOLLA_ENV == "production":
            return "https://api.dwolla.com"
        return "https://api-sandbox.dwolla.com"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    for name in ("DATABASE_ID", "USER_COLLECTION_ID", "BANK_COLLECTION_ID"):
        if not getattr(settings, name):
            errors.append(f"{name} is required")

    # Vendor credentials
    for name in (
        "APPWRITE_PROJECT",
        "APPWRITE_KEY",
        "PLAID_CLIENT_ID",
        "PLAID_SECRET",
        "DWOLLA_KEY",
        "DWOLLA_SECRET",
    ):
        if not getattr(settings, name):
            errors.append(f"{name} is required")

    if settings.is_production and not settings.SESSION_COOKIE_SECURE:
        errors.append("SESSION_COOKIE_SECURE must be enabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
