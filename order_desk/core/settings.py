# ==============================================================================
# SETTINGS CONFIGURATION - Environment Management
# ==============================================================================
# Pydantic Settings for type-safe environment variable management
# Supports: Development, Staging, Production environments
# ==============================================================================

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import Field, field_validator, computed_field
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class DatabaseType(str, Enum):
    """
    Supported database types for the application.

    Attributes:
        SQLITE: Lightweight file-based database for development/testing
        MONGODB: Document-oriented store used in production
    """
    SQLITE = "sqlite"
    MONGODB = "mongodb"


class Environment(str, Enum):
    """Application environment types."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """
    Application Settings Configuration.

    Manages all environment variables with type validation and defaults.
    Uses Pydantic BaseSettings for automatic .env file loading and
    environment variable parsing.

    Example:
        >>> from order_desk.core.settings import settings
        >>> print(settings.APP_NAME)
        'Pi Order Desk'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # --------------------------------------------------------------------------
    APP_NAME: str = Field(
        default="Pi Order Desk",
        description="Application display name"
    )
    APP_VERSION: str = Field(
        default="1.0.0",
        description="Application semantic version"
    )
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (logs, stack traces)"
    )
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Current deployment environment"
    )

    # --------------------------------------------------------------------------
    # API CONFIGURATION
    # --------------------------------------------------------------------------
    API_V1_PREFIX: str = Field(
        default="/api/v1",
        description="API version 1 route prefix"
    )
    API_TITLE: str = Field(
        default="Pi Order Desk API",
        description="OpenAPI documentation title"
    )
    API_DESCRIPTION: str = Field(
        default="Sell-order lifecycle, review and statistics backend",
        description="OpenAPI documentation description"
    )

    # --------------------------------------------------------------------------
    # DATABASE TYPE SELECTION
    # --------------------------------------------------------------------------
    DATABASE_TYPE: DatabaseType = Field(
        default=DatabaseType.SQLITE,
        description="Active database backend (sqlite, mongodb)"
    )

    # --------------------------------------------------------------------------
    # SQLITE CONFIGURATION
    # --------------------------------------------------------------------------
    SQLITE_URL: str = Field(
        default="sqlite:///./order_desk.db",
        description="SQLite database file path"
    )

    # --------------------------------------------------------------------------
    # MONGODB CONFIGURATION
    # --------------------------------------------------------------------------
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB: str = Field(
        default="order_desk",
        description="MongoDB database name"
    )

    # --------------------------------------------------------------------------
    # CONNECTION POOL SETTINGS
    # --------------------------------------------------------------------------
    DB_POOL_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Database connection pool size"
    )
    DB_POOL_TIMEOUT: int = Field(
        default=30,
        ge=1,
        le=300,
        description="Connection pool timeout in seconds"
    )

    # --------------------------------------------------------------------------
    # SECURITY SETTINGS
    # --------------------------------------------------------------------------
    SECRET_KEY: str = Field(
        default="your-super-secret-key-change-in-production",
        min_length=32,
        description="Shared secret used to verify identity-provider tokens"
    )
    ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(
        default=30,
        ge=1,
        le=1440,
        description="Access token expiration in minutes"
    )
    ADMIN_ROLE: str = Field(
        default="admin",
        description="Value of the 'role' claim that grants admin access"
    )

    # --------------------------------------------------------------------------
    # CORS SETTINGS
    # --------------------------------------------------------------------------
    CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(
        default=True,
        description="Allow credentials in CORS requests"
    )

    # --------------------------------------------------------------------------
    # LOGGING CONFIGURATION
    # --------------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # --------------------------------------------------------------------------
    # ORDER LIFECYCLE & STATISTICS
    # --------------------------------------------------------------------------
    REALIZED_STATUSES: Annotated[List[str], NoDecode] = Field(
        default=["completed"],
        description="Statuses whose orders count toward monetary totals"
    )
    DEFAULT_PAGE_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default page size for admin views"
    )
    MAX_PAGE_SIZE: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Largest page size a caller may request"
    )

    # --------------------------------------------------------------------------
    # OBJECT STORAGE (CLOUDINARY)
    # --------------------------------------------------------------------------
    CLOUDINARY_CLOUD_NAME: Optional[str] = Field(
        default=None,
        description="Cloudinary cloud name"
    )
    CLOUDINARY_API_KEY: Optional[str] = Field(
        default=None,
        description="Cloudinary API key"
    )
    CLOUDINARY_API_SECRET: Optional[str] = Field(
        default=None,
        description="Cloudinary API secret"
    )
    HTTP_TIMEOUT: float = Field(
        default=10.0,
        gt=0,
        description="Timeout in seconds for calls to external services"
    )

    # --------------------------------------------------------------------------
    # PRICE ORACLE
    # --------------------------------------------------------------------------
    PRICE_ORACLE_URL: str = Field(
        default="https://api.coingecko.com/api/v3/simple/price",
        description="Spot price endpoint"
    )
    PRICE_ORACLE_ASSET_ID: str = Field(
        default="pi-network",
        description="Asset identifier at the price oracle"
    )
    SELL_RATE_FACTOR: Decimal = Field(
        default=Decimal("0.5"),
        gt=0,
        le=1,
        description="Fraction of the spot price offered to sellers"
    )

    # --------------------------------------------------------------------------
    # IDENTITY DIRECTORY
    # --------------------------------------------------------------------------
    IDENTITY_API_URL: Optional[str] = Field(
        default=None,
        description="Identity provider admin API base URL (e.g. https://api.clerk.com/v1)"
    )
    IDENTITY_API_KEY: Optional[str] = Field(
        default=None,
        description="Identity provider admin API secret"
    )

    # --------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # --------------------------------------------------------------------------
    @computed_field
    @property
    def sqlite_async_url(self) -> str:
        """
        Construct SQLite async connection URL.

        Returns:
            Async SQLite connection string with aiosqlite driver
        """
        if "aiosqlite" in self.SQLITE_URL:
            return self.SQLITE_URL
        return self.SQLITE_URL.replace("sqlite://", "sqlite+aiosqlite://")

    @computed_field
    @property
    def database_url(self) -> str:
        """
        Get the appropriate database URL based on DATABASE_TYPE.

        Raises:
            ValueError: If DATABASE_TYPE is not supported
        """
        if self.DATABASE_TYPE == DatabaseType.SQLITE:
            return self.sqlite_async_url
        elif self.DATABASE_TYPE == DatabaseType.MONGODB:
            return self.MONGODB_URL
        raise ValueError(f"Unsupported database type: {self.DATABASE_TYPE}")

    @computed_field
    @property
    def storage_configured(self) -> bool:
        """Check whether object storage credentials are present."""
        return bool(
            self.CLOUDINARY_CLOUD_NAME
            and self.CLOUDINARY_API_KEY
            and self.CLOUDINARY_API_SECRET
        )

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT == Environment.PRODUCTION

    # --------------------------------------------------------------------------
    # VALIDATORS
    # --------------------------------------------------------------------------
    @field_validator("SECRET_KEY")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """Warn when the default secret is in use."""
        if v == "your-super-secret-key-change-in-production":
            import warnings
            warnings.warn(
                "Using default SECRET_KEY. Configure the identity provider secret for production!",
                UserWarning
            )
        return v

    @field_validator("CORS_ORIGINS", "REALIZED_STATUSES", mode="before")
    @classmethod
    def parse_comma_separated(cls, v):
        """Accept comma-separated strings as well as lists."""
        if isinstance(v, str):
            if v == "*":
                return ["*"]
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("REALIZED_STATUSES")
    @classmethod
    def validate_realized_statuses(cls, v: List[str]) -> List[str]:
        """Realized statuses must be known order statuses."""
        from order_desk.core.constants import TransactionConstants

        unknown = [s for s in v if s not in TransactionConstants.all_statuses()]
        if unknown:
            raise ValueError(f"Unknown order status in REALIZED_STATUSES: {unknown}")
        if not v:
            raise ValueError("REALIZED_STATUSES must name at least one status")
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Uses lru_cache to ensure settings are only loaded once,
    providing a singleton-like behavior for the settings object.
    """
    return Settings()


# Module-level settings instance for convenient imports
settings = get_settings()
