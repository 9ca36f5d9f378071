"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        COHORT_DB_HOST: Database host (default: localhost)
        COHORT_DB_PORT: Database port (default: 5432)
        COHORT_DB_DATABASE: Database name (default: cohort)
        COHORT_DB_USERNAME: Database user (default: cohort)
        COHORT_DB_PASSWORD: Database password (required in production)
        COHORT_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        COHORT_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="COHORT_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="cohort", description="Database name")
    username: str = Field(default="cohort", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """Identity provider settings for bearer token validation.

    Environment variables:
        COHORT_OIDC_ISSUER_URL: Issuer URL, e.g. https://tenant.auth0.com/
        COHORT_OIDC_AUDIENCE: Expected ``aud`` claim
        COHORT_OIDC_USER_ID_CLAIM: Claim carrying the provider user id (default: sub)
        COHORT_OIDC_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime (default: 86400)
    """

    model_config = SettingsConfigDict(
        env_prefix="COHORT_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/cohort",
        description="OIDC issuer URL",
    )
    audience: str = Field(default="cohort-api", description="Expected audience")
    user_id_claim: str = Field(
        default="sub",
        description="Claim holding the identity provider's user id",
    )
    jwks_cache_ttl_seconds: int = Field(
        default=86400,
        description="Seconds to cache the issuer's JWKS",
        ge=60,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="COHORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="Cohort API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(
        default="INFO",
        description="Minimum log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def oidc(self) -> OIDCSettings:
        """Get identity provider settings."""
        return get_oidc_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings."""
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached identity provider settings."""
    return OIDCSettings()
