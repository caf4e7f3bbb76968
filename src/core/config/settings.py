# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the quiz
evaluation and recommendation service. Settings are loaded from environment
variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_DATABASE_PASSWORD = "quizpath_password"


class DatabaseSettings(BaseSettings):
    """Database configuration for quizzes, results and preference profiles.

    Attributes:
        user: PostgreSQL username.
        password: PostgreSQL password.
        host: Database host address.
        port: Database port number.
        name: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
    """

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        extra="ignore",
    )

    user: str = "quizpath"
    password: SecretStr = SecretStr(DEFAULT_DATABASE_PASSWORD)
    host: str = "localhost"
    port: int = 5432
    name: str = "quizpath"
    pool_size: int = 10
    max_overflow: int = 20

    @property
    def url(self) -> str:
        """Build the async database URL from components."""
        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Build the sync database URL for migrations."""
        pwd = self.password.get_secret_value()
        return f"postgresql://{self.user}:{pwd}@{self.host}:{self.port}/{self.name}"


class RedisSettings(BaseSettings):
    """Redis configuration for caching, locking and message brokering.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
        key_prefix: Namespace prefix applied to every cache and lock key.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0
    max_connections: int = 50
    key_prefix: str = "quizpath"

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is None:
            return f"redis://{self.host}:{self.port}/{self.database}"
        pwd = self.password.get_secret_value()
        return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"


class CatalogSettings(BaseSettings):
    """External course catalog service configuration.

    Attributes:
        url: GraphQL endpoint of the course service.
        timeout: Request timeout in seconds.
        max_retries: Retry attempts for a failed lookup.
        backoff_base: Base delay in seconds for exponential backoff.
        backoff_cap: Maximum delay in seconds between attempts.
    """

    model_config = SettingsConfigDict(
        env_prefix="CATALOG_",
        extra="ignore",
    )

    url: str = "http://localhost:4001/graphql"
    timeout: float = 5.0
    max_retries: int = 3
    backoff_base: float = 0.2
    backoff_cap: float = 5.0


class PublisherSettings(BaseSettings):
    """Result publisher retry configuration.

    Attributes:
        max_retries: Retry attempts after the first failed publish.
        backoff_base: Base delay in seconds for exponential backoff.
        backoff_cap: Maximum delay in seconds between attempts.
    """

    model_config = SettingsConfigDict(
        env_prefix="PUBLISHER_",
        extra="ignore",
    )

    max_retries: int = 5
    backoff_base: float = 0.1
    backoff_cap: float = 10.0


class PreferenceSettings(BaseSettings):
    """Preference aggregation configuration.

    Attributes:
        history_size: Number of recent quiz scores in the rolling average.
        default_time_availability: Hours per week assigned to new profiles.
        lock_timeout: Seconds a per-user lock may be held.
        lock_blocking_timeout: Seconds to wait for a per-user lock.
        profile_cache_ttl: Seconds a cached profile snapshot stays valid.
    """

    model_config = SettingsConfigDict(
        env_prefix="PREFERENCE_",
        extra="ignore",
    )

    history_size: int = Field(default=10, ge=1)
    default_time_availability: float = Field(default=10.0, ge=0, le=168)
    lock_timeout: float = 30.0
    lock_blocking_timeout: float = 10.0
    profile_cache_ttl: int = 300


class QuizSettings(BaseSettings):
    """Quiz submission policy.

    Attributes:
        single_attempt: Allow only one recorded result per student and quiz.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_",
        extra="ignore",
    )

    single_attempt: bool = False


class RateLimitSettings(BaseSettings):
    """Rate limiting configuration.

    Attributes:
        enabled: Whether limits are enforced.
        submissions_per_minute: Maximum quiz submissions per minute per client.
        storage_uri: limits storage backend; the Redis URL when unset.
    """

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        extra="ignore",
    )

    enabled: bool = True
    submissions_per_minute: int = 30
    storage_uri: str | None = None


class CORSSettings(BaseSettings):
    """CORS configuration for API.

    Attributes:
        origins: Comma-separated list of allowed origins.
        allow_credentials: Whether to allow credentials.
        allow_methods: Allowed HTTP methods.
        allow_headers: Allowed HTTP headers.
    """

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        extra="ignore",
    )

    origins: str = "http://localhost:3000,http://localhost:5173"
    allow_credentials: bool = True
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @property
    def origins_list(self) -> list[str]:
        """Parse origins string into a list."""
        return [origin.strip() for origin in self.origins.split(",") if origin.strip()]


class APISettings(BaseSettings):
    """API server configuration.

    Attributes:
        host: Host to bind to.
        port: Port to listen on.
        workers: Number of worker processes.
        reload: Whether to enable auto-reload.
    """

    model_config = SettingsConfigDict(
        env_prefix="API_",
        extra="ignore",
    )

    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 2
    reload: bool = False


class WorkerSettings(BaseSettings):
    """Background worker configuration.

    Attributes:
        processes: Number of worker processes.
        threads: Number of threads per process.
        max_retries: Broker-level redelivery attempts for failed actors.
    """

    model_config = SettingsConfigDict(
        env_prefix="WORKER_",
        extra="ignore",
    )

    processes: int = 2
    threads: int = 4
    max_retries: int = 10


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Database settings.
        redis: Redis settings.
        catalog: Course catalog client settings.
        publisher: Result publisher retry settings.
        preference: Preference aggregation settings.
        quiz: Quiz submission policy.
        rate_limit: Rate limiting settings.
        cors: CORS settings.
        api: API server settings.
        worker: Background worker settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    publisher: PublisherSettings = Field(default_factory=PublisherSettings)
    preference: PreferenceSettings = Field(default_factory=PreferenceSettings)
    quiz: QuizSettings = Field(default_factory=QuizSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)
    api: APISettings = Field(default_factory=APISettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.database.password.get_secret_value() == DEFAULT_DATABASE_PASSWORD:
                raise ValueError(
                    "Database password must be changed from default in production. "
                    "Set DATABASE_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
