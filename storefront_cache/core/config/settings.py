#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
storefront cache layer. All configuration is centralized here so that the
remote-store credentials and TTL policy are read in exactly one place.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with override mechanisms

Remote tier credentials are optional. When either the URL or the token is
missing the cache runs memory-only; that is not a configuration error.
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from storefront_cache.core.config.constants import (
    L1_SWEEP_INTERVAL,
    LONG_TTL,
    MEDIUM_TTL,
    MEMORY_RESIDENCY_TTL,
    REMOTE_DEFAULT_TTL,
    SHORT_TTL,
)


class RemoteStoreSettings(BaseSettings):
    """
    Remote key-value store (L2) connection configuration.

    STAGE-R.0: Remote store configuration

    The URL may be a REST endpoint (https://...) or a native Redis URL
    (redis:// or rediss://). The token authenticates either transport.
    """

    UPSTASH_REDIS_REST_URL: str | None = Field(default=None, description="Remote store endpoint URL")
    UPSTASH_REDIS_REST_TOKEN: str | None = Field(default=None, description="Remote store access token")
    REMOTE_STORE_TIMEOUT: float = Field(default=5.0, gt=0, description="Request timeout in seconds")
    REMOTE_STORE_MAX_CONNECTIONS: int = Field(default=20, ge=1, description="HTTP connection pool limit")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)

    @property
    def is_configured(self) -> bool:
        """True when both URL and token are present."""
        return bool(self.UPSTASH_REDIS_REST_URL) and bool(self.UPSTASH_REDIS_REST_TOKEN)


class CacheSettings(BaseSettings):
    """
    Two-tier cache TTL policy and sweep configuration.

    STAGE-C: Cache TTL configuration

    L1 residency is intentionally much shorter than any L2 TTL: the memory
    tier absorbs bursts, the remote tier is authoritative.
    """

    CACHE_MEMORY_TTL: int = Field(default=MEMORY_RESIDENCY_TTL, description="L1 residency (1 minute)")
    CACHE_REMOTE_TTL: int = Field(default=REMOTE_DEFAULT_TTL, description="L2 default TTL (10 minutes)")
    CACHE_TTL_SHORT: int = Field(default=SHORT_TTL, description="Short tier TTL (5 minutes)")
    CACHE_TTL_MEDIUM: int = Field(default=MEDIUM_TTL, description="Medium tier TTL (30 minutes)")
    CACHE_TTL_LONG: int = Field(default=LONG_TTL, description="Long tier TTL (2 hours)")
    CACHE_SWEEP_INTERVAL: float = Field(default=L1_SWEEP_INTERVAL, description="L1 sweep period in seconds")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """
    General application settings.

    STAGE-0: Application initialization
    """

    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Storefront Cache Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all API routes")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from storefront_cache.core.config.settings import get_settings

        settings = get_settings()
        url = settings.remote.UPSTASH_REDIS_REST_URL
        medium = settings.cache.CACHE_TTL_MEDIUM
    """

    # Remote store settings
    UPSTASH_REDIS_REST_URL: str | None = Field(default=None, description="Remote store endpoint URL")
    UPSTASH_REDIS_REST_TOKEN: str | None = Field(default=None, description="Remote store access token")
    REMOTE_STORE_TIMEOUT: float = Field(default=5.0, gt=0, description="Request timeout in seconds")
    REMOTE_STORE_MAX_CONNECTIONS: int = Field(default=20, ge=1, description="HTTP connection pool limit")

    # Cache settings
    CACHE_MEMORY_TTL: int = Field(default=MEMORY_RESIDENCY_TTL, description="L1 residency (1 minute)")
    CACHE_REMOTE_TTL: int = Field(default=REMOTE_DEFAULT_TTL, description="L2 default TTL (10 minutes)")
    CACHE_TTL_SHORT: int = Field(default=SHORT_TTL, description="Short tier TTL (5 minutes)")
    CACHE_TTL_MEDIUM: int = Field(default=MEDIUM_TTL, description="Medium tier TTL (30 minutes)")
    CACHE_TTL_LONG: int = Field(default=LONG_TTL, description="Long tier TTL (2 hours)")
    CACHE_SWEEP_INTERVAL: float = Field(default=L1_SWEEP_INTERVAL, gt=0, description="L1 sweep period in seconds")

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    # Application settings
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Storefront Cache Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_BASE_PATH: str = Field(default="/api/v1", description="Prefix for all API routes")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator(
        "CACHE_MEMORY_TTL",
        "CACHE_REMOTE_TTL",
        "CACHE_TTL_SHORT",
        "CACHE_TTL_MEDIUM",
        "CACHE_TTL_LONG",
    )
    @classmethod
    def validate_positive_ttl(cls, v):
        """TTLs are whole seconds and must be positive."""
        if v <= 0:
            raise ValueError("cache TTL values must be positive")
        return v

    # Nested configuration views
    @property
    def remote(self) -> RemoteStoreSettings:
        """Get remote store settings."""
        return RemoteStoreSettings(
            UPSTASH_REDIS_REST_URL=self.UPSTASH_REDIS_REST_URL,
            UPSTASH_REDIS_REST_TOKEN=self.UPSTASH_REDIS_REST_TOKEN,
            REMOTE_STORE_TIMEOUT=self.REMOTE_STORE_TIMEOUT,
            REMOTE_STORE_MAX_CONNECTIONS=self.REMOTE_STORE_MAX_CONNECTIONS,
        )

    @property
    def cache(self) -> CacheSettings:
        """Get cache settings."""
        return CacheSettings(
            CACHE_MEMORY_TTL=self.CACHE_MEMORY_TTL,
            CACHE_REMOTE_TTL=self.CACHE_REMOTE_TTL,
            CACHE_TTL_SHORT=self.CACHE_TTL_SHORT,
            CACHE_TTL_MEDIUM=self.CACHE_TTL_MEDIUM,
            CACHE_TTL_LONG=self.CACHE_TTL_LONG,
            CACHE_SWEEP_INTERVAL=self.CACHE_SWEEP_INTERVAL,
        )

    @property
    def logging(self) -> LoggingSettings:
        """Get logging settings."""
        return LoggingSettings(LOG_LEVEL=self.LOG_LEVEL, LOG_FORMAT=self.LOG_FORMAT)

    @property
    def app(self) -> ApplicationSettings:
        """Get application settings."""
        return ApplicationSettings(
            ENVIRONMENT=self.ENVIRONMENT,
            APP_NAME=self.APP_NAME,
            APP_VERSION=self.APP_VERSION,
            API_BASE_PATH=self.API_BASE_PATH,
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
