"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with validation,
type coercion, and sensible defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path(__file__).parent / "data"


class CatalogConfig(BaseSettings):
    """Listing URLs and labels for the two catalogs."""

    model_config = SettingsConfigDict(env_prefix="CATALOG_")

    source_url: str = Field(
        default=...,
        description="Storefront category URL (page 1) of the source catalog",
    )
    target_url: str = Field(
        default=...,
        description="Public list URL (page 1) of the target catalog",
    )
    source_platform: str = Field(
        default="PS5 Pro",
        description="Platform tag attached to source catalog entries",
    )
    target_platform: str = Field(
        default="PS5",
        description="Platform tag attached to target catalog entries",
    )
    store_base_url: str = Field(
        default="https://store.playstation.com",
        description="Base URL used to absolutize relative storefront links",
    )

    @field_validator("source_url", "target_url", "store_base_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate that URLs are absolute http(s) URLs."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid listing URL: {v}")
        return v


class PaginationConfig(BaseSettings):
    """Traversal limits and timeouts."""

    model_config = SettingsConfigDict(env_prefix="PAGINATION_")

    page_size: int = Field(
        default=24,
        ge=1,
        le=500,
        description="Items per page assumed for offset-style pagination",
    )
    max_pages: int = Field(
        default=50,
        ge=1,
        le=500,
        description="Safety ceiling on pages visited in one traversal",
    )
    inter_page_delay_ms: int = Field(
        default=2000,
        ge=0,
        le=60000,
        description="Fixed delay after each successful navigation",
    )
    navigation_timeout_ms: int = Field(
        default=30000,
        ge=0,
        le=300000,
        description="Timeout for loading a computed next-page URL",
    )
    url_change_timeout_ms: int = Field(
        default=5000,
        ge=0,
        le=120000,
        description="Timeout for the URL to change after clicking next",
    )
    network_idle_timeout_ms: int = Field(
        default=10000,
        ge=0,
        le=120000,
        description="Timeout for the network to settle after clicking next",
    )
    selector_timeout_ms: int = Field(
        default=3000,
        ge=0,
        le=60000,
        description="Timeout for a single selector probe",
    )


class BrowserConfig(BaseSettings):
    """Headless browser configuration."""

    model_config = SettingsConfigDict(env_prefix="BROWSER_")

    headless: bool = Field(default=True, description="Run Chromium headless")
    slow_mo_ms: int = Field(
        default=100,
        ge=0,
        le=5000,
        description="Delay Playwright inserts between browser operations",
    )
    user_agent: str = Field(
        default=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
            "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36"
        ),
        description="User-Agent header sent by the browser context",
    )
    initial_load_timeout_ms: int = Field(
        default=90000,
        ge=1000,
        le=600000,
        description="Timeout for loading the first page of a listing",
    )
    ready_timeout_ms: int = Field(
        default=10000,
        ge=0,
        le=120000,
        description="Timeout for the listing items to render",
    )


class MappingConfig(BaseSettings):
    """Locations of the alias table and the exemption list."""

    model_config = SettingsConfigDict(env_prefix="MAPPING_")

    alias_table_path: Path = Field(
        default=DATA_DIR / "title_mappings.json",
        description="JSON file with source/target title aliases",
    )
    exemption_list_path: Path = Field(
        default=DATA_DIR / "manual_additions.json",
        description="JSON file with target titles never flagged for removal",
    )


class RetryConfig(BaseSettings):
    """Retry behavior configuration."""

    model_config = SettingsConfigDict(env_prefix="RETRY_")

    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum number of browser launch attempts",
    )
    base_delay_seconds: float = Field(
        default=1.0,
        ge=0.1,
        le=30.0,
        description="Base delay between retries (exponential backoff)",
    )
    max_delay_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=300.0,
        description="Maximum delay between retries",
    )
    exponential_base: float = Field(
        default=2.0,
        ge=1.5,
        le=4.0,
        description="Base for exponential backoff calculation",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    include_timestamp: bool = Field(
        default=True,
        description="Include timestamp in log entries",
    )


class Settings(BaseSettings):
    """
    Main application settings.

    Aggregates all configuration sections and provides
    a single entry point for configuration access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Sub-configurations
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
