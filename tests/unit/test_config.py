"""Tests for configuration module."""

import os
from unittest.mock import patch

import pytest

from catalog_sync.config import (
    BrowserConfig,
    CatalogConfig,
    LoggingConfig,
    MappingConfig,
    PaginationConfig,
    RetryConfig,
    Settings,
)

CATALOG_ENV = {
    "CATALOG_SOURCE_URL": "https://store.playstation.com/es-es/category/abc/1",
    "CATALOG_TARGET_URL": "https://backloggd.com/u/someone/list/ps5-pro/",
}


class TestCatalogConfig:
    """Tests for catalog configuration."""

    def test_urls_from_env(self) -> None:
        """Test listing URLs and default platform tags."""
        with patch.dict(os.environ, CATALOG_ENV):
            config = CatalogConfig()

        assert config.source_url == CATALOG_ENV["CATALOG_SOURCE_URL"]
        assert config.target_url == CATALOG_ENV["CATALOG_TARGET_URL"]
        assert config.source_platform == "PS5 Pro"
        assert config.target_platform == "PS5"

    def test_urls_required(self) -> None:
        """Test that both listing URLs are required."""
        with patch.dict(os.environ, {}, clear=True), pytest.raises(ValueError):
            CatalogConfig()

    def test_invalid_url(self) -> None:
        """Test that non-http URLs are rejected."""
        with (
            patch.dict(os.environ, {**CATALOG_ENV, "CATALOG_SOURCE_URL": "store.playstation.com"}),
            pytest.raises(ValueError, match="Invalid listing URL"),
        ):
            CatalogConfig()


class TestPaginationConfig:
    """Tests for pagination configuration."""

    def test_default_values(self) -> None:
        """Test default traversal limits."""
        with patch.dict(os.environ, {}, clear=True):
            config = PaginationConfig()

        assert config.page_size == 24
        assert config.max_pages == 50
        assert config.inter_page_delay_ms == 2000
        assert config.url_change_timeout_ms == 5000
        assert config.network_idle_timeout_ms == 10000

    def test_env_override(self) -> None:
        """Test overriding values from the environment."""
        with patch.dict(os.environ, {"PAGINATION_MAX_PAGES": "10", "PAGINATION_INTER_PAGE_DELAY_MS": "0"}):
            config = PaginationConfig()

        assert config.max_pages == 10
        assert config.inter_page_delay_ms == 0

    def test_max_pages_bounds(self) -> None:
        """Test max_pages validation bounds."""
        with patch.dict(os.environ, {"PAGINATION_MAX_PAGES": "0"}), pytest.raises(ValueError):
            PaginationConfig()


class TestBrowserAndMappingConfig:
    """Tests for browser and mapping configuration."""

    def test_browser_defaults(self) -> None:
        """Test default browser settings."""
        with patch.dict(os.environ, {}, clear=True):
            config = BrowserConfig()

        assert config.headless is True
        assert config.slow_mo_ms == 100

    def test_headless_from_env(self) -> None:
        """Test boolean coercion from the environment."""
        with patch.dict(os.environ, {"BROWSER_HEADLESS": "false"}):
            assert BrowserConfig().headless is False

    def test_bundled_mapping_files(self) -> None:
        """Test that default mapping paths point at bundled files."""
        with patch.dict(os.environ, {}, clear=True):
            config = MappingConfig()

        assert config.alias_table_path.exists()
        assert config.exemption_list_path.exists()


class TestRetryConfig:
    """Tests for retry configuration."""

    def test_default_values(self) -> None:
        """Test default retry values."""
        with patch.dict(os.environ, {}, clear=True):
            config = RetryConfig()

        assert config.max_attempts == 3
        assert config.base_delay_seconds == 1.0
        assert config.max_delay_seconds == 60.0
        assert config.exponential_base == 2.0

    def test_max_attempts_bounds(self) -> None:
        """Test max_attempts validation bounds."""
        with patch.dict(os.environ, {"RETRY_MAX_ATTEMPTS": "0"}), pytest.raises(ValueError):
            RetryConfig()

        with patch.dict(os.environ, {"RETRY_MAX_ATTEMPTS": "11"}), pytest.raises(ValueError):
            RetryConfig()


class TestLoggingConfig:
    """Tests for logging configuration."""

    def test_valid_levels(self) -> None:
        """Test valid log levels."""
        for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            with patch.dict(os.environ, {"LOG_LEVEL": level}):
                config = LoggingConfig()
                assert config.level == level

    def test_valid_formats(self) -> None:
        """Test valid log formats."""
        for fmt in ["json", "console"]:
            with patch.dict(os.environ, {"LOG_FORMAT": fmt}):
                config = LoggingConfig()
                assert config.format == fmt


class TestSettings:
    """Tests for the aggregated settings."""

    def test_sections_loaded(self) -> None:
        """Test that every section is built from the environment."""
        with patch.dict(os.environ, {**CATALOG_ENV, "ENVIRONMENT": "production"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.environment == "production"
        assert settings.catalog.target_url == CATALOG_ENV["CATALOG_TARGET_URL"]
        assert settings.pagination.max_pages == 50
