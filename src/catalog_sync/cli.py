"""
Command-line interface for Catalog Sync.

Provides commands to check configuration, scrape a single catalog and
run the full source/target comparison.
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from catalog_sync.config import get_settings
from catalog_sync.logger import get_logger, setup_logging

logger = get_logger(__name__, component="cli")


class CLIOutput(BaseModel):
    """Structured output for CLI commands."""

    success: bool
    command: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    data: dict[str, Any] | list[Any] | None = None
    error: str | None = None


def print_json(output: CLIOutput) -> None:
    """Print output as formatted JSON."""
    print(json.dumps(output.model_dump(), indent=2, default=str, ensure_ascii=False))


async def cmd_test_config() -> None:
    """Test configuration loading."""
    settings = get_settings()

    output = CLIOutput(
        success=True,
        command="test-config",
        data={
            "environment": settings.environment,
            "source_url": settings.catalog.source_url,
            "target_url": settings.catalog.target_url,
            "page_size": settings.pagination.page_size,
            "max_pages": settings.pagination.max_pages,
            "inter_page_delay_ms": settings.pagination.inter_page_delay_ms,
            "headless": settings.browser.headless,
            "alias_table_path": str(settings.mapping.alias_table_path),
            "alias_table_exists": settings.mapping.alias_table_path.exists(),
            "exemption_list_path": str(settings.mapping.exemption_list_path),
            "exemption_list_exists": settings.mapping.exemption_list_path.exists(),
        },
    )
    print_json(output)


async def cmd_scrape(which: str) -> None:
    """Scrape one catalog and print its entries."""
    from catalog_sync.ingestion.extractors import BackloggdScraper, PlayStationStoreScraper

    settings = get_settings()
    scraper_cls = PlayStationStoreScraper if which == "source" else BackloggdScraper
    scraper = scraper_cls(
        settings.catalog,
        browser_config=settings.browser,
        pagination_config=settings.pagination,
        retry_config=settings.retry,
    )

    logger.info("Scraping catalog", catalog=which, url=scraper.url)
    result = await scraper.scrape()

    output = CLIOutput(
        success=True,
        command=f"scrape-{which}",
        data={
            "catalog": result.catalog,
            "expected_total": result.expected_total,
            "pages_visited": result.pages_visited,
            "strategy": result.strategy.value,
            "stop_reason": result.stop_reason.value,
            "warnings": result.warnings,
            "entries": [entry.to_dict() for entry in result.entries],
        },
    )
    print_json(output)


async def cmd_sync() -> None:
    """Scrape both catalogs and print the comparison."""
    from catalog_sync.ingestion.orchestrator import SyncOrchestrator

    orchestrator = SyncOrchestrator(get_settings())
    result = await orchestrator.run()

    output = CLIOutput(
        success=True,
        command="sync",
        data=result.to_dict(),
    )
    print_json(output)


def print_usage() -> None:
    """Print CLI usage information."""
    usage = """
Catalog Sync CLI
================

Usage: catalog-sync <command>

Commands:
  test-config      Test configuration loading
  scrape-source    Scrape the source catalog (storefront category)
  scrape-target    Scrape the target catalog (public list)
  sync             Scrape both catalogs and print what to add / remove

Configuration is read from the environment (or .env):
  CATALOG_SOURCE_URL, CATALOG_TARGET_URL   listing URLs (required)
  PAGINATION_*, BROWSER_*, MAPPING_*, LOG_*

Examples:
  CATALOG_SOURCE_URL=... CATALOG_TARGET_URL=... catalog-sync sync
"""
    print(usage)


def main() -> None:
    """Main CLI entry point."""
    if len(sys.argv) < 2:
        print_usage()
        sys.exit(1)

    # Config sections read the process environment, so .env is loaded into it first
    load_dotenv()
    setup_logging()
    command = sys.argv[1]

    try:
        if command == "test-config":
            asyncio.run(cmd_test_config())

        elif command == "scrape-source":
            asyncio.run(cmd_scrape("source"))

        elif command == "scrape-target":
            asyncio.run(cmd_scrape("target"))

        elif command == "sync":
            asyncio.run(cmd_sync())

        elif command in ("help", "--help", "-h"):
            print_usage()

        else:
            print(f"Unknown command: {command}")
            print_usage()
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.exception("CLI error", error=str(e))
        output = CLIOutput(
            success=False,
            command=command,
            error=str(e),
        )
        print_json(output)
        sys.exit(1)


if __name__ == "__main__":
    main()
