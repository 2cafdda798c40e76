"""
Backloggd list extractor.

Reads game covers from a public Backloggd list. No authentication is
needed for public lists.
"""

from urllib.parse import urlsplit

from catalog_sync.catalog.models import Entry
from catalog_sync.config import (
    BrowserConfig,
    CatalogConfig,
    PaginationConfig,
    RetryConfig,
)
from catalog_sync.ingestion.driver import ElementSnapshot
from catalog_sync.ingestion.extractors.base import CatalogScraper, ExtractionAdapter, clean_title


class BackloggdAdapter(ExtractionAdapter):
    """List covers -> entries."""

    item_selector = ".game-cover"

    def __init__(self, platform_tag: str = "PS5") -> None:
        super().__init__(platform_tag)

    @property
    def source_name(self) -> str:
        return "backloggd"

    @staticmethod
    def game_slug(url: str | None) -> str | None:
        if not url:
            return None
        segments = [s for s in urlsplit(url).path.split("/") if s]
        return segments[-1] if segments else None

    def parse_element(self, element: ElementSnapshot) -> Entry | None:
        # Covers carry the title as a link title or image alt, one line each
        raw = element.title or element.image_alt or ""
        title = clean_title(raw, min_length=1, max_length=200)
        if not title:
            return None
        return Entry(
            title=title,
            platform_tag=self.platform_tag,
            source_url=element.href,
            stable_id=self.game_slug(element.href),
        )


class BackloggdScraper(CatalogScraper):
    """Scrapes the target catalog from a public Backloggd list."""

    def __init__(
        self,
        catalog_config: CatalogConfig,
        *,
        browser_config: BrowserConfig | None = None,
        pagination_config: PaginationConfig | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        super().__init__(
            BackloggdAdapter(catalog_config.target_platform),
            catalog_config.target_url,
            browser_config=browser_config,
            pagination_config=pagination_config,
            retry_config=retry_config,
        )
