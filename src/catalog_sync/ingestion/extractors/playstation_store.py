"""
PlayStation Store extractor.

Reads game tiles from a storefront category listing. Tiles are links to
concept pages whose text mixes the title with prices and badges.
"""

from urllib.parse import urljoin, urlsplit

from catalog_sync.catalog.models import Entry
from catalog_sync.config import (
    BrowserConfig,
    CatalogConfig,
    PaginationConfig,
    RetryConfig,
)
from catalog_sync.ingestion.driver import ElementSnapshot, PageDriver
from catalog_sync.ingestion.extractors.base import CatalogScraper, ExtractionAdapter, clean_title


class PlayStationStoreAdapter(ExtractionAdapter):
    """Storefront tiles -> entries."""

    item_selector = 'a[href*="/concept/"]'
    READY_SELECTOR = '[data-qa^="search#product"]'

    def __init__(
        self,
        platform_tag: str = "PS5 Pro",
        *,
        base_url: str = "https://store.playstation.com",
        ready_timeout_ms: int = 10000,
    ) -> None:
        super().__init__(platform_tag)
        self.base_url = base_url
        self.ready_timeout_ms = ready_timeout_ms

    @property
    def source_name(self) -> str:
        return "playstation_store"

    @staticmethod
    def concept_id(url: str) -> str | None:
        """Id following ``/concept/`` in a storefront URL."""
        segments = [s for s in urlsplit(url).path.split("/") if s]
        if "concept" in segments:
            index = segments.index("concept")
            if index + 1 < len(segments):
                return segments[index + 1]
        return None

    def parse_element(self, element: ElementSnapshot) -> Entry | None:
        if not element.href:
            return None
        title = clean_title(element.text)
        if not title:
            return None
        url = urljoin(self.base_url, element.href)
        return Entry(
            title=title,
            platform_tag=self.platform_tag,
            source_url=url,
            stable_id=self.concept_id(url),
        )

    async def prepare(self, driver: PageDriver) -> None:
        # The store renders tiles lazily; scroll so every tile is attached
        await driver.wait_for_selector(self.READY_SELECTOR, timeout_ms=self.ready_timeout_ms)
        await driver.scroll_to_bottom()


class PlayStationStoreScraper(CatalogScraper):
    """Scrapes the source catalog from a PlayStation Store category."""

    def __init__(
        self,
        catalog_config: CatalogConfig,
        *,
        browser_config: BrowserConfig | None = None,
        pagination_config: PaginationConfig | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        browser_config = browser_config or BrowserConfig()
        adapter = PlayStationStoreAdapter(
            catalog_config.source_platform,
            base_url=catalog_config.store_base_url,
            ready_timeout_ms=browser_config.ready_timeout_ms,
        )
        super().__init__(
            adapter,
            catalog_config.source_url,
            browser_config=browser_config,
            pagination_config=pagination_config,
            retry_config=retry_config,
        )
