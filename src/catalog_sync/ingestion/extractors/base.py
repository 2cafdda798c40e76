"""
Base classes for catalog extraction.

An ExtractionAdapter turns the elements of one rendered page into raw
entries. A CatalogScraper opens a browser session, loads page 1 of a
listing and hands the adapter to the PaginationController.
"""

import re
from abc import ABC, abstractmethod
from typing import ClassVar

from catalog_sync.catalog.models import Entry
from catalog_sync.catalog.normalize import normalize_title
from catalog_sync.config import BrowserConfig, PaginationConfig, RetryConfig
from catalog_sync.ingestion.browser import BrowserSession
from catalog_sync.ingestion.driver import ElementSnapshot, PageDriver
from catalog_sync.ingestion.errors import NavigationError
from catalog_sync.ingestion.pagination import PaginationController, TraversalResult
from catalog_sync.logger import get_logger

# Lines that are prices, discounts or tile badges rather than titles
_NOISE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"[€$£¥₩]"),
    re.compile(r"%"),
    re.compile(r"^[0-9,. ]+$"),
    re.compile(r"precio|ahorra|^(?:price|save)\b", re.IGNORECASE),
    re.compile(r"<img", re.IGNORECASE),
)

_BADGES: frozenset[str] = frozenset(
    {
        "gratis",
        "free",
        "extra",
        "premium",
        "essential",
        "included",
        "incluido",
        "prueba de juego",
        "game trial",
    }
)


def clean_title(text: str, *, min_length: int = 3, max_length: int = 100) -> str:
    """
    Pick the title line out of a multi-line tile text.

    Lines that look like prices, percentages, numbers or badges, lines
    outside the length bounds and lines with no letters or digits are
    skipped. Returns "" when nothing is left.

    Example:
        >>> clean_title("Premium\\nAstro Bot\\n69,99 €")
        'Astro Bot'
    """
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if len(line) < min_length or len(line) > max_length:
            continue
        if line.lower() in _BADGES:
            continue
        if any(pattern.search(line) for pattern in _NOISE_PATTERNS):
            continue
        # No comparison key (symbols only)
        if not normalize_title(line):
            continue
        return line
    return ""


class ExtractionAdapter(ABC):
    """
    Maps one rendered listing page to raw entries.

    Adapters neither deduplicate nor normalize; they only drop entries
    whose title is empty after cleaning.
    """

    item_selector: ClassVar[str]

    def __init__(self, platform_tag: str) -> None:
        self.platform_tag = platform_tag

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return identifier for this catalog."""
        ...

    @abstractmethod
    def parse_element(self, element: ElementSnapshot) -> Entry | None:
        """Build an entry from one element, or None if it has no usable title."""
        ...

    def parse(self, elements: list[ElementSnapshot]) -> list[Entry]:
        """Build entries from every element of a page, in page order."""
        entries = []
        for element in elements:
            entry = self.parse_element(element)
            if entry is not None:
                entries.append(entry)
        return entries

    async def prepare(self, driver: PageDriver) -> None:
        """Hook run on every page before its elements are read."""
        return None

    async def extract(self, driver: PageDriver) -> list[Entry]:
        """Read the current page of ``driver``."""
        await self.prepare(driver)
        return self.parse(await driver.query_all(self.item_selector))


class CatalogScraper:
    """
    Fetches a complete catalog through a fresh browser session.

    SessionError and NavigationError (first page unreachable) propagate;
    anything after page 1 degrades to a partial TraversalResult.
    """

    COOKIE_CONSENT_SELECTORS: ClassVar[tuple[str, ...]] = (
        'button[data-qa="accept-cookies"]',
        "#onetrust-accept-btn-handler",
        'button:has-text("Accept all")',
        'button:has-text("Aceptar todas")',
    )

    def __init__(
        self,
        adapter: ExtractionAdapter,
        url: str,
        *,
        browser_config: BrowserConfig | None = None,
        pagination_config: PaginationConfig | None = None,
        retry_config: RetryConfig | None = None,
    ) -> None:
        self.adapter = adapter
        self.url = url
        self._browser_config = browser_config or BrowserConfig()
        self._pagination_config = pagination_config or PaginationConfig()
        self._retry_config = retry_config or RetryConfig()
        self._logger = get_logger(
            self.__class__.__name__,
            component="scraper",
            source=adapter.source_name,
        )

    def open_session(self) -> BrowserSession:
        return BrowserSession(
            self._browser_config,
            retry_config=self._retry_config,
            source=self.adapter.source_name,
        )

    async def _dismiss_cookie_consent(self, driver: PageDriver) -> None:
        for selector in self.COOKIE_CONSENT_SELECTORS:
            if await driver.is_visible(selector):
                if await driver.click(selector):
                    self._logger.info("Dismissed cookie consent", selector=selector)
                return
        self._logger.debug("No cookie consent dialog found")

    async def open_listing(self, driver: PageDriver) -> None:
        """Load page 1 and wait for the listing to render."""
        self._logger.info("Navigating to listing", url=self.url)
        loaded = await driver.load(
            self.url,
            wait_mode="domcontentloaded",
            timeout_ms=self._browser_config.initial_load_timeout_ms,
        )
        if not loaded:
            raise NavigationError(
                "Could not load the first page of the listing",
                source=self.adapter.source_name,
                url=self.url,
            )

        await self._dismiss_cookie_consent(driver)

        if not await driver.wait_for_selector(
            self.adapter.item_selector, timeout_ms=self._browser_config.ready_timeout_ms
        ):
            self._logger.warning(
                "Listing items did not render in time",
                selector=self.adapter.item_selector,
            )

    async def scrape_with(self, driver: PageDriver) -> TraversalResult:
        """Run a complete traversal on an already open driver."""
        await self.open_listing(driver)
        controller = PaginationController(self._pagination_config)
        result = await controller.paginate(
            driver, self.adapter.extract, catalog=self.adapter.source_name
        )
        self._logger.info(
            "Catalog scraped",
            entries=len(result.entries),
            pages=result.pages_visited,
        )
        return result

    async def scrape(self) -> TraversalResult:
        """Open a browser session and collect the whole catalog."""
        async with self.open_session() as driver:
            return await self.scrape_with(driver)
