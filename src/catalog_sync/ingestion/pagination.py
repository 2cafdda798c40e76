"""
Pagination-driven extraction loop.

Drives one PageDriver session through every page of a listing:

1. Detect the total item count from on-page text (optional).
2. Detect whether pages advance through a "next" control or the URL.
3. Extract, deduplicate, check completion, navigate; repeat until the
   listing ends, navigation fails, the total is reached or the page
   ceiling is hit.

Probe lists are plain data so supporting a new site is an addition to
a tuple, not a new branch.
"""

import asyncio
import re
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from catalog_sync.catalog.models import Entry
from catalog_sync.config import PaginationConfig
from catalog_sync.ingestion.driver import PageDriver
from catalog_sync.logger import get_logger

PageExtractor = Callable[[PageDriver], Awaitable[list[Entry]]]


class PaginationStrategy(str, Enum):
    """How a listing advances to its next page."""

    BUTTON = "button"
    URL_PARAM = "url_param"


class StopReason(str, Enum):
    """Why a traversal ended."""

    COMPLETE = "complete"  # collected >= detected total
    LAST_PAGE = "last_page"  # no enabled next control
    NAVIGATION_FAILED = "navigation_failed"  # click or load failed
    PAGE_LIMIT = "page_limit"  # safety ceiling reached


# --- Total count detection --------------------------------------------------

_NUMBER = r"(\d[\d.,]*)"
_RATIO_PATTERN = re.compile(rf"{_NUMBER}\s+(?:de|of)\s+{_NUMBER}", re.IGNORECASE)
_UNIT_PATTERN = re.compile(rf"{_NUMBER}\s+(?:games|juegos|results|resultados)\b", re.IGNORECASE)


def _to_int(raw: str) -> int | None:
    digits = re.sub(r"\D", "", raw)
    return int(digits) if digits else None


def ratio_total(text: str) -> int | None:
    """Second number of "<shown> of <total>" ("Mostrando 24 de 195 resultados")."""
    match = _RATIO_PATTERN.search(text)
    return _to_int(match.group(2)) if match else None


def unit_total(text: str) -> int | None:
    """Number before a unit word ("199 Games")."""
    match = _UNIT_PATTERN.search(text)
    return _to_int(match.group(1)) if match else None


TotalExtractor = Callable[[str], int | None]


@dataclass(frozen=True)
class CountProbe:
    """A text locator plus the rules that pull a total out of its text."""

    selector: str
    extractors: tuple[TotalExtractor, ...] = (ratio_total, unit_total)

    def parse(self, text: str) -> int | None:
        for extract in self.extractors:
            total = extract(text)
            if total is not None:
                return total
        return None


TOTAL_COUNT_PROBES: tuple[CountProbe, ...] = (
    CountProbe(r"text=/mostrando.*de.*resultados/i", (ratio_total,)),
    CountProbe(r"text=/\d+\s+games/i", (unit_total,)),
    CountProbe(r"text=/showing.*of.*results/i", (ratio_total,)),
    CountProbe('[data-qa*="results"]'),
    CountProbe(".pagination-info"),
)


def parse_total(text: str) -> int | None:
    """Apply every count rule in priority order to a piece of text."""
    return CountProbe("").parse(text)


# --- Next page controls and URLs --------------------------------------------

NEXT_PAGE_CONTROLS: tuple[str, ...] = (
    'button:has-text("Next")',
    'button:has-text("Siguiente")',
    'a:has-text("Next")',
    'a:has-text("Siguiente")',
    '[data-qa*="next"]',
    ".pagination .next",
    'button[aria-label*="next" i]',
    'a[rel="next"]',
)

PAGE_PARAMS: tuple[str, ...] = ("page", "p")
OFFSET_PARAMS: tuple[str, ...] = ("offset", "start")

_TRAILING_PAGE = re.compile(r"/(\d+)(/?)$")


def detect_url_pagination(url: str) -> bool:
    """Whether the URL already carries a numeric page/offset parameter or a trailing page number."""
    parts = urlsplit(url)
    params = {
        key.lower()
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if value.isdigit()
    }
    if params & {*PAGE_PARAMS, *OFFSET_PARAMS}:
        return True
    return _TRAILING_PAGE.search(parts.path) is not None


def next_page_url(url: str, page_index: int, page_size: int = 24) -> str:
    """
    Compute the URL of the page after ``url``.

    Increments an existing page parameter by one or an offset parameter by
    ``page_size``; otherwise increments a trailing numeric path segment;
    otherwise sets ``page=<page_index + 1>``, replacing a blank or
    non-numeric page parameter in place.

    Example:
        >>> next_page_url("https://store.example/category/abc/3", 3)
        'https://store.example/category/abc/4'
    """
    parts = urlsplit(url)
    query = parse_qsl(parts.query, keep_blank_values=True)

    for step_params, step in ((PAGE_PARAMS, 1), (OFFSET_PARAMS, page_size)):
        for i, (key, value) in enumerate(query):
            if key.lower() in step_params and value.isdigit():
                query[i] = (key, str(int(value) + step))
                return urlunsplit(parts._replace(query=urlencode(query)))

    match = _TRAILING_PAGE.search(parts.path)
    if match:
        path = (
            parts.path[: match.start()] + f"/{int(match.group(1)) + 1}{match.group(2)}"
        )
        return urlunsplit(parts._replace(path=path))

    for i, (key, _) in enumerate(query):
        if key.lower() in PAGE_PARAMS:
            query[i] = (key, str(page_index + 1))
            return urlunsplit(parts._replace(query=urlencode(query)))

    query.append(("page", str(page_index + 1)))
    return urlunsplit(parts._replace(query=urlencode(query)))


# --- Traversal state ----------------------------------------------------------


@dataclass
class PaginationState:
    """
    Mutable state of one traversal, owned by a single controller call.

    ``seen_keys`` and ``collected`` grow together: an entry is appended
    only if its identity key is new.
    """

    strategy: PaginationStrategy
    expected_total: int | None = None  # None: unbounded
    page_index: int = 1
    collected: list[Entry] = field(default_factory=list)
    seen_keys: set[str] = field(default_factory=set)

    def absorb(self, entries: Sequence[Entry]) -> int:
        """Append entries with unseen identity keys; return how many were new."""
        added = 0
        for entry in entries:
            key = entry.identity_key
            if key in self.seen_keys:
                continue
            self.seen_keys.add(key)
            self.collected.append(entry)
            added += 1
        return added

    @property
    def is_complete(self) -> bool:
        return self.expected_total is not None and len(self.collected) >= self.expected_total


@dataclass
class TraversalResult:
    """Outcome of a traversal; ``entries`` is the deduplicated listing."""

    catalog: str
    entries: list[Entry]
    pages_visited: int
    expected_total: int | None
    strategy: PaginationStrategy
    stop_reason: StopReason
    warnings: list[str] = field(default_factory=list)

    @property
    def count_mismatch(self) -> bool:
        return self.expected_total is not None and len(self.entries) != self.expected_total


# --- Controller ---------------------------------------------------------------


class PaginationController:
    """
    Collects every entry of a paginated listing.

    The driver must already be on page 1. Navigation faults end the
    traversal with what has been collected so far; SessionError from the
    driver propagates unchanged.
    """

    def __init__(
        self,
        config: PaginationConfig | None = None,
        *,
        count_probes: Sequence[CountProbe] = TOTAL_COUNT_PROBES,
        next_controls: Sequence[str] = NEXT_PAGE_CONTROLS,
    ) -> None:
        self._config = config or PaginationConfig()
        self._count_probes = tuple(count_probes)
        self._next_controls = tuple(next_controls)
        self._logger = get_logger(__name__, component="pagination")

    async def detect_total(self, driver: PageDriver) -> int | None:
        """Return the advertised item count, or None when no probe matches."""
        for probe in self._count_probes:
            text = await driver.query_text(
                probe.selector, timeout_ms=self._config.selector_timeout_ms
            )
            if not text:
                continue
            total = probe.parse(text)
            if total is not None:
                self._logger.info(
                    "Found total item count", expected_total=total, text=text.strip()
                )
                return total

        self._logger.warning("Could not extract total count, will scrape until no more pages")
        return None

    async def detect_strategy(self, driver: PageDriver) -> PaginationStrategy:
        """Classify the listing as URL-driven or button-driven."""
        url = driver.current_url()
        if detect_url_pagination(url):
            self._logger.info("Detected URL-based pagination", url=url)
            return PaginationStrategy.URL_PARAM

        for selector in self._next_controls:
            if await driver.is_visible(selector):
                self._logger.info("Detected button-based pagination", selector=selector)
                return PaginationStrategy.BUTTON

        self._logger.info("Pagination type unclear, defaulting to button-based")
        return PaginationStrategy.BUTTON

    async def paginate(
        self,
        driver: PageDriver,
        extract: PageExtractor,
        *,
        catalog: str = "catalog",
    ) -> TraversalResult:
        """
        Walk every page of the listing and collect unique entries.

        Args:
            driver: Session positioned on page 1
            extract: Maps the current page to raw entries
            catalog: Label used in logs and in the result

        Returns:
            TraversalResult with the deduplicated entries in page order
        """
        logger = self._logger.bind(catalog=catalog)

        expected_total = await self.detect_total(driver)
        strategy = await self.detect_strategy(driver)
        state = PaginationState(strategy=strategy, expected_total=expected_total)
        warnings: list[str] = []

        while True:
            entries = await extract(driver)
            added = state.absorb(entries)
            logger.info(
                "Extracted page",
                page=state.page_index,
                new_entries=added,
                collected=len(state.collected),
                expected_total=expected_total,
            )

            if state.is_complete:
                stop_reason = StopReason.COMPLETE
                break

            halt = await self._navigate(driver, state)
            if halt is not None:
                stop_reason = halt
                break

            if self._config.inter_page_delay_ms:
                await asyncio.sleep(self._config.inter_page_delay_ms / 1000)
            state.page_index += 1

            if state.page_index > self._config.max_pages:
                message = f"Reached maximum page limit ({self._config.max_pages}), stopping"
                logger.warning(message, page=state.page_index)
                warnings.append(message)
                stop_reason = StopReason.PAGE_LIMIT
                break

        pages_visited = min(state.page_index, self._config.max_pages)
        if expected_total is not None and len(state.collected) != expected_total:
            message = (
                f"Collected {len(state.collected)} entries but the listing "
                f"advertised {expected_total}"
            )
            logger.warning(
                "Collected count differs from detected total",
                collected=len(state.collected),
                expected_total=expected_total,
                stop_reason=stop_reason.value,
            )
            warnings.append(message)

        logger.info(
            "Traversal finished",
            entries=len(state.collected),
            pages=pages_visited,
            strategy=strategy.value,
            stop_reason=stop_reason.value,
        )
        return TraversalResult(
            catalog=catalog,
            entries=state.collected,
            pages_visited=pages_visited,
            expected_total=expected_total,
            strategy=strategy,
            stop_reason=stop_reason,
            warnings=warnings,
        )

    async def _navigate(self, driver: PageDriver, state: PaginationState) -> StopReason | None:
        """Move to the next page; return None on success, else why pagination ends."""
        if state.strategy is PaginationStrategy.BUTTON:
            return await self._click_next(driver)
        return await self._load_next_url(driver, state)

    async def _click_next(self, driver: PageDriver) -> StopReason | None:
        click_failed = False
        for selector in self._next_controls:
            if not await driver.is_visible(selector):
                continue
            if await driver.is_disabled(selector):
                self._logger.info("Next button is disabled, no more pages", selector=selector)
                return StopReason.LAST_PAGE

            previous_url = driver.current_url()
            if not await driver.click(selector):
                self._logger.debug("Next control click failed", selector=selector)
                click_failed = True
                continue

            await self._wait_after_click(driver, previous_url)
            self._logger.info("Navigated to next page via button", selector=selector)
            return None

        if click_failed:
            self._logger.warning("Every next control click failed, keeping partial result")
            return StopReason.NAVIGATION_FAILED
        self._logger.info("No next button found, reached last page")
        return StopReason.LAST_PAGE

    async def _wait_after_click(self, driver: PageDriver, previous_url: str) -> None:
        """Resume as soon as the URL changes or the network settles."""
        waits = {
            asyncio.ensure_future(
                driver.wait_for_url_change(previous_url, self._config.url_change_timeout_ms)
            ),
            asyncio.ensure_future(
                driver.wait_for_network_settled(self._config.network_idle_timeout_ms)
            ),
        }
        done, pending = await asyncio.wait(waits, return_when=asyncio.FIRST_COMPLETED)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        for task in done:
            task.result()

    async def _load_next_url(
        self, driver: PageDriver, state: PaginationState
    ) -> StopReason | None:
        current = driver.current_url()
        target = next_page_url(current, state.page_index, self._config.page_size)
        loaded = await driver.load(
            target,
            wait_mode="domcontentloaded",
            timeout_ms=self._config.navigation_timeout_ms,
        )
        if not loaded:
            self._logger.warning("Failed to load next page, keeping partial result", url=target)
            return StopReason.NAVIGATION_FAILED

        self._logger.info("Navigated to next page via URL", url=target)
        return None
