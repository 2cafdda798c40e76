"""
Browser session management.

Each catalog traversal owns one BrowserSession: one Playwright instance,
one Chromium browser, one context and one page. Sessions are never
shared between traversals.
"""

from typing import Any

from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from catalog_sync.config import BrowserConfig, RetryConfig
from catalog_sync.ingestion.driver import PlaywrightPageDriver
from catalog_sync.ingestion.errors import SessionError
from catalog_sync.logger import get_logger


class BrowserSession:
    """
    Async context manager yielding a PlaywrightPageDriver.

    Browser launch is retried with exponential backoff; if every attempt
    fails a SessionError is raised.

    Example:
        >>> async with BrowserSession(BrowserConfig(), source="target") as driver:
        ...     await driver.load("https://example.com/list")
    """

    def __init__(
        self,
        config: BrowserConfig,
        *,
        retry_config: RetryConfig | None = None,
        source: str | None = None,
    ) -> None:
        self._config = config
        self._retry_config = retry_config or RetryConfig()
        self._source = source
        self._logger = get_logger(__name__, component="browser", source=source)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    def _log_retry_attempt(self, retry_state: Any) -> None:
        """Log retry attempts for observability."""
        self._logger.warning(
            "Retrying browser launch",
            attempt=retry_state.attempt_number,
            wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
            exception=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _launch(self) -> Browser:
        assert self._playwright is not None
        return await self._playwright.chromium.launch(
            headless=self._config.headless,
            slow_mo=self._config.slow_mo_ms,
        )

    def _create_retry_decorator(self) -> Any:
        """Create retry decorator with current configuration."""
        return retry(
            retry=retry_if_exception_type(PlaywrightError),
            stop=stop_after_attempt(self._retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=self._retry_config.base_delay_seconds,
                max=self._retry_config.max_delay_seconds,
                exp_base=self._retry_config.exponential_base,
            ),
            before_sleep=self._log_retry_attempt,
            reraise=False,
        )

    async def start(self) -> PlaywrightPageDriver:
        """Start Playwright, launch the browser and open a page."""
        launch = self._create_retry_decorator()(self._launch)

        try:
            self._playwright = await async_playwright().start()
            self._browser = await launch()
            self._context = await self._browser.new_context(user_agent=self._config.user_agent)
            page = await self._context.new_page()
        except RetryError as e:
            await self.close()
            self._logger.error(
                "Browser launch failed after retries",
                attempts=self._retry_config.max_attempts,
            )
            raise SessionError(
                f"Browser launch failed after {self._retry_config.max_attempts} attempts",
                source=self._source,
                original_error=e,
            ) from e
        except PlaywrightError as e:
            await self.close()
            raise SessionError(
                "Browser session could not be opened",
                source=self._source,
                original_error=e,
            ) from e

        self._logger.info("Browser session started", headless=self._config.headless)
        return PlaywrightPageDriver(page, source=self._source)

    async def close(self) -> None:
        """Close browser and release resources."""
        if self._context is not None:
            try:
                await self._context.close()
            except PlaywrightError as e:
                self._logger.debug("Context already closed", error=str(e))
            self._context = None
        if self._browser is not None:
            try:
                await self._browser.close()
            except PlaywrightError as e:
                self._logger.debug("Browser already closed", error=str(e))
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None

    async def __aenter__(self) -> PlaywrightPageDriver:
        return await self.start()

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
