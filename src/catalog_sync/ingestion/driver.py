"""
Page driver abstraction over a rendered browser page.

The pagination controller and the extraction adapters only talk to a
PageDriver, so they can be exercised against an in-memory fake. The
Playwright implementation turns per-operation timeouts and failures into
boolean results and raises SessionError only when the page itself is gone.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Literal, Protocol, TypeVar

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from catalog_sync.ingestion.errors import SessionError
from catalog_sync.logger import get_logger

WaitMode = Literal["commit", "domcontentloaded", "load", "networkidle"]

R = TypeVar("R")


@dataclass(frozen=True)
class ElementSnapshot:
    """Rendered state of one listing element, detached from the live page."""

    text: str = ""
    href: str | None = None
    title: str | None = None
    image_alt: str | None = None


class PageDriver(Protocol):
    """Capabilities the traversal needs from a live browsing session."""

    async def load(
        self, url: str, *, wait_mode: WaitMode = "domcontentloaded", timeout_ms: int = 30000
    ) -> bool: ...

    def current_url(self) -> str: ...

    async def query_text(self, selector: str, *, timeout_ms: int = 3000) -> str | None: ...

    async def query_all(self, selector: str) -> list[ElementSnapshot]: ...

    async def click(self, selector: str, *, timeout_ms: int = 5000) -> bool: ...

    async def is_visible(self, selector: str) -> bool: ...

    async def is_disabled(self, selector: str) -> bool: ...

    async def wait_for_network_settled(self, timeout_ms: int) -> bool: ...

    async def wait_for_url_change(self, previous_url: str, timeout_ms: int) -> bool: ...

    async def wait_for_selector(self, selector: str, *, timeout_ms: int) -> bool: ...

    async def scroll_to_bottom(self) -> None: ...


# Runs in the page: one plain object per matched element.
_SNAPSHOT_JS = """
(elements) => elements.map((el) => {
  const link = el.closest('a') || el.querySelector('a');
  const img = el.querySelector('img');
  return {
    text: el.innerText || el.textContent || '',
    href: link ? link.href : null,
    title: el.getAttribute('title') || (link ? link.getAttribute('title') : null),
    image_alt: img ? img.getAttribute('alt') : null,
  };
})
"""

# Scrolls in small steps so lazily rendered tiles get attached.
_AUTO_SCROLL_JS = """
async () => {
  await new Promise((resolve) => {
    let total = 0;
    const distance = 100;
    const timer = setInterval(() => {
      window.scrollBy(0, distance);
      total += distance;
      if (total >= document.body.scrollHeight) {
        clearInterval(timer);
        resolve();
      }
    }, 100);
  });
}
"""


class PlaywrightPageDriver:
    """PageDriver backed by a Playwright async Page."""

    def __init__(self, page: Page, *, source: str | None = None) -> None:
        self._page = page
        self._source = source
        self._logger = get_logger(__name__, component="page_driver", source=source)

    @property
    def page(self) -> Page:
        return self._page

    def _session_alive(self) -> bool:
        if self._page.is_closed():
            return False
        browser = self._page.context.browser
        return browser is None or browser.is_connected()

    async def _attempt(
        self,
        operation: str,
        action: Callable[[], Awaitable[R]],
        default: R,
        **context: Any,
    ) -> R:
        """Run one page operation, mapping non-fatal failures to ``default``."""
        try:
            return await action()
        except PlaywrightTimeoutError:
            self._logger.debug("Page operation timed out", operation=operation, **context)
            return default
        except PlaywrightError as e:
            if not self._session_alive():
                raise SessionError(
                    f"Browser session lost during {operation}",
                    source=self._source,
                    url=self._page.url if not self._page.is_closed() else None,
                    original_error=e,
                ) from e
            self._logger.debug(
                "Page operation failed", operation=operation, error=str(e), **context
            )
            return default

    async def load(
        self, url: str, *, wait_mode: WaitMode = "domcontentloaded", timeout_ms: int = 30000
    ) -> bool:
        async def _goto() -> bool:
            await self._page.goto(url, wait_until=wait_mode, timeout=timeout_ms)
            return True

        return await self._attempt("load", _goto, False, url=url)

    def current_url(self) -> str:
        return self._page.url

    async def query_text(self, selector: str, *, timeout_ms: int = 3000) -> str | None:
        locator = self._page.locator(selector).first
        return await self._attempt(
            "query_text",
            lambda: locator.text_content(timeout=timeout_ms),
            None,
            selector=selector,
        )

    async def query_all(self, selector: str) -> list[ElementSnapshot]:
        raw: list[dict[str, Any]] = await self._attempt(
            "query_all",
            lambda: self._page.eval_on_selector_all(selector, _SNAPSHOT_JS),
            [],
            selector=selector,
        )
        return [
            ElementSnapshot(
                text=item.get("text") or "",
                href=item.get("href"),
                title=item.get("title"),
                image_alt=item.get("image_alt"),
            )
            for item in raw
        ]

    async def click(self, selector: str, *, timeout_ms: int = 5000) -> bool:
        locator = self._page.locator(selector).first

        async def _click() -> bool:
            await locator.click(timeout=timeout_ms)
            return True

        return await self._attempt("click", _click, False, selector=selector)

    async def is_visible(self, selector: str) -> bool:
        locator = self._page.locator(selector).first
        return await self._attempt("is_visible", locator.is_visible, False, selector=selector)

    async def is_disabled(self, selector: str) -> bool:
        locator = self._page.locator(selector).first

        async def _disabled() -> bool:
            if await locator.is_disabled(timeout=1000):
                return True
            return await locator.get_attribute("aria-disabled", timeout=1000) == "true"

        return await self._attempt("is_disabled", _disabled, False, selector=selector)

    async def wait_for_network_settled(self, timeout_ms: int) -> bool:
        async def _idle() -> bool:
            await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
            return True

        return await self._attempt("wait_for_network_settled", _idle, False)

    async def wait_for_url_change(self, previous_url: str, timeout_ms: int) -> bool:
        async def _changed() -> bool:
            await self._page.wait_for_url(
                lambda url: url != previous_url, wait_until="commit", timeout=timeout_ms
            )
            return True

        return await self._attempt("wait_for_url_change", _changed, False)

    async def wait_for_selector(self, selector: str, *, timeout_ms: int) -> bool:
        async def _present() -> bool:
            await self._page.wait_for_selector(selector, timeout=timeout_ms)
            return True

        return await self._attempt("wait_for_selector", _present, False, selector=selector)

    async def scroll_to_bottom(self) -> None:
        async def _scroll() -> None:
            await self._page.evaluate(_AUTO_SCROLL_JS)

        await self._attempt("scroll_to_bottom", _scroll, None)
