"""Browser session using Playwright: one browser process, one page."""

import asyncio
from typing import Optional, Dict, Any, List

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    Route,
    TimeoutError as PWTimeout,
)

from cnki_crawler.agent.configuration import (
    BROWSER_HEADLESS,
    BROWSER_SLOW_MO,
    BROWSER_TIMEOUT,
)
from cnki_crawler.core.errors import NavigationTimeout, SessionLaunchFailure
from cnki_crawler.utils.log_utils import get_logger

logger = get_logger(__name__)

_QUERY_ROWS_SCRIPT = """
([rowSelector, cells]) => Array.from(document.querySelectorAll(rowSelector)).map(row => {
    const out = {};
    for (const [field, sel] of Object.entries(cells)) {
        out[field] = Array.from(row.querySelectorAll(sel)).map(el => ({
            text: (el.innerText || el.textContent || '').trim(),
            href: el.href || el.getAttribute('href') || null,
        }));
    }
    return out;
})
"""


class BrowserSession:
    """Owns one Playwright browser process and its single page.

    Every workflow step talks to the site through the DOM-query methods
    below, so a step never touches Playwright directly and tests can swap in
    a fake session with the same methods.
    """

    def __init__(
        self,
        executable_path: Optional[str] = None,
        headless: bool = BROWSER_HEADLESS,
        slow_mo: int = BROWSER_SLOW_MO,
        timeout: int = BROWSER_TIMEOUT,
    ):
        """Initialize the browser session.

        Args:
            executable_path: Local Chrome executable; None uses Playwright's bundled Chromium
            headless: Run browser in headless mode
            slow_mo: Slow down operations by this many milliseconds
            timeout: Default timeout for waits and actions in milliseconds
        """
        self._executable_path = executable_path
        self._headless = headless
        self._slow_mo = slow_mo
        self._timeout = timeout

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def page(self) -> Optional[Page]:
        """Get the current page instance."""
        return self._page

    @property
    def timeout(self) -> int:
        """Default wait timeout in milliseconds."""
        return self._timeout

    @property
    def is_open(self) -> bool:
        return self._page is not None

    def _require_page(self) -> Page:
        if not self._page:
            raise RuntimeError("Browser not started. Call start() first.")
        return self._page

    async def start(self) -> None:
        """Launch the browser and prepare its first page.

        Raises:
            SessionLaunchFailure: If Playwright or the browser cannot start
        """
        logger.info(
            f"Starting browser: executable={self._executable_path or 'bundled chromium'}, "
            f"headless={self._headless}"
        )

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                executable_path=self._executable_path,
                headless=self._headless,
                slow_mo=self._slow_mo,
            )
            # no_viewport lets the page follow the window size
            self._context = await self._browser.new_context(no_viewport=True, locale="zh-CN")
            self._context.set_default_timeout(self._timeout)
            self._page = await self._context.new_page()
            await self._configure_page(self._page)
        except PlaywrightError as e:
            await self.close()
            raise SessionLaunchFailure(f"Failed to launch browser: {e}") from e
        except OSError as e:
            await self.close()
            raise SessionLaunchFailure(f"Failed to launch browser: {e}") from e

        logger.info("Browser started")

    async def _configure_page(self, page: Page) -> None:
        """Install interception and the error sinks on the page."""
        # Hide webdriver flag
        await page.add_init_script(
            "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"
        )

        await page.route("**/*", self._continue_request)

        page.on("crash", self._on_crash)
        page.on("pageerror", self._on_page_error)
        page.on("console", self._on_console)

    async def _continue_request(self, route: Route) -> None:
        """Pass every request through unmodified."""
        await route.continue_()

    def _on_crash(self, page: Page) -> None:
        logger.warning(f"Error occurred: page crashed at {page.url}")

    def _on_page_error(self, error: Any) -> None:
        logger.warning(f"Pageerror occurred: {error}")

    def _on_console(self, message: Any) -> None:
        logger.debug(f"console.{message.type}: {message.text}")

    async def navigate(self, url: str, wait_until: str = "networkidle") -> None:
        """Navigate to URL and wait for load.

        Args:
            url: URL to navigate to
            wait_until: When to consider navigation complete
                ("domcontentloaded", "load", "networkidle")
        """
        page = self._require_page()

        logger.info(f"Navigating to: {url}")
        try:
            await page.goto(url, wait_until=wait_until)
        except PWTimeout as e:
            raise NavigationTimeout("navigate", url, self._timeout) from e
        logger.debug(f"Navigation complete: {await page.title()}")

    async def wait_for_element(
        self,
        selector: str,
        timeout: Optional[int] = None,
        state: str = "attached",
        step: str = "wait",
    ) -> None:
        """Wait for an element to reach a state.

        Args:
            selector: CSS selector for the element
            timeout: Timeout in milliseconds
            state: State to wait for ("attached", "detached", "visible", "hidden")
            step: Workflow step name reported on timeout

        Raises:
            NavigationTimeout: If the element does not reach the state in time
        """
        page = self._require_page()
        timeout = self._timeout if timeout is None else timeout

        try:
            await page.wait_for_selector(selector, timeout=timeout, state=state)
        except PWTimeout as e:
            raise NavigationTimeout(step, selector, timeout) from e

    async def wait_for_settle(
        self,
        selector: str,
        timeout: Optional[int] = None,
        fallback_delay: float = 0.0,
    ) -> bool:
        """Poll for a readiness selector, sleeping a fixed delay if it never shows.

        Returns:
            True if the selector appeared, False if the fallback delay was used
        """
        page = self._require_page()
        timeout = self._timeout if timeout is None else timeout

        try:
            await page.wait_for_selector(selector, timeout=timeout, state="attached")
            return True
        except PWTimeout:
            logger.debug(f"{selector} not ready, settling for {fallback_delay}s")
            await asyncio.sleep(fallback_delay)
            return False

    async def wait_for_text_prefix(
        self,
        selector: str,
        prefix: str,
        timeout: Optional[int] = None,
        step: str = "wait",
    ) -> None:
        """Wait until an element's text starts with a prefix."""
        page = self._require_page()
        timeout = self._timeout if timeout is None else timeout

        try:
            await page.wait_for_function(
                """
                ([sel, prefix]) => {
                    const el = document.querySelector(sel);
                    return !!el && (el.textContent || '').trim().startsWith(prefix);
                }
                """,
                arg=[selector, prefix],
                timeout=timeout,
            )
        except PWTimeout as e:
            raise NavigationTimeout(step, f"{selector} ~ {prefix}", timeout) from e

    async def click(self, selector: str, step: str = "click") -> None:
        """Click the first element matching a selector."""
        page = self._require_page()

        logger.debug(f"Clicking {selector}")
        try:
            await page.click(selector)
        except PWTimeout as e:
            raise NavigationTimeout(step, selector, self._timeout) from e

    async def click_nth(self, selector: str, index: int, step: str = "click") -> None:
        """Click the element at ``index`` among those matching a selector."""
        page = self._require_page()

        logger.debug(f"Clicking {selector} [{index}]")
        try:
            await page.locator(selector).nth(index).click()
        except PWTimeout as e:
            raise NavigationTimeout(step, f"{selector}:nth({index})", self._timeout) from e

    async def click_in_page(self, selector: str) -> bool:
        """Click an element from inside the page's own script context.

        Returns:
            True if the element existed and was clicked
        """
        page = self._require_page()

        logger.debug(f"Clicking {selector} via page script")
        return await page.evaluate(
            """
            (sel) => {
                const el = document.querySelector(sel);
                if (!el) return false;
                el.click();
                return true;
            }
            """,
            selector,
        )

    async def type_into(self, selector: str, text: str, delay: int = 50, step: str = "type") -> None:
        """Type text into an input, one keystroke at a time.

        Args:
            selector: CSS selector for the input
            text: Text to type
            delay: Delay between keystrokes in milliseconds
        """
        page = self._require_page()

        logger.debug(f"Typing into {selector}: {text[:50]}")
        try:
            await page.locator(selector).first.press_sequentially(text, delay=delay)
        except PWTimeout as e:
            raise NavigationTimeout(step, selector, self._timeout) from e

    async def press_key(self, key: str) -> None:
        """Press a keyboard key.

        Args:
            key: Key to press (e.g., "Enter", "Tab", "Escape")
        """
        page = self._require_page()

        logger.debug(f"Pressing key: {key}")
        await page.keyboard.press(key)

    async def set_attribute(self, selector: str, name: str, value: str, step: str = "set_attribute") -> None:
        """Set an attribute on the first element matching a selector."""
        page = self._require_page()

        try:
            await page.locator(selector).first.evaluate(
                "(el, [name, value]) => el.setAttribute(name, value)",
                [name, value],
            )
        except PWTimeout as e:
            raise NavigationTimeout(step, selector, self._timeout) from e

    async def set_window_name(self, name: str) -> None:
        """Set ``window.name`` on the current page."""
        page = self._require_page()

        await page.evaluate("(name) => { window.name = name; }", name)
        logger.debug(f"window.name: {name}")

    async def count(self, selector: str) -> int:
        """Number of elements currently matching a selector."""
        page = self._require_page()
        return await page.locator(selector).count()

    async def text_of(self, selector: str) -> Optional[str]:
        """Visible text of the first match, or None if nothing matches."""
        page = self._require_page()
        return await page.evaluate(
            """
            (sel) => {
                const el = document.querySelector(sel);
                return el ? (el.innerText || el.textContent || '') : null;
            }
            """,
            selector,
        )

    async def texts_of(self, selector: str) -> List[str]:
        """Visible text of every match, in document order."""
        page = self._require_page()
        return await page.eval_on_selector_all(
            selector,
            "els => els.map(el => el.innerText || el.textContent || '')",
        )

    async def query_rows(
        self,
        row_selector: str,
        cells: Dict[str, str],
    ) -> List[Dict[str, List[Dict[str, Optional[str]]]]]:
        """Read cell text and links from every row.

        Args:
            row_selector: Selector matching the rows
            cells: Field name -> selector relative to the row

        Returns:
            One dict per row mapping each field to a list of
            ``{"text": ..., "href": ...}`` entries, one per matching element
        """
        page = self._require_page()
        return await page.evaluate(_QUERY_ROWS_SCRIPT, [row_selector, cells])

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Execute JavaScript in the page context.

        Args:
            script: JavaScript code to execute
            arg: Optional argument to pass to the script

        Returns:
            Result of the script execution
        """
        page = self._require_page()

        if arg is not None:
            return await page.evaluate(script, arg)
        return await page.evaluate(script)

    async def settle(self, seconds: float) -> None:
        """Fixed pause; used only where no readiness signal exists."""
        if seconds > 0:
            await asyncio.sleep(seconds)

    async def get_page_info(self) -> Dict[str, Any]:
        """Get current page information.

        Returns:
            Dictionary with url and title
        """
        page = self._require_page()
        return {"url": page.url, "title": await page.title()}

    async def close(self) -> None:
        """Clean up browser resources.

        Every resource is released even if closing an earlier one fails; such
        failures are logged, not raised.
        """
        if not (self._page or self._context or self._browser or self._playwright):
            return

        logger.info("Closing browser...")

        page, self._page = self._page, None
        context, self._context = self._context, None
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None

        steps = [
            ("page", page.close if page else None),
            ("context", context.close if context else None),
            ("browser", browser.close if browser else None),
            ("playwright", playwright.stop if playwright else None),
        ]
        for name, release in steps:
            if release is None:
                continue
            try:
                await release()
            except Exception as e:
                logger.warning(f"Failed to close {name}: {e}")

        logger.info("Browser closed")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
