"""Headless browser session and primitive page operations."""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, AsyncIterator, Callable, Optional, Union

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Locator, Page, Playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from cita_checker.constants import Timeouts
from cita_checker.core.exceptions import (
    CitaCheckerError,
    ElementNotFoundError,
    LaunchError,
    NavigationError,
    WaitTimeoutError,
)


class ClickMode(str, Enum):
    """How a click is delivered to the page."""

    NORMAL = "normal-click"
    # Scripted DOM dispatch for controls the portal renders unclickable
    FORCED_SCRIPT = "forced-script-click"


class ElementState(str, Enum):
    """States accepted by wait_for_state()."""

    VISIBLE = "visible"
    HIDDEN = "hidden"


# Shows the element if display:none, dispatches press/release/click, restores
# the original inline display. Returns false when nothing matches so calling
# it again on an already confirmed page is harmless.
FORCED_CLICK_SCRIPT = """
(selector) => {
    const el = document.querySelector(selector);
    if (!el) {
        return false;
    }
    const originalDisplay = el.style.display;
    const hidden = window.getComputedStyle(el).display === 'none';
    if (hidden) {
        el.style.display = 'block';
    }
    try {
        for (const type of ['mousedown', 'mouseup', 'click']) {
            el.dispatchEvent(new MouseEvent(type, {bubbles: true, cancelable: true, view: window}));
        }
    } finally {
        if (hidden) {
            el.style.display = originalDisplay;
        }
    }
    return true;
}
"""


@dataclass
class BrowserSession:
    """One browser process, one isolated context, one page."""

    playwright: Playwright
    browser: Browser
    context: BrowserContext
    page: Page
    disposed: bool = False


@dataclass(frozen=True)
class ElementHandle:
    """Lazy reference to the nodes matching a selector."""

    name: str
    selector: str
    locator: Locator


class PageDriver:
    """Minimal facade over Playwright used by the availability workflow."""

    def __init__(
        self,
        headless: bool = True,
        navigation_timeout_ms: int = Timeouts.NAVIGATION,
        element_timeout_ms: int = Timeouts.ELEMENT,
        playwright_factory: Callable[[], Any] = async_playwright,
        log: Optional[Any] = None,
    ):
        """
        Initialize page driver.

        Args:
            headless: Launch Chromium without a window
            navigation_timeout_ms: Timeout for page loads
            element_timeout_ms: Timeout for element actions
            playwright_factory: Callable returning an object with ``start()``
            log: Logger to use (defaults to the loguru logger)
        """
        self.headless = headless
        self.navigation_timeout_ms = navigation_timeout_ms
        self.element_timeout_ms = element_timeout_ms
        self._playwright_factory = playwright_factory
        self._log = log or logger.bind(component="page_driver")

    async def launch(self) -> BrowserSession:
        """
        Start a headless browser and open one page in a fresh context.

        Raises:
            LaunchError: If the browser executable or runtime is unavailable
        """
        playwright = browser = context = None
        try:
            playwright = await self._playwright_factory().start()
            browser = await playwright.chromium.launch(headless=self.headless)
            context = await browser.new_context(viewport={"width": 1920, "height": 1080})
            page = await context.new_page()
        except PlaywrightError as e:
            self._log.error(f"Browser launch failed: {e}")
            await self._close_resources(context, browser, playwright)
            raise LaunchError(f"Browser launch failed: {e}") from e

        self._log.info("Browser started successfully")
        return BrowserSession(playwright=playwright, browser=browser, context=context, page=page)

    async def dispose(self, session: BrowserSession) -> None:
        """Release context, browser and Playwright. Safe to call more than once."""
        if session.disposed:
            return
        session.disposed = True
        await self._close_resources(session.context, session.browser, session.playwright)
        self._log.info("Browser resources cleaned up")

    async def _close_resources(
        self,
        context: Optional[BrowserContext],
        browser: Optional[Browser],
        playwright: Optional[Playwright],
    ) -> None:
        # Each step runs even if the previous one failed
        if context is not None:
            try:
                await context.close()
            except Exception as e:
                self._log.warning(f"Failed to close browser context: {e}")
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                self._log.warning(f"Failed to close browser: {e}")
        if playwright is not None:
            try:
                await playwright.stop()
            except Exception as e:
                self._log.warning(f"Failed to stop Playwright: {e}")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[BrowserSession]:
        """Launch a session and dispose of it on every exit path."""
        browser_session = await self.launch()
        try:
            yield browser_session
        finally:
            await self.dispose(browser_session)

    async def navigate(self, session: BrowserSession, url: str) -> None:
        """
        Load ``url`` and wait for the load event.

        Raises:
            NavigationError: On network failure or timeout
        """
        self._log.info(f"Navigating to {url}")
        try:
            await session.page.goto(url, wait_until="load", timeout=self.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationError(url, f"timed out after {self.navigation_timeout_ms}ms") from e
        except PlaywrightError as e:
            raise NavigationError(url, str(e)) from e

    def locate(self, session: BrowserSession, name: str, selector: str) -> ElementHandle:
        """Return a lazy handle; existence is checked by the action performed on it."""
        return ElementHandle(name=name, selector=selector, locator=session.page.locator(selector))

    async def select_option(
        self, handle: ElementHandle, value: str, timeout_ms: Optional[int] = None
    ) -> None:
        """
        Set a <select> value; Playwright dispatches input/change events.

        Raises:
            ElementNotFoundError: If nothing matches within the timeout
        """
        timeout = timeout_ms or self.element_timeout_ms
        self._log.debug(f"Selecting '{value}' in {handle.name}")
        try:
            await handle.locator.select_option(value, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(handle.name, handle.selector, timeout) from e
        except PlaywrightError as e:
            raise CitaCheckerError(f"Selecting '{value}' in {handle.name} failed: {e}") from e

    async def click(
        self,
        session: BrowserSession,
        handle: ElementHandle,
        mode: ClickMode = ClickMode.NORMAL,
        timeout_ms: Optional[int] = None,
    ) -> bool:
        """
        Click the first matching element.

        Returns:
            False only for a forced click whose target is absent

        Raises:
            ElementNotFoundError: If a normal click finds nothing within the timeout
        """
        if mode is ClickMode.FORCED_SCRIPT:
            clicked = await self.evaluate_script(session, FORCED_CLICK_SCRIPT, handle.selector)
            self._log.debug(f"Forced click on {handle.name}: {'dispatched' if clicked else 'absent'}")
            return bool(clicked)

        timeout = timeout_ms or self.element_timeout_ms
        self._log.debug(f"Clicking {handle.name}")
        try:
            await handle.locator.first.click(timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(handle.name, handle.selector, timeout) from e
        except PlaywrightError as e:
            raise CitaCheckerError(f"Click on {handle.name} failed: {e}") from e
        return True

    async def wait_for_state(
        self, handle: ElementHandle, state: ElementState, timeout_ms: int
    ) -> None:
        """
        Block until the element is visible or hidden.

        Raises:
            WaitTimeoutError: If the state is not reached in time
            CitaCheckerError: If the page fails while waiting
        """
        self._log.debug(f"Waiting for {handle.name} to be {state.value} ({timeout_ms}ms)")
        try:
            await handle.locator.first.wait_for(state=state.value, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(f"{handle.name} to be {state.value}", timeout_ms) from e
        except PlaywrightError as e:
            raise CitaCheckerError(f"Waiting for {handle.name} failed: {e}") from e

    async def is_visible(self, handle: ElementHandle) -> bool:
        """Non-blocking visibility check; False when the element is absent."""
        try:
            return await handle.locator.first.is_visible()
        except PlaywrightError as e:
            raise CitaCheckerError(f"Visibility check on {handle.name} failed: {e}") from e

    async def evaluate_script(
        self, session: BrowserSession, script: str, arg: Optional[Any] = None
    ) -> Any:
        """Run ``script`` in the page and return its serialized result."""
        try:
            return await session.page.evaluate(script, arg)
        except PlaywrightError as e:
            raise CitaCheckerError(f"Script evaluation failed: {e}") from e

    async def wait_for_predicate(
        self,
        session: BrowserSession,
        expression: str,
        what: str,
        timeout_ms: int,
        polling_ms: Optional[int] = None,
    ) -> None:
        """
        Poll a page-side predicate until it returns a truthy value.

        Raises:
            WaitTimeoutError: If the predicate stays falsy for ``timeout_ms``
            CitaCheckerError: If the page fails while polling (e.g. the execution
                context is destroyed by a navigation)
        """
        try:
            await session.page.wait_for_function(
                expression, timeout=timeout_ms, polling=polling_ms or "raf"
            )
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(what, timeout_ms) from e
        except PlaywrightError as e:
            raise CitaCheckerError(f"Waiting for {what} failed: {e}") from e

    async def screenshot(self, session: BrowserSession, path: Union[str, Path]) -> None:
        """Capture a full-page screenshot."""
        try:
            await session.page.screenshot(path=str(path), full_page=True)
        except PlaywrightError as e:
            raise CitaCheckerError(f"Screenshot failed: {e}") from e

    async def inner_html(self, handle: ElementHandle, timeout_ms: int = 2000) -> str:
        """Serialized HTML of the first matching element."""
        try:
            return await handle.locator.first.inner_html(timeout=timeout_ms)
        except PlaywrightError as e:
            raise CitaCheckerError(f"Reading HTML of {handle.name} failed: {e}") from e

    async def content(self, session: BrowserSession) -> str:
        """Serialized HTML of the whole page."""
        try:
            return await session.page.content()
        except PlaywrightError as e:
            raise CitaCheckerError(f"Reading page content failed: {e}") from e
