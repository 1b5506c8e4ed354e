"""Playwright doubles shared by the test suite."""

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional
from unittest.mock import AsyncMock, MagicMock

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from cita_checker.browser import FormSelectorSet
from cita_checker.constants import PORTAL_URL

SECTION_HTML = '<div id="formcita:seccionCentro"><span>Sin citas</span></div>'


class FakePortal:
    """
    Playwright double for the cita previa form.

    Builds the playwright -> browser -> context -> page chain out of mocks.
    Locators are created per selector and behave according to the flags.
    """

    def __init__(
        self,
        missing: Iterable[str] = (),
        calendar_visible: bool = True,
        section_visible: bool = True,
        procedure_hides: bool = True,
        confirmation_present: bool = True,
        queue_drains: bool = True,
        launch_error: Optional[Exception] = None,
        goto_error: Optional[Exception] = None,
    ):
        self.selectors = FormSelectorSet()
        self.missing = {self.selectors.as_dict()[role] for role in missing}
        self.calendar_visible = calendar_visible
        self.section_visible = section_visible
        self.procedure_hides = procedure_hides
        self.locators: Dict[str, MagicMock] = {}

        self.page = MagicMock(name="page")
        self.page.url = PORTAL_URL
        self.page.goto = AsyncMock(side_effect=goto_error)
        self.page.evaluate = AsyncMock(return_value=confirmation_present)
        self.page.wait_for_function = AsyncMock(
            side_effect=None if queue_drains else PlaywrightTimeoutError("Timeout 30000ms exceeded.")
        )
        self.page.screenshot = AsyncMock(side_effect=self._screenshot)
        self.page.content = AsyncMock(return_value="<html><body>portal</body></html>")
        self.page.locator = MagicMock(side_effect=self._locator)

        self.context = MagicMock(name="context")
        self.context.new_page = AsyncMock(return_value=self.page)
        self.context.close = AsyncMock()

        self.browser = MagicMock(name="browser")
        self.browser.new_context = AsyncMock(return_value=self.context)
        self.browser.close = AsyncMock()

        self.playwright = MagicMock(name="playwright")
        self.playwright.chromium.launch = AsyncMock(
            return_value=self.browser, side_effect=launch_error
        )
        self.playwright.stop = AsyncMock()

        self.factory = MagicMock(name="async_playwright")
        self.factory.return_value.start = AsyncMock(return_value=self.playwright)

    @staticmethod
    def _screenshot(path: str, full_page: bool = False) -> None:
        Path(path).write_bytes(b"\x89PNG fake")

    def _timeout(self, selector: str) -> PlaywrightTimeoutError:
        return PlaywrightTimeoutError(f"Timeout exceeded waiting for locator('{selector}')")

    def _wait_for(self, selector: str) -> Callable:
        def wait_for(state: str = "visible", timeout: Optional[int] = None) -> None:
            if selector == self.selectors.procedure_confirmation and state == "hidden":
                if not self.procedure_hides:
                    raise self._timeout(selector)
            if selector == self.selectors.appointment_section and state == "visible":
                if not self.section_visible:
                    raise self._timeout(selector)

        return wait_for

    def _locator(self, selector: str) -> MagicMock:
        if selector in self.locators:
            return self.locators[selector]

        locator = MagicMock(name=f"locator({selector})")
        locator.first = locator
        error = self._timeout(selector) if selector in self.missing else None
        locator.select_option = AsyncMock(side_effect=error)
        locator.click = AsyncMock(side_effect=error)
        locator.wait_for = AsyncMock(side_effect=self._wait_for(selector))
        if selector == self.selectors.calendar:
            locator.is_visible = AsyncMock(return_value=self.calendar_visible)
        else:
            locator.is_visible = AsyncMock(return_value=selector not in self.missing)
        locator.inner_html = AsyncMock(return_value=SECTION_HTML)
        self.locators[selector] = locator
        return locator

    def locator_for(self, role: str) -> MagicMock:
        return self._locator(self.selectors.as_dict()[role])

    def assert_released_once(self) -> None:
        self.context.close.assert_awaited_once()
        self.browser.close.assert_awaited_once()
        self.playwright.stop.assert_awaited_once()
