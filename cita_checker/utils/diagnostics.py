"""Diagnostic artifacts (screenshot + HTML context) captured on timeouts."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from loguru import logger

from cita_checker.browser.page_driver import BrowserSession, ElementHandle, PageDriver
from cita_checker.constants import Artifacts

# Characters of HTML context copied into the log record
HTML_LOG_PREVIEW = 2000


class DiagnosticCapture:
    """Write a screenshot and HTML context for a failed step."""

    def __init__(
        self,
        driver: PageDriver,
        artifacts_dir: Union[str, Path] = Artifacts.DIR,
        log: Optional[Any] = None,
    ):
        """
        Initialize diagnostic capture.

        Args:
            driver: Page driver used to read the page
            artifacts_dir: Directory for artifacts
            log: Logger to use (defaults to the loguru logger)
        """
        self._driver = driver
        self.artifacts_dir = Path(artifacts_dir)
        self._log = log or logger.bind(component="diagnostics")

    @property
    def log_path(self) -> Path:
        return self.artifacts_dir / Artifacts.LOG_FILE

    async def capture(
        self,
        session: BrowserSession,
        step: str,
        error: Exception,
        container: Optional[ElementHandle] = None,
    ) -> Dict[str, Any]:
        """
        Capture artifacts for ``step``.

        Failures while capturing are logged and never raised, so the original
        error is what the caller propagates.

        Returns:
            Record describing what was written
        """
        record: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "step": step,
            "error_type": type(error).__name__,
            "error_message": str(error),
            "url": getattr(session.page, "url", None),
            "captures": {},
        }

        try:
            self.artifacts_dir.mkdir(parents=True, exist_ok=True)
            writable = True
        except OSError as e:
            self._log.warning(f"Could not create artifacts directory {self.artifacts_dir}: {e}")
            writable = False

        if writable:
            screenshot_path = self.artifacts_dir / f"{step}.png"
            try:
                await self._driver.screenshot(session, screenshot_path)
                record["captures"]["screenshot"] = str(screenshot_path)
                self._log.info(f"Captured screenshot: {screenshot_path}")
            except Exception as e:
                self._log.warning(f"Could not capture screenshot: {e}")

        html = await self._read_html(session, container)
        if html is not None:
            if writable:
                html_path = self.artifacts_dir / f"{step}.html"
                try:
                    html_path.write_text(html, encoding="utf-8", errors="replace")
                    record["captures"]["html"] = str(html_path)
                except OSError as e:
                    self._log.warning(f"Could not write HTML snapshot: {e}")
            self._log.error(f"HTML context for {step}:\n{html[:HTML_LOG_PREVIEW]}")

        if not writable:
            return record

        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False, default=str) + "\n")
        except OSError as e:
            self._log.warning(f"Could not append to {self.log_path}: {e}")

        return record

    async def _read_html(
        self, session: BrowserSession, container: Optional[ElementHandle]
    ) -> Optional[str]:
        if container is not None:
            try:
                return await self._driver.inner_html(container)
            except Exception as e:
                self._log.debug(f"Container {container.name} unreadable, using page content: {e}")
        try:
            return await self._driver.content(session)
        except Exception as e:
            self._log.warning(f"Could not read page content: {e}")
            return None
