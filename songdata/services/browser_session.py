"""Headless browser sessions configured to look like a regular desktop browser."""

import os
import shutil
from typing import Iterable

import logfire
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from songdata.config import Settings, get_settings
from songdata.constants import (
    BROWSER_EXECUTABLE_CANDIDATES,
    BROWSER_EXTRA_HEADERS,
    DESKTOP_USER_AGENT,
    VIEWPORT_HEIGHT,
    VIEWPORT_WIDTH,
)
from songdata.services.errors import LaunchError

# Flags for running inside constrained containers plus hiding automation
LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--no-first-run",
    "--no-zygote",
    "--disable-gpu",
    f"--window-size={VIEWPORT_WIDTH},{VIEWPORT_HEIGHT}",
    "--disable-features=VizDisplayCompositor",
    "--disable-blink-features=AutomationControlled",
]

# Runs before any page script on every document of the context
STEALTH_INIT_SCRIPT = """
(() => {
  delete Object.getPrototypeOf(navigator).webdriver;
  window.chrome = { runtime: {} };
  window.navigator.chrome = { runtime: {} };

  const originalQuery = window.navigator.permissions.query;
  window.navigator.permissions.query = (parameters) => (
    parameters.name === 'notifications'
      ? Promise.resolve({ state: Notification.permission })
      : originalQuery(parameters)
  );

  Object.defineProperty(navigator, 'webdriver', { get: () => undefined });
})();
"""


def discover_browser_executable(
    explicit_path: str | None = None,
    candidates: Iterable[str] = BROWSER_EXECUTABLE_CANDIDATES,
) -> str | None:
    """Locate a Chromium-compatible executable.

    Args:
        explicit_path: Configured executable; must exist if given
        candidates: Executable names probed on PATH, in order

    Returns:
        Absolute path, or None to fall back to Playwright's bundled Chromium

    Raises:
        LaunchError: If explicit_path is set but does not exist
    """
    if explicit_path:
        resolved = shutil.which(explicit_path) or (
            explicit_path if os.path.isfile(explicit_path) else None
        )
        if resolved is None:
            raise LaunchError(f"Browser executable not found: {explicit_path}")
        return resolved

    for name in candidates:
        found = shutil.which(name)
        if found:
            return found
    return None


class BrowserSession:
    """Async context manager yielding a configured Playwright page.

    Fingerprint settings (viewport, user agent, headers, init script) are
    applied once when the session opens, before any navigation. Everything
    that was started is torn down exactly once on exit, including when
    opening the session fails halfway.

    Example:
        async with BrowserSession() as page:
            await page.goto(url)
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize the session.

        Args:
            settings: Application settings (defaults to get_settings())
        """
        self._settings = settings or get_settings()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    async def __aenter__(self) -> Page:
        try:
            return await self._open()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _open(self) -> Page:
        executable = discover_browser_executable(
            self._settings.browser_executable_path
        )
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._settings.browser_headless,
                executable_path=executable,
                args=LAUNCH_ARGS,
            )
        except PlaywrightError as e:
            raise LaunchError(f"Failed to launch browser: {e}") from e

        logfire.info(
            "Browser launched",
            executable=executable or "playwright-bundled",
            headless=self._settings.browser_headless,
        )

        self._context = await self._browser.new_context(
            viewport={"width": VIEWPORT_WIDTH, "height": VIEWPORT_HEIGHT},
            user_agent=DESKTOP_USER_AGENT,
            extra_http_headers=BROWSER_EXTRA_HEADERS,
            ignore_https_errors=True,
        )
        await self._context.add_init_script(STEALTH_INIT_SCRIPT)
        self._page = await self._context.new_page()
        return self._page

    async def close(self) -> None:
        """Close page, context, browser and driver; safe to call repeatedly."""
        context, browser, playwright = self._context, self._browser, self._playwright
        self._page = self._context = self._browser = self._playwright = None

        try:
            if context is not None:
                await context.close()
            if browser is not None:
                await browser.close()
        finally:
            if playwright is not None:
                await playwright.stop()
                logfire.info("Browser session closed")
