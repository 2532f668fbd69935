"""Navigation retry loop for the track page.

Each attempt navigates, waits for the network to settle, pauses like a
human would, then inspects the page:

    ATTEMPTING -> SUCCEEDED                       record extracted
    ATTEMPTING -> BLOCKED -> BACKOFF -> ATTEMPTING block page served
    ATTEMPTING -> BACKOFF -> ATTEMPTING            no record / navigation error
    ... -> EXHAUSTED                               attempt budget consumed

Delays go through an injected ``Jitter`` so tests can run without waiting.
"""

import asyncio
import enum
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

import logfire
from playwright.async_api import Error as PlaywrightError

from songdata.constants import (
    BLOCK_PAGE_SIGNATURES,
    BLOCKED_BACKOFF_RANGE_SECONDS,
    DEBUG_SCREENSHOT_PATH,
    DEFAULT_MAX_SCRAPE_ATTEMPTS,
    NAVIGATION_ERROR_DELAY_RANGE_SECONDS,
    NAVIGATION_TIMEOUT_SECONDS,
    POST_LOAD_DELAY_RANGE_SECONDS,
    SOFT_FAILURE_DELAY_RANGE_SECONDS,
)
from songdata.models.scraper_models import TrackAttributes
from songdata.services.errors import (
    BlockedPageError,
    ExtractionEmptyError,
    NavigationError,
)
from songdata.services.field_extractor import extract_track_attributes

# Sleeps for a duration drawn from [low, high] seconds
Jitter = Callable[[float, float], Awaitable[None]]

Extractor = Callable[[str, str], TrackAttributes | None]


async def human_pause(low: float, high: float) -> None:
    """Sleep for a random duration between low and high seconds."""
    await asyncio.sleep(random.uniform(low, high))


class PageHandle(Protocol):
    """The subset of a Playwright page the loop drives."""

    async def goto(self, url: str, **kwargs): ...

    async def content(self) -> str: ...

    async def screenshot(self, **kwargs): ...


class LoopState(enum.Enum):
    ATTEMPTING = "attempting"
    BLOCKED = "blocked"
    BACKOFF = "backoff"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


@dataclass
class LoopOutcome:
    """Terminal state of the loop and what it produced."""

    state: LoopState
    attempts: int
    data: TrackAttributes | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is LoopState.SUCCEEDED


def detect_block_signature(content: str) -> str | None:
    """Return the first block-page signature found in raw content, if any."""
    for signature in BLOCK_PAGE_SIGNATURES:
        if signature in content:
            return signature
    return None


class NavigationRetryLoop:
    """Drive a page to the track URL until a record is extracted.

    Only block pages, empty extractions and navigation errors are retried;
    any other exception propagates to the caller.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_SCRAPE_ATTEMPTS,
        navigation_timeout: float = NAVIGATION_TIMEOUT_SECONDS,
        screenshot_path: str = DEBUG_SCREENSHOT_PATH,
        jitter: Jitter | None = None,
        extractor: Extractor | None = None,
    ):
        """Initialize the retry loop.

        Args:
            max_attempts: Total attempts before giving up
            navigation_timeout: Upper bound for one navigation (seconds)
            screenshot_path: Debug screenshot, overwritten every attempt
            jitter: Delay function (defaults to human_pause)
            extractor: HTML -> record function (defaults to extract_track_attributes)
        """
        self._max_attempts = max_attempts
        self._navigation_timeout_ms = navigation_timeout * 1000
        self._screenshot_path = screenshot_path
        self._jitter = jitter or human_pause
        self._extractor = extractor or extract_track_attributes
        self.state = LoopState.ATTEMPTING

    async def run(self, page: PageHandle, url: str) -> LoopOutcome:
        """Attempt navigation and extraction until success or exhaustion.

        Args:
            page: Page to navigate
            url: Track page URL

        Returns:
            LoopOutcome in state SUCCEEDED (with data) or EXHAUSTED
        """
        remaining = self._max_attempts
        attempts = 0

        while remaining > 0:
            self.state = LoopState.ATTEMPTING
            attempts += 1
            try:
                data = await self._attempt(page, url)
            except BlockedPageError as e:
                self.state = LoopState.BLOCKED
                remaining -= 1
                logfire.warning(
                    "Hit security check, retrying",
                    url=url,
                    attempt=attempts,
                    signature=e.signature,
                    remaining_attempts=remaining,
                )
                await self._backoff(remaining, BLOCKED_BACKOFF_RANGE_SECONDS)
            except ExtractionEmptyError:
                remaining -= 1
                logfire.warning(
                    "No data found, retrying",
                    url=url,
                    attempt=attempts,
                    remaining_attempts=remaining,
                )
                await self._backoff(remaining, SOFT_FAILURE_DELAY_RANGE_SECONDS)
            except NavigationError as e:
                remaining -= 1
                logfire.warning(
                    "Navigation error",
                    url=url,
                    attempt=attempts,
                    error=str(e),
                    remaining_attempts=remaining,
                )
                await self._backoff(remaining, NAVIGATION_ERROR_DELAY_RANGE_SECONDS)
            else:
                self.state = LoopState.SUCCEEDED
                logfire.info(
                    "Successfully extracted data",
                    url=url,
                    attempt=attempts,
                    recommendation_count=len(data.recommendations),
                )
                return LoopOutcome(LoopState.SUCCEEDED, attempts, data)

        self.state = LoopState.EXHAUSTED
        logfire.error("Retries exhausted without data", url=url, attempts=attempts)
        return LoopOutcome(LoopState.EXHAUSTED, attempts)

    async def _backoff(self, remaining: int, delay_range: tuple[float, float]) -> None:
        if remaining > 0:
            self.state = LoopState.BACKOFF
            await self._jitter(*delay_range)

    async def _attempt(self, page: PageHandle, url: str) -> TrackAttributes:
        """One navigate-settle-inspect cycle.

        Raises:
            NavigationError: On timeout or transport failure
            BlockedPageError: If a block page was served
            ExtractionEmptyError: If no record could be extracted
        """
        try:
            await page.goto(
                url, wait_until="networkidle", timeout=self._navigation_timeout_ms
            )
            await self._jitter(*POST_LOAD_DELAY_RANGE_SECONDS)
            content = await page.content()
        except PlaywrightError as e:
            raise NavigationError(str(e)) from e

        await self._save_screenshot(page)

        signature = detect_block_signature(content)
        if signature is not None:
            raise BlockedPageError(signature)

        data = self._extractor(content, url)
        if data is None:
            raise ExtractionEmptyError(f"No title, artist or album found at {url}")
        return data

    async def _save_screenshot(self, page: PageHandle) -> None:
        try:
            await page.screenshot(path=self._screenshot_path)
        except PlaywrightError as e:
            logfire.warning(
                "Debug screenshot failed",
                path=self._screenshot_path,
                error=str(e),
            )
