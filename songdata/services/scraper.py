"""Track page scraping service.

Wires the pieces together: a browser session is opened, the track URL is
built from the artist/song names, the retry loop navigates and extracts,
and the outcome is wrapped into a single ``ScrapeResult``. The public
entry points never raise.
"""

import time
from typing import AsyncContextManager, Callable

import logfire

from songdata.config import Settings, get_settings
from songdata.constants import EXTRACTION_FAILED_MESSAGE
from songdata.models.scraper_models import (
    ScrapeFailure,
    ScrapeRequest,
    ScrapeResult,
    ScrapeSuccess,
)
from songdata.services.browser_session import BrowserSession
from songdata.services.errors import ExhaustedRetriesError
from songdata.services.navigation import (
    Jitter,
    LoopState,
    NavigationRetryLoop,
    PageHandle,
)
from songdata.services.url_builder import build_track_url

SessionFactory = Callable[[], AsyncContextManager[PageHandle]]


class TunebatScraper:
    """Scrape musical attributes for one track per call.

    Every call gets its own browser session; nothing is shared between
    calls except the debug screenshot path. The session factory and jitter
    can be injected for testing.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: SessionFactory | None = None,
        jitter: Jitter | None = None,
    ):
        """Initialize the scraper.

        Args:
            settings: Application settings (defaults to get_settings())
            session_factory: Returns an async context manager yielding a page
                (defaults to BrowserSession)
            jitter: Delay function for the retry loop (defaults to human_pause)
        """
        self._settings = settings or get_settings()
        self._session_factory = session_factory or (
            lambda: BrowserSession(self._settings)
        )
        self._jitter = jitter

    def _new_loop(self) -> NavigationRetryLoop:
        return NavigationRetryLoop(
            max_attempts=self._settings.max_scrape_attempts,
            navigation_timeout=self._settings.navigation_timeout_seconds,
            screenshot_path=self._settings.debug_screenshot_path,
            jitter=self._jitter,
        )

    async def scrape(
        self, artist_name: str, song_name: str, track_identifier: str
    ) -> ScrapeResult:
        """Scrape one track page.

        Args:
            artist_name: Artist name(s)
            song_name: Song title
            track_identifier: Spotify track ID

        Returns:
            ScrapeSuccess with the extracted attributes, or ScrapeFailure.
            Failures after the URL was built carry ``url``; unexpected
            errors (including browser launch failures) do not.
        """
        debug_image_path = self._settings.debug_screenshot_path
        start_time = time.time()
        outcome = None

        try:
            request = ScrapeRequest(
                artist_name=artist_name,
                song_name=song_name,
                track_identifier=track_identifier,
            )
            async with self._session_factory() as page:
                url = build_track_url(
                    request.artist_name,
                    request.song_name,
                    request.track_identifier,
                    base_url=self._settings.tunebat_base_url,
                )
                logfire.info("Navigating to track page", url=url)

                outcome = await self._new_loop().run(page, url)
        except Exception as e:
            if outcome is None:
                logfire.error(
                    "Fatal scrape error",
                    error=str(e),
                    error_type=type(e).__name__,
                    total_time_ms=(time.time() - start_time) * 1000,
                )
                return ScrapeFailure(error=str(e), debug_image_path=debug_image_path)
            # The loop finished; only closing the browser failed
            logfire.warning(
                "Browser teardown failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )

        logfire.info(
            "Scrape finished",
            url=url,
            state=outcome.state.value,
            attempts=outcome.attempts,
            total_time_ms=(time.time() - start_time) * 1000,
        )

        if outcome.state is LoopState.SUCCEEDED and outcome.data is not None:
            return ScrapeSuccess(
                url=url, data=outcome.data, debug_image_path=debug_image_path
            )

        exhausted = ExhaustedRetriesError(
            EXTRACTION_FAILED_MESSAGE, attempts=outcome.attempts
        )
        return ScrapeFailure(
            url=url, error=str(exhausted), debug_image_path=debug_image_path
        )


async def scrape(
    artist_name: str, song_name: str, track_identifier: str
) -> ScrapeResult:
    """Scrape a track page with default settings.

    Convenience wrapper around ``TunebatScraper().scrape(...)``.
    """
    return await TunebatScraper().scrape(artist_name, song_name, track_identifier)
