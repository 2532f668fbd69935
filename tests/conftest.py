"""Shared pytest fixtures and configuration.

This module centralizes all test fixtures to:
- Keep browser-free fakes (pages, sessions, jitter) in one place
- Provide consistent sample track pages
- Make tests more maintainable

Fixture Categories:
1. Fakes: FakePage, fake_session_factory, no_delay
2. Sample Pages: track_page_html, title_only_html, anchorless_html, block_page_html
3. Infrastructure: mock_settings, mock_logfire, logfire_capture, test_client
"""

import os
from contextlib import asynccontextmanager
from unittest.mock import MagicMock, Mock, patch

import pytest

# Suppress "logfire not configured" warnings; tests never send data
os.environ.setdefault("LOGFIRE_IGNORE_NO_CONFIG", "1")

import logfire


def recommendation_card(
    title: str,
    artist: str,
    spotify_id: str | None,
    cells: tuple[str, ...] = ("C Major", "128", "8B", "61"),
    image: str = "https://i.scdn.co/image/cover",
) -> str:
    """Render one related-track card as the site marks it up."""
    link = (
        f'<a class="NWuk-" href="https://open.spotify.com/track/{spotify_id}">Open</a>'
        if spotify_id
        else '<a class="NWuk-" href="https://www.youtube.com/watch?v=x">Open</a>'
    )
    stat_cells = "".join(f'<div class="lAjUd">{cell}</div>' for cell in cells)
    return f"""
    <div class="ant-row pDoqI">
      <img src="{image}">
      <div class="aZDDf">{title}</div>
      <div class="_2zAVA">{artist}</div>
      {link}
      {stat_cells}
    </div>
    """


class FakePage:
    """Stand-in for a Playwright page.

    Each navigation consumes the next scripted step: a string becomes the
    page content, an exception is raised from goto(). The last step repeats
    once the script runs out.
    """

    def __init__(self, *steps):
        self._steps = list(steps)
        self._content = ""
        self.goto_calls: list[tuple[str, dict]] = []
        self.screenshot_calls: list[dict] = []

    async def goto(self, url: str, **kwargs):
        self.goto_calls.append((url, kwargs))
        index = min(len(self.goto_calls), len(self._steps)) - 1
        step = self._steps[index]
        if isinstance(step, BaseException):
            raise step
        self._content = step

    async def content(self) -> str:
        return self._content

    async def screenshot(self, **kwargs):
        self.screenshot_calls.append(kwargs)


class FakeSession:
    """Async context manager yielding a FakePage and counting teardowns."""

    def __init__(
        self,
        page: FakePage | None = None,
        enter_error: Exception | None = None,
        exit_error: Exception | None = None,
    ):
        self.page = page
        self.enter_error = enter_error
        self.exit_error = exit_error
        self.enter_count = 0
        self.exit_count = 0

    def __call__(self):
        return self._session()

    @asynccontextmanager
    async def _session(self):
        self.enter_count += 1
        try:
            if self.enter_error is not None:
                raise self.enter_error
            yield self.page
        finally:
            self.exit_count += 1
            if self.exit_error is not None:
                raise self.exit_error


@pytest.fixture
def no_delay():
    """Zero-delay jitter that records the requested ranges."""
    calls: list[tuple[float, float]] = []

    async def _jitter(low: float, high: float) -> None:
        calls.append((low, high))

    _jitter.calls = calls
    return _jitter


@pytest.fixture
def make_card():
    """Card renderer for recommendation tests."""
    return recommendation_card


@pytest.fixture
def fake_page():
    """Build a FakePage scripted with the given steps."""
    return FakePage


@pytest.fixture
def fake_session_factory():
    """Build a FakeSession around a FakePage scripted with the given steps."""

    def _build(
        *steps,
        enter_error: Exception | None = None,
        exit_error: Exception | None = None,
    ) -> FakeSession:
        page = FakePage(*steps) if steps else None
        return FakeSession(page=page, enter_error=enter_error, exit_error=exit_error)

    return _build


# =============================================================================
# Sample Pages
# =============================================================================


@pytest.fixture
def track_page_html():
    """A well-formed rendered track page with two related tracks."""
    cards = recommendation_card(
        "Around the World", "Daft Punk", "1pKYYY0dkg23sQQXi0Q5zN"
    ) + recommendation_card(
        "Music Sounds Better with You",
        "Stardust",
        "3b4GJ1KjBhVtUPz8Ek5iQ0",
        cells=("B Minor", "124", "10A", "58"),
    )
    return f"""
    <html>
    <head><title>One More Time - Daft Punk | Tunebat</title></head>
    <body>
      <div class="header">
        <h1>One More Time</h1>
        <h2 class="artist-name">Daft Punk</h2>
        <span class="album-name">Discovery</span>
        <img alt="Album art" src="/images/album/discovery.jpg">
      </div>
      <div class="stats">
        <p>Key: F Minor</p>
        <p>120 BPM</p>
        <p>Camelot: 4A</p>
        <p>Duration: 5:20</p>
        <p>Release Date: March 12, 2001</p>
        <p>Explicit: No</p>
        <p>70 Popularity</p>
        <p>Energy: 75 Energy</p>
        <p>61 Danceability</p>
        <p>47 Happiness</p>
        <p>1 Acousticness</p>
        <p>0 Instrumentalness</p>
        <p>33 Liveness</p>
        <p>13 Speechiness</p>
        <p>-6.5 dB Loudness</p>
      </div>
      <div class="related">{cards}</div>
    </body>
    </html>
    """


@pytest.fixture
def title_only_html():
    """A page with a heading and no pattern-matchable text."""
    return """
    <html><body>
      <h1>Harder Better Faster Stronger</h1>
      <p>Nothing else to see here</p>
    </body></html>
    """


@pytest.fixture
def anchorless_html():
    """Attribute text present, but no title/artist/album element."""
    return """
    <html><body>
      <div class="stats">
        <p>Key: F Minor</p>
        <p>120 BPM</p>
        <p>Energy: 75 Energy</p>
      </div>
    </body></html>
    """


@pytest.fixture
def block_page_html():
    """Rate-limit interstitial served instead of the track page."""
    return """
    <html><body>
      <h1>Too Many Requests</h1>
      <p>Please complete the security check to continue.</p>
    </body></html>
    """


# =============================================================================
# Infrastructure
# =============================================================================


@pytest.fixture
def mock_settings(monkeypatch, tmp_path):
    """Mock application settings."""
    from songdata.config import Settings

    settings = Settings(
        env="local",
        logfire_token=None,
        sentry_dsn=None,
        browser_executable_path=None,
        debug_screenshot_path=str(tmp_path / "debug.png"),
    )

    monkeypatch.setattr("songdata.config.get_settings", lambda: settings)
    # Patch where get_settings is used so services and handlers see the mock
    monkeypatch.setattr("songdata.services.scraper.get_settings", lambda: settings)
    monkeypatch.setattr(
        "songdata.services.browser_session.get_settings", lambda: settings
    )
    monkeypatch.setattr("songdata.api.analyze.get_settings", lambda: settings)
    monkeypatch.setattr("songdata.main.get_settings", lambda: settings)
    monkeypatch.setattr("songdata.logging_config.get_settings", lambda: settings)
    monkeypatch.setattr("songdata.cli.scrape_cli.get_settings", lambda: settings)
    return settings


@pytest.fixture
def test_client(mock_settings, mock_logfire):
    """FastAPI TestClient for E2E tests."""
    from fastapi.testclient import TestClient

    from songdata.main import app

    return TestClient(app)


@pytest.fixture
def logfire_capture():
    """
    Capture Logfire logs for testing.

    This fixture patches Logfire to capture log calls for assertion.
    """
    captured_logs = []

    original_info = logfire.info
    original_warning = logfire.warning
    original_error = logfire.error

    def capture_info(*args, **kwargs):
        captured_logs.append(("info", args, kwargs))
        return original_info(*args, **kwargs)

    def capture_warning(*args, **kwargs):
        captured_logs.append(("warning", args, kwargs))
        return original_warning(*args, **kwargs)

    def capture_error(*args, **kwargs):
        captured_logs.append(("error", args, kwargs))
        return original_error(*args, **kwargs)

    with (
        patch("logfire.info", side_effect=capture_info),
        patch("logfire.warning", side_effect=capture_warning),
        patch("logfire.error", side_effect=capture_error),
    ):
        yield captured_logs


@pytest.fixture
def mock_logfire(monkeypatch):
    """
    Mock Logfire for testing without actual logging.

    Useful for tests that don't need to verify logging behavior.
    """
    mock_logfire_module = MagicMock()
    mock_logfire_module.info = Mock()
    mock_logfire_module.warning = Mock()
    mock_logfire_module.error = Mock()
    mock_logfire_module.configure = Mock()
    mock_logfire_module.instrument_fastapi = Mock()
    mock_logfire_module.instrument_pydantic = Mock()

    # Patch module-level imports in our code (only modules that use logfire)
    monkeypatch.setattr("songdata.services.scraper.logfire", mock_logfire_module)
    monkeypatch.setattr("songdata.services.navigation.logfire", mock_logfire_module)
    monkeypatch.setattr(
        "songdata.services.browser_session.logfire", mock_logfire_module
    )
    monkeypatch.setattr(
        "songdata.services.recommendation_parser.logfire", mock_logfire_module
    )
    monkeypatch.setattr("songdata.logging_config.logfire", mock_logfire_module)
    monkeypatch.setattr("songdata.main.logfire", mock_logfire_module)

    return mock_logfire_module
