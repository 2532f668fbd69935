"""Application-wide constants.

This module centralizes all magic numbers and configuration constants
to ensure a single source of truth and easier maintenance.

Constants are organized by category. Values that can be overridden at
runtime are mirrored as fields on ``songdata.config.Settings``.
"""

# =============================================================================
# Target Site
# =============================================================================

# Base URL of the track-analysis site we scrape
TUNEBAT_BASE_URL = "https://tunebat.com"

# Substrings in the raw page content that indicate a rate-limit or
# anti-automation interstitial instead of real content
BLOCK_PAGE_SIGNATURES = ("security check", "Too Many Requests")

# Message reported when every attempt finished without a usable record
EXTRACTION_FAILED_MESSAGE = "Failed to extract data"

# =============================================================================
# Navigation / Retry Configuration
# =============================================================================

# Total number of navigation attempts per scrape
DEFAULT_MAX_SCRAPE_ATTEMPTS = 3

# Upper bound for a single navigation attempt (seconds)
NAVIGATION_TIMEOUT_SECONDS = 30.0

# Human-like pause after the page settles, before inspecting it (seconds)
POST_LOAD_DELAY_RANGE_SECONDS = (3.956, 5.443)

# Backoff after a block page was served (seconds)
BLOCKED_BACKOFF_RANGE_SECONDS = (4.0, 6.0)

# Pause after a page loaded but yielded no record (seconds)
SOFT_FAILURE_DELAY_RANGE_SECONDS = (2.5, 3.5)

# Pause after a navigation error or timeout (seconds)
NAVIGATION_ERROR_DELAY_RANGE_SECONDS = (4.5, 6.0)

# =============================================================================
# Browser Fingerprint
# =============================================================================

VIEWPORT_WIDTH = 1920
VIEWPORT_HEIGHT = 1080

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_EXTRA_HEADERS = {
    "Accept-Language": "en-US,en;q=0.9",
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

# Executables probed on PATH when no explicit browser path is configured
BROWSER_EXECUTABLE_CANDIDATES = (
    "chromium",
    "chromium-browser",
    "google-chrome",
    "google-chrome-stable",
)

# =============================================================================
# Diagnostics
# =============================================================================

# Screenshot written after each content inspection (overwritten every attempt)
DEBUG_SCREENSHOT_PATH = "debug.png"

# =============================================================================
# API Configuration
# =============================================================================

# Maximum number of scrapes (browser instances) running at once in the API
MAX_CONCURRENT_SCRAPES = 2

# Default port for the HTTP API
DEFAULT_API_PORT = 8888
