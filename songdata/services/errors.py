"""Exception taxonomy for the track page scraper.

Only ``LaunchError`` and unclassified exceptions ever leave the retry loop;
the others are raised by a single attempt and handled by the loop itself.
"""


class ScraperError(Exception):
    """Base exception for scraper errors."""

    pass


class LaunchError(ScraperError):
    """Raised when no compatible browser could be found or launched."""

    pass


class BlockedPageError(ScraperError):
    """Raised when a rate-limit or security-check page was served."""

    def __init__(self, signature: str):
        super().__init__(f"Block page detected: {signature!r}")
        self.signature = signature


class ExtractionEmptyError(ScraperError):
    """Raised when the page loaded but none of title/artist/album were found."""

    pass


class NavigationError(ScraperError):
    """Raised on a navigation timeout or transport failure."""

    pass


class ExhaustedRetriesError(ScraperError):
    """Attempt budget consumed without success.

    Terminal state of the retry loop. It is reported as a failed result,
    never raised to callers.
    """

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts
