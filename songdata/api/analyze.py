"""Track analysis endpoint.

The caller supplies the artist and song names (from its own track metadata
lookup) plus a Spotify link, URI or ID. The scrape result's fields are
forwarded as-is.
"""

import asyncio
import logging
from functools import lru_cache

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from songdata.config import get_settings
from songdata.services.scraper import TunebatScraper
from songdata.services.track_id import extract_spotify_track_id

logger = logging.getLogger(__name__)
router = APIRouter()


class AnalyzeRequest(BaseModel):
    """Body of POST /api/analyze."""

    input: str = Field(default="", description="Spotify track link, URI or ID")
    artist: str = Field(..., min_length=1, description="Artist name(s)")
    song: str = Field(..., min_length=1, description="Song title")


def get_scraper() -> TunebatScraper:
    """Get a scraper with the current settings."""
    return TunebatScraper()


@lru_cache()
def get_scrape_semaphore() -> asyncio.Semaphore:
    """Bound on concurrently running scrapes (each one owns a browser)."""
    return asyncio.Semaphore(get_settings().max_concurrent_scrapes)


def _bad_request(error: str) -> JSONResponse:
    return JSONResponse(status_code=400, content={"success": False, "error": error})


@router.post("/analyze")
async def analyze(body: AnalyzeRequest):
    """Scrape musical attributes for one track."""
    if not body.input.strip():
        return _bad_request("Spotify link or track ID is required")

    track_id = extract_spotify_track_id(body.input)
    if track_id is None:
        logger.warning("Rejected unrecognized track input")
        return _bad_request("Invalid Spotify link or track ID")

    scraper = get_scraper()
    async with get_scrape_semaphore():
        result = await scraper.scrape(body.artist, body.song, track_id)

    return {
        "success": result.success,
        "trackId": track_id,
        "tunebat": result.model_dump(by_alias=True)["data"],
        "tunebatUrl": result.url,
        "error": getattr(result, "error", None),
    }
