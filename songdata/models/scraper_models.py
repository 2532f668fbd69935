"""Models for scrape requests, extracted track attributes and scrape results."""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ScrapeRequest(BaseModel):
    """Immutable input for a single scrape.

    The track identifier is opaque: a malformed one simply produces a URL
    that does not resolve, which surfaces as an extraction failure.
    """

    model_config = ConfigDict(frozen=True)

    artist_name: str = Field(..., min_length=1, description="Artist name(s)")
    song_name: str = Field(..., min_length=1, description="Song title")
    track_identifier: str = Field(
        ..., min_length=1, description="External (Spotify) track ID"
    )


class RecommendationEntry(BaseModel):
    """One related-track card from the track page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    artist: str = ""
    spotify_id: str = Field(..., min_length=1)
    key: str = ""
    bpm: str = ""
    camelot: str = ""
    popularity: str = ""
    album_art: str = ""


class TrackAttributes(BaseModel):
    """Musical attributes extracted from a track page.

    Numeric fields are kept as the raw text found on the page; converting
    them to numbers is left to callers. Missing fields stay empty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = ""
    artist: str = ""
    album: str = ""
    key: str = ""
    camelot: str = ""
    bpm: str = ""
    duration: str = ""
    release_date: str = ""
    explicit: bool = False
    popularity: str = ""
    energy: str = ""
    danceability: str = ""
    happiness: str = ""
    acousticness: str = ""
    instrumentalness: str = ""
    liveness: str = ""
    speechiness: str = ""
    loudness: str = ""
    album_art: str = ""
    recommendations: list[RecommendationEntry] = Field(default_factory=list)


class ScrapeSuccess(BaseModel):
    """Scrape finished with a usable record."""

    success: Literal[True] = True
    url: str = Field(..., description="Page the data was extracted from")
    data: TrackAttributes
    debug_image_path: str


class ScrapeFailure(BaseModel):
    """Scrape finished without a usable record.

    ``url`` is only set when the failure happened after the target URL was
    built (retries exhausted); unexpected errors leave it unset.
    """

    success: Literal[False] = False
    url: str | None = None
    data: dict = Field(default_factory=dict)
    error: str
    debug_image_path: str


ScrapeResult = Union[ScrapeSuccess, ScrapeFailure]
