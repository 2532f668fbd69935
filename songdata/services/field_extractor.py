"""Extract track attributes from a rendered track page.

Extraction is two-tiered:

1. Structural pass: title, artist and album come from the first element
   matching an ordered list of CSS selectors.
2. Pattern pass: every other field is searched in the page text with an
   ordered list of regular expressions. The labeled form comes first and the
   bare form is the fallback; the first pattern that matches wins.

If the structural pass finds none of title/artist/album, the page is not
the track page we expected (block page, layout change, wrong content) and
no record is returned at all.
"""

import re
from typing import NamedTuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from songdata.models.scraper_models import TrackAttributes
from songdata.services.recommendation_parser import parse_recommendations


class StructuralRule(NamedTuple):
    """Ordered CSS selector candidates for one anchor field."""

    field: str
    selectors: tuple[str, ...]


class PatternRule(NamedTuple):
    """Ordered regex candidates for one text field; group 1 is the value."""

    field: str
    patterns: tuple[re.Pattern, ...]


STRUCTURAL_RULES: tuple[StructuralRule, ...] = (
    StructuralRule("title", ("h1", '[class*="title"]', '[class*="name"]')),
    StructuralRule(
        "artist", (".artist-name", '[class*="artist"]', '[class*="performer"]')
    ),
    StructuralRule("album", (".album-name", '[class*="album"]')),
)

ALBUM_ART_SELECTOR = 'img[alt*="album" i], img[src*="album" i]'

EXPLICIT_PATTERN = re.compile(r"Explicit:\s*Yes", re.IGNORECASE)


def _percent_of(label: str) -> tuple[re.Pattern, ...]:
    # "75 Energy" or "75 / 100 Energy"
    return (re.compile(rf"(\d+)\s*(?:/\s*\d+)?\s*{label}", re.IGNORECASE),)


FIELD_PATTERNS: tuple[PatternRule, ...] = (
    PatternRule(
        "key",
        (
            re.compile(
                r"Key:\s*([A-G][♯♭]?\s*(?:Major|Minor|maj|min))", re.IGNORECASE
            ),
            re.compile(r"([A-G][♯♭]?\s*(?:Major|Minor|maj|min))", re.IGNORECASE),
        ),
    ),
    PatternRule(
        "camelot",
        (
            re.compile(r"Camelot:\s*(\d+[AB])", re.IGNORECASE),
            re.compile(r"(\d+[AB])"),
        ),
    ),
    PatternRule(
        "bpm",
        (
            re.compile(r"BPM:\s*(\d+)", re.IGNORECASE),
            re.compile(r"Tempo:\s*(\d+)", re.IGNORECASE),
            re.compile(r"(\d+)\s*BPM", re.IGNORECASE),
        ),
    ),
    PatternRule("duration", (re.compile(r"Duration:\s*(\d+:\d+)", re.IGNORECASE),)),
    PatternRule(
        "release_date",
        (
            re.compile(
                r"Release Date:\s*([A-Za-z]+\s+\d{1,2},?\s+\d{4})", re.IGNORECASE
            ),
        ),
    ),
    PatternRule("popularity", _percent_of("Popularity")),
    PatternRule("energy", _percent_of("Energy")),
    PatternRule("danceability", _percent_of("Danceability")),
    PatternRule("happiness", _percent_of("Happiness")),
    PatternRule("acousticness", _percent_of("Acousticness")),
    PatternRule("instrumentalness", _percent_of("Instrumentalness")),
    PatternRule("liveness", _percent_of("Liveness")),
    PatternRule("speechiness", _percent_of("Speechiness")),
    PatternRule(
        "loudness",
        (re.compile(r"([-]?\d+(?:\.\d+)?)\s*(?:dB)?\s*Loudness", re.IGNORECASE),),
    ),
)


def _first_text(soup: BeautifulSoup, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        element = soup.select_one(selector)
        if element is not None:
            return element.get_text().strip()
    return ""


def find_pattern_value(text: str, patterns: tuple[re.Pattern, ...]) -> str:
    """Return group 1 of the first pattern that yields a value, else ""."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return ""


def page_text(soup: BeautifulSoup) -> str:
    """Concatenated text of the page body (the whole document if no body)."""
    root = soup.body or soup
    return root.get_text()


def extract_track_attributes(html: str, page_url: str) -> TrackAttributes | None:
    """Extract the attribute schema from rendered page HTML.

    Args:
        html: Rendered page content (after client-side scripts ran)
        page_url: URL the content was loaded from, for resolving image links

    Returns:
        TrackAttributes with every field not found left empty, or None when
        none of title/artist/album could be located
    """
    soup = BeautifulSoup(html, "html.parser")

    values: dict = {}
    for rule in STRUCTURAL_RULES:
        values[rule.field] = _first_text(soup, rule.selectors)

    if not any(values[rule.field] for rule in STRUCTURAL_RULES):
        return None

    album_art = soup.select_one(ALBUM_ART_SELECTOR)
    src = album_art.get("src") if album_art else None
    values["album_art"] = urljoin(page_url, src) if src else ""

    text = page_text(soup)
    for rule in FIELD_PATTERNS:
        values[rule.field] = find_pattern_value(text, rule.patterns)

    values["explicit"] = bool(EXPLICIT_PATTERN.search(text))
    values["recommendations"] = parse_recommendations(soup, page_url)

    return TrackAttributes(**values)
