"""Parse the "related tracks" cards of a track page."""

from typing import List
from urllib.parse import urljoin, urlparse

import logfire
from bs4 import BeautifulSoup, Tag

from songdata.models.scraper_models import RecommendationEntry

# One card per related track
CARD_SELECTOR = ".ant-row.pDoqI"
TITLE_SELECTOR = ".aZDDf"
ARTIST_SELECTOR = "._2zAVA"
SPOTIFY_LINK_SELECTOR = '.NWuk-[href*="spotify.com"]'
# Same-class cells read by position: key, bpm, camelot, popularity
STAT_CELL_SELECTOR = ".lAjUd"


def _text(card: Tag, selector: str) -> str:
    element = card.select_one(selector)
    return element.get_text().strip() if element else ""


def _cell(cells: List[Tag], index: int) -> str:
    return cells[index].get_text().strip() if index < len(cells) else ""


def _spotify_id(card: Tag, base_url: str) -> str:
    link = card.select_one(SPOTIFY_LINK_SELECTOR)
    href = (link.get("href") or "") if link else ""
    if not href:
        return ""
    return urlparse(urljoin(base_url, href)).path.split("/")[-1]


def parse_recommendation_card(card: Tag, base_url: str) -> RecommendationEntry | None:
    """Build one entry from a card, or None if it has no Spotify track ID.

    Args:
        card: The card's root element
        base_url: URL of the page, for resolving relative links and images

    Returns:
        RecommendationEntry, or None when the card has no resolvable ID
    """
    spotify_id = _spotify_id(card, base_url)
    if not spotify_id:
        return None

    cells = card.select(STAT_CELL_SELECTOR)
    image = card.find("img")
    src = image.get("src") if image else None

    return RecommendationEntry(
        title=_text(card, TITLE_SELECTOR),
        artist=_text(card, ARTIST_SELECTOR),
        spotify_id=spotify_id,
        key=_cell(cells, 0),
        bpm=_cell(cells, 1),
        camelot=_cell(cells, 2),
        popularity=_cell(cells, 3),
        album_art=urljoin(base_url, src) if src else "",
    )


def parse_recommendations(
    soup: BeautifulSoup, base_url: str
) -> List[RecommendationEntry]:
    """Extract related tracks in page order.

    Cards without a Spotify track ID are skipped. A card that fails to parse
    is logged and skipped; it never aborts the rest of the batch.

    Args:
        soup: Parsed track page
        base_url: URL of the page

    Returns:
        List of RecommendationEntry (possibly empty)
    """
    entries: List[RecommendationEntry] = []
    cards = soup.select(CARD_SELECTOR)

    for index, card in enumerate(cards):
        try:
            entry = parse_recommendation_card(card, base_url)
        except Exception as e:
            logfire.warning(
                "Error parsing recommendation card",
                card_index=index,
                error=str(e),
            )
            continue
        if entry is not None:
            entries.append(entry)

    return entries
