"""Build track page URLs from artist/song names."""

import re

from songdata.constants import TUNEBAT_BASE_URL

# Word characters are ASCII-only, as the site's own slugs are
_DISALLOWED_CHARS = re.compile(r"[^A-Za-z0-9_\s-]")
_WHITESPACE_RUNS = re.compile(r"\s+")
_HYPHEN_RUNS = re.compile(r"-+")


def slugify(text: str) -> str:
    """Render arbitrary text as a hyphenated URL segment.

    Drops everything except ASCII word characters, whitespace and hyphens, turns
    whitespace runs into single hyphens, collapses repeated hyphens and
    trims hyphens from both ends.

    Example:
        >>> slugify("One More Time (Radio Edit)")
        'One-More-Time-Radio-Edit'
    """
    text = _DISALLOWED_CHARS.sub("", text)
    text = _WHITESPACE_RUNS.sub("-", text)
    text = _HYPHEN_RUNS.sub("-", text)
    return text.strip("-")


def build_track_url(
    artist_name: str,
    song_name: str,
    track_identifier: str,
    base_url: str = TUNEBAT_BASE_URL,
) -> str:
    """Compose ``<base>/Info/<slug(song)>-<slug(artist)>/<track_identifier>``.

    Args:
        artist_name: Artist name(s), free text
        song_name: Song title, free text
        track_identifier: External track ID, used verbatim
        base_url: Site root (trailing slash is ignored)

    Returns:
        Absolute track page URL
    """
    return (
        f"{base_url.rstrip('/')}/Info/"
        f"{slugify(song_name)}-{slugify(artist_name)}/{track_identifier}"
    )
