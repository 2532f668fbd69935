"""Resolve Spotify track IDs from user input."""

import re

_BARE_TRACK_ID = re.compile(r"^[a-zA-Z0-9]{22}$")

# Ordered: URI form first, then web links
_TRACK_ID_PATTERNS = (
    re.compile(r"spotify:track:([a-zA-Z0-9]{22})"),
    re.compile(r"open\.spotify\.com/track/([a-zA-Z0-9]{22})"),
    re.compile(r"spotify\.com/track/([a-zA-Z0-9]{22})"),
)


def extract_spotify_track_id(value: str) -> str | None:
    """Return the 22-character track ID from an ID, URI or link.

    Accepts ``0TyaAdfWWdTCBtCw3HrDwO``, ``spotify:track:0TyaAdfWWdTCBtCw3HrDwO``
    and ``https://open.spotify.com/track/0TyaAdfWWdTCBtCw3HrDwO?si=...``.
    Returns None when nothing matches.
    """
    value = (value or "").strip()
    if _BARE_TRACK_ID.match(value):
        return value
    for pattern in _TRACK_ID_PATTERNS:
        match = pattern.search(value)
        if match:
            return match.group(1)
    return None
