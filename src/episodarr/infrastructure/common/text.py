"""Text helpers shared by providers and the slug resolver."""

from __future__ import annotations

import re

from unidecode import unidecode as _unidecode

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

# Playlist extension at the end of the path, optionally followed by a query.
_HLS_RE = re.compile(r"\.m3u8($|\?)", re.IGNORECASE)


def slugify(text: str) -> str:
    """Deterministic client-side slug: ASCII, lowercase, hyphen-separated.

    >>> slugify("Shingeki no Kyojin: Final Season")
    'shingeki-no-kyojin-final-season'
    """
    text = _unidecode(text).lower()
    return _NON_ALNUM_RE.sub("-", text).strip("-")


def is_hls_url(url: str) -> bool:
    """Heuristic HLS detection from the URL alone."""
    return bool(_HLS_RE.search(url))
