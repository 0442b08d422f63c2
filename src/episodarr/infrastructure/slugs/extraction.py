"""Candidate slug extraction from provider search-result pages.

Matching rules live in the named patterns below so they can follow site
layout changes without touching scoring or caching.
"""

from __future__ import annotations

import re
from urllib.parse import urlparse

from episodarr.infrastructure.common.html_selectors import extract_hrefs, parse_html

# /anime/<slug>, /animes/<slug>, /serie/<slug>, /series/<slug> (trailing slash optional)
SERIES_PATH_RE = re.compile(r"^/(?:anime|animes|serie|series)/([^/]+)/?$", re.IGNORECASE)

# /episodio/<slug>-episodio-<n>/ -> <slug>
EPISODE_PATH_RE = re.compile(r"^/episodio/(.+?)-episodio-\d+/?$", re.IGNORECASE)

_MULTI_SLASH_RE = re.compile(r"/+")


def extract_candidate_slugs(
    html: str,
    origin: str,
    *,
    allow_episode_slug_extract: bool = True,
) -> list[str]:
    """Return distinct slugs linked from *html*, in first-seen order.

    Only links on the same host as *origin* are considered.  Episode-page
    links contribute their base slug when *allow_episode_slug_extract* is set.
    """
    host = urlparse(origin).hostname
    seen: set[str] = set()
    slugs: list[str] = []

    for href in extract_hrefs(parse_html(html), base_url=origin):
        try:
            parsed = urlparse(href)
            link_host = parsed.hostname
        except ValueError:
            continue
        if not link_host or link_host != host:
            continue

        path = _MULTI_SLASH_RE.sub("/", parsed.path)

        slug: str | None = None
        m = SERIES_PATH_RE.match(path)
        if m:
            slug = m.group(1)
        elif allow_episode_slug_extract:
            m = EPISODE_PATH_RE.match(path)
            if m:
                slug = m.group(1)

        if slug and slug not in seen:
            seen.add(slug)
            slugs.append(slug)

    return slugs
