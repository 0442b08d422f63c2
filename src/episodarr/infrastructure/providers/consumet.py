"""Consumet Gogoanime provider: search, info and watch over the REST API.

Three calls per lookup:
1. ``/{query}?page=1``  fuzzy title search (first non-empty variant wins)
2. ``/info/{id}``       episode list of the matched anime
3. ``/watch/{ep_id}``   stream sources plus the headers the CDN expects

Custom headers (usually a Referer) cannot be attached by a browser to a
media request, so any header requirement flips ``requires_proxy``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from episodarr.domain.entities.errors import ProviderLookupError
from episodarr.domain.entities.resolution import (
    ProviderKind,
    ResolutionResult,
    normalize_title,
)
from episodarr.infrastructure.common.text import is_hls_url

from .base import HttpxProviderBase

_MOVIE_RE = re.compile(r"\bmovie\b", re.IGNORECASE)
_SEASON_RE = re.compile(r"\bseason\s*\d+\b", re.IGNORECASE)
_LEADING_INT_RE = re.compile(r"^\s*(\d+)")
_EPISODE_NUMBER_RE = re.compile(r"^\s*(\d+)\s*$")


@dataclass(frozen=True)
class _Episode:
    id: str
    number: int | None


@dataclass(frozen=True)
class _Source:
    url: str
    quality: int
    is_m3u8: bool


def query_variants(title: str) -> list[str]:
    """Raw title, then without "movie", then without "season N" (deduplicated)."""
    base = normalize_title(title)
    variants = [
        base,
        " ".join(_MOVIE_RE.sub("", base).split()),
        " ".join(_SEASON_RE.sub("", base).split()),
    ]
    out: list[str] = []
    for v in variants:
        if v and v not in out:
            out.append(v)
    return out


def parse_quality(value: Any) -> int:
    """Numeric quality from ``720`` or ``"720p"``; anything else is 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        m = _LEADING_INT_RE.match(value)
        if m:
            return int(m.group(1))
    return 0


def parse_episode_number(episode: str) -> int | None:
    m = _EPISODE_NUMBER_RE.match(episode)
    return int(m.group(1)) if m else None


def _parse_episodes(raw: Any) -> list[_Episode]:
    items = raw.get("episodes") if isinstance(raw, dict) else None
    if not isinstance(items, list):
        return []
    episodes: list[_Episode] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        ep_id = item.get("id")
        if not isinstance(ep_id, str) or not ep_id:
            continue
        number = item.get("number")
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            number = None
        elif isinstance(number, float):
            number = int(number) if number.is_integer() else None
        episodes.append(_Episode(id=ep_id, number=number))
    return episodes


def _parse_sources(raw: Any) -> list[_Source]:
    items = raw.get("sources") if isinstance(raw, dict) else None
    if not isinstance(items, list):
        return []
    sources: list[_Source] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        url = item.get("url")
        if not isinstance(url, str) or not url:
            continue
        sources.append(
            _Source(
                url=url,
                quality=parse_quality(item.get("quality")),
                is_m3u8=item.get("isM3U8") is True,
            )
        )
    return sources


def _parse_headers(raw: Any) -> dict[str, str] | None:
    headers = raw.get("headers") if isinstance(raw, dict) else None
    if not isinstance(headers, dict):
        return None
    parsed = {str(k): str(v) for k, v in headers.items() if v is not None}
    return parsed or None


def select_episode(episodes: list[_Episode], number: int | None) -> _Episode | None:
    """Match by reported number, else by position ``number - 1``."""
    if number is None:
        return None
    for ep in episodes:
        if ep.number == number:
            return ep
    if 1 <= number <= len(episodes):
        return episodes[number - 1]
    return None


def select_source(sources: list[_Source]) -> _Source | None:
    """Highest quality first; the first HLS entry in that order wins.

    A lower-quality HLS playlist beats a higher-quality progressive file.
    Without any HLS entry the highest-quality source is used.
    """
    if not sources:
        return None
    ranked = sorted(sources, key=lambda s: s.quality, reverse=True)
    return next((s for s in ranked if s.is_m3u8), ranked[0])


class ConsumetGogoProvider(HttpxProviderBase):
    """Aggregator provider backed by the Consumet Gogoanime API."""

    name = "Consumet - Gogoanime"
    slug = "consumet-gogoanime"
    kind = ProviderKind.AGGREGATOR
    default_base_url = "https://api.consumet.org/anime/gogoanime"
    has_ads = False
    is_embed = False
    docs = "https://api.consumet.org/anime/gogoanime (search -> info -> watch)"

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        return (
            f"{self.base_url} (search/info/watch flow) "
            f"slug={anime_slug} ep={episode} s={season}"
        )

    async def _lookup(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> ResolutionResult:
        anime_id = await self._search_anime(title_hint or anime_slug)
        if anime_id is None:
            raise ProviderLookupError("No search results")

        info = await self._fetch_json(
            f"{self.base_url}/info/{quote(anime_id, safe='')}", context="info"
        )
        episodes = _parse_episodes(info)
        if not episodes:
            raise ProviderLookupError("No episode list")

        target = select_episode(episodes, parse_episode_number(episode))
        if target is None:
            raise ProviderLookupError("Episode not found")

        watch = await self._fetch_json(
            f"{self.base_url}/watch/{quote(target.id, safe='')}?server=gogocdn",
            context="watch",
        )
        best = select_source(_parse_sources(watch))
        if best is None:
            raise ProviderLookupError("No sources in response")

        headers = _parse_headers(watch)
        self._log.debug(
            "consumet_resolved",
            anime_id=anime_id,
            episode_id=target.id,
            quality=best.quality,
            is_m3u8=best.is_m3u8,
            requires_proxy=headers is not None,
        )
        return ResolutionResult.success(
            provider=self.name,
            searched_endpoint=self.search_endpoint_description(
                anime_slug, episode, season
            ),
            episode=best.url,
            is_hls=best.is_m3u8 or is_hls_url(best.url),
            headers=headers,
            requires_proxy=headers is not None,
        )

    async def _search_anime(self, title: str) -> str | None:
        """First result id for the first query variant that returns anything."""
        for q in query_variants(title):
            url = f"{self.base_url}/{quote(q, safe='')}?page=1"
            try:
                raw = await self._fetch_json(url, context="search")
            except ProviderLookupError:
                continue
            results = raw.get("results") if isinstance(raw, dict) else None
            if not isinstance(results, list) or not results:
                continue
            first = results[0]
            anime_id = first.get("id") if isinstance(first, dict) else None
            if isinstance(anime_id, str) and anime_id:
                self._log.debug("consumet_search_hit", query=q, anime_id=anime_id)
                return anime_id
        return None
