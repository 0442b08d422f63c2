"""AnimeFire JSON provider: direct MP4/HLS links from the video API.

``/video/<slug>/<episode>`` answers with a JSON document carrying a
``data`` list of ``{src, label}`` pairs and, sometimes, a ``token`` URL.
The token may point at a Blogger-style redirect page; in that case the
first googlevideo CDN link on it is the playable file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from episodarr.domain.entities.errors import ProviderLookupError
from episodarr.domain.entities.resolution import ProviderKind, ResolutionResult
from episodarr.infrastructure.common.text import is_hls_url

from .base import HttpxProviderBase

# Higher rank = better.  Unknown labels rank 0.
QUALITY_ORDER: dict[str, int] = {
    "1080p": 1080,
    "720p": 720,
    "480p": 480,
    "360p": 360,
    "240p": 240,
}

# googlevideo.com playback links, absolute or protocol-relative.
CDN_LINK_RE = re.compile(
    r"(?:https?:)?//[a-z0-9\-_.]*googlevideo\.com/[^\"'<> \t\r\n]+",
    re.IGNORECASE,
)

_DIRECT_MEDIA_RE = re.compile(r"\.(?:mp4|m3u8|webm|mkv)($|\?)", re.IGNORECASE)
_CDN_HOST_SUFFIX = "googlevideo.com"


@dataclass(frozen=True)
class _VideoSource:
    src: str
    label: str


@dataclass(frozen=True)
class _AnimeFirePayload:
    sources: list[_VideoSource]
    token: str | None
    message: str | None


def _parse_payload(raw: Any) -> _AnimeFirePayload:
    """Read the fields we use; anything of the wrong shape counts as absent."""
    if not isinstance(raw, dict):
        raise ProviderLookupError("Unexpected AnimeFire response shape")

    sources: list[_VideoSource] = []
    data = raw.get("data")
    if isinstance(data, list):
        for item in data:
            if not isinstance(item, dict):
                continue
            src = item.get("src")
            if not isinstance(src, str) or not src.strip():
                continue
            label = item.get("label")
            sources.append(
                _VideoSource(
                    src=src.strip(),
                    label=label if isinstance(label, str) else "",
                )
            )

    token = raw.get("token")
    if not isinstance(token, str) or not token.strip():
        token = None

    message = None
    response = raw.get("response")
    if isinstance(response, dict) and isinstance(response.get("text"), str):
        message = response["text"] or None

    return _AnimeFirePayload(
        sources=sources,
        token=token.strip() if token else None,
        message=message,
    )


def pick_best_source(sources: list[_VideoSource]) -> str | None:
    """Best source by the fixed label ranking (stable among equal ranks)."""
    if not sources:
        return None
    ranked = sorted(sources, key=lambda s: QUALITY_ORDER.get(s.label, 0), reverse=True)
    return ranked[0].src


def extract_cdn_link(html: str) -> str | None:
    """First CDN link in *html*; protocol-relative links become https."""
    m = CDN_LINK_RE.search(html)
    if not m:
        return None
    url = m.group(0)
    return f"https:{url}" if url.startswith("//") else url


def _is_direct_media(url: str) -> bool:
    host = (urlparse(url).hostname or "").lower()
    return bool(_DIRECT_MEDIA_RE.search(url)) or host.endswith(_CDN_HOST_SUFFIX)


class AnimeFireApiProvider(HttpxProviderBase):
    """Structured JSON provider; never needs the media relay."""

    name = "AnimeFire (API)"
    slug = "anime-fire-api"
    kind = ProviderKind.DIRECT_JSON
    default_base_url = "https://animefire.plus/video/"
    has_ads = False
    is_embed = False
    docs = (
        "https://animefire.plus/video/{slug}/{episode} "
        "(returns JSON; token used when data is empty)"
    )

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        base = self.base_url if self.base_url.endswith("/") else self.base_url + "/"
        return f"{base}{anime_slug}/{episode}"

    async def _lookup(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> ResolutionResult:
        url = self.search_endpoint_description(anime_slug, episode, season)
        payload = _parse_payload(await self._fetch_json(url, context="video_json"))

        video_url = pick_best_source(payload.sources)
        if video_url is None and payload.token:
            video_url = await self._follow_token(payload.token)
        if video_url is None:
            raise ProviderLookupError(
                payload.message or "No video links in AnimeFire response"
            )

        self._log.debug("animefire_api_resolved", url=url, video_url=video_url)
        return ResolutionResult.success(
            provider=self.name,
            searched_endpoint=url,
            episode=video_url,
            is_hls=is_hls_url(video_url),
        )

    async def _follow_token(self, token: str) -> str:
        """Turn the token into a playable URL, falling back to the token itself."""
        if _is_direct_media(token):
            return token
        try:
            html = await self._fetch_text(token, context="token_page")
        except ProviderLookupError:
            return token
        link = extract_cdn_link(html)
        if link is None:
            self._log.debug("animefire_token_no_cdn_link", token=token)
            return token
        return link
