"""Consumer-side driver for the start/nextIndex continuation protocol.

The client asks the resolution endpoint for ``start=0``.  When the returned
source fails to play, ``try_next()`` asks again from ``index + 1`` until the
server reports the last provider.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote, urlencode

import httpx
import structlog

log = structlog.get_logger(__name__)

ALL_PROVIDERS_FAILED = "All providers failed."
GENERIC_FAILURE = "Failed to get the episode link."


class ClientState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class PlayerSource:
    """What gets handed to a player (or opened externally)."""

    url: str
    is_hls: bool
    is_embed: bool
    proxied: bool


def build_proxy_url(
    proxy_path: str, episode_url: str, headers: dict[str, str] | None
) -> str:
    """``{proxy_path}?url=...[&referer=...]`` for sources needing custom headers."""
    params = {"url": episode_url}
    referer = (headers or {}).get("Referer") or (headers or {}).get("referer")
    if referer:
        params["referer"] = referer
    return f"{proxy_path}?{urlencode(params, quote_via=quote)}"


class PlaybackContinuationClient:
    """State machine ``IDLE -> LOADING -> {SUCCESS, ERROR}``.

    ``SUCCESS`` and ``ERROR`` go back to ``LOADING`` on ``try_next()`` while
    providers remain.  The last successful payload survives later errors so
    the caller can still offer another attempt.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        *,
        anime_slug: str,
        episode: str,
        season: int = 1,
        title: str | None = None,
        proxy_path: str = "/api/proxy",
        on_release: Callable[[], None] | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self.anime_slug = anime_slug
        self.episode = episode
        self.season = season
        self.title = title
        self._proxy_path = proxy_path
        self._on_release = on_release

        self.state = ClientState.IDLE
        self.data: dict[str, Any] | None = None
        self.error: str | None = None
        self.tried: list[int] = []

    @property
    def can_try_next(self) -> bool:
        if self.data is None:
            return False
        return self.data["index"] + 1 < self.data["total"]

    @property
    def should_embed(self) -> bool:
        return self.state is ClientState.SUCCESS and bool(
            self.data and self.data.get("isEmbed")
        )

    @property
    def player_source(self) -> PlayerSource | None:
        if self.state is not ClientState.SUCCESS or not self.data:
            return None
        episode_url = self.data.get("episode")
        if not episode_url:
            return None
        proxied = bool(self.data.get("requiresProxy"))
        url = (
            build_proxy_url(self._proxy_path, episode_url, self.data.get("headers"))
            if proxied
            else episode_url
        )
        return PlayerSource(
            url=url,
            is_hls=bool(self.data.get("isHls")),
            is_embed=bool(self.data.get("isEmbed")),
            proxied=proxied,
        )

    def resolution_url(self, start: int) -> str:
        path = (
            f"{self._base_url}/api/v1/animes/{quote(self.anime_slug, safe='')}"
            f"/episodes/{quote(str(self.episode), safe='')}"
        )
        params: dict[str, Any] = {"season": self.season}
        if self.title:
            params["title"] = self.title
        params["start"] = start
        return f"{path}?{urlencode(params, quote_via=quote)}"

    async def load(self) -> ClientState:
        """Initial request from the first provider."""
        return await self._fetch_from(0)

    async def try_next(self) -> ClientState:
        """Advance past the current provider; no-op before any success."""
        if self.data is None:
            return self.state
        next_index = self.data["index"] + 1
        if next_index >= self.data["total"]:
            self.state = ClientState.ERROR
            self.error = ALL_PROVIDERS_FAILED
            log.info("continuation_exhausted", tried=list(self.tried))
            return self.state
        self._release()
        return await self._fetch_from(next_index)

    async def report_playback_failure(self) -> ClientState:
        """Player error (decode failure, fatal HLS error): move on."""
        log.info(
            "continuation_playback_failed",
            provider=self.data.get("provider") if self.data else None,
        )
        return await self.try_next()

    def _release(self) -> None:
        if self._on_release is not None:
            self._on_release()

    async def _fetch_from(self, start: int) -> ClientState:
        self.state = ClientState.LOADING
        self.error = None
        url = self.resolution_url(start)
        try:
            resp = await self._http.get(url)
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.warning("continuation_request_failed", url=url, error=str(exc))
            self.state = ClientState.ERROR
            self.error = GENERIC_FAILURE
            return self.state

        if (
            not resp.is_success
            or not isinstance(payload, dict)
            or payload.get("error")
            or not payload.get("episode")
        ):
            message = payload.get("message") if isinstance(payload, dict) else None
            self.state = ClientState.ERROR
            self.error = message or f"HTTP {resp.status_code}"
            log.info(
                "continuation_provider_unavailable",
                start=start,
                status=resp.status_code,
                message=self.error,
            )
            return self.state

        self.data = payload
        index = payload["index"]
        if index not in self.tried:
            self.tried.append(index)
        self.state = ClientState.SUCCESS
        log.debug(
            "continuation_source_ready",
            provider=payload.get("provider"),
            index=index,
            total=payload.get("total"),
        )
        return self.state
