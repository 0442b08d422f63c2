"""Domain entities for episode resolution.

Pure value objects without framework dependencies or I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

_SEPARATORS_RE = re.compile(r"[-_]+")


def normalize_title(text: str) -> str:
    """Collapse hyphens/underscores to spaces, collapse whitespace, trim."""
    return " ".join(_SEPARATORS_RE.sub(" ", text).split())


class ProviderKind(str, Enum):
    """Closed set of provider variants; the page kinds yield links to open."""

    DIRECT_JSON = "direct_json"
    AGGREGATOR = "aggregator"
    EPISODE_PAGE = "episode_page"
    VIDEO_PAGE = "video_page"
    SERIES_PAGE = "series_page"

    @property
    def is_page(self) -> bool:
        return self in (
            ProviderKind.EPISODE_PAGE,
            ProviderKind.VIDEO_PAGE,
            ProviderKind.SERIES_PAGE,
        )


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static description of one upstream provider."""

    name: str  # Display name, e.g. "AnimeFire (API)"
    slug: str  # Stable identifier, e.g. "anime-fire-api"
    base_url: str
    kind: ProviderKind
    has_ads: bool = False
    is_embed: bool = False
    docs: str = ""  # URL conventions, for the provider catalogue


@dataclass(frozen=True)
class ResolutionRequest:
    """Inbound request to resolve one episode.

    ``episode`` stays a string: some catalogues use identifiers like ``"12.5"``.
    """

    anime_slug: str
    episode: str
    season: int = 1
    title_hint: str | None = None
    start_index: int = 0

    @property
    def query(self) -> str:
        """Normalized free-text title used for searching and scraping."""
        return normalize_title(self.title_hint or self.anime_slug)


@dataclass(frozen=True)
class ResolutionResult:
    """Outcome of a single provider lookup.

    Invariant: ``episode is None`` iff ``error``.  ``requires_proxy`` is
    authoritative; ``headers`` only carries what the relay should attach.
    """

    error: bool
    provider: str
    searched_endpoint: str
    episode: str | None = None
    message: str | None = None
    is_embed: bool = False
    is_hls: bool = False
    headers: dict[str, str] | None = None
    requires_proxy: bool = False

    def __post_init__(self) -> None:
        if (self.episode is None) != self.error:
            raise ValueError("episode must be None exactly when error is set")

    @classmethod
    def success(
        cls,
        *,
        provider: str,
        searched_endpoint: str,
        episode: str,
        is_embed: bool = False,
        is_hls: bool = False,
        headers: dict[str, str] | None = None,
        requires_proxy: bool = False,
    ) -> ResolutionResult:
        return cls(
            error=False,
            provider=provider,
            searched_endpoint=searched_endpoint,
            episode=episode,
            is_embed=is_embed,
            is_hls=is_hls,
            headers=headers or None,
            requires_proxy=requires_proxy,
        )

    @classmethod
    def failure(
        cls,
        *,
        provider: str,
        searched_endpoint: str,
        message: str,
        is_embed: bool = False,
    ) -> ResolutionResult:
        return cls(
            error=True,
            provider=provider,
            searched_endpoint=searched_endpoint,
            message=message,
            is_embed=is_embed,
        )


@dataclass(frozen=True)
class ResolutionOutcome:
    """Orchestrator result plus its position in the provider list.

    ``index`` is ``-1`` when every remaining provider failed.
    """

    result: ResolutionResult
    index: int
    total: int

    @property
    def exhausted(self) -> bool:
        return self.index == -1 or self.result.error or not self.result.episode

    @property
    def next_index(self) -> int | None:
        if self.index < 0:
            return None
        nxt = self.index + 1
        return nxt if nxt < self.total else None

    def to_payload(self) -> dict[str, Any]:
        """Render the JSON body shared by the endpoint and the client."""
        r = self.result
        return {
            "error": r.error,
            "provider": r.provider,
            "searched_endpoint": r.searched_endpoint,
            "episode": r.episode,
            "message": r.message,
            "isEmbed": r.is_embed,
            "isHls": r.is_hls,
            "headers": r.headers,
            "requiresProxy": r.requires_proxy,
            "index": self.index,
            "total": self.total,
            "nextIndex": self.next_index,
        }


@dataclass(frozen=True)
class SlugCacheKey:
    """Cache key: provider origin + lowercase normalized title."""

    origin: str
    title: str

    @classmethod
    def build(cls, origin: str, title: str) -> SlugCacheKey:
        return cls(origin=origin, title=normalize_title(title).lower())


@dataclass(frozen=True)
class SlugCacheEntry:
    """Resolved slug and the monotonic time it was stored."""

    value: str
    stored_at: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at >= ttl_seconds


@dataclass(frozen=True)
class CandidateSlug:
    """A scraped slug and its match score against the query (0.0–1.0)."""

    slug: str
    score: float
