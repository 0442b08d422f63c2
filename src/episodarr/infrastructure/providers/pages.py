"""Page providers: browsable episode/series pages rather than media files.

Each resolves its own slug for the title, then fills a URL template.  The
result is meant to be opened as an external link, never fed to a player.
"""

from __future__ import annotations

from typing import ClassVar
from urllib.parse import quote

from episodarr.domain.entities.errors import ProviderLookupError
from episodarr.domain.entities.resolution import (
    ProviderKind,
    ResolutionResult,
    normalize_title,
)
from episodarr.domain.ports.slug_resolver import SlugResolverPort

from .base import ProviderBase

_SLUG_PLACEHOLDER = "{provider-slug}"


class PageProviderBase(ProviderBase):
    """Slug lookup + template formatting shared by the page providers.

    Subclasses set ``page_template`` with ``{base}``, ``{slug}`` and
    ``{episode}`` fields.
    """

    has_ads = True
    is_embed = True
    page_template: ClassVar[str] = ""

    def __init__(
        self,
        slug_resolver: SlugResolverPort,
        *,
        base_url: str | None = None,
    ) -> None:
        super().__init__(base_url=base_url)
        self._slugs = slug_resolver

    def build_page_url(self, provider_slug: str, episode: str) -> str:
        return self.page_template.format(
            base=self.base_url.rstrip("/"), slug=provider_slug, episode=episode
        )

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        return self.build_page_url(_SLUG_PLACEHOLDER, episode)

    def _searched_endpoint(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> str:
        query = normalize_title(title_hint or anime_slug)
        return f"{self.base_url.rstrip('/')}/?s={quote(query, safe='')}"

    async def _lookup(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> ResolutionResult:
        query = normalize_title(title_hint or anime_slug)
        provider_slug = await self._slugs.resolve(
            self.base_url, query, allow_episode_slug_extract=True
        )
        if not provider_slug:
            raise ProviderLookupError(f"No slug for '{query}'")
        page_url = self.build_page_url(provider_slug, episode)
        return ResolutionResult.success(
            provider=self.name,
            searched_endpoint=self._searched_endpoint(
                anime_slug, episode, season, title_hint
            ),
            episode=page_url,
            is_embed=True,
        )


class AnimesOnlineCCPageProvider(PageProviderBase):
    name = "Animes Online CC (Page)"
    slug = "animes-online-cc-page"
    kind = ProviderKind.EPISODE_PAGE
    default_base_url = "https://animesonlinecc.to"
    page_template = "{base}/episodio/{slug}-episodio-{episode}/"
    docs = "Search: /?s= ; episode: /episodio/{slug}-episodio-{n}/"


class AnimeFirePageProvider(PageProviderBase):
    name = "Anime Fire (Page)"
    slug = "anime-fire-page"
    kind = ProviderKind.VIDEO_PAGE
    default_base_url = "https://animefire.plus"
    page_template = "{base}/video/{slug}/{episode}"
    docs = "Search: /?s= ; episode: /video/{slug}/{n}"


class SuperflixPageProvider(PageProviderBase):
    """Last resort: links the series page, the user picks the episode there."""

    name = "Superflix (Page)"
    slug = "superflix-page"
    kind = ProviderKind.SERIES_PAGE
    default_base_url = "https://superflix.tv"
    page_template = "{base}/serie/{slug}/"
    docs = "Search: /?s= ; series: /serie/{slug}/"

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        return f"{self.base_url.rstrip('/')} (slug via search, series link)"
