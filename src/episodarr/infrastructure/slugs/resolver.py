"""Resolve a free-text title to the slug a provider site uses for it.

Flow: cache check -> concurrent search-page fetches -> anchor extraction
-> token scoring -> thresholded pick (or deterministic fallback) -> cache.
"""

from __future__ import annotations

import asyncio
from urllib.parse import quote, urlparse

import httpx
import structlog

from episodarr.domain.entities.resolution import SlugCacheKey, normalize_title
from episodarr.infrastructure.common.text import slugify

from .cache import SlugCache
from .extraction import extract_candidate_slugs
from .scoring import DEFAULT_SHORT_PENALTY, DEFAULT_THRESHOLD, pick_best

log = structlog.get_logger(__name__)

# Root query-string search plus three localized path conventions.
SEARCH_PATH_TEMPLATES: tuple[str, ...] = (
    "/?s={q}",
    "/search/{q}",
    "/buscar/{q}",
    "/pesquisar/{q}",
)


def _origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class SlugResolver:
    """Scrapes a provider's search pages to find its slug for a title.

    ``resolve()`` never raises (cancellation aside): on any failure or
    low-confidence match it returns ``slugify(title)``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        cache: SlugCache | None = None,
        timeout: float = 12.0,
        threshold: float = DEFAULT_THRESHOLD,
        short_penalty: float = DEFAULT_SHORT_PENALTY,
    ) -> None:
        self._http = http_client
        self._cache = cache if cache is not None else SlugCache()
        self._timeout = timeout
        self._threshold = threshold
        self._short_penalty = short_penalty

    @property
    def cache(self) -> SlugCache:
        return self._cache

    async def resolve(
        self,
        origin_url: str,
        title_or_slug: str,
        *,
        allow_episode_slug_extract: bool = True,
    ) -> str:
        query = normalize_title(title_or_slug)
        key = SlugCacheKey.build(origin_url, query)

        cached = self._cache.get(key)
        if cached is not None:
            log.debug("slug_resolve_cache_hit", origin=origin_url, query=query)
            return cached

        try:
            slug = await self._scrape(
                origin_url, query, allow_episode_slug_extract=allow_episode_slug_extract
            )
        except Exception:
            log.exception("slug_resolve_error", origin=origin_url, query=query)
            slug = None

        if slug is None:
            slug = slugify(query)
            log.info("slug_resolve_fallback", origin=origin_url, query=query, slug=slug)

        self._cache.set(key, slug)
        return slug

    async def _scrape(
        self,
        origin_url: str,
        query: str,
        *,
        allow_episode_slug_extract: bool,
    ) -> str | None:
        """Return the best confident slug, or None."""
        origin = _origin_of(origin_url)
        pages = await self._fetch_search_pages(origin, query)

        slugs: list[str] = []
        seen: set[str] = set()
        for html in pages:
            for slug in extract_candidate_slugs(
                html, origin, allow_episode_slug_extract=allow_episode_slug_extract
            ):
                if slug not in seen:
                    seen.add(slug)
                    slugs.append(slug)

        best = pick_best(slugs, query, short_penalty=self._short_penalty)
        if best is None or best.score < self._threshold:
            log.debug(
                "slug_resolve_no_confident_match",
                origin=origin,
                query=query,
                candidates=len(slugs),
                best_score=round(best.score, 3) if best else None,
            )
            return None

        log.info(
            "slug_resolve_success",
            origin=origin,
            query=query,
            slug=best.slug,
            score=round(best.score, 3),
        )
        return best.slug

    async def _fetch_search_pages(self, origin: str, query: str) -> list[str]:
        """Fetch all search paths concurrently; keep the bodies that succeeded.

        An unexpected error in one fetch cancels the others before it
        propagates, so nothing keeps running once ``resolve()`` returns.
        """
        quoted = quote(query, safe="")
        urls = [origin + tpl.format(q=quoted) for tpl in SEARCH_PATH_TEMPLATES]
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(self._fetch_text(url)) for url in urls]
        bodies = [task.result() for task in tasks]
        return [body for body in bodies if body is not None]

    async def _fetch_text(self, url: str) -> str | None:
        try:
            resp = await asyncio.wait_for(self._http.get(url), timeout=self._timeout)
            resp.raise_for_status()
            return resp.text
        except TimeoutError:
            log.debug("slug_search_timeout", url=url, timeout=self._timeout)
        except httpx.HTTPStatusError as exc:
            log.debug(
                "slug_search_http_error", url=url, status=exc.response.status_code
            )
        except httpx.HTTPError as exc:
            log.debug("slug_search_request_failed", url=url, error=str(exc))
        return None
