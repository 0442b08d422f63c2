"""Shared base classes for episode providers.

``ProviderBase`` owns the descriptor and the failure boundary: whatever a
subclass raises inside ``_lookup()`` comes back as a failed
``ResolutionResult``.  ``HttpxProviderBase`` adds time-bounded fetch helpers
that raise ``ProviderLookupError`` instead of leaking httpx exceptions.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, ClassVar

import httpx
import structlog

from episodarr.domain.entities.errors import ProviderLookupError
from episodarr.domain.entities.resolution import (
    ProviderDescriptor,
    ProviderKind,
    ResolutionResult,
)

DEFAULT_USER_AGENT = "Mozilla/5.0"
DEFAULT_TIMEOUT = 15.0


class ProviderBase:
    """Descriptor plumbing and the never-raise ``search_episode`` wrapper.

    Subclasses **must** set ``name``, ``slug``, ``kind``, ``default_base_url``
    and implement ``search_endpoint_description()`` and ``_lookup()``.
    """

    name: ClassVar[str] = ""
    slug: ClassVar[str] = ""
    kind: ClassVar[ProviderKind]
    default_base_url: ClassVar[str] = ""
    has_ads: ClassVar[bool] = False
    is_embed: ClassVar[bool] = False
    docs: ClassVar[str] = ""

    def __init__(self, *, base_url: str | None = None) -> None:
        self.base_url = base_url or self.default_base_url
        self._log = structlog.get_logger(self.slug or __name__)

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            slug=self.slug,
            base_url=self.base_url,
            kind=self.kind,
            has_ads=self.has_ads,
            is_embed=self.is_embed,
            docs=self.docs,
        )

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        raise NotImplementedError(
            f"{type(self).__name__}.search_endpoint_description() not implemented"
        )

    def _searched_endpoint(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> str:
        """Locator reported in the result; page providers report their search URL."""
        return self.search_endpoint_description(anime_slug, episode, season)

    async def search_episode(
        self,
        anime_slug: str,
        episode: str,
        season: int = 1,
        title_hint: str | None = None,
    ) -> ResolutionResult:
        searched = self._searched_endpoint(anime_slug, episode, season, title_hint)
        try:
            return await self._lookup(anime_slug, episode, season, title_hint)
        except ProviderLookupError as exc:
            self._log.warning(
                "provider_lookup_failed",
                provider=self.name,
                anime=anime_slug,
                episode=episode,
                reason=exc.message,
            )
            message = exc.message
        except Exception:
            self._log.exception(
                "provider_lookup_error",
                provider=self.name,
                anime=anime_slug,
                episode=episode,
            )
            message = f"{self.name} lookup failed"
        return ResolutionResult.failure(
            provider=self.name,
            searched_endpoint=searched,
            message=message,
            is_embed=self.is_embed,
        )

    async def _lookup(
        self,
        anime_slug: str,
        episode: str,
        season: int,
        title_hint: str | None,
    ) -> ResolutionResult:
        """Resolve the episode or raise ``ProviderLookupError``."""
        raise NotImplementedError(f"{type(self).__name__}._lookup() not implemented")


class HttpxProviderBase(ProviderBase):
    """Provider that talks to its upstream over the shared httpx client."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(base_url=base_url)
        self._http = http_client
        self._timeout = timeout
        self._user_agent = user_agent

    async def _get(self, url: str, *, context: str = "") -> httpx.Response:
        """GET *url* under an explicit timeout; raise on any failure."""
        try:
            resp = await asyncio.wait_for(
                self._http.get(url, headers={"User-Agent": self._user_agent}),
                timeout=self._timeout,
            )
            resp.raise_for_status()
            return resp
        except TimeoutError:
            self._log.warning(f"{self.slug}_timeout", url=url, context=context)
            raise ProviderLookupError(f"Timed out after {self._timeout:g}s") from None
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self._log.warning(
                f"{self.slug}_http_error", url=url, status=status, context=context
            )
            raise ProviderLookupError(f"HTTP {status}") from exc
        except httpx.HTTPError as exc:
            self._log.warning(
                f"{self.slug}_fetch_error", url=url, error=str(exc), context=context
            )
            raise ProviderLookupError(f"Request failed: {exc}") from exc

    async def _fetch_json(self, url: str, *, context: str = "") -> Any:
        resp = await self._get(url, context=context)
        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError):
            self._log.warning(f"{self.slug}_invalid_json", url=url, context=context)
            raise ProviderLookupError("Invalid JSON response") from None

    async def _fetch_text(self, url: str, *, context: str = "") -> str:
        resp = await self._get(url, context=context)
        return resp.text
