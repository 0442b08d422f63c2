"""Port for upstream episode providers."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from episodarr.domain.entities.resolution import ProviderDescriptor, ResolutionResult


@runtime_checkable
class EpisodeProviderPort(Protocol):
    """Locates a playable (or openable) URL for one episode on one upstream.

    Implementations handle site-specific lookup logic (JSON APIs, aggregator
    flows, scraped page slugs).  ``search_episode`` must not raise: every
    failure is reported as a ``ResolutionResult`` with ``error=True``.
    """

    @property
    def descriptor(self) -> ProviderDescriptor:
        """Static descriptor (name, slug, base URL, kind, flags)."""
        ...

    def search_endpoint_description(
        self, anime_slug: str, episode: str, season: int = 1
    ) -> str:
        """Human-readable locator for diagnostics (not necessarily fetchable)."""
        ...

    async def search_episode(
        self,
        anime_slug: str,
        episode: str,
        season: int = 1,
        title_hint: str | None = None,
    ) -> ResolutionResult:
        """Resolve the episode, returning a failed result instead of raising."""
        ...
