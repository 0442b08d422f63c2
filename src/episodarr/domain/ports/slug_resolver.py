"""Port for resolving a free-text title to a provider-specific slug."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class SlugResolverPort(Protocol):
    """Discovers the slug a provider site uses for a given title.

    Never raises; falls back to a deterministic slugification of the title.
    """

    async def resolve(
        self,
        origin_url: str,
        title_or_slug: str,
        *,
        allow_episode_slug_extract: bool = True,
    ) -> str: ...
