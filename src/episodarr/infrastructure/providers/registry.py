"""Default provider list, in fallback priority order."""

from __future__ import annotations

import httpx
import structlog

from episodarr.domain.ports.provider import EpisodeProviderPort
from episodarr.domain.ports.slug_resolver import SlugResolverPort
from episodarr.infrastructure.config.schema import ResolutionConfig

from .animefire_api import AnimeFireApiProvider
from .base import DEFAULT_USER_AGENT
from .consumet import ConsumetGogoProvider
from .pages import (
    AnimeFirePageProvider,
    AnimesOnlineCCPageProvider,
    SuperflixPageProvider,
)

log = structlog.get_logger(__name__)


def build_default_providers(
    http_client: httpx.AsyncClient,
    slug_resolver: SlugResolverPort,
    config: ResolutionConfig | None = None,
    *,
    user_agent: str = DEFAULT_USER_AGENT,
) -> list[EpisodeProviderPort]:
    """Providers ordered by decreasing desirability.

    Structured direct links first, then the aggregator, then page scrapes
    (episode pages before the series page).
    """
    config = config or ResolutionConfig()
    overrides = config.provider_base_urls

    providers: list[EpisodeProviderPort] = [
        AnimeFireApiProvider(
            http_client,
            base_url=overrides.get(AnimeFireApiProvider.slug),
            timeout=config.direct_timeout_seconds,
            user_agent=user_agent,
        ),
        ConsumetGogoProvider(
            http_client,
            base_url=overrides.get(ConsumetGogoProvider.slug),
            timeout=config.provider_timeout_seconds,
            user_agent=user_agent,
        ),
        AnimesOnlineCCPageProvider(
            slug_resolver, base_url=overrides.get(AnimesOnlineCCPageProvider.slug)
        ),
        AnimeFirePageProvider(
            slug_resolver, base_url=overrides.get(AnimeFirePageProvider.slug)
        ),
        SuperflixPageProvider(
            slug_resolver, base_url=overrides.get(SuperflixPageProvider.slug)
        ),
    ]

    unknown = set(overrides) - {p.descriptor.slug for p in providers}
    if unknown:
        log.warning("provider_base_url_override_unknown", providers=sorted(unknown))

    return providers
