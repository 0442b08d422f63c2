"""Episode resolution use case: ordered provider fallback.

Providers are tried strictly one after another from the requested start
index.  The first result with a usable episode URL wins, and its index is
returned so the caller can later resume *past* it without re-trying
providers that are already known to have failed.
"""

from __future__ import annotations

import time
from collections.abc import Sequence

import structlog

from episodarr.domain.entities.resolution import (
    ProviderDescriptor,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionResult,
)
from episodarr.domain.ports.provider import EpisodeProviderPort

log = structlog.get_logger(__name__)

EXHAUSTED_PROVIDER = "all"
EXHAUSTED_MESSAGE = "No provider found the episode."


class ProviderOrchestrator:
    """Runs the fixed, priority-ordered provider list for one request.

    Flow:
        1. Start at ``request.start_index`` (>= len(providers) -> exhausted)
        2. Call ``search_episode`` on each provider in order, one at a time
        3. Return the first non-error result that carries an episode URL
        4. Otherwise return the sentinel failure with index -1
    """

    def __init__(self, providers: Sequence[EpisodeProviderPort]) -> None:
        self._providers: tuple[EpisodeProviderPort, ...] = tuple(providers)

    @property
    def total(self) -> int:
        return len(self._providers)

    @property
    def descriptors(self) -> list[ProviderDescriptor]:
        return [p.descriptor for p in self._providers]

    async def resolve(self, request: ResolutionRequest) -> ResolutionOutcome:
        start = max(0, request.start_index)
        attempted: list[int] = []

        for index in range(start, self.total):
            provider = self._providers[index]
            name = provider.descriptor.name
            attempted.append(index)

            t0 = time.perf_counter_ns()
            result = await provider.search_episode(
                request.anime_slug,
                request.episode,
                request.season,
                request.title_hint,
            )
            duration_ms = (time.perf_counter_ns() - t0) / 1_000_000

            if not result.error and result.episode:
                log.info(
                    "provider_resolved",
                    provider=name,
                    index=index,
                    anime=request.anime_slug,
                    episode=request.episode,
                    is_embed=result.is_embed,
                    is_hls=result.is_hls,
                    requires_proxy=result.requires_proxy,
                    duration_ms=round(duration_ms, 2),
                )
                return ResolutionOutcome(result=result, index=index, total=self.total)

            log.info(
                "provider_attempt_failed",
                provider=name,
                index=index,
                message=result.message,
                duration_ms=round(duration_ms, 2),
            )

        log.warning(
            "providers_exhausted",
            anime=request.anime_slug,
            episode=request.episode,
            start=start,
            attempted=attempted,
        )
        return ResolutionOutcome(
            result=ResolutionResult.failure(
                provider=EXHAUSTED_PROVIDER,
                searched_endpoint="",
                message=EXHAUSTED_MESSAGE,
            ),
            index=-1,
            total=self.total,
        )
