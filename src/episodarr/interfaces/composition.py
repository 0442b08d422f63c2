"""Composition root: dependency injection via FastAPI lifespan."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, cast

import httpx
import structlog
from fastapi import FastAPI

from episodarr.application.use_cases.episode_resolution import ProviderOrchestrator
from episodarr.infrastructure.providers import build_default_providers
from episodarr.infrastructure.slugs import SlugCache, SlugResolver
from episodarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan Hook: Initialize and cleanup all resources (DI Composition Root).

    Order matters:
        1. HTTP client (shared by providers and the slug resolver)
        2. Slug resolver (owns the slug cache)
        3. Providers (priority order) -> orchestrator
    """
    state = cast(AppState, app.state)
    config = state.config
    resolution = config.resolution

    # 1) HTTP client; no retry transport, the next provider is the retry
    state.http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )
    log.info("http_client_initialized", timeout=config.http_timeout_seconds)

    # 2) Slug resolver with its in-memory TTL cache
    state.slug_resolver = SlugResolver(
        state.http_client,
        cache=SlugCache(ttl_seconds=resolution.slug_cache_ttl_seconds),
        timeout=resolution.slug_search_timeout_seconds,
        threshold=resolution.slug_score_threshold,
        short_penalty=resolution.slug_short_penalty,
    )
    log.info(
        "slug_resolver_initialized",
        cache_ttl_seconds=resolution.slug_cache_ttl_seconds,
        threshold=resolution.slug_score_threshold,
    )

    # 3) Providers + orchestrator
    providers = build_default_providers(
        state.http_client,
        state.slug_resolver,
        resolution,
        user_agent=config.http_user_agent,
    )
    state.orchestrator = ProviderOrchestrator(providers)
    log.info(
        "orchestrator_initialized",
        providers=[d.name for d in state.orchestrator.descriptors],
    )

    state.graceful_shutdown.mark_ready()
    log.info("app_startup_complete")

    try:
        yield
    finally:
        await state.graceful_shutdown.wait_for_drain()

        await state.http_client.aclose()
        log.info("http_client_closed")

        log.info("app_shutdown_complete")
