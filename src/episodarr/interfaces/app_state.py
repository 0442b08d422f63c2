"""Application state container for FastAPI dependency injection."""

from __future__ import annotations

import httpx
from starlette.datastructures import State

from episodarr.application.use_cases.episode_resolution import ProviderOrchestrator
from episodarr.infrastructure.config import AppConfig
from episodarr.infrastructure.graceful_shutdown import GracefulShutdown
from episodarr.infrastructure.slugs import SlugResolver


class AppState(State):
    """FastAPI application state with all DI resources.

    Lifecycle managed by composition.py::lifespan().
    """

    # Configuration
    config: AppConfig

    # Infrastructure
    http_client: httpx.AsyncClient
    slug_resolver: SlugResolver

    # Application Services
    orchestrator: ProviderOrchestrator

    # Graceful shutdown (request tracking + drain)
    graceful_shutdown: GracefulShutdown
