"""Shared test fixtures for the Episodarr test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from episodarr.domain.entities import (
    ProviderDescriptor,
    ProviderKind,
    ResolutionRequest,
    ResolutionResult,
)

# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def resolution_request() -> ResolutionRequest:
    """Minimal valid ResolutionRequest starting at provider 0."""
    return ResolutionRequest(anime_slug="naruto-shippuden", episode="5")


def _make_success(
    provider: str = "P", episode: str = "https://cdn.example/ep5.mp4"
) -> ResolutionResult:
    return ResolutionResult.success(
        provider=provider,
        searched_endpoint=f"https://{provider.lower()}.example/search",
        episode=episode,
    )


def _make_failure(provider: str = "P", message: str = "not found") -> ResolutionResult:
    return ResolutionResult.failure(
        provider=provider,
        searched_endpoint=f"https://{provider.lower()}.example/search",
        message=message,
    )


# ---------------------------------------------------------------------------
# Mock port fixtures
# ---------------------------------------------------------------------------


def _make_provider(
    name: str,
    result: ResolutionResult | None = None,
    *,
    kind: ProviderKind = ProviderKind.DIRECT_JSON,
) -> MagicMock:
    """Fake EpisodeProviderPort whose ``search_episode`` returns *result*."""
    provider = MagicMock()
    provider.descriptor = ProviderDescriptor(
        name=name,
        slug=name.lower(),
        base_url=f"https://{name.lower()}.example",
        kind=kind,
    )
    provider.search_endpoint_description.return_value = f"https://{name.lower()}.example"
    provider.search_episode = AsyncMock(
        return_value=result if result is not None else _make_failure(name)
    )
    return provider


@pytest.fixture()
def mock_slug_resolver() -> AsyncMock:
    """Mock SlugResolverPort returning a fixed slug."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value="naruto-shippuden")
    return resolver


@pytest.fixture()
def make_success():
    """Factory for successful ResolutionResults."""
    return _make_success


@pytest.fixture()
def make_failure():
    """Factory for failed ResolutionResults."""
    return _make_failure


@pytest.fixture()
def make_provider():
    """Factory for fake providers (see ``_make_provider``)."""
    return _make_provider
