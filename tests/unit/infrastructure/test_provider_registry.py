"""Tests for the default provider list."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx

from episodarr.domain.ports import EpisodeProviderPort
from episodarr.infrastructure.config import ResolutionConfig
from episodarr.infrastructure.providers import (
    AnimeFireApiProvider,
    AnimeFirePageProvider,
    AnimesOnlineCCPageProvider,
    ConsumetGogoProvider,
    SuperflixPageProvider,
    build_default_providers,
)


class TestBuildDefaultProviders:
    def test_priority_order(self, mock_slug_resolver: AsyncMock) -> None:
        providers = build_default_providers(httpx.AsyncClient(), mock_slug_resolver)
        assert [type(p) for p in providers] == [
            AnimeFireApiProvider,
            ConsumetGogoProvider,
            AnimesOnlineCCPageProvider,
            AnimeFirePageProvider,
            SuperflixPageProvider,
        ]

    def test_direct_before_pages(self, mock_slug_resolver: AsyncMock) -> None:
        providers = build_default_providers(httpx.AsyncClient(), mock_slug_resolver)
        kinds = [p.descriptor.kind.is_page for p in providers]
        assert kinds == sorted(kinds)

    def test_satisfy_port(self, mock_slug_resolver: AsyncMock) -> None:
        for p in build_default_providers(httpx.AsyncClient(), mock_slug_resolver):
            assert isinstance(p, EpisodeProviderPort)

    def test_unique_slugs(self, mock_slug_resolver: AsyncMock) -> None:
        slugs = [
            p.descriptor.slug
            for p in build_default_providers(httpx.AsyncClient(), mock_slug_resolver)
        ]
        assert len(slugs) == len(set(slugs))

    def test_timeouts_from_config(self, mock_slug_resolver: AsyncMock) -> None:
        config = ResolutionConfig(provider_timeout_seconds=7.0, direct_timeout_seconds=3.0)
        providers = build_default_providers(
            httpx.AsyncClient(), mock_slug_resolver, config
        )
        assert providers[0]._timeout == 3.0
        assert providers[1]._timeout == 7.0

    def test_base_url_overrides(self, mock_slug_resolver: AsyncMock) -> None:
        config = ResolutionConfig(
            provider_base_urls={
                "superflix-page": "https://superflix.example",
                "does-not-exist": "https://nowhere.example",
            }
        )
        providers = build_default_providers(
            httpx.AsyncClient(), mock_slug_resolver, config
        )
        assert providers[-1].descriptor.base_url == "https://superflix.example"
        assert providers[0].descriptor.base_url == "https://animefire.plus/video/"

    def test_user_agent_passed(self, mock_slug_resolver: AsyncMock) -> None:
        providers = build_default_providers(
            httpx.AsyncClient(), mock_slug_resolver, user_agent="Custom/2"
        )
        assert providers[0]._user_agent == "Custom/2"
        assert providers[1]._user_agent == "Custom/2"
