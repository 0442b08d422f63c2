"""Tests for the provider failure boundary in ProviderBase."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from episodarr.domain.entities import ProviderKind, ProviderLookupError, ResolutionResult
from episodarr.infrastructure.providers.base import HttpxProviderBase, ProviderBase


class _Provider(ProviderBase):
    name = "Test Provider"
    slug = "test-provider"
    kind = ProviderKind.DIRECT_JSON
    default_base_url = "https://test.example"

    def __init__(self, behaviour) -> None:
        super().__init__()
        self._behaviour = behaviour

    def search_endpoint_description(self, anime_slug, episode, season=1) -> str:
        return f"{self.base_url}/{anime_slug}/{episode}"

    async def _lookup(self, anime_slug, episode, season, title_hint):
        return await self._behaviour()


class TestSearchEpisodeBoundary:
    @pytest.mark.asyncio
    async def test_success_passthrough(self) -> None:
        async def _ok():
            return ResolutionResult.success(
                provider="Test Provider", searched_endpoint="e", episode="u"
            )

        result = await _Provider(_ok).search_episode("a", "1")
        assert result.episode == "u"

    @pytest.mark.asyncio
    async def test_lookup_error_message_kept(self) -> None:
        async def _fail():
            raise ProviderLookupError("No search results")

        result = await _Provider(_fail).search_episode("naruto", "3")
        assert result.error is True
        assert result.message == "No search results"
        assert result.searched_endpoint == "https://test.example/naruto/3"
        assert result.provider == "Test Provider"

    @pytest.mark.asyncio
    async def test_unexpected_error_converted(self) -> None:
        async def _crash():
            raise KeyError("episodes")

        result = await _Provider(_crash).search_episode("naruto", "3")
        assert result.error is True
        assert result.message == "Test Provider lookup failed"

    @pytest.mark.asyncio
    async def test_cancellation_not_swallowed(self) -> None:
        async def _cancelled():
            raise asyncio.CancelledError

        with pytest.raises(asyncio.CancelledError):
            await _Provider(_cancelled).search_episode("naruto", "3")

    def test_base_url_defaults(self) -> None:
        async def _noop():
            return None

        assert _Provider(_noop).base_url == "https://test.example"
        assert _Provider(_noop).descriptor.slug == "test-provider"


class TestNotImplemented:
    def test_description_required(self) -> None:
        class _Bare(ProviderBase):
            name = "bare"
            slug = "bare"
            kind = ProviderKind.AGGREGATOR

        with pytest.raises(NotImplementedError):
            _Bare().search_endpoint_description("a", "1")

    @pytest.mark.asyncio
    async def test_lookup_required_reported_as_failure(self) -> None:
        class _Bare(ProviderBase):
            name = "bare"
            slug = "bare"
            kind = ProviderKind.AGGREGATOR

            def search_endpoint_description(self, anime_slug, episode, season=1):
                return "bare"

        result = await _Bare().search_episode("a", "1")
        assert result.error is True


class TestHttpxProviderBase:
    def test_stores_settings(self) -> None:
        class _P(HttpxProviderBase):
            name = "p"
            slug = "p"
            kind = ProviderKind.AGGREGATOR
            default_base_url = "https://p.example"

        client = httpx.AsyncClient()
        p = _P(client, timeout=3.0, user_agent="UA/1")
        assert p._http is client
        assert p._timeout == 3.0
        assert p._user_agent == "UA/1"
        assert p.base_url == "https://p.example"
