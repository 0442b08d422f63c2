"""Tests for the application factory, lifespan wiring and probes."""

from __future__ import annotations

import asyncio
import time
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from episodarr.application.use_cases.episode_resolution import ProviderOrchestrator
from episodarr.domain.entities import ProviderDescriptor, ProviderKind
from episodarr.infrastructure.config import AppConfig
from episodarr.infrastructure.providers import SuperflixPageProvider
from episodarr.infrastructure.slugs import SlugResolver
from episodarr.interfaces.app import create_app


class TestProbesWithoutStartup:
    def test_healthz_without_lifespan(self) -> None:
        client = TestClient(create_app(AppConfig()))
        resp = client.get("/api/v1/healthz")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "providers": 0}

    def test_readyz_before_startup(self) -> None:
        client = TestClient(create_app(AppConfig()))
        resp = client.get("/api/v1/readyz")
        assert resp.status_code == 503
        assert resp.json() == {"status": "not_ready"}


class TestLifespan:
    def test_wires_resources(self) -> None:
        app = create_app(AppConfig())
        with TestClient(app) as client:
            assert client.get("/api/v1/readyz").status_code == 200
            assert client.get("/api/v1/healthz").json()["providers"] == 5
            assert isinstance(app.state.slug_resolver, SlugResolver)
            assert client.get("/api/v1/providers").json()["total"] == 5
        assert app.state.http_client.is_closed

    def test_config_reaches_providers(self) -> None:
        config = AppConfig(
            resolution={
                "slug_cache_ttl_seconds": 5,
                "provider_base_urls": {"superflix-page": "https://sf.example"},
            }
        )
        app = create_app(config)
        with TestClient(app) as client:
            providers = client.get("/api/v1/providers").json()["providers"]
            assert providers[-1]["base_url"] == "https://sf.example"
            assert app.state.slug_resolver.cache._ttl == 5
        assert SuperflixPageProvider.default_base_url == "https://superflix.tv"

    def test_not_ready_after_shutdown(self) -> None:
        app = create_app(AppConfig())
        with TestClient(app):
            pass
        assert app.state.graceful_shutdown.is_ready is False

    def test_bad_request_through_full_app(self) -> None:
        with TestClient(create_app(AppConfig())) as client:
            resp = client.get("/api/v1/episode-resolution", params={"slug": "naruto"})
        assert resp.status_code == 400
        assert resp.json()["error"] is True

    def test_unversioned_resolution_alias(self) -> None:
        with TestClient(create_app(AppConfig())) as client:
            resp = client.get("/episode-resolution", params={"slug": "naruto"})
        assert resp.status_code == 400
        assert resp.json()["message"] == "slug and episode are required."


def _http_scope(path: str, query: bytes) -> dict[str, Any]:
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query,
        "headers": [(b"host", b"testserver")],
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


class TestClientDisconnect:
    @pytest.mark.asyncio
    async def test_disconnect_cancels_provider_through_full_app(self) -> None:
        cancelled = asyncio.Event()

        async def _hang(*_args: Any) -> None:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        provider = MagicMock()
        provider.descriptor = ProviderDescriptor(
            name="Slow",
            slug="slow",
            base_url="https://slow.example",
            kind=ProviderKind.DIRECT_JSON,
        )
        provider.search_episode = AsyncMock(side_effect=_hang)

        app = create_app(AppConfig())
        app.state.orchestrator = ProviderOrchestrator([provider])

        inbound = iter([{"type": "http.request", "body": b"", "more_body": False}])

        async def receive() -> dict[str, Any]:
            return next(inbound, {"type": "http.disconnect"})

        sent: list[dict[str, Any]] = []

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        t0 = time.perf_counter()
        await app(
            _http_scope("/api/v1/episode-resolution", b"slug=naruto&episode=5"),
            receive,
            send,
        )
        elapsed = time.perf_counter() - t0

        assert cancelled.is_set()
        assert elapsed < 1.5
        statuses = [m["status"] for m in sent if m["type"] == "http.response.start"]
        assert statuses == [499]
        assert app.state.graceful_shutdown.active_requests == 0
