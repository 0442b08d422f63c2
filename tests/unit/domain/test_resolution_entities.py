"""Tests for episode resolution domain entities."""

from __future__ import annotations

import pytest

from episodarr.domain.entities import (
    InvalidResolutionRequest,
    ProviderKind,
    ProviderLookupError,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionResult,
    SlugCacheEntry,
    SlugCacheKey,
)
from episodarr.domain.entities.resolution import normalize_title


class TestNormalizeTitle:
    def test_hyphens_and_underscores_become_spaces(self) -> None:
        assert normalize_title("naruto-shippuden_movie") == "naruto shippuden movie"

    def test_collapses_runs(self) -> None:
        assert normalize_title("  one --  piece__ ") == "one piece"

    def test_empty(self) -> None:
        assert normalize_title("") == ""


class TestProviderKind:
    @pytest.mark.parametrize(
        "kind",
        [ProviderKind.EPISODE_PAGE, ProviderKind.VIDEO_PAGE, ProviderKind.SERIES_PAGE],
    )
    def test_page_kinds(self, kind: ProviderKind) -> None:
        assert kind.is_page is True

    def test_direct_kinds_are_not_pages(self) -> None:
        assert ProviderKind.DIRECT_JSON.is_page is False
        assert ProviderKind.AGGREGATOR.is_page is False


class TestResolutionRequest:
    def test_defaults(self) -> None:
        req = ResolutionRequest(anime_slug="bleach", episode="1")
        assert req.season == 1
        assert req.start_index == 0
        assert req.title_hint is None

    def test_query_falls_back_to_slug(self) -> None:
        req = ResolutionRequest(anime_slug="naruto-shippuden", episode="1")
        assert req.query == "naruto shippuden"

    def test_query_prefers_title_hint(self) -> None:
        req = ResolutionRequest(
            anime_slug="x", episode="1", title_hint="Shingeki no Kyojin"
        )
        assert req.query == "Shingeki no Kyojin"


class TestResolutionResult:
    def test_success_has_episode(self) -> None:
        r = ResolutionResult.success(
            provider="P", searched_endpoint="e", episode="https://x/v.mp4"
        )
        assert r.error is False
        assert r.episode == "https://x/v.mp4"
        assert r.message is None

    def test_success_empty_headers_become_none(self) -> None:
        r = ResolutionResult.success(
            provider="P", searched_endpoint="e", episode="u", headers={}
        )
        assert r.headers is None

    def test_failure_has_no_episode(self) -> None:
        r = ResolutionResult.failure(provider="P", searched_endpoint="e", message="m")
        assert r.error is True
        assert r.episode is None
        assert r.message == "m"
        assert r.requires_proxy is False

    def test_error_without_episode_invariant(self) -> None:
        with pytest.raises(ValueError):
            ResolutionResult(error=False, provider="P", searched_endpoint="e")

    def test_error_with_episode_rejected(self) -> None:
        with pytest.raises(ValueError):
            ResolutionResult(
                error=True, provider="P", searched_endpoint="e", episode="u"
            )

    def test_frozen(self) -> None:
        r = ResolutionResult.failure(provider="P", searched_endpoint="e", message="m")
        with pytest.raises(AttributeError):
            r.error = False  # type: ignore[misc]


class TestResolutionOutcome:
    def _ok(self) -> ResolutionResult:
        return ResolutionResult.success(
            provider="P", searched_endpoint="e", episode="u"
        )

    def test_next_index_mid_list(self) -> None:
        assert ResolutionOutcome(self._ok(), index=1, total=5).next_index == 2

    def test_next_index_last_provider(self) -> None:
        assert ResolutionOutcome(self._ok(), index=4, total=5).next_index is None

    def test_next_index_exhausted(self) -> None:
        failed = ResolutionResult.failure(
            provider="all", searched_endpoint="", message="m"
        )
        outcome = ResolutionOutcome(failed, index=-1, total=5)
        assert outcome.next_index is None
        assert outcome.exhausted is True

    def test_not_exhausted_on_success(self) -> None:
        assert ResolutionOutcome(self._ok(), index=0, total=5).exhausted is False

    def test_payload_wire_names(self) -> None:
        result = ResolutionResult.success(
            provider="Consumet - Gogoanime",
            searched_endpoint="e",
            episode="https://cdn/a.m3u8",
            is_hls=True,
            headers={"Referer": "https://gogo"},
            requires_proxy=True,
        )
        payload = ResolutionOutcome(result, index=1, total=5).to_payload()
        assert payload == {
            "error": False,
            "provider": "Consumet - Gogoanime",
            "searched_endpoint": "e",
            "episode": "https://cdn/a.m3u8",
            "message": None,
            "isEmbed": False,
            "isHls": True,
            "headers": {"Referer": "https://gogo"},
            "requiresProxy": True,
            "index": 1,
            "total": 5,
            "nextIndex": 2,
        }


class TestSlugCacheTypes:
    def test_key_normalizes_and_lowercases(self) -> None:
        a = SlugCacheKey.build("https://x", "One-Piece")
        b = SlugCacheKey.build("https://x", "one  piece")
        assert a == b

    def test_key_depends_on_origin(self) -> None:
        assert SlugCacheKey.build("https://a", "t") != SlugCacheKey.build(
            "https://b", "t"
        )

    def test_entry_expiry_boundary(self) -> None:
        entry = SlugCacheEntry(value="s", stored_at=100.0)
        assert entry.is_expired(now=1899.9, ttl_seconds=1800) is False
        assert entry.is_expired(now=1900.0, ttl_seconds=1800) is True


class TestErrors:
    def test_lookup_error_message(self) -> None:
        exc = ProviderLookupError("HTTP 500")
        assert exc.message == "HTTP 500"
        assert str(exc) == "HTTP 500"

    def test_invalid_request_message(self) -> None:
        exc = InvalidResolutionRequest("slug and episode are required.")
        assert exc.message == "slug and episode are required."
