"""Episode resolution endpoints (query-string and path-style)."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from contextlib import suppress
from typing import Any, TypeVar, cast

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from episodarr.domain.entities.errors import InvalidResolutionRequest
from episodarr.domain.entities.resolution import ResolutionOutcome, ResolutionRequest
from episodarr.interfaces.app_state import AppState

log = structlog.get_logger(__name__)

router = APIRouter(tags=["episodes"])

_T = TypeVar("_T")

# How often an in-flight resolution checks whether the caller went away.
_DISCONNECT_POLL_SECONDS = 0.25

# nginx-style "client closed request"; the caller never sees it.
_CLIENT_CLOSED_STATUS = 499


class _ClientDisconnected(Exception):
    pass


def _parse_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def parse_resolution_request(
    slug: str | None,
    episode: str | None,
    season: str | None = None,
    title: str | None = None,
    start: str | None = None,
) -> ResolutionRequest:
    """Build a ResolutionRequest from raw query values.

    ``slug`` and ``episode`` are required.  Season falls back to 1 and start
    to 0 when missing or unparsable; a negative start is clamped to 0.
    """
    slug = (slug or "").strip()
    episode = (episode or "").strip()
    if not slug or not episode:
        raise InvalidResolutionRequest("slug and episode are required.")

    season_num = _parse_int(season, 1)
    if season_num < 1:
        season_num = 1

    title_hint = title.strip() if title and title.strip() else None

    return ResolutionRequest(
        anime_slug=slug,
        episode=episode,
        season=season_num,
        title_hint=title_hint,
        start_index=max(0, _parse_int(start, 0)),
    )


def outcome_response(outcome: ResolutionOutcome) -> JSONResponse:
    """404 when nothing was resolved, 200 otherwise; body always structured."""
    status = 404 if outcome.exhausted else 200
    return JSONResponse(content=outcome.to_payload(), status_code=status)


async def _run_until_disconnect(
    request: Request, coro: Coroutine[Any, Any, _T]
) -> _T:
    """Await *coro*, cancelling it as soon as the HTTP client disconnects."""
    task = asyncio.ensure_future(coro)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
            if done:
                return task.result()
            if await request.is_disconnected():
                raise _ClientDisconnected
    finally:
        if not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task


async def _resolve(request: Request, resolution: ResolutionRequest) -> JSONResponse:
    state = cast(AppState, request.app.state)
    log.debug(
        "episode_resolution_requested",
        anime=resolution.anime_slug,
        episode=resolution.episode,
        season=resolution.season,
        start=resolution.start_index,
    )
    try:
        outcome = await _run_until_disconnect(
            request, state.orchestrator.resolve(resolution)
        )
    except _ClientDisconnected:
        log.info(
            "episode_resolution_cancelled",
            anime=resolution.anime_slug,
            episode=resolution.episode,
        )
        return JSONResponse(
            content={"error": True, "message": "Client closed request."},
            status_code=_CLIENT_CLOSED_STATUS,
        )
    return outcome_response(outcome)


def _bad_request(exc: InvalidResolutionRequest) -> JSONResponse:
    return JSONResponse(content={"error": True, "message": exc.message}, status_code=400)


@router.get("/episode-resolution")
async def resolve_episode(
    request: Request,
    slug: str | None = None,
    episode: str | None = None,
    season: str | None = None,
    title: str | None = None,
    start: str | None = None,
) -> JSONResponse:
    """Resolve an episode starting at provider index ``start``."""
    try:
        resolution = parse_resolution_request(slug, episode, season, title, start)
    except InvalidResolutionRequest as exc:
        return _bad_request(exc)
    return await _resolve(request, resolution)


@router.get("/animes/{slug}/episodes/{episode}")
async def resolve_episode_by_path(
    request: Request,
    slug: str,
    episode: str,
    season: str | None = None,
    title: str | None = None,
    start: str | None = None,
) -> JSONResponse:
    """Path-style alias of ``/episode-resolution``."""
    try:
        resolution = parse_resolution_request(slug, episode, season, title, start)
    except InvalidResolutionRequest as exc:
        return _bad_request(exc)
    return await _resolve(request, resolution)
