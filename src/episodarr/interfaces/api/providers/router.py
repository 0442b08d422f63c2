"""Provider catalogue endpoint."""

from __future__ import annotations

from typing import Any, cast

from fastapi import APIRouter, Request

from episodarr.interfaces.app_state import AppState

router = APIRouter(tags=["providers"])


@router.get("/providers")
async def list_providers(request: Request) -> dict[str, Any]:
    """Ordered provider list; ``index`` is the value to pass as ``start``.

    ``proxy_path`` is where clients relay ``requiresProxy`` sources.
    """
    state = cast(AppState, request.app.state)
    descriptors = state.orchestrator.descriptors
    return {
        "total": len(descriptors),
        "proxy_path": state.config.resolution.proxy_path,
        "providers": [
            {
                "index": i,
                "name": d.name,
                "slug": d.slug,
                "base_url": d.base_url,
                "kind": d.kind.value,
                "is_page": d.kind.is_page,
                "has_ads": d.has_ads,
                "is_embed": d.is_embed,
                "docs": d.docs,
            }
            for i, d in enumerate(descriptors)
        ],
    }
