"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "episodarr",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": "Mozilla/5.0",
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "resolution": {
        "provider_timeout_seconds": 15.0,
        "direct_timeout_seconds": 12.0,
        "slug_search_timeout_seconds": 12.0,
        "slug_cache_ttl_seconds": 1800,
        "slug_score_threshold": 0.35,
        "slug_short_penalty": 0.15,
        "proxy_path": "/api/proxy",
        "provider_base_urls": {},
    },
}
