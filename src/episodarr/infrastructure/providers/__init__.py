"""Episode provider implementations."""

from __future__ import annotations

from .animefire_api import AnimeFireApiProvider
from .consumet import ConsumetGogoProvider
from .pages import AnimeFirePageProvider, AnimesOnlineCCPageProvider, SuperflixPageProvider
from .registry import build_default_providers

__all__ = [
    "AnimeFireApiProvider",
    "AnimeFirePageProvider",
    "AnimesOnlineCCPageProvider",
    "ConsumetGogoProvider",
    "SuperflixPageProvider",
    "build_default_providers",
]
