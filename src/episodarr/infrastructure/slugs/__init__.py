"""Provider slug resolution (scrape, score, cache)."""

from __future__ import annotations

from .cache import SlugCache
from .extraction import extract_candidate_slugs
from .resolver import SlugResolver
from .scoring import pick_best, score_candidate

__all__ = [
    "SlugCache",
    "SlugResolver",
    "extract_candidate_slugs",
    "pick_best",
    "score_candidate",
]
