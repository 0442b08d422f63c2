"""Token-overlap scoring of candidate slugs against a title query.

Pure transformation logic, no I/O.
"""

from __future__ import annotations

from episodarr.domain.entities.resolution import CandidateSlug, normalize_title

DEFAULT_SHORT_PENALTY = 0.15
DEFAULT_THRESHOLD = 0.35


def score_candidate(
    candidate_slug: str,
    query: str,
    *,
    short_penalty: float = DEFAULT_SHORT_PENALTY,
) -> float:
    """Fraction of query tokens present in the slug, minus a short-slug penalty.

    Query tokens split on whitespace, slug tokens on hyphens.  Slugs with
    fewer than ``max(2, len(query_tokens) // 2)`` tokens lose *short_penalty*
    so generic one-word slugs cannot win on a coincidental hit.
    """
    query_tokens = normalize_title(query).lower().split()
    slug_tokens = [t for t in candidate_slug.lower().split("-") if t]
    if not query_tokens or not slug_tokens:
        return 0.0

    slug_set = set(slug_tokens)
    hits = sum(1 for token in query_tokens if token in slug_set)
    base = hits / len(query_tokens)

    penalty = short_penalty if len(slug_tokens) < max(2, len(query_tokens) // 2) else 0.0
    return max(0.0, base - penalty)


def pick_best(
    slugs: list[str],
    query: str,
    *,
    short_penalty: float = DEFAULT_SHORT_PENALTY,
) -> CandidateSlug | None:
    """Highest-scoring candidate; the first seen wins ties."""
    best: CandidateSlug | None = None
    for slug in slugs:
        score = score_candidate(slug, query, short_penalty=short_penalty)
        if best is None or score > best.score:
            best = CandidateSlug(slug=slug, score=score)
    return best
