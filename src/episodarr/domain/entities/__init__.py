from .errors import EpisodarrError, InvalidResolutionRequest, ProviderLookupError
from .resolution import (
    CandidateSlug,
    ProviderDescriptor,
    ProviderKind,
    ResolutionOutcome,
    ResolutionRequest,
    ResolutionResult,
    SlugCacheEntry,
    SlugCacheKey,
    normalize_title,
)

__all__ = [
    "CandidateSlug",
    "EpisodarrError",
    "InvalidResolutionRequest",
    "ProviderDescriptor",
    "ProviderKind",
    "ProviderLookupError",
    "ResolutionOutcome",
    "ResolutionRequest",
    "ResolutionResult",
    "SlugCacheEntry",
    "SlugCacheKey",
    "normalize_title",
]
