from .provider import EpisodeProviderPort
from .slug_resolver import SlugResolverPort

__all__ = [
    "EpisodeProviderPort",
    "SlugResolverPort",
]
