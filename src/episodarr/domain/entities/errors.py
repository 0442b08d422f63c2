"""Domain exceptions for episode resolution."""

from __future__ import annotations


class EpisodarrError(Exception):
    """Base class for all Episodarr errors."""


class ProviderLookupError(EpisodarrError):
    """A provider could not produce an episode URL.

    Raised inside provider implementations only; the provider boundary
    converts it into a failed ``ResolutionResult``.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidResolutionRequest(EpisodarrError):
    """Inbound request is missing required fields (mapped to HTTP 400)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
