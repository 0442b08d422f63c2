from .episode_resolution import ProviderOrchestrator

__all__ = ["ProviderOrchestrator"]
