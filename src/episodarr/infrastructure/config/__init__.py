from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, ResolutionConfig

__all__ = ["AppConfig", "EnvOverrides", "ResolutionConfig", "load_config"]
