"""Pydantic configuration models with validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


class ResolutionConfig(BaseModel):
    """Configuration for provider fallback and slug resolution.

    All values configurable via YAML (resolution section) or ENV vars.
    """

    provider_timeout_seconds: float = Field(
        default=15.0,
        description="Per-request timeout for aggregator API calls.",
    )
    direct_timeout_seconds: float = Field(
        default=12.0,
        description="Per-request timeout for the direct JSON/token provider.",
    )
    slug_search_timeout_seconds: float = Field(
        default=12.0,
        description="Per-path timeout for slug search page fetches.",
    )
    slug_cache_ttl_seconds: int = Field(
        default=1800,
        description="TTL for resolved provider slugs (seconds). Default 30min.",
    )
    slug_score_threshold: float = Field(
        default=0.35,
        description="Minimum candidate score to accept a scraped slug.",
    )
    slug_short_penalty: float = Field(
        default=0.15,
        description="Penalty for candidate slugs with too few tokens.",
    )
    proxy_path: str = Field(
        default="/api/proxy",
        description="Path of the media relay used for requiresProxy results.",
    )
    provider_base_urls: dict[str, str] = Field(
        default_factory=dict,
        description="Per-provider base URL overrides keyed by provider slug.",
    )

    @field_validator(
        "provider_timeout_seconds",
        "direct_timeout_seconds",
        "slug_search_timeout_seconds",
    )
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("slug_cache_ttl_seconds")
    @classmethod
    def _validate_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("slug_cache_ttl_seconds must be >= 0")
        return v

    @field_validator("slug_score_threshold", "slug_short_penalty")
    @classmethod
    def _validate_unit_interval(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("score values must be within [0, 1]")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/logging/resolution).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="episodarr", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=15.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Default HTTP timeout in seconds for upstream requests.",
    )
    http_follow_redirects: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "http_follow_redirects",
            AliasPath("http", "follow_redirects"),
        ),
        description="Whether HTTP client follows redirects.",
    )
    http_user_agent: str = Field(
        default="Mozilla/5.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Provider resolution (YAML section: resolution.*)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """
        Dump configuration in the sectioned shape used by config.yaml/docs.
        """
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "follow_redirects": self.http_follow_redirects,
                "user_agent": self.http_user_agent,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
            "resolution": self.resolution.model_dump(),
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Supported env var examples (flat, explicit):
    - EPISODARR_ENVIRONMENT
    - EPISODARR_HTTP_TIMEOUT_SECONDS
    - EPISODARR_LOG_LEVEL
    - EPISODARR_SLUG_CACHE_TTL_SECONDS
    """

    model_config = SettingsConfigDict(
        env_prefix="EPISODARR_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_follow_redirects: Optional[bool] = None
    http_user_agent: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    provider_timeout_seconds: Optional[float] = None
    slug_search_timeout_seconds: Optional[float] = None
    slug_cache_ttl_seconds: Optional[int] = None
    proxy_path: Optional[str] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
