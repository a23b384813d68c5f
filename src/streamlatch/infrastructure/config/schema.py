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


class PlaybackConfig(BaseModel):
    """Where the player lives in the page and how HLS gets attached.

    All values configurable via YAML (playback section).
    """

    settle_delay_seconds: float = Field(
        default=0.15,
        description="Delay after play() before inspecting the media element.",
    )
    container_selector: str = Field(
        default="#modalBody",
        description="CSS selector of the player container.",
    )
    media_selector: str = Field(
        default="audio.preview-audio",
        description="CSS selector of the media element inside the container.",
    )
    hls_mime_type: str = Field(
        default="application/vnd.apple.mpegurl",
        description="MIME type used for the native HLS capability check.",
    )
    client_script_url: str = Field(
        default="https://cdn.jsdelivr.net/npm/hls.js@1.4.0/dist/hls.min.js",
        description="Adaptive-streaming client library loaded on demand.",
    )
    attach_timeout_seconds: float = Field(
        default=10.0,
        description="Max wait for the client's media-attached event.",
    )
    playlist_global: str = Field(
        default="currentPlaylist",
        description="Page global holding the playlist array.",
    )
    play_function: str = Field(
        default="playPlaylistTrack",
        description="Page global play(index) function to wrap.",
    )

    @field_validator("settle_delay_seconds")
    @classmethod
    def _validate_settle_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError("settle_delay_seconds must be >= 0")
        return v

    @field_validator("attach_timeout_seconds")
    @classmethod
    def _validate_attach_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("attach_timeout_seconds must be > 0")
        return v


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    Note:
    - YAML is expected to be sectioned (http/resolver/playback/playwright/logging).
    - Environment variables are handled by EnvOverrides(BaseSettings) to allow strict
      precedence control (defaults < YAML < ENV < CLI) in load.py.
    """

    # General
    app_name: str = Field(default="streamlatch", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="HTTP timeout in seconds per resolution step.",
    )
    http_user_agent: str = Field(
        default="streamlatch/0.1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for outgoing HTTP requests.",
    )
    http_max_manifest_bytes: int = Field(
        default=1024 * 1024,
        validation_alias=AliasChoices(
            "http_max_manifest_bytes",
            AliasPath("http", "max_manifest_bytes"),
        ),
        description="Upper bound on bytes read from a single manifest.",
    )

    # Resolver (YAML section: resolver.*)
    resolver_max_depth: int = Field(
        default=4,
        validation_alias=AliasChoices(
            "resolver_max_depth",
            AliasPath("resolver", "max_depth"),
        ),
        description="Max nested-manifest steps before resolution stops.",
    )

    # Playback attachment (YAML section: playback.*)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)

    # Playwright (YAML section: playwright.*)
    playwright_headless: bool = Field(
        default=True,
        validation_alias=AliasChoices(
            "playwright_headless",
            AliasPath("playwright", "headless"),
        ),
        description="Run Playwright headless.",
    )
    playwright_timeout_ms: int = Field(
        default=30_000,
        validation_alias=AliasChoices(
            "playwright_timeout_ms",
            AliasPath("playwright", "timeout_ms"),
        ),
        description="Playwright timeout in milliseconds.",
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

    @field_validator("http_timeout_seconds")
    @classmethod
    def _validate_http_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_seconds must be > 0")
        return v

    @field_validator("http_max_manifest_bytes")
    @classmethod
    def _validate_manifest_bytes(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("http_max_manifest_bytes must be > 0")
        return v

    @field_validator("resolver_max_depth")
    @classmethod
    def _validate_max_depth(cls, v: int) -> int:
        if v < 0:
            raise ValueError("resolver_max_depth must be >= 0")
        return v

    @field_validator("playwright_timeout_ms")
    @classmethod
    def _validate_playwright_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("playwright_timeout_ms must be > 0")
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
                "user_agent": self.http_user_agent,
                "max_manifest_bytes": self.http_max_manifest_bytes,
            },
            "resolver": {"max_depth": self.resolver_max_depth},
            "playback": self.playback.model_dump(),
            "playwright": {
                "headless": self.playwright_headless,
                "timeout_ms": self.playwright_timeout_ms,
            },
            "logging": {"level": self.log_level, "format": self.log_format},
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    Intended usage:
    - load.py creates EnvOverrides() to read STREAMLATCH_* variables,
      converts to dict of set values, merges into YAML/defaults,
      then validates AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMLATCH_HTTP_TIMEOUT_SECONDS
    - STREAMLATCH_RESOLVER_MAX_DEPTH
    - STREAMLATCH_PLAYBACK_CLIENT_SCRIPT_URL
    - STREAMLATCH_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMLATCH_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    http_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None
    http_max_manifest_bytes: Optional[int] = None

    resolver_max_depth: Optional[int] = None

    playback_settle_delay_seconds: Optional[float] = None
    playback_client_script_url: Optional[str] = None

    playwright_headless: Optional[bool] = None
    playwright_timeout_ms: Optional[int] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    def to_update_dict(self) -> dict[str, Any]:
        """
        Return only values that were actually provided (non-None), for merging.
        """
        return self.model_dump(exclude_none=True)
