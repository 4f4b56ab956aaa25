"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.constants import ProviderNames, YouTubeUrls
from ..domain.shared.messages import ErrorMessages
from ..domain.shared.validators import is_absolute_http_url, validate_mirror_urls

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def _as_tuple(v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
    # Env vars arrive as a JSON array or a comma-separated string
    if isinstance(v, str):
        text = v.strip()
        if text.startswith("["):
            v = json.loads(text)
        else:
            return tuple(part.strip() for part in text.split(",") if part.strip())
    if isinstance(v, list):
        return tuple(v)
    return v


class MirrorProviderSettings(BaseModel):
    """Mirror list and per-call timeout for one provider family."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    instances: tuple[str, ...] = Field(
        default_factory=tuple, validation_alias=AliasChoices("instances", "mirrors")
    )
    timeout: float = Field(default=10.0, gt=0.0, le=120.0)

    @field_validator("instances", mode="before")
    @classmethod
    def validate_instances(cls, v: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Validate mirror base URLs and convert lists to tuples."""
        return validate_mirror_urls(_as_tuple(v))


class InnertubeSettings(BaseModel):
    """YouTube internal player API configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    player_url: str = YouTubeUrls.INNERTUBE_PLAYER
    api_key: str = Field(
        default=YouTubeUrls.INNERTUBE_API_KEY,
        validation_alias=AliasChoices("api_key", "innertube_key"),
    )
    timeout: float = Field(default=10.0, gt=0.0, le=120.0)


class YtDlpSettings(BaseModel):
    """Local yt-dlp extraction configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    format: str = Field(
        default="251/140/bestaudio[protocol^=http]/bestaudio",
        validation_alias=AliasChoices("format", "ytdlp_format"),
    )
    socket_timeout: int = Field(default=10, ge=1, le=120)
    timeout: float = Field(default=15.0, gt=0.0, le=300.0)


class ProviderSettings(BaseModel):
    """Configuration data for every provider adapter."""

    model_config = SettingsConfigDict(frozen=True)

    user_agent: str = DEFAULT_USER_AGENT

    cobalt: MirrorProviderSettings = Field(
        default_factory=lambda: MirrorProviderSettings(
            instances=("https://api.cobalt.tools", "https://co.wuk.sh"),
            timeout=10.0,
        )
    )
    piped: MirrorProviderSettings = Field(
        default_factory=lambda: MirrorProviderSettings(
            instances=(
                "https://pipedapi.kavin.rocks",
                "https://pipedapi.tokhmi.xyz",
                "https://pipedapi.moomoo.me",
                "https://api-piped.mha.fi",
                "https://pipedapi.syncpundit.io",
            ),
            timeout=8.0,
        )
    )
    invidious: MirrorProviderSettings = Field(
        default_factory=lambda: MirrorProviderSettings(
            instances=(
                "https://invidious.fdn.fr",
                "https://iv.nboeck.de",
                "https://invidious.projectsegfau.lt",
                "https://yewtu.be",
                "https://invidious.protokolla.fi",
                "https://iv.melmac.space",
                "https://inv.nadeko.net",
                "https://invidious.privacyredirect.com",
            ),
            timeout=5.0,
        )
    )
    downloader_api: MirrorProviderSettings = Field(
        default_factory=lambda: MirrorProviderSettings(
            instances=("https://youtube-dl-api-omega.vercel.app",),
            timeout=15.0,
        )
    )
    heuristic: MirrorProviderSettings = Field(
        default_factory=lambda: MirrorProviderSettings(
            instances=(
                "https://api.savefrom.net/ajax.php?url={watch_url}",
                "https://loader.to/ajax/search.php?query={watch_url}",
                "https://9convert.com/api/ajaxSearch/index",
            ),
            timeout=10.0,
        )
    )
    innertube: InnertubeSettings = Field(default_factory=InnertubeSettings)
    ytdlp: YtDlpSettings = Field(default_factory=YtDlpSettings)


class ResolverSettings(BaseModel):
    """Fan-out policy configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    provider_order: tuple[str, ...] = Field(
        default=ProviderNames.ALL,
        validation_alias=AliasChoices("provider_order", "providers"),
    )
    raced_tier_size: int = Field(
        default=3, ge=1, le=10, validation_alias=AliasChoices("raced_tier_size", "race")
    )
    overall_timeout: float | None = Field(default=45.0, gt=0.0)

    @field_validator("provider_order", mode="before")
    @classmethod
    def validate_provider_order(cls, v: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Validate provider names against the known set and reject duplicates."""
        v = _as_tuple(v)
        if not v:
            raise ValueError(ErrorMessages.EMPTY_PROVIDER_ORDER)
        seen: set[str] = set()
        for name in v:
            if name not in ProviderNames.ALL:
                raise ValueError(
                    ErrorMessages.UNKNOWN_PROVIDER.format(name=name, known=ProviderNames.ALL)
                )
            if name in seen:
                raise ValueError(ErrorMessages.DUPLICATE_PROVIDER.format(name=name))
            seen.add(name)
        return v


class ServerSettings(BaseModel):
    """HTTP boundary configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    host: str = "127.0.0.1"
    port: int = Field(default=8000, ge=1, le=65535)
    allowed_origins: tuple[str, ...] = Field(
        default=(
            "https://nexusnoscreenyoutube.netlify.app",
            "https://noscreenyt.opex.associates",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ),
        validation_alias=AliasChoices("allowed_origins", "cors_origins"),
    )
    reject_disallowed_origins: bool = True

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def validate_origins(cls, v: tuple[str, ...] | list[str]) -> tuple[str, ...]:
        """Validate origins and convert lists to tuples."""
        v = _as_tuple(v)
        for origin in v:
            if not is_absolute_http_url(origin):
                raise ValueError(ErrorMessages.INVALID_ORIGIN.format(origin=origin))
        return tuple(origin.rstrip("/") for origin in v)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - SERVER__HOST, SERVER__PORT, SERVER__ALLOWED_ORIGINS (JSON array)
    - RESOLVER__PROVIDER_ORDER (JSON array), RESOLVER__RACED_TIER_SIZE
    - PROVIDERS__PIPED__INSTANCES (JSON array), PROVIDERS__PIPED__TIMEOUT, etc.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    server: ServerSettings = Field(default_factory=ServerSettings)
    resolver: ResolverSettings = Field(default_factory=ResolverSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)

    @property
    def effective_log_level(self) -> str:
        """``debug`` forces DEBUG regardless of ``log_level``."""
        return "DEBUG" if self.debug else self.log_level

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
