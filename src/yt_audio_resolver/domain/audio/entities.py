"""Core domain entities for the audio resolution bounded context."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from yt_audio_resolver.domain.audio.value_objects import VideoId, VideoIdField
from yt_audio_resolver.domain.shared.constants import Fallbacks
from yt_audio_resolver.domain.shared.enums import AttemptOutcome
from yt_audio_resolver.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
)
from yt_audio_resolver.domain.shared.validators import is_absolute_http_url, validate_audio_url

_MAX_DURATION = 864_000


def _text_or(value: Any, fallback: str) -> str:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int | float):
        return str(value)
    if not isinstance(value, str) or not value.strip():
        return fallback
    return value.strip()


class AudioDescriptor(BaseModel):
    """Normalized result of a successful resolution.

    Only ``audio_url`` is guaranteed; everything else is best-effort and
    falls back to deterministic placeholders. Serialised with the camelCase
    field names the playback layer expects (``model_dump(by_alias=True)``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    audio_url: NonEmptyStr = Field(alias="audioUrl")
    format: NonEmptyStr = Fallbacks.UNKNOWN_LOWER
    codec: NonEmptyStr = Fallbacks.UNKNOWN_LOWER
    quality: NonEmptyStr = Fallbacks.UNKNOWN_LOWER
    title: NonEmptyStr = Fallbacks.UNKNOWN
    duration_seconds: DurationSeconds = Field(default=Fallbacks.DURATION, alias="duration")
    uploader: NonEmptyStr = Fallbacks.UNKNOWN
    thumbnail_url: HttpUrlStr = Field(alias="thumbnail")
    source: NonEmptyStr

    @field_validator("audio_url", mode="before")
    @classmethod
    def _validate_audio_url(cls, v: Any) -> str:
        if not isinstance(v, str):
            raise ValueError("audioUrl must be a string")
        return validate_audio_url(v)

    @field_validator("format", "codec", "quality", mode="before")
    @classmethod
    def _coerce_hint(cls, v: Any) -> str:
        """Providers report these as strings, numbers, or not at all."""
        return _text_or(v, Fallbacks.UNKNOWN_LOWER)

    @field_validator("title", "uploader", mode="before")
    @classmethod
    def _coerce_display_text(cls, v: Any) -> str:
        return _text_or(v, Fallbacks.UNKNOWN)

    @field_validator("duration_seconds", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int:
        """Coerce to a sane non-negative int; fall back to 0 for garbage values."""
        if v is None or isinstance(v, bool):
            return Fallbacks.DURATION
        try:
            val = int(float(v))
        except (TypeError, ValueError):
            return Fallbacks.DURATION
        return val if 0 <= val <= _MAX_DURATION else Fallbacks.DURATION

    @classmethod
    def for_video(
        cls,
        video_id: VideoId,
        *,
        audio_url: str,
        source: str,
        thumbnail_url: str | None = None,
        **fields: Any,
    ) -> AudioDescriptor:
        """Build a descriptor, deriving the thumbnail from the id when the provider gave none."""
        if not isinstance(thumbnail_url, str) or not is_absolute_http_url(thumbnail_url):
            thumbnail_url = video_id.thumbnail_url
        return cls(
            audio_url=audio_url,
            source=source,
            thumbnail_url=thumbnail_url,
            **fields,
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ProviderAttempt(BaseModel):
    """Record of one adapter invocation, kept only for diagnostics."""

    model_config = ConfigDict(frozen=True)

    provider: NonEmptyStr
    outcome: AttemptOutcome
    detail: str = ""
    elapsed_seconds: NonNegativeFloat = 0.0

    @property
    def succeeded(self) -> bool:
        return self.outcome is AttemptOutcome.SUCCESS

    @property
    def message(self) -> str:
        """Human-readable failure detail, never empty."""
        return self.detail.strip() or self.outcome.value


class ResolutionFailure(BaseModel):
    """Every attempted provider failed.

    Returned to the caller as a value, never raised.
    """

    model_config = ConfigDict(frozen=True)

    video_id: VideoIdField
    attempts: tuple[ProviderAttempt, ...] = ()

    @property
    def errors(self) -> dict[str, str]:
        """Map of provider name to failure message, in attempt order."""
        return {
            attempt.provider: attempt.message
            for attempt in self.attempts
            if not attempt.succeeded
        }
