"""Pydantic models for provider response payloads.

These are infrastructure-specific models for parsing external provider
data. Extra fields are silently ignored and before-validators coerce
garbage from unreliable mirrors gracefully, so only a structurally wrong
payload (e.g. a list where an object is expected) fails validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from yt_audio_resolver.domain.audio.services import mentions_opus


def _str_or_none(v: Any) -> str | None:
    """Convert empty / whitespace-only / non-string values to None."""
    if isinstance(v, bool):
        return None
    if isinstance(v, int | float):
        return str(v)
    if not isinstance(v, str) or not v.strip():
        return None
    return v.strip()


def _int_or_none(v: Any) -> int | None:
    """Coerce to non-negative int; return None for garbage values."""
    if v is None or isinstance(v, bool):
        return None
    try:
        val = int(float(v))
    except (TypeError, ValueError):
        return None
    return val if val >= 0 else None


def _float_or_none(v: Any) -> float | None:
    if v is None or isinstance(v, bool):
        return None
    try:
        return float(v)
    except (TypeError, ValueError):
        return None


def _list_or_empty(v: Any) -> list[Any]:
    """Providers send null or omit lists entirely; keep only dict entries."""
    if not isinstance(v, list):
        return []
    return [item for item in v if isinstance(item, dict)]


class _ProviderModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


# ── Invidious ───────────────────────────────────────────────────────────


class InvidiousFormat(_ProviderModel):
    """One entry of ``adaptiveFormats`` from ``/api/v1/videos/{id}``."""

    type: str | None = None
    url: str | None = None
    container: str | None = None
    encoding: str | None = None
    bitrate: str | None = None

    @field_validator("type", "url", "container", "encoding", "bitrate", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @property
    def is_audio(self) -> bool:
        return bool(self.url) and self.type is not None and "audio" in self.type

    @property
    def is_opus(self) -> bool:
        return mentions_opus(self.type)


class InvidiousThumbnail(_ProviderModel):
    url: str | None = None


class InvidiousVideo(_ProviderModel):
    """Subset of the Invidious video endpoint response."""

    title: str | None = None
    author: str | None = None
    length_seconds: int | None = Field(default=None, alias="lengthSeconds")
    adaptive_formats: list[InvidiousFormat] = Field(default_factory=list, alias="adaptiveFormats")
    video_thumbnails: list[InvidiousThumbnail] = Field(
        default_factory=list, alias="videoThumbnails"
    )
    error: str | None = None

    @field_validator("title", "author", "error", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("length_seconds", mode="before")
    @classmethod
    def _coerce_length(cls, v: Any) -> int | None:
        return _int_or_none(v)

    @field_validator("adaptive_formats", "video_thumbnails", mode="before")
    @classmethod
    def _coerce_lists(cls, v: Any) -> list[Any]:
        return _list_or_empty(v)

    @property
    def thumbnail_url(self) -> str | None:
        return self.video_thumbnails[0].url if self.video_thumbnails else None


# ── Piped ───────────────────────────────────────────────────────────────


class PipedAudioStream(_ProviderModel):
    """One entry of ``audioStreams`` from ``/streams/{id}``."""

    url: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")
    format: str | None = None
    codec: str | None = None
    bitrate: str | None = None
    quality: str | None = None
    video_only: bool = Field(default=False, alias="videoOnly")

    @field_validator("url", "mime_type", "format", "codec", "bitrate", "quality", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("video_only", mode="before")
    @classmethod
    def _coerce_flag(cls, v: Any) -> bool:
        return v is True

    @property
    def is_audio(self) -> bool:
        return bool(self.url) and not self.video_only

    @property
    def is_opus(self) -> bool:
        return mentions_opus(self.codec, self.mime_type)


class PipedStreams(_ProviderModel):
    """Subset of the Piped streams endpoint response."""

    title: str | None = None
    uploader: str | None = None
    duration: int | None = None
    thumbnail_url: str | None = Field(default=None, alias="thumbnailUrl")
    audio_streams: list[PipedAudioStream] = Field(default_factory=list, alias="audioStreams")
    error: str | None = None
    message: str | None = None

    @field_validator("title", "uploader", "thumbnail_url", "error", "message", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        return _int_or_none(v)

    @field_validator("audio_streams", mode="before")
    @classmethod
    def _coerce_streams(cls, v: Any) -> list[Any]:
        return _list_or_empty(v)


# ── YouTube internal player API ─────────────────────────────────────────


class PlayerFormat(_ProviderModel):
    """One entry of ``streamingData.adaptiveFormats``."""

    mime_type: str | None = Field(default=None, alias="mimeType")
    url: str | None = None
    bitrate: str | None = None
    audio_quality: str | None = Field(default=None, alias="audioQuality")

    @field_validator("mime_type", "url", "bitrate", "audio_quality", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @property
    def is_audio(self) -> bool:
        return bool(self.url) and self.mime_type is not None and "audio" in self.mime_type

    @property
    def is_opus(self) -> bool:
        return mentions_opus(self.mime_type)

    @property
    def container(self) -> str | None:
        """``audio/webm; codecs="opus"`` → ``webm``."""
        if not self.mime_type or "/" not in self.mime_type:
            return None
        return self.mime_type.split("/", 1)[1].split(";", 1)[0].strip() or None


class PlayabilityStatus(_ProviderModel):
    status: str | None = None
    reason: str | None = None

    @field_validator("status", "reason", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)


class StreamingData(_ProviderModel):
    adaptive_formats: list[PlayerFormat] = Field(default_factory=list, alias="adaptiveFormats")

    @field_validator("adaptive_formats", mode="before")
    @classmethod
    def _coerce_formats(cls, v: Any) -> list[Any]:
        return _list_or_empty(v)


class VideoDetails(_ProviderModel):
    title: str | None = None
    author: str | None = None
    length_seconds: int | None = Field(default=None, alias="lengthSeconds")

    @field_validator("title", "author", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("length_seconds", mode="before")
    @classmethod
    def _coerce_length(cls, v: Any) -> int | None:
        return _int_or_none(v)


class PlayerResponse(_ProviderModel):
    """Subset of the ``youtubei/v1/player`` response."""

    playability_status: PlayabilityStatus = Field(
        default_factory=PlayabilityStatus, alias="playabilityStatus"
    )
    streaming_data: StreamingData = Field(default_factory=StreamingData, alias="streamingData")
    video_details: VideoDetails = Field(default_factory=VideoDetails, alias="videoDetails")

    @field_validator("playability_status", "streaming_data", "video_details", mode="before")
    @classmethod
    def _coerce_missing(cls, v: Any) -> Any:
        return {} if v is None else v


# ── Cobalt ──────────────────────────────────────────────────────────────


class CobaltResponse(_ProviderModel):
    """Response of Cobalt's ``/api/json`` endpoint."""

    status: str | None = None
    url: str | None = None
    text: str | None = None

    @field_validator("status", "url", "text", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @property
    def has_stream(self) -> bool:
        return self.status in ("redirect", "stream", "tunnel") and bool(self.url)


# ── yt-dlp style info dicts (remote downloader API and local yt-dlp) ────


class DownloaderFormat(_ProviderModel):
    """A single format entry of a yt-dlp info dict."""

    url: str | None = None
    acodec: str | None = None
    vcodec: str | None = None
    ext: str | None = None
    abr: float | None = None
    format_note: str | None = None

    @field_validator("url", "acodec", "vcodec", "ext", "format_note", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("abr", mode="before")
    @classmethod
    def _coerce_abr(cls, v: Any) -> float | None:
        return _float_or_none(v)

    @property
    def is_audio(self) -> bool:
        """Audio-only: carries an audio codec and no video codec."""
        has_audio = self.acodec is not None and self.acodec != "none"
        no_video = self.vcodec is None or self.vcodec == "none"
        return bool(self.url) and has_audio and no_video

    @property
    def is_opus(self) -> bool:
        return mentions_opus(self.acodec)

    @property
    def quality(self) -> str | None:
        if self.abr:
            return f"{self.abr:g}k"
        return self.format_note


class DownloaderInfo(_ProviderModel):
    """Trimmed yt-dlp info dict.

    Shared by the remote downloader API, which returns this schema verbatim,
    and the local yt-dlp adapter.
    """

    title: str | None = None
    uploader: str | None = Field(
        default=None, validation_alias=AliasChoices("uploader", "channel", "author")
    )
    duration: int | None = None
    thumbnail: str | None = None
    url: str | None = None
    acodec: str | None = None
    vcodec: str | None = None
    ext: str | None = None
    abr: float | None = None
    format_note: str | None = None
    formats: list[DownloaderFormat] = Field(default_factory=list)

    @field_validator(
        "title", "uploader", "thumbnail", "url", "acodec", "vcodec", "ext", "format_note",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        return _str_or_none(v)

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        return _int_or_none(v)

    @field_validator("formats", mode="before")
    @classmethod
    def _coerce_formats(cls, v: Any) -> list[Any]:
        return _list_or_empty(v)

    @field_validator("abr", mode="before")
    @classmethod
    def _coerce_abr(cls, v: Any) -> float | None:
        return _float_or_none(v)

    @property
    def requested_format(self) -> DownloaderFormat | None:
        """Top-level stream picked by yt-dlp's format selector, if any."""
        if not self.url:
            return None
        return DownloaderFormat(
            url=self.url,
            acodec=self.acodec,
            vcodec=self.vcodec,
            ext=self.ext,
            abr=self.abr,
            format_note=self.format_note,
        )


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    skip_download: bool = True
    socket_timeout: int = 10
    format: str | None = None
