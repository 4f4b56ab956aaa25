"""Adapter for hosted youtube-dl style APIs that return a yt-dlp info dict."""

from __future__ import annotations

import httpx

from yt_audio_resolver.config.settings import MirrorProviderSettings
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.services import AudioTrackSelector
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.constants import Fallbacks, ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages
from yt_audio_resolver.infrastructure.providers.base import HttpProviderAdapter, mirror_label
from yt_audio_resolver.infrastructure.providers.models import DownloaderFormat, DownloaderInfo


def select_audio_format(formats: list[DownloaderFormat]) -> DownloaderFormat | None:
    return AudioTrackSelector.select(
        formats,
        is_audio=lambda f: f.is_audio,
        is_opus=lambda f: f.is_opus,
    )


def descriptor_from_info(
    video_id: VideoId,
    info: DownloaderInfo,
    fmt: DownloaderFormat,
    *,
    source: str,
) -> AudioDescriptor:
    """Build a descriptor from a yt-dlp info dict and the chosen format."""
    if fmt.url is None:
        raise ProviderError.malformed(ErrorMessages.EMPTY_AUDIO_URL)
    return AudioDescriptor.for_video(
        video_id,
        audio_url=fmt.url,
        source=source,
        format=fmt.ext or Fallbacks.CONTAINER,
        codec=fmt.acodec,
        quality=fmt.quality,
        title=info.title,
        duration_seconds=info.duration,
        uploader=info.uploader,
        thumbnail_url=info.thumbnail,
    )


class DownloaderApiAdapter(HttpProviderAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: MirrorProviderSettings,
        user_agent: str | None = None,
    ) -> None:
        super().__init__(
            client,
            name=ProviderNames.DOWNLOADER_API,
            mirrors=settings.instances,
            timeout=settings.timeout,
            user_agent=user_agent,
        )

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        info = await self._request_json(
            "GET", f"{mirror}/api/video/{video_id}", DownloaderInfo, headers=self._headers()
        )

        fmt = select_audio_format(info.formats)
        if fmt is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_FORMATS, provider=self.name)

        return descriptor_from_info(
            video_id, info, fmt, source=f"Downloader API ({mirror_label(mirror)})"
        )
