"""Invidious public API adapter."""

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
from yt_audio_resolver.infrastructure.providers.models import InvidiousVideo

INVIDIOUS_FIELDS = "adaptiveFormats,title,author,lengthSeconds,videoThumbnails"


class InvidiousAdapter(HttpProviderAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: MirrorProviderSettings,
        user_agent: str | None = None,
    ) -> None:
        super().__init__(
            client,
            name=ProviderNames.INVIDIOUS,
            mirrors=settings.instances,
            timeout=settings.timeout,
            user_agent=user_agent,
        )

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        data = await self._request_json(
            "GET",
            f"{mirror}/api/v1/videos/{video_id}",
            InvidiousVideo,
            params={"fields": INVIDIOUS_FIELDS},
            headers=self._headers(),
        )

        if data.error:
            raise ProviderError.not_playable(data.error, provider=self.name)

        fmt = AudioTrackSelector.select(
            data.adaptive_formats,
            is_audio=lambda f: f.is_audio,
            is_opus=lambda f: f.is_opus,
        )
        if fmt is None or fmt.url is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_FORMATS, provider=self.name)

        return AudioDescriptor.for_video(
            video_id,
            audio_url=fmt.url,
            source=f"Invidious ({mirror_label(mirror)})",
            format=fmt.container or Fallbacks.CONTAINER,
            codec=fmt.encoding or (Fallbacks.CODEC if fmt.is_opus else None),
            quality=fmt.bitrate,
            title=data.title,
            duration_seconds=data.length_seconds,
            uploader=data.author,
            thumbnail_url=data.thumbnail_url,
        )
