"""Piped public API adapter."""

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
from yt_audio_resolver.infrastructure.providers.models import PipedStreams


class PipedAdapter(HttpProviderAdapter):
    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: MirrorProviderSettings,
        user_agent: str | None = None,
    ) -> None:
        super().__init__(
            client,
            name=ProviderNames.PIPED,
            mirrors=settings.instances,
            timeout=settings.timeout,
            user_agent=user_agent,
        )

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        data = await self._request_json(
            "GET", f"{mirror}/streams/{video_id}", PipedStreams, headers=self._headers()
        )

        if data.error:
            raise ProviderError.not_playable(data.message or data.error, provider=self.name)
        if not data.audio_streams:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_STREAMS, provider=self.name)

        stream = AudioTrackSelector.select(
            data.audio_streams,
            is_audio=lambda s: s.is_audio,
            is_opus=lambda s: s.is_opus,
        )
        if stream is None or stream.url is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_STREAMS, provider=self.name)

        return AudioDescriptor.for_video(
            video_id,
            audio_url=stream.url,
            source=f"Piped ({mirror_label(mirror)})",
            format=stream.format or Fallbacks.CONTAINER,
            codec=stream.codec or Fallbacks.CODEC,
            quality=stream.bitrate or stream.quality,
            title=data.title,
            duration_seconds=data.duration,
            uploader=data.uploader,
            thumbnail_url=data.thumbnail_url,
        )

