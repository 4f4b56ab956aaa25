"""Cobalt media-extraction service adapter."""

from __future__ import annotations

import httpx

from yt_audio_resolver.config.settings import MirrorProviderSettings
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.constants import Fallbacks, ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages
from yt_audio_resolver.infrastructure.providers.base import HttpProviderAdapter, mirror_label
from yt_audio_resolver.infrastructure.providers.models import CobaltResponse

# Cobalt only returns a stream URL; it never reports metadata.
_COBALT_AUDIO_FORMAT = "best"


class CobaltAdapter(HttpProviderAdapter):
    """Asks a Cobalt instance for an audio-only stream of the watch page."""

    def __init__(self, client: httpx.AsyncClient, settings: MirrorProviderSettings) -> None:
        super().__init__(
            client,
            name=ProviderNames.COBALT,
            mirrors=settings.instances,
            timeout=settings.timeout,
        )

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        data = await self._request_json(
            "POST",
            f"{mirror}/api/json",
            CobaltResponse,
            headers=self._headers({"Content-Type": "application/json"}),
            json={
                "url": video_id.watch_url,
                "isAudioOnly": True,
                "aFormat": _COBALT_AUDIO_FORMAT,
            },
        )

        if data.status == "error":
            raise ProviderError.no_audio(
                ErrorMessages.PROVIDER_REPORTED_ERROR.format(
                    detail=data.text or Fallbacks.UNKNOWN_LOWER
                ),
                provider=self.name,
            )
        if not data.has_stream or data.url is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_URL_IN_RESPONSE, provider=self.name)

        return AudioDescriptor.for_video(
            video_id,
            audio_url=data.url,
            source=f"Cobalt ({mirror_label(mirror)})",
            format="opus",
            codec="opus",
            quality=_COBALT_AUDIO_FORMAT,
            title=f"YouTube Video {video_id}",
        )
