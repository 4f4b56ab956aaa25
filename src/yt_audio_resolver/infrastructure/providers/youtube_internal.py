"""YouTube internal player API adapter.

Calls ``youtubei/v1/player`` directly while impersonating one of YouTube's own
clients. Each client profile is a separate adapter so the resolver can rank
them independently; they differ only in request headers and body context.
"""

from __future__ import annotations

from typing import Any, Final

import httpx
from pydantic import BaseModel, ConfigDict, Field

from yt_audio_resolver.config.settings import InnertubeSettings
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.services import AudioTrackSelector
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.constants import Fallbacks, ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages
from yt_audio_resolver.infrastructure.providers.base import HttpProviderAdapter
from yt_audio_resolver.infrastructure.providers.models import PlayerResponse

PLAYABLE_STATUS: Final[str] = "OK"
MP4_AUDIO_CODEC: Final[str] = "mp4a"


class ClientProfile(BaseModel):
    """Headers and ``context`` body fields identifying an impersonated client."""

    model_config = ConfigDict(frozen=True)

    source: str
    client_name: str
    client_version: str
    user_agent: str
    headers: dict[str, str] = Field(default_factory=dict)
    client_extra: dict[str, Any] = Field(default_factory=dict)
    context_extra: dict[str, Any] = Field(default_factory=dict)
    playback_context: dict[str, Any] = Field(default_factory=dict)

    def request_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
            **self.headers,
        }

    def request_body(self, video_id: VideoId) -> dict[str, Any]:
        body: dict[str, Any] = {
            "videoId": video_id.value,
            "context": {
                "client": {
                    "clientName": self.client_name,
                    "clientVersion": self.client_version,
                    "hl": "en",
                    "gl": "US",
                    **self.client_extra,
                },
                **self.context_extra,
            },
            "contentCheckOk": True,
            "racyCheckOk": True,
        }
        if self.playback_context:
            body["playbackContext"] = {"contentPlaybackContext": self.playback_context}
        return body


CLIENT_PROFILES: Final[dict[str, ClientProfile]] = {
    ProviderNames.YOUTUBE_TV: ClientProfile(
        source="YouTube TV",
        client_name="TVHTML5_SIMPLY_EMBEDDED_PLAYER",
        client_version="2.0",
        user_agent="Mozilla/5.0 (ChromiumStylePlatform) Cobalt/Version",
        headers={"Origin": "https://www.youtube.com"},
        client_extra={"platform": "TV"},
        context_extra={"thirdParty": {"embedUrl": "https://www.youtube.com/"}},
        playback_context={"signatureTimestamp": 0},
    ),
    ProviderNames.YOUTUBE_MWEB: ClientProfile(
        source="YouTube Mobile Web",
        client_name="MWEB",
        client_version="2.20240304.08.00",
        user_agent=(
            "Mozilla/5.0 (Linux; Android 11; Pixel 5) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/98.0.4758.101 Mobile Safari/537.36"
        ),
        headers={
            "X-YouTube-Client-Name": "2",
            "X-YouTube-Client-Version": "2.20240304.08.00",
            "Origin": "https://m.youtube.com",
            "Referer": "https://m.youtube.com/",
        },
        client_extra={"utcOffsetMinutes": 0},
        playback_context={"html5Preference": "HTML5_PREF_WANTS"},
    ),
    ProviderNames.YOUTUBE_IOS: ClientProfile(
        source="YouTube iOS",
        client_name="IOS",
        client_version="19.09.3",
        user_agent="com.google.ios.youtube/19.09.3 (iPhone14,3; U; CPU iOS 15_6 like Mac OS X)",
        headers={"X-YouTube-Client-Name": "5", "X-YouTube-Client-Version": "19.09.3"},
        client_extra={"deviceModel": "iPhone14,3"},
    ),
    ProviderNames.YOUTUBE_ANDROID: ClientProfile(
        source="YouTube Android",
        client_name="ANDROID",
        client_version="19.09.37",
        user_agent="com.google.android.youtube/19.09.37 (Linux; U; Android 11) gzip",
        headers={"X-YouTube-Client-Name": "3", "X-YouTube-Client-Version": "19.09.37"},
        client_extra={"androidSdkVersion": 30},
    ),
}


class YouTubeInternalClientAdapter(HttpProviderAdapter):
    """One impersonated client profile against the internal player endpoint."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: InnertubeSettings,
        *,
        profile: str,
    ) -> None:
        super().__init__(
            client,
            name=profile,
            mirrors=(settings.player_url,),
            timeout=settings.timeout,
        )
        self._profile = CLIENT_PROFILES[profile]
        self._api_key = settings.api_key

    @property
    def profile(self) -> ClientProfile:
        return self._profile

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        data = await self._request_json(
            "POST",
            mirror,
            PlayerResponse,
            params={"key": self._api_key, "prettyPrint": "false"},
            headers=self._profile.request_headers(),
            json=self._profile.request_body(video_id),
        )

        status = data.playability_status
        if status.status != PLAYABLE_STATUS:
            raise ProviderError.not_playable(status.reason, provider=self.name)

        fmt = AudioTrackSelector.select(
            data.streaming_data.adaptive_formats,
            is_audio=lambda f: f.is_audio,
            is_opus=lambda f: f.is_opus,
        )
        if fmt is None or fmt.url is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_FORMATS, provider=self.name)

        details = data.video_details
        return AudioDescriptor.for_video(
            video_id,
            audio_url=fmt.url,
            source=self._profile.source,
            format=fmt.container or Fallbacks.CONTAINER,
            codec=Fallbacks.CODEC if fmt.is_opus else MP4_AUDIO_CODEC,
            quality=fmt.bitrate or fmt.audio_quality,
            title=details.title,
            duration_seconds=details.length_seconds,
            uploader=details.author,
        )
