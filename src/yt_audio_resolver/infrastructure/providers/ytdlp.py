"""Local yt-dlp extraction adapter."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final, cast

from pydantic import ValidationError as PydanticValidationError
from yt_dlp import YoutubeDL
from yt_dlp.utils import YoutubeDLError

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter
from yt_audio_resolver.config.settings import YtDlpSettings
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.constants import ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages
from yt_audio_resolver.infrastructure.providers.downloader_api import (
    descriptor_from_info,
    select_audio_format,
)
from yt_audio_resolver.infrastructure.providers.base import schema_error
from yt_audio_resolver.infrastructure.providers.models import DownloaderInfo, YtDlpOpts

logger = logging.getLogger(__name__)

YTDLP_SOURCE: Final[str] = "yt-dlp"

# Substrings of yt-dlp error messages that describe the video, not the network.
UNPLAYABLE_MARKERS: Final[tuple[str, ...]] = (
    "Video unavailable",
    "Private video",
    "Sign in to confirm",
    "members-only",
    "This live event will begin",
    "removed by the uploader",
)


class YtDlpAdapter(ProviderAdapter):
    """Runs ``YoutubeDL.extract_info`` in a worker thread.

    A cancelled resolve abandons the thread; its result is discarded.
    """

    def __init__(self, settings: YtDlpSettings | None = None) -> None:
        self._settings = settings or YtDlpSettings()
        self._opts = YtDlpOpts(
            format=self._settings.format,
            socket_timeout=self._settings.socket_timeout,
        )

    @property
    def name(self) -> str:
        return ProviderNames.YTDLP

    @property
    def timeout(self) -> float:
        return self._settings.timeout

    @property
    def opts(self) -> YtDlpOpts:
        return self._opts

    def _extract_info_sync(self, url: str) -> dict[str, Any]:
        try:
            with YoutubeDL(params=cast(Any, self._opts.model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except YoutubeDLError as e:
            raise _classify(str(e)) from e

        if not isinstance(data, dict):
            raise ProviderError.malformed(
                ErrorMessages.UNEXPECTED_SCHEMA.format(error=type(data).__name__),
                provider=ProviderNames.YTDLP,
            )
        return dict(data)

    async def resolve(self, video_id: VideoId) -> AudioDescriptor:
        data = await asyncio.to_thread(self._extract_info_sync, video_id.watch_url)

        try:
            info = DownloaderInfo.model_validate(data)
        except PydanticValidationError as e:
            raise schema_error(e, self.name) from e

        fmt = info.requested_format
        if fmt is None or not fmt.is_audio:
            fmt = select_audio_format(info.formats)
        if fmt is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_FORMATS, provider=self.name)

        try:
            return descriptor_from_info(video_id, info, fmt, source=YTDLP_SOURCE)
        except PydanticValidationError as e:
            raise schema_error(e, self.name) from e


def _classify(message: str) -> ProviderError:
    detail = ErrorMessages.YTDLP_EXTRACTION_FAILED.format(error=message)
    if any(marker in message for marker in UNPLAYABLE_MARKERS):
        return ProviderError.not_playable(detail, provider=ProviderNames.YTDLP)
    return ProviderError.unreachable(detail, provider=ProviderNames.YTDLP)
