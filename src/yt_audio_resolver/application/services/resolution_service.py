"""Application service exposing audio resolution to callers."""

from __future__ import annotations

import logging

from yt_audio_resolver.application.services.resolver import ResolutionResult, Resolver
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.exceptions import InvalidVideoIdError
from yt_audio_resolver.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class ResolutionService:
    """Boundary operation: ``resolve(videoId) -> AudioDescriptor | ResolutionFailure``.

    Validates input before any provider is contacted; an invalid id raises
    ``InvalidVideoIdError`` and never reaches the network.
    """

    def __init__(self, resolver: Resolver) -> None:
        self._resolver = resolver

    @property
    def resolver(self) -> Resolver:
        return self._resolver

    async def resolve(
        self, video_id: VideoId | str, deadline: float | None = None
    ) -> ResolutionResult:
        try:
            vid = VideoId.parse(video_id)
        except InvalidVideoIdError:
            logger.info(LogTemplates.RESOLVE_REJECTED_INVALID_ID, video_id)
            raise
        return await self._resolver.resolve(vid, deadline=deadline)

    async def resolve_url(self, text: str, deadline: float | None = None) -> ResolutionResult:
        """Resolve a pasted YouTube URL (or bare id)."""
        try:
            vid = VideoId.from_url(text)
        except InvalidVideoIdError:
            logger.info(LogTemplates.RESOLVE_REJECTED_INVALID_ID, text)
            raise
        return await self._resolver.resolve(vid, deadline=deadline)
