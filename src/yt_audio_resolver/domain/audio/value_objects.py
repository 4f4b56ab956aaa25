"""Immutable value objects for the audio resolution bounded context."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Annotated, Final

from pydantic import PlainSerializer, PlainValidator

from yt_audio_resolver.domain.shared.constants import VIDEO_ID_PATTERN, YouTubeUrls
from yt_audio_resolver.domain.shared.exceptions import InvalidVideoIdError
from yt_audio_resolver.domain.shared.messages import ErrorMessages

_VIDEO_ID_RE: Final[re.Pattern[str]] = re.compile(VIDEO_ID_PATTERN)

_URL_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(
        r"(?:youtube\.com/watch\?(?:[^#]*&)?v=|youtu\.be/|youtube\.com/embed/)"
        r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"
    ),
    re.compile(r"youtube\.com/shorts/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
    re.compile(r"youtube\.com/live/([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"),
]


@dataclass(frozen=True)
class VideoId:
    """Eleven-character YouTube video identifier."""

    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not _VIDEO_ID_RE.fullmatch(self.value):
            raise InvalidVideoIdError(self.value)

    def __str__(self) -> str:
        return self.value

    def __hash__(self) -> int:
        return hash(self.value)

    @property
    def watch_url(self) -> str:
        return YouTubeUrls.WATCH.format(video_id=self.value)

    @property
    def thumbnail_url(self) -> str:
        return YouTubeUrls.THUMBNAIL.format(video_id=self.value)

    @classmethod
    def parse(cls, value: VideoId | str) -> VideoId:
        """Accept an existing VideoId or validate a raw string (surrounding whitespace ignored)."""
        if isinstance(value, VideoId):
            return value
        if not isinstance(value, str):
            raise InvalidVideoIdError(value)
        return cls(value.strip())

    @classmethod
    def from_url(cls, text: str) -> VideoId:
        """Extract a video id from a YouTube URL, or accept a bare 11-character id."""
        candidate = text.strip()
        if _VIDEO_ID_RE.fullmatch(candidate):
            return cls(candidate)

        for pattern in _URL_PATTERNS:
            match = pattern.search(candidate)
            if match:
                return cls(match.group(1))

        raise InvalidVideoIdError(text, ErrorMessages.NO_VIDEO_ID_IN_URL)


# Serializes as plain string in JSON, stores as VideoId in the model.
VideoIdField = Annotated[
    VideoId,
    PlainValidator(lambda v: VideoId.parse(v)),
    PlainSerializer(lambda v: v.value, return_type=str),
]
