"""Low-confidence adapter for SaveFrom-style converter endpoints.

These services have no stable schema. The response is searched for the
first string that looks like a direct audio file URL, first through the
JSON tree and otherwise through the raw text.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Final

import httpx

from yt_audio_resolver.config.settings import MirrorProviderSettings
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.constants import Fallbacks, ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages, LogTemplates
from yt_audio_resolver.infrastructure.providers.base import HttpProviderAdapter, mirror_label

logger = logging.getLogger(__name__)

AUDIO_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"https?://[^\s\"'<>]+\.(webm|m4a|opus|mp3)", re.IGNORECASE
)

WATCH_URL_PLACEHOLDER: Final[str] = "{watch_url}"

_AJAX_HEADERS: Final[dict[str, str]] = {
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "X-Requested-With": "XMLHttpRequest",
}


def find_audio_url(node: Any) -> str | None:
    """Depth-first search of a decoded JSON value for an audio file URL."""
    if isinstance(node, str):
        candidate = node.strip()
        if AUDIO_URL_PATTERN.match(candidate) and not any(c.isspace() for c in candidate):
            # Keep signed query strings that follow the extension.
            return candidate
        return scan_text(candidate)
    if isinstance(node, dict):
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return None
    for child in children:
        found = find_audio_url(child)
        if found:
            return found
    return None


def scan_text(text: str) -> str | None:
    match = AUDIO_URL_PATTERN.search(text)
    return match.group(0) if match else None


class HeuristicAdapter(HttpProviderAdapter):
    """POSTs ``query=<watch url>`` and scrapes the reply for an audio link."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        settings: MirrorProviderSettings,
        user_agent: str | None = None,
    ) -> None:
        super().__init__(
            client,
            name=ProviderNames.HEURISTIC,
            mirrors=settings.instances,
            timeout=settings.timeout,
            user_agent=user_agent,
        )

    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        watch_url = video_id.watch_url
        response = await self._request(
            "POST",
            mirror.replace(WATCH_URL_PLACEHOLDER, watch_url),
            data={"query": watch_url},
            headers=self._headers(_AJAX_HEADERS),
        )

        text = response.text
        try:
            audio_url = find_audio_url(json.loads(text))
        except ValueError:
            audio_url = scan_text(text)

        if audio_url is None:
            raise ProviderError.no_audio(ErrorMessages.NO_AUDIO_URL_IN_RESPONSE, provider=self.name)

        logger.debug(LogTemplates.HEURISTIC_MATCH, mirror_label(mirror), audio_url)
        match = AUDIO_URL_PATTERN.search(audio_url)
        extension = match.group(1).lower() if match else Fallbacks.CONTAINER
        return AudioDescriptor.for_video(
            video_id,
            audio_url=audio_url,
            source=f"Heuristic ({mirror_label(mirror)})",
            format=extension,
            codec=Fallbacks.CODEC if extension in ("webm", "opus") else extension,
        )
