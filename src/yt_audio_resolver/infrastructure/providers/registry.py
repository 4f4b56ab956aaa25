"""Builds the ordered adapter list from configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Final

import httpx

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter
from yt_audio_resolver.config.settings import ProviderSettings
from yt_audio_resolver.domain.shared.constants import ProviderNames
from yt_audio_resolver.domain.shared.messages import ErrorMessages
from yt_audio_resolver.infrastructure.providers.cobalt import CobaltAdapter
from yt_audio_resolver.infrastructure.providers.downloader_api import DownloaderApiAdapter
from yt_audio_resolver.infrastructure.providers.heuristic import HeuristicAdapter
from yt_audio_resolver.infrastructure.providers.invidious import InvidiousAdapter
from yt_audio_resolver.infrastructure.providers.piped import PipedAdapter
from yt_audio_resolver.infrastructure.providers.youtube_internal import (
    YouTubeInternalClientAdapter,
)
from yt_audio_resolver.infrastructure.providers.ytdlp import YtDlpAdapter

AdapterFactory = Callable[[ProviderSettings, httpx.AsyncClient], ProviderAdapter]


def _innertube(profile: str) -> AdapterFactory:
    def factory(settings: ProviderSettings, client: httpx.AsyncClient) -> ProviderAdapter:
        return YouTubeInternalClientAdapter(client, settings.innertube, profile=profile)

    return factory


ADAPTER_FACTORIES: Final[dict[str, AdapterFactory]] = {
    ProviderNames.COBALT: lambda s, c: CobaltAdapter(c, s.cobalt),
    ProviderNames.PIPED: lambda s, c: PipedAdapter(c, s.piped, s.user_agent),
    ProviderNames.INVIDIOUS: lambda s, c: InvidiousAdapter(c, s.invidious, s.user_agent),
    ProviderNames.YOUTUBE_TV: _innertube(ProviderNames.YOUTUBE_TV),
    ProviderNames.YOUTUBE_MWEB: _innertube(ProviderNames.YOUTUBE_MWEB),
    ProviderNames.YOUTUBE_IOS: _innertube(ProviderNames.YOUTUBE_IOS),
    ProviderNames.YOUTUBE_ANDROID: _innertube(ProviderNames.YOUTUBE_ANDROID),
    ProviderNames.DOWNLOADER_API: lambda s, c: DownloaderApiAdapter(
        c, s.downloader_api, s.user_agent
    ),
    ProviderNames.YTDLP: lambda s, c: YtDlpAdapter(s.ytdlp),
    ProviderNames.HEURISTIC: lambda s, c: HeuristicAdapter(c, s.heuristic, s.user_agent),
}


def build_adapters(
    order: tuple[str, ...],
    settings: ProviderSettings,
    client: httpx.AsyncClient,
) -> list[ProviderAdapter]:
    """Instantiate one adapter per configured provider name, preserving order.

    Raises:
        ValueError: If a name has no registered factory.
    """
    adapters: list[ProviderAdapter] = []
    for name in order:
        factory = ADAPTER_FACTORIES.get(name)
        if factory is None:
            raise ValueError(
                ErrorMessages.UNKNOWN_PROVIDER.format(name=name, known=ProviderNames.ALL)
            )
        adapters.append(factory(settings, client))
    return adapters
