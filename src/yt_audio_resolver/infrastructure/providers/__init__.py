"""Provider adapters - one per extraction backend."""

from yt_audio_resolver.infrastructure.providers.base import HttpProviderAdapter
from yt_audio_resolver.infrastructure.providers.cobalt import CobaltAdapter
from yt_audio_resolver.infrastructure.providers.downloader_api import DownloaderApiAdapter
from yt_audio_resolver.infrastructure.providers.heuristic import HeuristicAdapter
from yt_audio_resolver.infrastructure.providers.invidious import InvidiousAdapter
from yt_audio_resolver.infrastructure.providers.piped import PipedAdapter
from yt_audio_resolver.infrastructure.providers.registry import ADAPTER_FACTORIES, build_adapters
from yt_audio_resolver.infrastructure.providers.youtube_internal import (
    CLIENT_PROFILES,
    ClientProfile,
    YouTubeInternalClientAdapter,
)
from yt_audio_resolver.infrastructure.providers.ytdlp import YtDlpAdapter

__all__ = [
    "ADAPTER_FACTORIES",
    "CLIENT_PROFILES",
    "ClientProfile",
    "CobaltAdapter",
    "DownloaderApiAdapter",
    "HeuristicAdapter",
    "HttpProviderAdapter",
    "InvidiousAdapter",
    "PipedAdapter",
    "YouTubeInternalClientAdapter",
    "YtDlpAdapter",
    "build_adapters",
]
