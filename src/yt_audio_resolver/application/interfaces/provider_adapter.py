"""Port interface for extraction providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.audio.entities import AudioDescriptor
    from ...domain.audio.value_objects import VideoId


class ProviderAdapter(ABC):
    """Interface translating one extraction backend into an AudioDescriptor.

    Implementations raise ``ProviderError`` on failure and hold no mutable
    state, so one instance can serve concurrent resolutions.
    """

    mirrors: tuple[str, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        """Stable provider name used for ordering and diagnostics."""
        ...

    @property
    @abstractmethod
    def timeout(self) -> float:
        """Seconds allowed for a single outbound call."""
        ...

    @property
    def budget(self) -> float:
        """Seconds the resolver allows for the whole adapter, mirrors included."""
        return self.timeout * max(1, len(self.mirrors))

    @abstractmethod
    async def resolve(self, video_id: VideoId) -> AudioDescriptor:
        """Resolve a video id to a playable audio descriptor."""
        ...
