import asyncio
from collections.abc import Callable

import pytest

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.value_objects import VideoId

# ============================================================================
# Fake Adapters
# ============================================================================


class FakeAdapter(ProviderAdapter):
    """Scriptable adapter recording every call it receives."""

    def __init__(
        self,
        name: str,
        *,
        result: AudioDescriptor | Callable[[VideoId], AudioDescriptor] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
        hang: bool = False,
        timeout: float = 5.0,
    ) -> None:
        self._name = name
        self._result = result
        self._error = error
        self._delay = delay
        self._hang = hang
        self._timeout = timeout
        self.calls: list[VideoId] = []
        self.cancelled = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def timeout(self) -> float:
        return self._timeout

    async def resolve(self, video_id: VideoId) -> AudioDescriptor:
        self.calls.append(video_id)
        try:
            if self._hang:
                await asyncio.Event().wait()
            if self._delay:
                await asyncio.sleep(self._delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self._error is not None:
            raise self._error
        if callable(self._result):
            return self._result(video_id)
        if self._result is None:
            raise AssertionError(f"FakeAdapter {self._name} has no scripted result")
        return self._result


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def video_id() -> VideoId:
    """A valid 11-character video id."""
    return VideoId("dQw4w9WgXcQ")


@pytest.fixture
def make_descriptor(video_id):
    """Factory for descriptors tagged with a source name."""

    def _make(source: str = "Test", audio_url: str | None = None, **fields) -> AudioDescriptor:
        return AudioDescriptor.for_video(
            video_id,
            audio_url=audio_url or f"https://media.example.com/{source.lower()}.webm",
            source=source,
            **fields,
        )

    return _make


@pytest.fixture
def make_adapter():
    """Factory for FakeAdapter instances."""
    return FakeAdapter
