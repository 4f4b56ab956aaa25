"""Domain services for audio track selection."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

T = TypeVar("T")

OPUS_MARKER = "opus"


def mentions_opus(*hints: str | None) -> bool:
    """True when any codec/mime hint names the Opus codec."""
    return any(hint is not None and OPUS_MARKER in hint.lower() for hint in hints)


class AudioTrackSelector:
    """First-match track selection shared by every adapter that sees a track list.

    Filter to audio-only tracks, take the first Opus-encoded one, otherwise the
    first audio track in provider order. Bitrates are never compared.
    """

    @staticmethod
    def select(
        tracks: Iterable[T],
        *,
        is_audio: Callable[[T], bool],
        is_opus: Callable[[T], bool],
    ) -> T | None:
        audio_tracks = [track for track in tracks if is_audio(track)]
        if not audio_tracks:
            return None
        for track in audio_tracks:
            if is_opus(track):
                return track
        return audio_tracks[0]
