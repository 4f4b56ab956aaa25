"""
Audio Resolution Bounded Context

Video ids, normalized audio descriptors, provider attempts, and the
track-selection policy shared by all providers.
"""

from yt_audio_resolver.domain.audio.entities import (
    AudioDescriptor,
    ProviderAttempt,
    ResolutionFailure,
)
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.services import AudioTrackSelector, mentions_opus
from yt_audio_resolver.domain.audio.value_objects import VideoId

__all__ = [
    # Entities
    "AudioDescriptor",
    "ProviderAttempt",
    "ResolutionFailure",
    # Value Objects
    "VideoId",
    # Errors
    "ProviderError",
    # Services
    "AudioTrackSelector",
    "mentions_opus",
]
