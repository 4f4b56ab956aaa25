# ruff: noqa: N999
"""
Domain Layer

Contains pure resolution logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, enums, constants, and types
- audio/: Video ids, audio descriptors, attempts, and track selection
"""

from yt_audio_resolver.domain.audio import AudioDescriptor, ResolutionFailure, VideoId
from yt_audio_resolver.domain.shared.exceptions import DomainError

__all__ = [
    "AudioDescriptor",
    "DomainError",
    "ResolutionFailure",
    "VideoId",
]
