"""Shared Kernel - cross-cutting exceptions, enums, constants, and types."""

from yt_audio_resolver.domain.shared.enums import AttemptOutcome, ProviderErrorKind
from yt_audio_resolver.domain.shared.exceptions import (
    DomainError,
    InvalidVideoIdError,
    ValidationError,
)

__all__ = [
    "AttemptOutcome",
    "DomainError",
    "InvalidVideoIdError",
    "ProviderErrorKind",
    "ValidationError",
]
