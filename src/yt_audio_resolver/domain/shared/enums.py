"""Shared string enumerations for type-safe comparisons across layers."""

from __future__ import annotations

from enum import StrEnum


class ProviderErrorKind(StrEnum):
    """Why a single provider could not produce a descriptor."""

    UNREACHABLE = "unreachable"
    HTTP_ERROR = "http_error"
    MALFORMED_RESPONSE = "malformed_response"
    NO_AUDIO_AVAILABLE = "no_audio_available"
    NOT_PLAYABLE = "not_playable"

    @property
    def specificity(self) -> int:
        """Higher is more informative when several mirrors fail differently."""
        return _SPECIFICITY[self]


_SPECIFICITY: dict[ProviderErrorKind, int] = {
    ProviderErrorKind.UNREACHABLE: 0,
    ProviderErrorKind.HTTP_ERROR: 1,
    ProviderErrorKind.MALFORMED_RESPONSE: 2,
    ProviderErrorKind.NO_AUDIO_AVAILABLE: 3,
    ProviderErrorKind.NOT_PLAYABLE: 4,
}


class AttemptOutcome(StrEnum):
    """Outcome recorded for one adapter invocation."""

    SUCCESS = "success"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    HTTP_ERROR = "http_error"
    PARSE_ERROR = "parse_error"
    NO_AUDIO_FOUND = "no_audio_found"
    NOT_PLAYABLE = "not_playable"

    @classmethod
    def from_error_kind(cls, kind: ProviderErrorKind) -> AttemptOutcome:
        return _OUTCOME_BY_KIND[kind]


_OUTCOME_BY_KIND: dict[ProviderErrorKind, AttemptOutcome] = {
    ProviderErrorKind.UNREACHABLE: AttemptOutcome.UNREACHABLE,
    ProviderErrorKind.HTTP_ERROR: AttemptOutcome.HTTP_ERROR,
    ProviderErrorKind.MALFORMED_RESPONSE: AttemptOutcome.PARSE_ERROR,
    ProviderErrorKind.NO_AUDIO_AVAILABLE: AttemptOutcome.NO_AUDIO_FOUND,
    ProviderErrorKind.NOT_PLAYABLE: AttemptOutcome.NOT_PLAYABLE,
}
