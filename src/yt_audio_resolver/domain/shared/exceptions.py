"""Base exception classes for domain-level errors."""

from __future__ import annotations

from yt_audio_resolver.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidVideoIdError(ValidationError):
    """Raised at the boundary when a value is not an 11-character video id."""

    def __init__(self, value: object, message: str | None = None) -> None:
        super().__init__(message or ErrorMessages.INVALID_VIDEO_ID, field="video_id")
        self.code = "INVALID_VIDEO_ID"
        self.value = value
