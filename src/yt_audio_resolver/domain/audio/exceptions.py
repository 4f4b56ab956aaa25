"""Errors raised by provider adapters."""

from __future__ import annotations

from yt_audio_resolver.domain.shared.enums import ProviderErrorKind
from yt_audio_resolver.domain.shared.exceptions import DomainError
from yt_audio_resolver.domain.shared.messages import ErrorMessages


class ProviderError(DomainError):
    """Raised when one provider cannot produce a descriptor.

    Recovered by the resolver, which moves on to the next provider.
    """

    def __init__(
        self,
        kind: ProviderErrorKind,
        message: str,
        *,
        provider: str | None = None,
        status: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message, code=kind.value.upper())
        self.kind = kind
        self.provider = provider
        self.status = status
        self.reason = reason

    @classmethod
    def unreachable(cls, message: str, provider: str | None = None) -> ProviderError:
        return cls(ProviderErrorKind.UNREACHABLE, message, provider=provider)

    @classmethod
    def http_error(cls, status: int, provider: str | None = None) -> ProviderError:
        return cls(
            ProviderErrorKind.HTTP_ERROR,
            ErrorMessages.HTTP_STATUS.format(status=status),
            provider=provider,
            status=status,
        )

    @classmethod
    def malformed(cls, message: str, provider: str | None = None) -> ProviderError:
        return cls(ProviderErrorKind.MALFORMED_RESPONSE, message, provider=provider)

    @classmethod
    def no_audio(
        cls, message: str = ErrorMessages.NO_AUDIO_FORMATS, provider: str | None = None
    ) -> ProviderError:
        return cls(ProviderErrorKind.NO_AUDIO_AVAILABLE, message, provider=provider)

    @classmethod
    def not_playable(cls, reason: str | None = None, provider: str | None = None) -> ProviderError:
        message = reason or ErrorMessages.VIDEO_NOT_PLAYABLE
        return cls(ProviderErrorKind.NOT_PLAYABLE, message, provider=provider, reason=reason)

    def with_prefix(self, prefix: str) -> ProviderError:
        """Copy of this error whose message is prefixed, e.g. with the mirror host."""
        return ProviderError(
            self.kind,
            f"{prefix}: {self.message}",
            provider=self.provider,
            status=self.status,
            reason=self.reason,
        )
