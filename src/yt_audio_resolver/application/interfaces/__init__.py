"""Port interfaces implemented by infrastructure adapters."""

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter

__all__ = ["ProviderAdapter"]
