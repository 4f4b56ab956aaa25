"""Application services orchestrating resolution use cases."""

from yt_audio_resolver.application.services.resolution_service import ResolutionService
from yt_audio_resolver.application.services.resolver import ResolutionResult, Resolver

__all__ = ["ResolutionResult", "ResolutionService", "Resolver"]
