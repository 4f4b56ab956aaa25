"""HTTP boundary - FastAPI app serving the resolution endpoint."""

from yt_audio_resolver.infrastructure.http.app import create_app

__all__ = ["create_app"]
