"""FastAPI application exposing audio resolution over HTTP.

Routes:
- ``GET /extract-audio?videoId=<id>``: descriptor JSON, 400 on bad input,
  503 when every provider failed.
- ``GET /health``: liveness probe.
- ``OPTIONS`` on any path: CORS preflight.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse

from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.shared.constants import API_VERSION, HEALTH_DATE_FORMAT
from yt_audio_resolver.domain.shared.exceptions import InvalidVideoIdError
from yt_audio_resolver.domain.shared.messages import ApiMessages, LogTemplates

if TYPE_CHECKING:
    from yt_audio_resolver.config.container import Container
    from yt_audio_resolver.config.settings import ServerSettings

logger = logging.getLogger(__name__)

CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Accept"


def cors_headers(origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": origin,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Credentials": "true",
    }


def _error(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"error": error, "message": message, **extra}
    )


def _install_cors(app: FastAPI, server: ServerSettings) -> None:
    allowed = frozenset(server.allowed_origins)

    @app.middleware("http")
    async def cors_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        origin = request.headers.get("origin")
        origin_allowed = origin is not None and origin in allowed

        if origin is not None and not origin_allowed and server.reject_disallowed_origins:
            logger.warning(LogTemplates.CORS_ORIGIN_REJECTED, origin)
            response: Response = _error(
                403, ApiMessages.ACCESS_DENIED_ERROR, ApiMessages.ACCESS_DENIED_MESSAGE
            )
        elif request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        if origin_allowed and origin is not None:
            response.headers.update(cors_headers(origin))
        response.headers["Vary"] = "Origin"
        return response


def create_app(container: Container) -> FastAPI:
    """Build the ASGI app around a container; the container is shut down with the app."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title="YouTube Audio API",
        description="Resolves YouTube video ids to directly playable audio stream URLs.",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.container = container
    _install_cors(app, container.settings.server)

    @app.get("/extract-audio")
    async def extract_audio(
        video_id: str | None = Query(default=None, alias="videoId"),
    ) -> JSONResponse:
        if video_id is None or not video_id.strip():
            return _error(
                400, ApiMessages.MISSING_VIDEO_ID_ERROR, ApiMessages.MISSING_VIDEO_ID_MESSAGE
            )

        logger.info(LogTemplates.HTTP_RESOLVE_REQUEST, video_id)
        try:
            result = await container.resolution_service.resolve(video_id)
        except InvalidVideoIdError:
            return _error(
                400, ApiMessages.INVALID_VIDEO_ID_ERROR, ApiMessages.INVALID_VIDEO_ID_MESSAGE
            )

        if isinstance(result, AudioDescriptor):
            return JSONResponse(status_code=200, content=result.to_payload())

        return _error(
            503,
            ApiMessages.ALL_FAILED_ERROR,
            ApiMessages.ALL_FAILED_MESSAGE,
            videoId=str(result.video_id),
            errors=result.errors,
        )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        now = datetime.now(UTC)
        return {
            "status": "ok",
            "message": ApiMessages.HEALTH_OK_MESSAGE,
            "version": API_VERSION,
            "timestamp": int(time.time()),
            "date": now.strftime(HEALTH_DATE_FORMAT),
        }

    return app
