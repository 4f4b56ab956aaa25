"""Shared machinery for HTTP-backed provider adapters.

``HttpProviderAdapter`` owns the mirror loop and maps every transport,
status, JSON and schema failure onto a ``ProviderError`` kind so concrete
adapters only describe their wire protocol.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, TypeVar
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from yt_audio_resolver.application.interfaces.provider_adapter import ProviderAdapter
from yt_audio_resolver.domain.audio.entities import AudioDescriptor
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.domain.audio.value_objects import VideoId
from yt_audio_resolver.domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def mirror_label(mirror: str) -> str:
    """Host part of a mirror URL, used to tag per-mirror failures."""
    return urlparse(mirror).netloc or mirror


def most_specific(errors: list[ProviderError]) -> ProviderError:
    """Pick the error that says the most about the video itself."""
    return max(errors, key=lambda e: e.kind.specificity)


def schema_error(error: PydanticValidationError, provider: str) -> ProviderError:
    """Report a payload that parsed but did not fit the expected shape."""
    return ProviderError.malformed(
        ErrorMessages.UNEXPECTED_SCHEMA.format(error=error.errors()[0]["msg"]),
        provider=provider,
    )


class HttpProviderAdapter(ProviderAdapter):
    """Base class for adapters that talk to one or more HTTP mirrors.

    Mirrors are tried in order; the first one that yields a descriptor wins.
    When all of them fail, the most specific error is re-raised with a
    message listing each mirror's failure.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        name: str,
        mirrors: tuple[str, ...],
        timeout: float,
        user_agent: str | None = None,
    ) -> None:
        self._client = client
        self._name = name
        self.mirrors = tuple(mirrors)
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def name(self) -> str:
        return self._name

    @property
    def timeout(self) -> float:
        return self._timeout

    async def resolve(self, video_id: VideoId) -> AudioDescriptor:
        if not self.mirrors:
            raise ProviderError.unreachable(
                ErrorMessages.NO_MIRRORS_CONFIGURED.format(provider=self.name),
                provider=self.name,
            )

        errors: list[ProviderError] = []
        for mirror in self.mirrors:
            label = mirror_label(mirror)
            logger.debug(LogTemplates.MIRROR_ATTEMPT, self.name, label)
            try:
                descriptor = await self._resolve_with(mirror, video_id)
            except PydanticValidationError as e:
                error = schema_error(e, self.name)
            except ProviderError as e:
                error = e
            else:
                logger.debug(LogTemplates.MIRROR_SUCCEEDED, self.name, label)
                return descriptor
            logger.debug(LogTemplates.MIRROR_FAILED, self.name, label, error.message)
            errors.append(error.with_prefix(label))

        if len(errors) == 1:
            raise errors[0]

        worst = most_specific(errors)
        raise ProviderError(
            worst.kind,
            ErrorMessages.ALL_MIRRORS_FAILED.format(
                provider=self.name, errors="; ".join(e.message for e in errors)
            ),
            provider=self.name,
            status=worst.status,
            reason=worst.reason,
        )

    @abstractmethod
    async def _resolve_with(self, mirror: str, video_id: VideoId) -> AudioDescriptor:
        """Resolve ``video_id`` against a single mirror."""
        ...

    # ── HTTP helpers ────────────────────────────────────────────────────

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": "application/json"}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        if extra:
            headers.update(extra)
        return headers

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one bounded request; non-2xx responses raise ``http_error``."""
        try:
            response = await self._client.request(method, url, timeout=self._timeout, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderError.unreachable(
                ErrorMessages.REQUEST_TIMED_OUT.format(timeout=self._timeout),
                provider=self.name,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError.unreachable(
                ErrorMessages.CONNECTION_FAILED.format(error=str(e) or e.__class__.__name__),
                provider=self.name,
            ) from e

        if not response.is_success:
            raise ProviderError.http_error(response.status_code, provider=self.name)
        return response

    async def _request_json(
        self, method: str, url: str, model: type[M], **kwargs: Any
    ) -> M:
        """Send a request and validate the JSON body against ``model``."""
        response = await self._request(method, url, **kwargs)
        try:
            payload = response.json()
        except ValueError as e:
            raise ProviderError.malformed(ErrorMessages.INVALID_JSON, provider=self.name) from e
        return self._parse(payload, model)

    def _parse(self, payload: Any, model: type[M]) -> M:
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise schema_error(e, self.name) from e
