"""Shared validators for domain models and settings."""

from __future__ import annotations

from urllib.parse import urlparse

from yt_audio_resolver.domain.shared.messages import ErrorMessages


def is_absolute_http_url(value: str) -> bool:
    """Return True when ``value`` is an http(s) URL with a network location."""
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_audio_url(value: str) -> str:
    """Validate the one field a descriptor cannot do without.

    Args:
        value: Candidate stream URL from a provider.

    Returns:
        The URL with surrounding whitespace removed.

    Raises:
        ValueError: If the URL is empty or not an absolute http(s) URL.
    """
    value = value.strip()
    if not value:
        raise ValueError(ErrorMessages.EMPTY_AUDIO_URL)
    if not is_absolute_http_url(value):
        raise ValueError(ErrorMessages.INVALID_AUDIO_URL)
    return value


def validate_mirror_urls(values: tuple[str, ...]) -> tuple[str, ...]:
    """Validate mirror base URLs and strip trailing slashes.

    Raises:
        ValueError: If any entry is not an absolute http(s) URL.
    """
    cleaned: list[str] = []
    for url in values:
        if not is_absolute_http_url(url):
            raise ValueError(ErrorMessages.INVALID_MIRROR_URL.format(url=url))
        cleaned.append(url.rstrip("/"))
    return tuple(cleaned)

