"""Centralized message constants for error messages, log templates, and API responses."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Video Id Validation Errors
    INVALID_VIDEO_ID = "Video ID must be 11 characters"
    NO_VIDEO_ID_IN_URL = "Could not extract video ID from URL"

    # Descriptor Validation Errors
    EMPTY_AUDIO_URL = "audioUrl cannot be empty"
    INVALID_AUDIO_URL = "audioUrl must be an absolute http(s) URL"

    # Provider Errors (templates)
    HTTP_STATUS = "HTTP {status}"
    REQUEST_TIMED_OUT = "Request timed out after {timeout}s"
    CONNECTION_FAILED = "Connection failed: {error}"
    INVALID_JSON = "Response was not valid JSON"
    UNEXPECTED_SCHEMA = "Unexpected response schema: {error}"
    NO_AUDIO_STREAMS = "No audio streams"
    NO_AUDIO_FORMATS = "No audio formats found"
    NO_AUDIO_URL_IN_RESPONSE = "No audio URLs found in response"
    VIDEO_NOT_PLAYABLE = "Video not playable"
    PROVIDER_REPORTED_ERROR = "Provider reported an error: {detail}"
    ALL_MIRRORS_FAILED = "All {provider} instances failed: {errors}"
    NO_MIRRORS_CONFIGURED = "No {provider} instances configured"
    ADAPTER_TIMED_OUT = "Gave up after {budget}s"
    DEADLINE_EXCEEDED = "Resolution deadline exceeded"
    UNEXPECTED_ADAPTER_ERROR = "Unexpected error: {error}"
    YTDLP_EXTRACTION_FAILED = "yt-dlp extraction failed: {error}"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    UNKNOWN_PROVIDER = "Unknown provider '{name}'. Must be one of {known}"
    DUPLICATE_PROVIDER = "Provider '{name}' listed more than once"
    EMPTY_PROVIDER_ORDER = "At least one provider must be configured"
    INVALID_MIRROR_URL = "Mirror URL must start with http:// or https://: {url}"
    INVALID_ORIGIN = "Origin must start with http:// or https://: {origin}"


class ApiMessages:
    """Bodies returned by the HTTP boundary."""

    MISSING_VIDEO_ID_ERROR = "Missing videoId parameter"
    MISSING_VIDEO_ID_MESSAGE = "Please provide a YouTube video ID"
    INVALID_VIDEO_ID_ERROR = "Invalid videoId format"
    INVALID_VIDEO_ID_MESSAGE = ErrorMessages.INVALID_VIDEO_ID
    ALL_FAILED_ERROR = "All audio extraction services are currently unavailable"
    ALL_FAILED_MESSAGE = "Unable to extract audio from this video. Please try again later."
    ACCESS_DENIED_ERROR = "Access denied"
    ACCESS_DENIED_MESSAGE = "This API can only be accessed from authorized domains"
    HEALTH_OK_MESSAGE = "YouTube Audio API is running"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Service Lifecycle
    SERVICE_STARTING = "Starting audio resolver service (environment=%s)"
    SERVICE_LISTENING = "Serving HTTP on %s:%s"
    SERVICE_STOPPED = "Audio resolver service stopped"
    SERVICE_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down"
    SERVICE_FATAL_ERROR = "Fatal error: %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
    HTTP_CLIENT_CLOSED = "HTTP client closed"
    PROVIDERS_CONFIGURED = "Configured %d providers (raced tier: %s)"

    # Resolution
    RESOLVE_STARTED = "Resolving audio for %s"
    RESOLVE_SUCCEEDED = "Resolved %s via %s in %.2fs"
    RESOLVE_FAILED = "All providers failed for %s: %s"
    RESOLVE_REJECTED_INVALID_ID = "Rejected invalid video id %r"
    RESOLVE_DEADLINE_EXCEEDED = "Resolution deadline of %.1fs exceeded for %s"
    RACED_TIER_FAILED = "Raced tier failed for %s, falling back to sequential providers"

    # Provider Attempts
    PROVIDER_ATTEMPT = "Trying provider %s for %s"
    PROVIDER_SUCCEEDED = "Provider %s succeeded for %s"
    PROVIDER_FAILED = "Provider %s failed for %s: %s (%s)"
    PROVIDER_TIMED_OUT = "Provider %s timed out after %.1fs for %s"
    PROVIDER_UNEXPECTED_ERROR = "Provider %s raised an unexpected error for %s"
    PROVIDER_CANCELLED = "Cancelled provider %s after %s won"
    MIRROR_ATTEMPT = "Trying %s mirror %s"
    MIRROR_FAILED = "%s mirror %s failed: %s"
    MIRROR_SUCCEEDED = "%s mirror %s succeeded"
    HEURISTIC_MATCH = "Heuristic match on %s: %s"

    # HTTP Boundary
    CORS_ORIGIN_REJECTED = "Rejected request from disallowed origin %r"
    HTTP_RESOLVE_REQUEST = "GET /extract-audio videoId=%s"
