#!/usr/bin/env python3
"""Main entry point for the YouTube audio resolver."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from yt_audio_resolver.domain.shared.messages import ApiMessages, LogTemplates

if TYPE_CHECKING:
    from yt_audio_resolver.config.container import Container

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

EXIT_OK = 0
EXIT_INVALID_INPUT = 1
EXIT_ALL_FAILED = 2
EXIT_ERROR = 3


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH)
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="yt-audio-resolver",
        description="Resolve YouTube videos to directly playable audio streams.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s serve --port 8080          # Run the HTTP API
  %(prog)s resolve dQw4w9WgXcQ        # Resolve one video id
  %(prog)s resolve https://youtu.be/dQw4w9WgXcQ --timeout 20
        """,
    )
    parser.set_defaults(host=None, port=None)

    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="run the HTTP API (default)")
    serve.add_argument("--host", default=None, help="bind address (default: SERVER__HOST)")
    serve.add_argument("--port", type=int, default=None, help="bind port (default: SERVER__PORT)")

    resolve = subparsers.add_parser("resolve", help="resolve a single video and print JSON")
    resolve.add_argument("target", help="11-character video id or YouTube URL")
    resolve.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="overall deadline in seconds (default: RESOLVER__OVERALL_TIMEOUT)",
    )

    return parser


async def resolve_once(container: Container, target: str, timeout: float | None = None) -> int:
    """Resolve one target, print the JSON result and return the process exit code."""
    from yt_audio_resolver.domain.audio.entities import AudioDescriptor
    from yt_audio_resolver.domain.shared.exceptions import InvalidVideoIdError

    try:
        result = await container.resolution_service.resolve_url(target, deadline=timeout)
    except InvalidVideoIdError as e:
        payload = {"error": ApiMessages.INVALID_VIDEO_ID_ERROR, "message": e.message}
        print(json.dumps(payload), file=sys.stderr)
        return EXIT_INVALID_INPUT
    finally:
        await container.shutdown()

    if isinstance(result, AudioDescriptor):
        print(json.dumps(result.to_payload(), indent=2))
        return EXIT_OK

    payload = {
        "error": ApiMessages.ALL_FAILED_ERROR,
        "videoId": str(result.video_id),
        "message": ApiMessages.ALL_FAILED_MESSAGE,
        "errors": result.errors,
    }
    print(json.dumps(payload, indent=2))
    return EXIT_ALL_FAILED


def serve(container: Container, host: str, port: int) -> int:
    import uvicorn

    from yt_audio_resolver.infrastructure.http.app import create_app

    app = create_app(container)
    logging.getLogger(__name__).info(LogTemplates.SERVICE_LISTENING, host, port)
    uvicorn.run(app, host=host, port=port, log_config=None)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    from yt_audio_resolver.config.settings import get_settings

    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings.effective_log_level)

    logger = logging.getLogger(__name__)
    logger.info(LogTemplates.SERVICE_STARTING, settings.environment)

    from yt_audio_resolver.config.container import create_container

    container = create_container(settings)

    try:
        if args.command == "resolve":
            return asyncio.run(resolve_once(container, args.target, args.timeout))

        exit_code = serve(
            container,
            args.host or settings.server.host,
            args.port or settings.server.port,
        )
        logger.info(LogTemplates.SERVICE_STOPPED)
        return exit_code
    except KeyboardInterrupt:
        logger.info(LogTemplates.SERVICE_KEYBOARD_INTERRUPT)
        return EXIT_OK
    except Exception as e:
        logger.exception(LogTemplates.SERVICE_FATAL_ERROR, e)
        return EXIT_ERROR


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
