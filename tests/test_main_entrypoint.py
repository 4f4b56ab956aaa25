"""
Tests for main.py - Main Entry Point

Tests for the main entry point including:
- Logging configuration
- Argument parsing for the serve and resolve commands
- One-shot resolution output and exit codes
- Container creation
- Error handling
"""

import json
import logging
from unittest.mock import AsyncMock, MagicMock, mock_open, patch

import pytest

from yt_audio_resolver.application.services.resolution_service import ResolutionService
from yt_audio_resolver.application.services.resolver import Resolver
from yt_audio_resolver.config.container import Container
from yt_audio_resolver.config.settings import Settings
from yt_audio_resolver.domain.audio.exceptions import ProviderError
from yt_audio_resolver.main import (
    _LOGGING_CONFIG_PATH,
    EXIT_ALL_FAILED,
    EXIT_ERROR,
    EXIT_INVALID_INPUT,
    EXIT_OK,
    build_parser,
    main,
    resolve_once,
    setup_logging,
)


class TestLoggingSetup:
    """Tests for logging configuration."""

    def _make_valid_config(self) -> dict:
        return {
            "version": 1,
            "disable_existing_loggers": False,
            "handlers": {},
            "loggers": {
                "httpx": {"level": "WARNING"},
                "httpcore": {"level": "WARNING"},
            },
            "root": {"level": "INFO", "handlers": []},
        }

    def test_dictconfig_called_when_json_exists(self):
        """Should call dictConfig when logging_config.json exists."""
        config = self._make_valid_config()
        m = mock_open(read_data=json.dumps(config))
        with (
            patch("builtins.open", m),
            patch("logging.config.dictConfig") as mock_dc,
        ):
            setup_logging()

            mock_dc.assert_called_once_with(config)

    def test_fallback_to_basicconfig_when_json_missing(self):
        """Should fallback to basicConfig when logging_config.json is missing."""
        with (
            patch("builtins.open", side_effect=FileNotFoundError),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

            mock_bc.assert_called_once()
            assert mock_bc.call_args[1]["level"] == logging.INFO

    def test_fallback_to_basicconfig_when_json_malformed(self):
        m = mock_open(read_data="{invalid json")
        with (
            patch("builtins.open", m),
            patch("logging.basicConfig") as mock_bc,
        ):
            setup_logging()

            mock_bc.assert_called_once()

    def test_root_logger_level_overridden_by_settings(self):
        """Should override root logger level with the provided log_level."""
        config = self._make_valid_config()
        m = mock_open(read_data=json.dumps(config))
        with (
            patch("builtins.open", m),
            patch("logging.config.dictConfig"),
            patch("logging.getLogger") as mock_get_logger,
        ):
            mock_root = MagicMock()
            mock_get_logger.return_value = mock_root

            setup_logging("DEBUG")

            mock_root.setLevel.assert_called_once_with(logging.DEBUG)

    def test_shipped_config_quiets_http_libraries(self):
        """Should keep per-request HTTP client logging out of the console."""
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)

        for name in ("httpx", "httpcore", "uvicorn.access"):
            assert config["loggers"][name]["level"] == "WARNING"
        assert config["formatters"]["console"]["()"].endswith("ColoredFormatter")


class TestArgumentParsing:
    """Tests for the command line interface."""

    def test_no_command_means_serve(self):
        args = build_parser().parse_args([])

        assert args.command is None
        assert args.host is None
        assert args.port is None

    def test_serve_overrides(self):
        args = build_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "9000"])

        assert args.command == "serve"
        assert args.host == "0.0.0.0"
        assert args.port == 9000

    def test_resolve_target_and_timeout(self):
        args = build_parser().parse_args(["resolve", "dQw4w9WgXcQ", "--timeout", "12.5"])

        assert args.command == "resolve"
        assert args.target == "dQw4w9WgXcQ"
        assert args.timeout == 12.5


class TestResolveOnce:
    """Tests for one-shot resolution."""

    def _container(self, adapters) -> Container:
        return Container(
            Settings(), _resolution_service=ResolutionService(Resolver(adapters))
        )

    @pytest.mark.asyncio
    async def test_prints_descriptor_and_exits_zero(
        self, make_adapter, make_descriptor, capsys
    ):
        container = self._container([make_adapter("piped", result=make_descriptor("Piped"))])

        exit_code = await resolve_once(container, "https://youtu.be/dQw4w9WgXcQ")

        assert exit_code == EXIT_OK
        payload = json.loads(capsys.readouterr().out)
        assert payload["source"] == "Piped"
        assert payload["audioUrl"] == "https://media.example.com/piped.webm"

    @pytest.mark.asyncio
    async def test_all_failed_exits_two(self, make_adapter, capsys):
        container = self._container(
            [make_adapter("piped", error=ProviderError.http_error(502))]
        )

        exit_code = await resolve_once(container, "dQw4w9WgXcQ")

        assert exit_code == EXIT_ALL_FAILED
        payload = json.loads(capsys.readouterr().out)
        assert payload["videoId"] == "dQw4w9WgXcQ"
        assert payload["errors"] == {"piped": "HTTP 502"}

    @pytest.mark.asyncio
    async def test_invalid_target_exits_one(self, make_adapter, capsys):
        adapter = make_adapter("piped", error=ProviderError.http_error(502))
        container = self._container([adapter])

        exit_code = await resolve_once(container, "not a video")

        assert exit_code == EXIT_INVALID_INPUT
        assert json.loads(capsys.readouterr().err)["error"] == "Invalid videoId format"
        assert adapter.calls == []

    @pytest.mark.asyncio
    async def test_container_shut_down_afterwards(self, make_adapter, make_descriptor):
        container = self._container([make_adapter("piped", result=make_descriptor())])

        await resolve_once(container, "dQw4w9WgXcQ")

        assert container._resolution_service is None


class TestMainFunction:
    """Tests for main entry point function."""

    def _settings(self) -> MagicMock:
        mock_settings = MagicMock()
        mock_settings.log_level = "INFO"
        mock_settings.effective_log_level = "INFO"
        mock_settings.environment = "test"
        mock_settings.server.host = "127.0.0.1"
        mock_settings.server.port = 8000
        return mock_settings

    def test_main_serves_by_default(self):
        """Should run the HTTP server with configured host and port."""
        mock_settings = self._settings()
        mock_container = MagicMock()

        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=mock_settings),
            patch("yt_audio_resolver.main.setup_logging"),
            patch(
                "yt_audio_resolver.config.container.create_container",
                return_value=mock_container,
            ) as mock_create_container,
            patch("yt_audio_resolver.main.serve", return_value=EXIT_OK) as mock_serve,
        ):
            exit_code = main([])

        assert exit_code == EXIT_OK
        mock_create_container.assert_called_once_with(mock_settings)
        mock_serve.assert_called_once_with(mock_container, "127.0.0.1", 8000)

    def test_main_configures_logging_from_settings(self):
        """Should pass the effective level, so debug mode forces DEBUG."""
        settings = Settings(debug=True, log_level="WARNING")

        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=settings),
            patch("yt_audio_resolver.main.setup_logging") as mock_setup,
            patch("yt_audio_resolver.config.container.create_container"),
            patch("yt_audio_resolver.main.serve", return_value=EXIT_OK),
        ):
            main([])

        mock_setup.assert_called_once_with("DEBUG")

    def test_main_serve_cli_overrides(self):
        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=self._settings()),
            patch("yt_audio_resolver.main.setup_logging"),
            patch("yt_audio_resolver.config.container.create_container"),
            patch("yt_audio_resolver.main.serve", return_value=EXIT_OK) as mock_serve,
        ):
            main(["serve", "--host", "0.0.0.0", "--port", "9000"])

        assert mock_serve.call_args.args[1:] == ("0.0.0.0", 9000)

    def test_main_resolve_returns_resolution_exit_code(self):
        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=self._settings()),
            patch("yt_audio_resolver.main.setup_logging"),
            patch("yt_audio_resolver.config.container.create_container"),
            patch(
                "yt_audio_resolver.main.resolve_once",
                new=AsyncMock(return_value=EXIT_ALL_FAILED),
            ) as mock_resolve,
        ):
            exit_code = main(["resolve", "dQw4w9WgXcQ", "--timeout", "5"])

        assert exit_code == EXIT_ALL_FAILED
        assert mock_resolve.call_args.args[1:] == ("dQw4w9WgXcQ", 5.0)

    def test_main_handles_keyboard_interrupt(self):
        """Should return 0 on KeyboardInterrupt (graceful shutdown)."""
        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=self._settings()),
            patch("yt_audio_resolver.main.setup_logging"),
            patch("yt_audio_resolver.config.container.create_container"),
            patch("yt_audio_resolver.main.serve", side_effect=KeyboardInterrupt()),
        ):
            exit_code = main([])

        assert exit_code == EXIT_OK

    def test_main_handles_exception(self):
        """Should return error code on unhandled exception."""
        with (
            patch("yt_audio_resolver.config.settings.get_settings", return_value=self._settings()),
            patch("yt_audio_resolver.main.setup_logging"),
            patch("yt_audio_resolver.config.container.create_container"),
            patch("yt_audio_resolver.main.serve", side_effect=RuntimeError("bind failed")),
        ):
            exit_code = main([])

        assert exit_code == EXIT_ERROR
        assert EXIT_ERROR not in (EXIT_OK, EXIT_INVALID_INPUT, EXIT_ALL_FAILED)

    def test_full_startup_sequence(self):
        """Should execute the startup sequence in order."""
        call_order = []

        def track_call(name, result=None):
            def wrapper(*args, **kwargs):
                call_order.append(name)
                return result if result is not None else MagicMock()

            return wrapper

        with (
            patch(
                "yt_audio_resolver.config.settings.get_settings",
                side_effect=track_call("get_settings", self._settings()),
            ),
            patch(
                "yt_audio_resolver.main.setup_logging", side_effect=track_call("setup_logging")
            ),
            patch(
                "yt_audio_resolver.config.container.create_container",
                side_effect=track_call("create_container"),
            ),
            patch("yt_audio_resolver.main.serve", side_effect=track_call("serve", EXIT_OK)),
        ):
            main([])

        assert call_order == ["get_settings", "setup_logging", "create_container", "serve"]
