"""Tests for structured logging."""

import json
import logging

import pytest
import structlog

from covupload.config.models import LoggingConfig
from covupload.core.logging import bind_run_id, configure_logging
from covupload.core.progress import suppress_console_logs


def _json_lines(err: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in err.splitlines() if line.startswith("{")]


class TestRunId:
    """Run correlation ID binding."""

    def setup_method(self) -> None:
        structlog.contextvars.clear_contextvars()

    def test_given_bind_when_called_then_id_in_context(self) -> None:
        run_id = bind_run_id()

        assert len(run_id) == 12
        assert structlog.contextvars.get_contextvars()["run_id"] == run_id

    def test_given_two_binds_then_ids_differ(self) -> None:
        assert bind_run_id() != bind_run_id()


class TestConfigureLogging:
    """Logging configuration tests."""

    def setup_method(self) -> None:
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()

    def test_given_json_format_when_log_then_json_line_on_stderr(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON output carries event, fields, level and timestamp."""
        # Given
        configure_logging(LoggingConfig(level="INFO", format="json"))

        # When
        structlog.get_logger().info("aggregate.done", files=3)

        # Then
        (data,) = _json_lines(capsys.readouterr().err)
        assert data["event"] == "aggregate.done"
        assert data["files"] == 3
        assert data["level"] == "info"
        assert "timestamp" in data

    def test_given_run_id_when_log_then_run_id_attached(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(LoggingConfig(format="json"))
        run_id = bind_run_id()

        structlog.get_logger().info("upload.accepted")

        (data,) = _json_lines(capsys.readouterr().err)
        assert data["run_id"] == run_id

    def test_given_warning_level_when_info_logged_then_dropped(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(LoggingConfig(level="WARNING", format="json"))

        log = structlog.get_logger()
        log.info("quiet")
        log.warning("resolve.source_unreadable")

        events = [d["event"] for d in _json_lines(capsys.readouterr().err)]
        assert events == ["resolve.source_unreadable"]

    def test_given_default_config_then_info_emitted(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The default level shows the aggregate summary line."""
        configure_logging()

        structlog.get_logger().info("aggregate.done", message="processed 2 of 3 files")

        assert "processed 2 of 3 files" in capsys.readouterr().err

    def test_given_stdlib_record_then_rendered_as_json(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(LoggingConfig(format="json"))

        logging.getLogger("some.library").warning("plain stdlib message")

        (data,) = _json_lines(capsys.readouterr().err)
        assert data["event"] == "plain stdlib message"
        assert data["level"] == "warning"

    def test_given_debug_level_then_http_loggers_stay_quiet(self) -> None:
        configure_logging(LoggingConfig(level="DEBUG"))

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_given_reconfigure_then_single_handler(self) -> None:
        configure_logging()
        configure_logging(LoggingConfig(level="DEBUG"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1

    def test_given_suppression_when_log_then_nothing_printed(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Console stays quiet while a live display is active."""
        configure_logging(LoggingConfig(format="json"))

        with suppress_console_logs():
            structlog.get_logger().warning("hidden")

        assert "hidden" not in capsys.readouterr().err
