"""Tests for the error taxonomy and structured logging setup."""

from http import HTTPStatus
import json
import logging

import pytest
import structlog

from saas_factory.config import Settings
from saas_factory.errors import (
    AppError,
    Conflict,
    GenerationTimeout,
    NotFound,
    ValidationError,
    mask_secrets,
)
from saas_factory.logging import (
    clear_context,
    get_correlation_id,
    get_logger,
    new_correlation_id,
    set_correlation_id,
    setup_logging,
)


def parse_json_lines(output):
    """Parse output containing multiple JSON lines."""
    lines = output.strip().split("\n")
    return [json.loads(line) for line in lines if line.strip()]


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


class TestErrors:
    def test_default_message_and_extra(self):
        error = Conflict(status="generating")

        assert error.status_code == HTTPStatus.CONFLICT
        assert error.message == Conflict.default_message
        assert error.extra == {"status": "generating"}

    @pytest.mark.parametrize(
        ("error_cls", "status_code"),
        [
            (ValidationError, 400),
            (NotFound, 404),
            (GenerationTimeout, 504),
            (AppError, 500),
        ],
    )
    def test_status_codes(self, error_cls, status_code):
        assert error_cls("x").status_code == status_code

    def test_mask_secrets(self):
        message = mask_secrets("token abc123 rejected", ["abc123", None, ""])

        assert message == "token *** rejected"


class TestLogging:
    def test_json_output_includes_service_and_fields(self, settings, capsys):
        setup_logging(
            settings, service_name="saas-factory-test", log_format="json", log_level="INFO"
        )

        get_logger("tests").info("project_created", project_id="p1")

        entries = parse_json_lines(capsys.readouterr().out)
        entry = next(e for e in entries if e.get("event") == "project_created")
        assert entry["service"] == "saas-factory-test"
        assert entry["project_id"] == "p1"
        assert entry["level"] == "info"
        assert "timestamp" in entry

    def test_log_level_filters(self, settings, capsys):
        setup_logging(settings, log_format="json", log_level="WARNING")

        logger = get_logger("tests")
        logger.info("hidden_event")
        logger.warning("shown_event")

        output = capsys.readouterr().out
        assert "hidden_event" not in output
        assert "shown_event" in output

    def test_correlation_id_is_bound(self, settings, capsys):
        setup_logging(settings, log_format="json", log_level="INFO")
        correlation_id = new_correlation_id()
        set_correlation_id(correlation_id)

        get_logger("tests").info("with_correlation")

        assert get_correlation_id() == correlation_id
        entries = parse_json_lines(capsys.readouterr().out)
        entry = next(e for e in entries if e.get("event") == "with_correlation")
        assert entry["correlation_id"] == correlation_id

        clear_context()
        assert get_correlation_id() is None

    def test_new_correlation_id_format(self):
        correlation_id = new_correlation_id()

        assert correlation_id.startswith("req_")
        assert len(correlation_id) == 12  # noqa: PLR2004

    def test_environment_and_demo_mode_survive_context_clear(self, settings, capsys):
        settings.demo_mode = True
        setup_logging(settings, log_format="json")
        set_correlation_id(new_correlation_id())
        clear_context()

        get_logger("tests").info("after_request")

        entries = parse_json_lines(capsys.readouterr().out)
        entry = next(e for e in entries if e.get("event") == "after_request")
        assert entry["service"] == "saas-factory"
        assert entry["environment"] == "test"
        assert entry["demo_mode"] is True
        assert "correlation_id" not in entry

    def test_production_logs_json_with_structured_tracebacks(self, capsys):
        setup_logging(Settings(_env_file=None, environment="production"))

        try:
            raise ValueError("bad artifact")
        except ValueError:
            get_logger("tests").exception("generation_failed", project_id="p1")

        entries = parse_json_lines(capsys.readouterr().out)
        entry = next(e for e in entries if e.get("event") == "generation_failed")
        assert entry["environment"] == "production"
        assert entry["exception"][0]["exc_type"] == "ValueError"
        assert entry["exception"][0]["exc_value"] == "bad artifact"

    @pytest.mark.parametrize(
        ("log_level", "library_level"),
        [("INFO", logging.WARNING), ("ERROR", logging.ERROR), ("DEBUG", logging.DEBUG)],
    )
    def test_library_loggers_are_quieted(self, settings, log_level, library_level):
        setup_logging(settings, log_format="json", log_level=log_level)

        assert logging.getLogger("sqlalchemy.engine").level == library_level
        assert logging.getLogger("httpx").level == library_level
