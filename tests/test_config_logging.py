"""Tests for settings and structured logging setup."""

import pytest
import structlog

from opflow.core.config import Settings
from opflow.core.logging import get_logger, setup_logging
from opflow.pipeline.events import StepLogListener


@pytest.fixture
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("OPFLOW_LOG_LEVEL", "OPFLOW_LOG_JSON", "OPFLOW_LOG_STEP_EVENTS"):
            monkeypatch.delenv(name, raising=False)

        config = Settings(_env_file=None)

        assert config.LOG_LEVEL == "INFO"
        assert config.LOG_JSON is False
        assert config.WARN_ON_DUPLICATE_STEP_NAMES is True
        assert config.LOG_STEP_EVENTS is False

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("OPFLOW_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("OPFLOW_LOG_STEP_EVENTS", "true")

        config = Settings(_env_file=None)

        assert config.LOG_LEVEL == "DEBUG"
        assert config.LOG_STEP_EVENTS is True


class TestLogging:
    def test_setup_logging_renders_json(self, capsys, reset_structlog):
        setup_logging("INFO", json=True)

        get_logger("opflow.test").info("Transaction declared", steps=2)

        out = capsys.readouterr().out
        assert '"event": "Transaction declared"' in out
        assert '"steps": 2' in out

    def test_named_logger_adds_no_context_keys(self, capsys, reset_structlog):
        setup_logging("INFO", json=True)

        get_logger("opflow.test").info("Transaction declared")

        assert "logger_name" not in capsys.readouterr().out

    def test_setup_logging_filters_below_level(self, capsys, reset_structlog):
        setup_logging("WARNING", json=True)

        get_logger("opflow.test").info("hidden")

        assert "hidden" not in capsys.readouterr().out

    def test_unknown_level_is_rejected(self):
        with pytest.raises(ValueError):
            setup_logging("LOUD")

    def test_step_log_listener_levels(self):
        with structlog.testing.capture_logs() as logs:
            listener = StepLogListener()
            listener.on_step_started("process", {})
            listener.on_step_succeeded("process", {}, {})
            listener.on_step_failed("validate", {}, ValueError("email required"))

        assert [(entry["event"], entry["log_level"]) for entry in logs] == [
            ("Step started", "debug"),
            ("Step succeeded", "info"),
            ("Step failed", "warning"),
        ]
        assert logs[-1]["error"] == "email required"
