"""Tests for configuration and logging setup."""

from __future__ import annotations

import json
import logging

import pytest
from pydantic import ValidationError

from perfbudget.config import PerfBudgetConfig, get_config, reset_config
from perfbudget.logger import ROOT_LOGGER, JsonFormatter, configure_logging


class TestConfig:
    def test_defaults(self):
        config = PerfBudgetConfig(_env_file=None)
        assert config.log_level == "info"
        assert config.log_format == "text"
        assert config.budgets_file is None
        assert config.get_budgets_path() is None
        assert config.emit_span_events is True
        assert config.fail_on_unregistered is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PERFBUDGET_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PERFBUDGET_FAIL_ON_UNREGISTERED", "true")
        config = PerfBudgetConfig(_env_file=None)
        assert config.log_level == "debug"
        assert config.fail_on_unregistered is True

    def test_budgets_file_expanded(self, monkeypatch, tmp_path):
        monkeypatch.setenv("BUDGET_DIR", str(tmp_path))
        config = PerfBudgetConfig(_env_file=None, budgets_file="$BUDGET_DIR/budgets.yaml")
        assert config.get_budgets_path() == tmp_path / "budgets.yaml"

    def test_invalid_format_rejected(self):
        with pytest.raises(ValidationError):
            PerfBudgetConfig(_env_file=None, log_format="xml")

    def test_singleton(self):
        assert get_config() is get_config()

    def test_overrides_replace_singleton(self):
        first = get_config()
        second = get_config(log_format="json")
        assert second is not first
        assert get_config().log_format == "json"

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers = handlers
    logger.setLevel(level)


class TestLogging:
    def test_configure_is_idempotent(self, restore_logger):
        configure_logging("debug", "text")
        configure_logging("warning", "json")

        ours = [h for h in restore_logger.handlers if getattr(h, "_perfbudget", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, JsonFormatter)
        assert restore_logger.level == logging.WARNING

    def test_json_formatter(self):
        record = logging.LogRecord(
            name="perfbudget.otel",
            level=logging.WARNING,
            pathname=__file__,
            lineno=1,
            msg="%s over budget",
            args=("context_detection",),
            exc_info=None,
        )
        record.operation = "context_detection"
        record.passes = False

        entry = json.loads(JsonFormatter().format(record))
        assert entry["level"] == "warning"
        assert entry["logger"] == "perfbudget.otel"
        assert entry["message"] == "context_detection over budget"
        assert entry["operation"] == "context_detection"
        assert entry["passes"] is False
        assert "timestamp" in entry
