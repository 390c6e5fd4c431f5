"""Tests for settings and logging setup."""

import json
import logging

import pytest
import structlog
from pydantic import ValidationError as PydanticValidationError

from invoicing.config import Settings, get_settings
from invoicing.logging_config import get_logger, setup_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ["INVOICING_LOG_LEVEL", "INVOICING_SNAPSHOT_MAPPER", "INVOICING_APP_ENV"]:
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.app_name == "invoicing"
        assert settings.log_level == "INFO"
        assert settings.snapshot_mapper == "visitor"
        assert not settings.is_production

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("INVOICING_LOG_LEVEL", "debug")
        monkeypatch.setenv("INVOICING_APP_ENV", "production")

        settings = get_settings()

        assert settings.log_level == "DEBUG"
        assert settings.is_production

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_invalid_log_level(self):
        with pytest.raises(PydanticValidationError):
            Settings(log_level="LOUD")

    def test_invalid_mapper(self):
        with pytest.raises(PydanticValidationError):
            Settings(snapshot_mapper="reflection")


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_logging(self):
        root_logger = logging.getLogger()
        level = root_logger.level
        yield
        structlog.reset_defaults()
        # Drop the stdout handler setup_logging installed; pytest manages its own.
        for handler in root_logger.handlers[:]:
            if type(handler) is logging.StreamHandler:
                root_logger.removeHandler(handler)
        root_logger.setLevel(level)

    @pytest.mark.parametrize("log_json", [True, False])
    def test_setup_logging(self, log_json):
        setup_logging(Settings(log_level="WARNING", log_json=log_json))

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1

    def test_setup_logging_is_repeatable(self):
        setup_logging(Settings())
        setup_logging(Settings())

        assert len(logging.getLogger().handlers) == 1

    def test_get_logger(self):
        setup_logging(Settings(log_level="DEBUG"))

        logger = get_logger("invoicing.tests")
        logger.info("test_event", answer=42)

    def test_json_events_carry_app_context_from_settings(self, capsys):
        setup_logging(Settings(app_name="billing-worker", app_env="staging", log_json=True))

        get_logger("invoicing.tests").info("invoice_exported", lines=2)

        records = [json.loads(line) for line in capsys.readouterr().out.splitlines() if line]
        record = next(r for r in records if r["message"] == "invoice_exported")
        assert record["app_name"] == "billing-worker"
        assert record["app_env"] == "staging"
        # Fields are rendered once, not nested inside a JSON string
        assert record["lines"] == 2
        assert record["level"] == "info"
