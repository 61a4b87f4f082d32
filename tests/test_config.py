"""Tests for settings and logging setup."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from paraflow import configure_logging, get_settings
from paraflow.config import Settings, reset_settings


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.log_format == "console"
        assert settings.adapter_max_workers is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("PARAFLOW_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PARAFLOW_LOG_FORMAT", "json")
        settings = get_settings()
        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"

    def test_adapter_max_workers_must_be_positive(self, monkeypatch):
        with pytest.raises(ValidationError):
            Settings(adapter_max_workers=0)
        monkeypatch.setenv("PARAFLOW_ADAPTER_MAX_WORKERS", "0")
        with pytest.raises(ValidationError):
            get_settings()

    def test_cached_until_reset(self, monkeypatch):
        first = get_settings()
        assert get_settings() is first
        reset_settings()
        assert get_settings() is not first


class TestConfigureLogging:
    def test_json_formatter(self, monkeypatch):
        monkeypatch.setenv("PARAFLOW_LOG_FORMAT", "json")
        handlers = list(logging.root.handlers)
        formatters = [handler.formatter for handler in handlers]
        root_level = logging.root.level
        try:
            configure_logging()
            assert any(
                isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
                for handler in logging.root.handlers
            )
        finally:
            for handler in list(logging.root.handlers):
                if handler not in handlers:
                    logging.root.removeHandler(handler)
                    handler.close()
            for handler, formatter in zip(handlers, formatters):
                handler.setFormatter(formatter)
            logging.root.setLevel(root_level)
            logging.getLogger("paraflow").setLevel(logging.NOTSET)
            structlog.reset_defaults()

        assert logging.root.handlers == handlers
