"""
Unit tests for configuration and logging setup.
"""

import logging

import json_log_formatter
import pytest
from pydantic import ValidationError

from catalogue.catalogue_server.config import Settings
from catalogue.catalogue_server.observability import setup_logging


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self):
        settings = Settings()
        assert settings.pool_size == 5
        assert settings.pool_timeout_seconds == 5.0
        assert settings.wal_mode is True
        assert settings.log_format == "json"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CATALOGUE_DATABASE_PATH", "/tmp/cat.db")
        monkeypatch.setenv("CATALOGUE_POOL_SIZE", "3")
        monkeypatch.setenv("CATALOGUE_WAL_MODE", "false")

        settings = Settings()
        assert settings.database_path == "/tmp/cat.db"
        assert settings.pool_size == 3
        assert settings.wal_mode is False

    def test_invalid_pool_size(self, monkeypatch):
        monkeypatch.setenv("CATALOGUE_POOL_SIZE", "0")
        with pytest.raises(ValidationError):
            Settings()

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("CATALOGUE_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings()

    def test_log_config(self, caplog):
        with caplog.at_level(logging.INFO):
            Settings().log_config()
        assert "Catalogue configuration loaded" in caplog.text


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_json_format(self):
        setup_logging(Settings(log_format="json", log_level="debug"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, json_log_formatter.JSONFormatter)

    def test_text_format(self):
        setup_logging(Settings(log_format="text", log_level="WARNING"))

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, json_log_formatter.JSONFormatter)
