"""Logging configuration helpers."""

import logging
import logging.handlers

import structlog
from commerce.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_log_level,
)


class TestLogLevel:
    def test_follows_environment(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.setenv("ENV", "production")
        assert get_log_level() == "INFO"

    def test_test_environment_is_quiet(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("ENV", raising=False)
        monkeypatch.delenv("ENVIRONMENT", raising=False)
        monkeypatch.setenv("PROTEAN_ENV", "test")
        assert get_log_level() == "WARNING"

    def test_explicit_override(self, monkeypatch):
        monkeypatch.setenv("ENV", "production")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        assert get_log_level() == "DEBUG"


class TestConfigureLogging:
    def test_writes_rotating_file_when_directory_given(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "INFO")
        root = logging.getLogger()
        previous_handlers, previous_level = root.handlers[:], root.level
        try:
            configure_logging(log_dir=tmp_path / "logs", json_output=True)
            assert (tmp_path / "logs").is_dir()
            assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
            assert logging.getLogger("protean").level == logging.WARNING
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers = previous_handlers
            root.setLevel(previous_level)
            structlog.reset_defaults()


class TestRequestContext:
    def test_binds_request_id_and_fields(self):
        request_id = bind_request_context("req-42", path="/api/orders")
        try:
            assert request_id == "req-42"
            assert structlog.contextvars.get_contextvars() == {"request_id": "req-42", "path": "/api/orders"}
        finally:
            clear_request_context()

    def test_generates_request_id(self):
        request_id = bind_request_context()
        try:
            assert len(request_id) == 32
        finally:
            clear_request_context()

    def test_clear_drops_everything(self):
        bind_request_context("req-1")
        clear_request_context()
        assert structlog.contextvars.get_contextvars() == {}
