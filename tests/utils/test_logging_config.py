# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `cactus.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Can disable console logging when `log_to_console` is set to False.
- Enables key tracing only when the CACTUS_KEYTRACE variable is set.

The tests run in a temporary working directory to avoid touching real files.
"""

import logging

from cactus.utils import logging_config


def test_setup_logging_creates_handlers(tmp_path, monkeypatch) -> None:
    """`setup_logging` should add rotating file handlers with proper levels.

    Scenario:
    - Console logging is disabled.
    - Separate error log is requested.
    - File handler level is INFO.

    Assertions:
    - Exactly two handlers (main + error) are attached to the root logger.
    - Handler levels match the configuration.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR, raising=False)

    logging_config.setup_logging(
        {
            "logging": {
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
            }
        }
    )

    root = logging.getLogger()
    names = {type(h).__name__ for h in root.handlers}

    assert "RotatingFileHandler" in names
    assert len(root.handlers) == 2
    assert root.handlers[0].level == logging.INFO
    assert root.handlers[1].level == logging.ERROR
    assert (tmp_path / "cactus.log").exists()


def test_setup_logging_console_handler(tmp_path, monkeypatch) -> None:
    """A console handler is added at the configured level when enabled."""
    monkeypatch.chdir(tmp_path)

    logging_config.setup_logging(
        {"logging": {"log_to_console": True, "console_level": "ERROR"}}
    )

    root = logging.getLogger()
    stream_handlers = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].level == logging.ERROR


def test_key_trace_disabled_by_default(tmp_path, monkeypatch) -> None:
    """Without CACTUS_KEYTRACE the key logger is disabled and writes nothing."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR, raising=False)

    logging_config.setup_logging({"logging": {"log_to_console": False}})

    assert logging_config.KEY_LOGGER.disabled is True
    assert not (tmp_path / "keytrace.log").exists()


def test_key_trace_enabled_by_env(tmp_path, monkeypatch) -> None:
    """CACTUS_KEYTRACE=1 attaches a rotating keytrace.log handler."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(logging_config.KEYTRACE_ENV_VAR, "1")

    logging_config.setup_logging({"logging": {"log_to_console": False}})

    key_logger = logging_config.KEY_LOGGER
    assert key_logger.disabled is False
    assert key_logger.propagate is False
    assert any(type(h).__name__ == "RotatingFileHandler" for h in key_logger.handlers)
    assert (tmp_path / "keytrace.log").exists()
