# cactus/utils/logging_config.py
"""cactus.utils.logging_config
=============================

Logging configuration for the Cactus editor.

The module defines the global logger objects and a single setup function,
`setup_logging`, which attaches handlers to the root logger according to the
``[logging]`` section of the application configuration.

Features:
    - Rotating file logging for general application events (cactus.log).
    - Optional console logging to stderr with configurable log level.
    - Optional separate error log file (error.log) for ERROR and CRITICAL events.
    - Optional key event tracing (keytrace.log) enabled via the CACTUS_KEYTRACE
      environment variable.
    - Safe reconfiguration: existing handlers are cleared so repeated calls
      (e.g. from tests) do not duplicate records.
    - Never raises; problems are reported to stderr and logging continues
      with a best-effort configuration.

Globals:
    logger: Main application logger ("cactus").
    KEY_LOGGER: Logger for raw key-press trace events ("cactus.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("cactus")  # main application logger
KEY_LOGGER = logging.getLogger("cactus.keyevents")  # raw key-press trace

KEYTRACE_ENV_VAR = "CACTUS_KEYTRACE"


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    """Create a rotating handler, creating the parent directory if needed."""
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        os.makedirs(log_dir)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating ``cactus.log`` capturing everything from the
       configured ``file_level`` (default DEBUG) upward.
    2. Console handler: optional ``stderr`` output whose threshold is
       ``console_level`` (default WARNING).
    3. Error-file handler: optional rotating ``error.log`` that stores only
       ERROR and CRITICAL events.
    4. Key-event handler: rotating ``keytrace.log`` attached to the
       ``cactus.keyevents`` logger when ``CACTUS_KEYTRACE`` is ``1/true/yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``file_level``, ``console_level``, ``log_to_console``,
            ``separate_error_log`` and ``log_file``.

    Notes:
        The function never raises.
    """
    if config is None:
        config = {}
    logging_config = config.get("logging", {})

    log_filename = logging_config.get("log_file", "cactus.log")
    log_file_level_str = str(logging_config.get("file_level", "DEBUG")).upper()
    log_file_level = getattr(logging, log_file_level_str, logging.DEBUG)

    file_formatter = logging.Formatter(
        "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
    )
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    except OSError as e_fh:
        print(
            f"Error setting up file logger for '{log_filename}': {e_fh}.",
            file=sys.stderr,
        )
        log_filename = os.path.join(tempfile.gettempdir(), "cactus.log")
        print(f"Logging to temporary file: '{log_filename}'", file=sys.stderr)
        try:
            file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
        except OSError as e_tmp:
            print(f"File logging disabled: {e_tmp}", file=sys.stderr)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(log_file_level)

    # Console Handler
    console_handler = None
    if logging_config.get("log_to_console", True):
        console_level_str = str(logging_config.get("console_level", "WARNING")).upper()
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)-8s - %(name)-12s - %(message)s")
        )
        console_handler.setLevel(getattr(logging, console_level_str, logging.WARNING))

    # Optional Separate Error Log File
    error_file_handler = None
    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler("error.log", 1 * 1024 * 1024, 3)
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
        except OSError as e_efh:
            print(f"Error setting up separate error log 'error.log': {e_efh}.", file=sys.stderr)

    root_logger = logging.getLogger()
    root_logger.handlers = []  # avoid duplicates on reconfiguration
    for handler in (file_handler, console_handler, error_file_handler):
        if handler:
            root_logger.addHandler(handler)
    root_logger.setLevel(log_file_level)

    # Key Event Logger
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        try:
            key_trace_handler = _rotating_handler("keytrace.log", 1 * 1024 * 1024, 3)
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            logger.info("Key event tracing enabled, logging to 'keytrace.log'.")
        except OSError as e_keytrace:
            logger.error("Failed to set up key trace logging: %s", e_keytrace, exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logger.debug("Key event tracing is disabled.")

    logger.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logger.info(
            "File logging to '%s' at level: %s.",
            log_filename,
            logging.getLevelName(file_handler.level),
        )
