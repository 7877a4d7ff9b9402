#!/usr/bin/env python3
# cactus/main.py
"""
Cactus Main Entry Point
=======================

This module is the entry point for launching the Cactus editor. It performs:
1) Environment Loading: reads ~/.config/cactus/.env early.
2) Configuration & Logging: loads config and initializes logging.
3) Curses Wrapper: safely initializes/tears down curses.
4) Application Run: instantiates Cactus, opens the requested file and
   starts its main loop.

A file named on the command line that cannot be opened is fatal: the
terminal is restored, the error is printed to stderr and the process
exits with status 1.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from typing import Any, Optional

from dotenv import load_dotenv

from cactus.utils.utils import get_config_dir, load_config
from cactus.utils.logging_config import setup_logging

logger = logging.getLogger("cactus")


def _bootstrap() -> dict[str, Any]:
    """Load the user's .env, the configuration and set up logging."""
    try:
        load_dotenv(dotenv_path=get_config_dir() / ".env")
    except OSError:
        # a missing HOME only loses optional overrides
        pass

    try:
        config: dict[str, Any] = load_config()
        setup_logging(config)
    except Exception as e:
        print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
        sys.exit(1)
    return config


def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[str]) -> None:
    """
    Target for `curses.wrapper`. Creates the editor and runs it.

    Raises:
        OSError: If `file_to_open` cannot be read.
    """
    from cactus.core.Cactus import HELP_MESSAGE, Cactus

    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        os.environ.setdefault("ESCDELAY", "25")

    editor = Cactus(stdscr, config=config)

    # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    if file_to_open:
        editor.open_file(file_to_open)

    editor._set_status_message(HELP_MESSAGE)
    editor.run()


def start() -> None:
    """
    Initializes locale and runs the curses application via wrapper.
    """
    config = _bootstrap()
    logger.info("Cactus editor starting up...")

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = sys.argv[1] if len(sys.argv) > 1 else None

    try:
        curses.wrapper(main_app_runner, config, file_to_open)
        logger.info("Cactus editor shut down gracefully.")
    except OSError as e:
        logger.critical("Could not open '%s': %s", file_to_open, e, exc_info=True)
        print(f"cactus: {file_to_open}: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
