# guit/utils/logging_config.py
"""guit.utils.logging_config
===========================

Root logger setup for guit. Records go to one rotating file (guit.log by
default under ~/.config/guit) because curses owns the terminal while the
dashboard runs. Decoded key presses can additionally be traced to
keytrace.log by setting GUIT_KEYTRACE.
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


logger = logging.getLogger("guit")
KEY_LOGGER = logging.getLogger("guit.keyevents")

LOG_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"


def _ensure_log_dir(filename: str) -> str:
    """Creates the directory of *filename*; returns a temp-dir path on failure."""
    log_dir = os.path.dirname(filename)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir)
        except OSError as e_mkdir:
            print(f"Error creating log directory '{log_dir}': {e_mkdir}", file=sys.stderr)
            filename = os.path.join(tempfile.gettempdir(), os.path.basename(filename) or "guit.log")
            print(f"Logging to temporary file: '{filename}'", file=sys.stderr)
    return filename


def _setup_key_trace(log_dir: str) -> None:
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get("GUIT_KEYTRACE", "").lower() not in {"1", "true", "yes"}:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        return

    key_trace_filename = os.path.join(log_dir, "keytrace.log")
    try:
        handler = logging.handlers.RotatingFileHandler(
            key_trace_filename, maxBytes=1 * 1024 * 1024, backupCount=3, encoding="utf-8"
        )
    except OSError as e:
        logger.error("Failed to set up key trace logging: %s", e)
        KEY_LOGGER.disabled = True
        return
    handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
    KEY_LOGGER.addHandler(handler)
    logger.info("Key event tracing enabled, logging to '%s'.", key_trace_filename)


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures the root logger from the ``[logging]`` config section.

    Recognised keys are ``log_file`` (``~`` is expanded) and ``file_level``
    (default ``"DEBUG"``, overridden by ``GUIT_LOG_LEVEL``). Existing root
    handlers are replaced, so calling this twice does not duplicate records.
    Errors are reported to stderr and never raised.
    """
    logging_config = (config or {}).get("logging", {})

    log_filename = _ensure_log_dir(os.path.expanduser(logging_config.get("log_file", "guit.log")))
    level_name = (os.environ.get("GUIT_LOG_LEVEL") or logging_config.get("file_level", "DEBUG")).upper()
    level = getattr(logging, level_name, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(level)

    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_filename, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
    except OSError as e:
        print(f"Error setting up file logger for '{log_filename}': {e}. File logging is disabled.", file=sys.stderr)
    else:
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)

    _setup_key_trace(os.path.dirname(log_filename))
    logger.info("Logging to '%s' at level %s.", log_filename, logging.getLevelName(level))
