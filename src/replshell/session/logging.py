"""Session logging configuration.

Provides session-specific file logging for command failures and debug info.
Logs are written to ~/.replshell/logs/<session-id>.log
"""
from __future__ import annotations

import logging
import sys
import traceback
import uuid
from pathlib import Path
from typing import Optional

# Directory for log files
LOGS_DIR = Path.home() / ".replshell" / "logs"

# Root logger of the package
LOGGER_NAME = "replshell"

# Module-level state
_session_handler: Optional[logging.FileHandler] = None
_session_log_path: Optional[Path] = None
_debug_handler: Optional[logging.StreamHandler] = None


def new_session_id() -> str:
    """Generate a short session ID."""
    return uuid.uuid4().hex[:8]


def get_log_path(session_id: str) -> Path:
    """Get the log file path for a session, creating the logs directory."""
    LOGS_DIR.mkdir(parents=True, exist_ok=True)
    return LOGS_DIR / f"{session_id}.log"


def configure_session_logging(
    session_id: str,
    level: int = logging.DEBUG,
    debug: bool = False,
) -> Path:
    """Configure file logging for a REPL session.

    Args:
        session_id: The session ID
        level: Logging level for file output (default DEBUG)
        debug: Also mirror records to stderr in grey

    Returns:
        Path to the log file
    """
    global _session_handler, _session_log_path, _debug_handler

    log_path = get_log_path(session_id)

    # Remove existing session handler if any
    close_session_logging()

    _session_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _session_handler.setLevel(level)
    _session_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(_session_handler)
    logger.setLevel(min(logger.level or logging.DEBUG, level))
    # Keep records out of the terminal unless asked for
    logger.propagate = False

    if debug:
        _debug_handler = logging.StreamHandler(sys.stderr)
        _debug_handler.setLevel(logging.DEBUG)
        _debug_handler.setFormatter(logging.Formatter("\033[90m%(name)s: %(message)s\033[0m"))
        logger.addHandler(_debug_handler)

    _session_log_path = log_path
    logger.info(f"=== Session started: {session_id} ===")
    return log_path


def close_session_logging() -> None:
    """Flush and close the current session's log handlers."""
    global _session_handler, _session_log_path, _debug_handler

    logger = logging.getLogger(LOGGER_NAME)
    if _session_handler is not None:
        logger.info("=== Session ended ===")
        logger.removeHandler(_session_handler)
        _session_handler.close()
        _session_handler = None
        _session_log_path = None
    if _debug_handler is not None:
        logger.removeHandler(_debug_handler)
        _debug_handler = None
    logger.propagate = True


def get_current_log_path() -> Optional[Path]:
    """Path to the current log file, or None if session logging is inactive."""
    return _session_log_path


def log_exception(
    error: BaseException,
    context: str = "",
    include_traceback: bool = True,
) -> str:
    """Log an exception with full details to the session log.

    Args:
        error: The exception to log
        context: What was happening
        include_traceback: Whether to include the traceback in the log

    Returns:
        User-friendly error message (without traceback)
    """
    logger = logging.getLogger(LOGGER_NAME)

    error_type = type(error).__name__
    error_msg = str(error)
    user_msg = f"{context}: {error_msg}" if context else f"{error_type}: {error_msg}"

    if include_traceback and error.__traceback__ is not None:
        tb_str = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        logger.error(f"{context}\n{error_type}: {error_msg}\n\nTraceback:\n{tb_str}")
    else:
        logger.error(f"{context} - {error_type}: {error_msg}")

    return user_msg
