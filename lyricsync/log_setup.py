"""Logging configuration for LyricSync."""

import logging
import sys
from logging.handlers import RotatingFileHandler
import os
from typing import Iterable, Optional
from .utils import ensure_dir_exists

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'
DEFAULT_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# SDK and HTTP loggers that are chatty at INFO (one line per request).
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "urllib3")


def level_from_name(name: Optional[str], default: int = logging.INFO) -> int:
    """Maps 'DEBUG', 'info', ... to a logging level, falling back to default."""
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def setup_logging(
    log_level: int = logging.INFO,
    log_dir: Optional[str] = "logs",
    log_file: str = "lyricsync.log",
    log_format: str = DEFAULT_LOG_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
    max_bytes: int = 5 * 1024 * 1024, # 5 MB
    backup_count: int = 3,
    quiet_loggers: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """
    Configures the root logger for the application.

    Logs go to stdout and, when log_dir is set, to a rotating file.
    Calling it again replaces the previous handlers, so the CLI can
    start with defaults and re-run it once the config file is loaded.

    Args:
        log_level: The minimum logging level (e.g., logging.INFO, logging.DEBUG).
        log_dir: Directory for the log file. None disables file logging.
        log_file: The name of the log file.
        log_format: The format string for log messages.
        date_format: The format string for timestamps in logs.
        max_bytes: Maximum size of a log file before rotation.
        backup_count: Number of rotated files to keep.
        quiet_loggers: Logger names capped at WARNING.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(log_level)
    formatter = logging.Formatter(log_format, datefmt=date_format)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if log_dir:
        try:
            ensure_dir_exists(log_dir)
            log_path = os.path.join(log_dir, log_file)
            file_handler = RotatingFileHandler(
                log_path,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
            root.debug(f"Logging initialized. Log file: {log_path}")
        except Exception as e:
            # Console logging still works; keep going without the file.
            root.error(f"Failed to set up file logging handler at {log_dir}/{log_file}: {e}", exc_info=True)

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
