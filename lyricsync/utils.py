"""Utility functions for LyricSync."""

import os
import logging
from .exceptions import FileSystemError

logger = logging.getLogger(__name__)

def ensure_dir_exists(dir_path: str) -> None:
    """
    Ensures that a directory exists. Creates it if it doesn't.

    Args:
        dir_path: The path to the directory.

    Raises:
        FileSystemError: If the directory cannot be created due to permissions
                         or if the path exists but is not a directory.
    """
    if not dir_path:
        raise ValueError("Directory path cannot be empty.")
    try:
        if not os.path.exists(dir_path):
            os.makedirs(dir_path)
            logger.info(f"Created directory: {dir_path}")
        elif not os.path.isdir(dir_path):
            raise FileSystemError(f"Path exists but is not a directory: {dir_path}")
    except OSError as e:
        logger.error(f"Error creating or accessing directory {dir_path}: {e}", exc_info=True)
        raise FileSystemError(f"Could not create or access directory {dir_path}: {e}") from e

def format_time_srt(seconds: float) -> str:
    """
    Formats seconds into SRT time format HH:MM:SS,mmm.

    Args:
        seconds: Time in seconds.

    Returns:
        Formatted time string.
    """
    if seconds < 0:
        seconds = 0.0 # Ensure non-negative time
    milliseconds = int(seconds * 1000 + 0.5) # Half-up, like Math.round
    hrs = milliseconds // 3600000
    milliseconds %= 3600000
    mins = milliseconds // 60000
    milliseconds %= 60000
    secs = milliseconds // 1000
    milliseconds %= 1000
    return f"{hrs:02d}:{mins:02d}:{secs:02d},{milliseconds:03d}"

def format_time_lrc(seconds: float) -> str:
    """
    Formats seconds into an LRC tag [MM:SS.cc] (centiseconds).

    Minutes are not wrapped into hours; they simply grow past 99.
    """
    if seconds < 0:
        seconds = 0.0
    centis = int(seconds * 100 + 0.5)
    mins = centis // 6000
    centis %= 6000
    secs = centis // 100
    centis %= 100
    return f"[{mins:02d}:{secs:02d}.{centis:02d}]"

def format_time_display(seconds: float) -> str:
    """Formats seconds as MM:SS.mmm for on-screen or log display."""
    if seconds < 0:
        seconds = 0.0
    milliseconds = int(seconds * 1000 + 0.5)
    mins = milliseconds // 60000
    milliseconds %= 60000
    secs = milliseconds // 1000
    milliseconds %= 1000
    return f"{mins:02d}:{secs:02d}.{milliseconds:03d}"

def format_duration(seconds: float) -> str:
    """Formats a duration as M:SS."""
    total = int(max(seconds, 0.0))
    return f"{total // 60}:{total % 60:02d}"
