"""Normalizes model-generated timestamps into seconds."""

import logging
import math
import re
from typing import Any

logger = logging.getLogger(__name__)

# Anything that is not a digit, a clock colon or a decimal separator is noise.
_NOISE_RE = re.compile(r"[^0-9:.,]")
_DIGITS_RE = re.compile(r"^\d+$")


def _seconds_part_to_ms(part: str) -> int:
    """
    Converts an 'SS' or 'SS.fff' component to whole milliseconds.

    The fraction is truncated or right-padded to exactly three digits first,
    so '5.5' is 5500ms and '5.12345' is 5123ms.

    Raises:
        ValueError: If the component is not a plain decimal number.
    """
    whole, sep, fraction = part.partition(".")
    if not whole:
        whole = "0"
    if not _DIGITS_RE.match(whole) or (sep and fraction and not _DIGITS_RE.match(fraction)):
        raise ValueError(f"Invalid seconds component: {part!r}")
    millis = (fraction[:3]).ljust(3, "0")
    return int(whole) * 1000 + int(millis)


def _clock_part(part: str) -> int:
    if not _DIGITS_RE.match(part):
        raise ValueError(f"Invalid clock component: {part!r}")
    return int(part)


def parse_timestamp_ms(raw: str) -> int:
    """
    Parses a timestamp string into integer milliseconds.

    Accepts 'SS', 'SS.mmm', 'MM:SS', 'MM:SS.mmm' and 'HH:MM:SS.mmm', with
    either '.' or ',' as the fractional separator. A string without any
    colon is read as raw total seconds ('65.5' is 65.5 seconds).

    Args:
        raw: The timestamp as emitted by the model.

    Returns:
        The timestamp in milliseconds.

    Raises:
        ValueError: If nothing parseable remains after cleaning.
    """
    cleaned = _NOISE_RE.sub("", raw).replace(",", ".")
    if not cleaned:
        raise ValueError(f"No timestamp digits in {raw!r}")

    parts = cleaned.split(":")
    if len(parts) == 1:
        return _seconds_part_to_ms(parts[0])
    if len(parts) == 2:
        minutes, seconds = parts
        return _clock_part(minutes) * 60_000 + _seconds_part_to_ms(seconds)
    if len(parts) == 3:
        hours, minutes, seconds = parts
        return (_clock_part(hours) * 3600 + _clock_part(minutes) * 60) * 1000 + _seconds_part_to_ms(seconds)
    raise ValueError(f"Too many ':' separated parts in {raw!r}")


def normalize_timestamp(raw: Any) -> float:
    """
    Converts a raw timestamp value into non-negative seconds.

    Numbers are taken as seconds already. Strings go through
    parse_timestamp_ms. Anything unparseable (or negative, NaN, infinite)
    yields 0.0 and a warning, so one bad field never aborts a batch.

    Args:
        raw: A string, int or float from the model output. None means the
             field was missing.

    Returns:
        A finite, non-negative float in seconds.
    """
    if raw is None:
        logger.debug("Missing timestamp, defaulting to 0.")
        return 0.0
    if isinstance(raw, bool):
        logger.warning(f"Could not parse timestamp: {raw!r}. Using 0.")
        return 0.0
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            logger.warning(f"Timestamp out of range: {raw!r:.40}. Using 0.")
            return 0.0
        if not math.isfinite(value) or value < 0:
            logger.warning(f"Timestamp out of range: {raw!r}. Using 0.")
            return 0.0
        return value
    if not isinstance(raw, str):
        logger.warning(f"Unsupported timestamp type {type(raw).__name__}: {raw!r}. Using 0.")
        return 0.0

    try:
        return parse_timestamp_ms(raw) / 1000.0
    except (ValueError, OverflowError):
        logger.warning(f"Could not parse timestamp: {raw!r:.40}. Using 0.")
        return 0.0
