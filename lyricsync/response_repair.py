"""Recovers the segment list from raw (possibly truncated) model output."""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from .exceptions import EmptyResponseError, MalformedResponseError

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^\s*```[A-Za-z]*[ \t]*\r?\n?")
_TRAILING_FENCE_RE = re.compile(r"\r?\n?```\s*$")

_CLOSERS = {"{": "}", "[": "]"}


def strip_code_fences(text: str) -> str:
    """Removes a surrounding ``` / ```json block and outer whitespace."""
    stripped = text.strip()
    stripped = _LEADING_FENCE_RE.sub("", stripped, count=1)
    stripped = _TRAILING_FENCE_RE.sub("", stripped, count=1)
    return stripped.strip()


def _loads(candidate: str) -> Optional[Any]:
    """json.loads that returns None instead of raising on bad input."""
    try:
        return json.loads(candidate)
    except (ValueError, RecursionError):
        return None


def _as_shape(parsed: Any) -> Optional[Dict[str, List[Any]]]:
    """Accepts {"segments": [...]} or a bare array; anything else is rejected."""
    if isinstance(parsed, list):
        return {"segments": parsed}
    if isinstance(parsed, dict) and isinstance(parsed.get("segments"), list):
        return parsed
    return None


def _close_after_last_object(text: str) -> Optional[str]:
    """
    Cuts text right after the last '}' that closes an object outside a
    string literal, then appends the closers for whatever is still open.

    Returns None when no object was ever completed.
    """
    stack: List[str] = []
    in_string = False
    escaped = False
    cut: Optional[int] = None
    open_at_cut: List[str] = []

    for index, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(char)
        elif char in "}]":
            if not stack or _CLOSERS[stack[-1]] != char:
                # Mismatched bracket; nothing after this point can be trusted.
                break
            stack.pop()
            if char == "}":
                cut = index
                open_at_cut = list(stack)

    if cut is None:
        return None
    closers = "".join(_CLOSERS[opener] for opener in reversed(open_at_cut))
    return text[: cut + 1] + closers


def _scan_prefixes(text: str) -> Optional[Dict[str, List[Any]]]:
    """
    Tries prefixes that start at the first '[', longest first.

    A prefix ending on ']' is parsed as-is; one ending on '}' (a complete
    element) is parsed with ']' appended. Other positions cannot end a
    valid array and are skipped. Each attempt is a full json.loads, so the
    worst case is quadratic in the text length; this only runs after the
    cheaper repairs failed.
    """
    first = text.find("[")
    if first == -1:
        return None
    for end in range(len(text), first, -1):
        last = text[end - 1]
        if last == "]":
            candidate = text[first:end]
        elif last == "}":
            candidate = text[first:end] + "]"
        else:
            continue
        parsed = _loads(candidate)
        if isinstance(parsed, list):
            return {"segments": parsed}
    return None


def repair_response(text: Optional[str]) -> Dict[str, List[Any]]:
    """
    Recovers the largest valid {"segments": [...]} structure from model output.

    Steps: strip code fences, parse directly, close brackets after the last
    complete object, then scan shrinking prefixes for a valid array.

    Args:
        text: Raw response text from the model.

    Returns:
        A mapping with a "segments" list of loosely-typed records.

    Raises:
        EmptyResponseError: If there is no text to parse.
        MalformedResponseError: If no repair strategy yields a segment list.
    """
    cleaned = strip_code_fences(text or "")
    if not cleaned:
        raise EmptyResponseError("AI returned an empty response.")

    parsed = _loads(cleaned)
    if parsed is not None:
        shape = _as_shape(parsed)
        if shape is not None:
            return shape
        if isinstance(parsed, dict):
            raise MalformedResponseError(
                f"Response JSON has no 'segments' array (keys: {sorted(parsed)[:10]})."
            )

    logger.warning(f"Response is not valid JSON ({len(cleaned)} chars). Attempting repair.")

    closed = _close_after_last_object(cleaned)
    if closed is not None:
        shape = _as_shape(_loads(closed))
        if shape is not None:
            logger.info(f"Recovered {len(shape['segments'])} segments by closing truncated JSON.")
            return shape

    shape = _scan_prefixes(cleaned)
    if shape is not None:
        logger.info(f"Recovered {len(shape['segments'])} segments by prefix scan.")
        return shape

    raise MalformedResponseError(
        "Failed to parse the transcription response as JSON. The response was probably "
        "too long or complex; try a shorter audio clip or the 'line' mode."
    )
