"""Turns repaired model output into validated, ordered subtitle segments."""

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import Any, Dict, List, Optional

from .models import RawSegment, RawWord, SubtitleSegment, WordTiming
from .timestamps import normalize_timestamp

logger = logging.getLogger(__name__)

ROLLOVER_PERIOD_SECONDS = 60.0
ROLLOVER_TOLERANCE_SECONDS = 5.0


def _build_words(raw_words: Optional[List[RawWord]]) -> tuple:
    if not raw_words:
        return ()
    words = []
    for raw in raw_words:
        text = raw.text.strip()
        if not text:
            continue
        words.append(WordTiming(
            start=normalize_timestamp(raw.start),
            end=normalize_timestamp(raw.end),
            text=text,
        ))
    words.sort(key=lambda w: w.start)
    return tuple(words)


def _build_segment(raw: RawSegment) -> Optional[SubtitleSegment]:
    text = raw.text.strip()
    if not text:
        return None
    return SubtitleSegment(
        start=normalize_timestamp(raw.start),
        end=normalize_timestamp(raw.end),
        text=text,
        words=_build_words(raw.words),
    )


def _shift(segment: SubtitleSegment, offset: float) -> SubtitleSegment:
    words = tuple(
        replace(word, start=word.start + offset, end=word.end + offset)
        for word in segment.words
    )
    return replace(segment, start=segment.start + offset, end=segment.end + offset, words=words)


def correct_rollover(segments: List[SubtitleSegment]) -> List[SubtitleSegment]:
    """
    Undoes 60-second clock wraps in segments given in emission order.

    When a start jumps back more than ROLLOVER_TOLERANCE_SECONDS behind the
    previous (corrected) start, the running offset grows by 60s until the
    segment is no longer behind. The offset applies to that segment and
    every later one.

    Args:
        segments: Segments in the order the model produced them.

    Returns:
        A new list with start, end and word timings shifted.
    """
    corrected = []
    offset = 0.0
    last_start: Optional[float] = None
    for segment in segments:
        adjusted = segment.start + offset
        if last_start is not None and adjusted < last_start - ROLLOVER_TOLERANCE_SECONDS:
            while segment.start + offset < last_start:
                offset += ROLLOVER_PERIOD_SECONDS
            logger.info(
                f"Suspected clock rollover at {segment.start:.3f}s "
                f"(previous start {last_start:.3f}s). Offset is now {offset:.0f}s."
            )
        if offset:
            segment = _shift(segment, offset)
        corrected.append(segment)
        last_start = segment.start
    return corrected


def post_process(parsed: Mapping, correct_rollovers: bool = False) -> List[SubtitleSegment]:
    """
    Validates, cleans and orders the segments of a repaired response.

    Args:
        parsed: Mapping with a "segments" list, as returned by repair_response.
        correct_rollovers: Apply correct_rollover before sorting. Only useful
                           for models that emit raw seconds which may wrap.

    Returns:
        Segments with non-empty text, sorted by start (stable).
    """
    records: List[Any] = parsed.get("segments") or []
    segments: List[SubtitleSegment] = []
    dropped = 0

    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning(f"Skipping segment #{index}: expected an object, got {type(record).__name__}.")
            dropped += 1
            continue
        segment = _build_segment(RawSegment.from_mapping(record))
        if segment is None:
            dropped += 1
            continue
        segments.append(segment)

    if dropped:
        logger.debug(f"Dropped {dropped} empty or invalid segment records.")

    if correct_rollovers:
        segments = correct_rollover(segments)

    segments.sort(key=lambda s: s.start)

    for segment in segments:
        if not segment.has_valid_timing:
            logger.warning(
                f"Segment ends before it starts ({segment.start:.3f}s -> {segment.end:.3f}s): "
                f"'{segment.text[:30]}'"
            )

    logger.info(f"Post-processing produced {len(segments)} segments.")
    return segments


def summarize_timing(segments: List[SubtitleSegment]) -> Dict[str, float]:
    """Small report used in logs: count, span and number of inverted segments."""
    if not segments:
        return {"count": 0, "first_start": 0.0, "last_end": 0.0, "inverted": 0}
    return {
        "count": len(segments),
        "first_start": segments[0].start,
        "last_end": max(s.end for s in segments),
        "inverted": sum(1 for s in segments if not s.has_valid_timing),
    }
