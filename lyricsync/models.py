"""Data models for LyricSync."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

# Timestamp values exactly as the model emitted them, before normalization.
RawTimestamp = Union[str, int, float, None]

@dataclass(frozen=True)
class WordTiming:
    """Timing for a single token inside a segment (karaoke granularity)."""
    start: float
    end: float
    text: str

@dataclass(frozen=True)
class SubtitleSegment:
    """Represents a single timed subtitle or lyric line."""
    start: float
    end: float
    text: str
    words: Tuple[WordTiming, ...] = ()

    @property
    def duration(self) -> float:
        return self.end - self.start

    @property
    def has_valid_timing(self) -> bool:
        """False when the model produced an end time before the start time."""
        return self.end >= self.start

@dataclass
class TranscriptionResult:
    """Holds the structured output of one transcription request."""
    model: str
    mode: str
    segments: List[SubtitleSegment] = field(default_factory=list)
    source_path: Optional[str] = None


def _pick(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in record:
            return record[key]
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class RawWord:
    """Loosely-typed word record as found in the model output."""
    start: RawTimestamp = None
    end: RawTimestamp = None
    text: str = ""

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "RawWord":
        return cls(
            start=_pick(record, "start", "startTime", "start_time"),
            end=_pick(record, "end", "endTime", "end_time"),
            text=_as_text(_pick(record, "text", "word")),
        )

@dataclass
class RawSegment:
    """
    Loosely-typed segment record mirroring the external JSON shape.

    Timestamps stay untyped (string, number or missing) until the
    post-processor resolves them into a SubtitleSegment.
    """
    start: RawTimestamp = None
    end: RawTimestamp = None
    text: str = ""
    words: Optional[List[RawWord]] = None

    @classmethod
    def from_mapping(cls, record: Mapping[str, Any]) -> "RawSegment":
        raw_words = record.get("words")
        words = None
        if isinstance(raw_words, list):
            words = [RawWord.from_mapping(w) for w in raw_words if isinstance(w, Mapping)]
        return cls(
            start=_pick(record, "start", "startTime", "start_time"),
            end=_pick(record, "end", "endTime", "end_time"),
            text=_as_text(record.get("text")),
            words=words,
        )
