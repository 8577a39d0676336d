"""
Tests for segment post-processing.
"""

import logging

from lyricsync.models import SubtitleSegment, WordTiming
from lyricsync.post_processor import correct_rollover, post_process, summarize_timing


def test_normalizes_and_sorts_segments():
    parsed = {"segments": [
        {"start": "00:05.000", "end": "00:07.000", "text": " second "},
        {"startTime": "00:01.500", "endTime": "00:03.250", "text": "first"},
    ]}
    segments = post_process(parsed)
    assert segments == [
        SubtitleSegment(start=1.5, end=3.25, text="first"),
        SubtitleSegment(start=5.0, end=7.0, text="second"),
    ]


def test_drops_empty_and_non_object_records():
    parsed = {"segments": [
        {"start": "00:01.000", "end": "00:02.000", "text": "   "},
        {"start": "00:02.000", "end": "00:03.000"},
        "not a segment",
        {"start": "00:03.000", "end": "00:04.000", "text": "kept"},
    ]}
    segments = post_process(parsed)
    assert [s.text for s in segments] == ["kept"]


def test_sort_is_stable_for_equal_starts():
    parsed = {"segments": [
        {"start": 2, "end": 3, "text": "a"},
        {"start": 1, "end": 2, "text": "b"},
        {"start": 2, "end": 4, "text": "c"},
    ]}
    assert [s.text for s in post_process(parsed)] == ["b", "a", "c"]


def test_bad_timestamp_does_not_fail_batch():
    parsed = {"segments": [
        {"start": "garbage", "end": "00:01.000", "text": "zero start"},
        {"start": "00:02.000", "end": "00:03.000", "text": "fine"},
    ]}
    segments = post_process(parsed)
    assert segments[0].start == 0.0
    assert segments[0].text == "zero start"
    assert len(segments) == 2


def test_words_are_normalized_and_sorted():
    parsed = {"segments": [{
        "start": "00:01.000", "end": "00:03.000", "text": "hello big world",
        "words": [
            {"start": "00:02.000", "end": "00:03.000", "text": "world"},
            {"start": "00:01.000", "end": "00:01.500", "word": "hello"},
            {"start": "00:01.500", "end": "00:02.000", "text": " "},
            {"start": "00:01.500", "end": "00:02.000", "text": "big"},
        ],
    }]}
    (segment,) = post_process(parsed)
    assert segment.words == (
        WordTiming(start=1.0, end=1.5, text="hello"),
        WordTiming(start=1.5, end=2.0, text="big"),
        WordTiming(start=2.0, end=3.0, text="world"),
    )


def test_end_before_start_is_kept_and_warned(caplog):
    parsed = {"segments": [{"start": "00:05.000", "end": "00:04.000", "text": "backwards"}]}
    with caplog.at_level(logging.WARNING, logger="lyricsync.post_processor"):
        (segment,) = post_process(parsed)
    assert (segment.start, segment.end) == (5.0, 4.0)
    assert not segment.has_valid_timing
    assert "ends before it starts" in caplog.text


def test_rollover_correction_restores_wrapped_clock():
    parsed = {"segments": [
        {"start": 0, "end": 5, "text": "a"},
        {"start": 10, "end": 20, "text": "b"},
        {"start": 3, "end": 8, "text": "c", "words": [{"start": 3, "end": 4, "text": "c"}]},
        {"start": 15, "end": 18, "text": "d"},
    ]}
    segments = post_process(parsed, correct_rollovers=True)
    assert [s.start for s in segments] == [0, 10, 63, 75]
    assert [s.end for s in segments] == [5, 20, 68, 78]
    assert segments[2].words[0].start == 63
    starts = [s.start for s in segments]
    assert starts == sorted(starts)


def test_rollover_tolerates_small_overlaps():
    segments = [
        SubtitleSegment(start=10.0, end=12.0, text="a"),
        SubtitleSegment(start=7.0, end=9.0, text="overlap"),
    ]
    assert correct_rollover(segments) == segments


def test_rollover_is_off_by_default():
    parsed = {"segments": [
        {"start": 10, "end": 20, "text": "b"},
        {"start": 3, "end": 8, "text": "c"},
    ]}
    assert [s.start for s in post_process(parsed)] == [3, 10]


def test_summarize_timing():
    segments = [
        SubtitleSegment(start=1.0, end=2.0, text="a"),
        SubtitleSegment(start=3.0, end=2.5, text="b"),
    ]
    assert summarize_timing(segments) == {"count": 2, "first_start": 1.0, "last_end": 2.5, "inverted": 1}
    assert summarize_timing([])["count"] == 0
