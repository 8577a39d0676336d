"""
Tests for the end-to-end subtitle generation pipeline.
"""

import os

import pytest

from lyricsync.audio_extractor import AudioExtractor
from lyricsync.exceptions import AudioExtractionError, LyricSyncError, TranscriptionError
from lyricsync.models import SubtitleSegment
from lyricsync.subtitle_generator import SubtitleGenerator
from lyricsync.transcriber import Transcriber


class StubTranscriber(Transcriber):
    def __init__(self, segments):
        self.segments = segments
        self.calls = []

    def transcribe(self, audio, mime_type, model="gemini-2.5-flash", mode="line"):
        self.calls.append((audio, mime_type, model, mode))
        return list(self.segments)


class StubExtractor(AudioExtractor):
    def __init__(self):
        super().__init__()
        self.extracted = []

    def extract_audio(self, video_filepath, output_audio_dir, output_filename=None):
        path = os.path.join(output_audio_dir, f"{output_filename}.mp3")
        with open(path, "wb") as f:
            f.write(b"extracted-mp3")
        self.extracted.append(path)
        return path


def make_config(tmp_path, **overrides):
    config = {
        "temp_dir": str(tmp_path / "temp"),
        "model": "gemini-2.5-flash",
        "mode": "line",
        "output_formats": ["srt", "lrc"],
        "lrc_artist": "Band",
    }
    config.update(overrides)
    return config


SEGMENTS = [
    SubtitleSegment(start=1.5, end=3.25, text="Hello"),
    SubtitleSegment(start=28.19, end=30.0, text="La la la"),
]


def test_generate_writes_srt_and_lrc(tmp_path):
    audio = tmp_path / "song.mp3"
    audio.write_bytes(b"ID3-audio")
    transcriber = StubTranscriber(SEGMENTS)
    generator = SubtitleGenerator(make_config(tmp_path), StubExtractor(), transcriber)

    result = generator.generate(str(audio), str(tmp_path / "out"))

    assert result.segments == SEGMENTS
    assert transcriber.calls[0][:2] == (b"ID3-audio", "audio/mpeg")
    srt = (tmp_path / "out" / "song.srt").read_text(encoding="utf-8")
    lrc = (tmp_path / "out" / "song.lrc").read_text(encoding="utf-8")
    assert srt.startswith("1\n00:00:01,500 --> 00:00:03,250\nHello\n")
    assert lrc == "[ti:song]\n[ar:Band]\n[00:01.50]Hello\n[00:28.19]La la la"


def test_video_input_is_extracted_and_cleaned_up(tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"video")
    extractor = StubExtractor()
    transcriber = StubTranscriber(SEGMENTS)
    generator = SubtitleGenerator(make_config(tmp_path, output_formats=["srt"]), extractor, transcriber)

    generator.generate(str(video), str(tmp_path / "out"))

    assert transcriber.calls[0][:2] == (b"extracted-mp3", "audio/mpeg")
    assert not os.path.exists(extractor.extracted[0])
    assert (tmp_path / "out" / "clip.srt").exists()
    assert not (tmp_path / "out" / "clip.lrc").exists()


def test_no_segments_is_an_error(tmp_path):
    audio = tmp_path / "silence.wav"
    audio.write_bytes(b"RIFF")
    generator = SubtitleGenerator(make_config(tmp_path), StubExtractor(), StubTranscriber([]))
    with pytest.raises(TranscriptionError):
        generator.generate(str(audio), str(tmp_path / "out"))


def test_missing_input(tmp_path):
    generator = SubtitleGenerator(make_config(tmp_path), StubExtractor(), StubTranscriber(SEGMENTS))
    with pytest.raises(FileNotFoundError):
        generator.generate(str(tmp_path / "nope.mp3"), str(tmp_path / "out"))


def test_empty_audio_file(tmp_path):
    audio = tmp_path / "empty.mp3"
    audio.write_bytes(b"")
    generator = SubtitleGenerator(make_config(tmp_path), StubExtractor(), StubTranscriber(SEGMENTS))
    with pytest.raises(AudioExtractionError):
        generator.generate(str(audio), str(tmp_path / "out"))


def test_invalid_config(tmp_path):
    with pytest.raises(LyricSyncError):
        SubtitleGenerator(make_config(tmp_path, temp_dir=None), StubExtractor(), StubTranscriber([]))
    with pytest.raises(LyricSyncError):
        SubtitleGenerator(make_config(tmp_path, mode="syllable"), StubExtractor(), StubTranscriber([]))
    with pytest.raises(LyricSyncError):
        SubtitleGenerator(make_config(tmp_path, output_formats=["vtt"]), StubExtractor(), StubTranscriber([]))
