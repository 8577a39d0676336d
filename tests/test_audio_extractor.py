"""
Tests for audio payload preparation.
"""

import pytest

from lyricsync.audio_extractor import (
    AudioExtractor,
    guess_mime_type,
    is_supported_media,
    is_video_file,
    read_audio_file,
)
from lyricsync.exceptions import AudioExtractionError


def test_guess_mime_type():
    assert guess_mime_type("a.MP3") == "audio/mpeg"
    assert guess_mime_type("a.m4a") == "audio/mp4"
    assert guess_mime_type("a.wav") == "audio/wav"
    assert guess_mime_type("a.unknown") == "audio/mpeg"


def test_media_classification():
    assert is_video_file("clip.MKV")
    assert not is_video_file("song.flac")
    assert is_supported_media("song.ogg")
    assert is_supported_media("clip.mov")
    assert not is_supported_media("notes.txt")


def test_read_audio_file(tmp_path):
    path = tmp_path / "voice.ogg"
    path.write_bytes(b"OggS")
    assert read_audio_file(str(path)) == (b"OggS", "audio/ogg")


def test_read_audio_file_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_audio_file(str(tmp_path / "missing.mp3"))
    empty = tmp_path / "empty.mp3"
    empty.write_bytes(b"")
    with pytest.raises(AudioExtractionError):
        read_audio_file(str(empty))


def test_extract_audio_missing_video(tmp_path):
    with pytest.raises(FileNotFoundError):
        AudioExtractor().extract_audio(str(tmp_path / "missing.mp4"), str(tmp_path))


def test_extract_audio_missing_ffmpeg_binary(tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"not really a video")
    extractor = AudioExtractor(ffmpeg_path=str(tmp_path / "no-such-ffmpeg"))
    with pytest.raises(AudioExtractionError):
        extractor.extract_audio(str(video), str(tmp_path / "out"))
