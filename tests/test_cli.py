"""
Tests for the command-line entry point.
"""

import argparse
import logging

import pytest

from lyricsync import cli
from lyricsync.models import SubtitleSegment, TranscriptionResult


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put pytest's handlers back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def write_config(tmp_path, extra=""):
    path = tmp_path / "config.yaml"
    path.write_text(f"log_dir: null\ntemp_dir: {tmp_path / 'temp'}\n{extra}", encoding="utf-8")
    return str(path)


def test_missing_config_exits_1(tmp_path):
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"x")
    code = cli.CLIHandler().run(["-i", str(audio), "-o", str(tmp_path), "-c", str(tmp_path / "none.yaml")])
    assert code == 1


def test_missing_api_key_exits_1(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"x")
    code = cli.CLIHandler().run(["-i", str(audio), "-o", str(tmp_path / "out"), "-c", write_config(tmp_path)])
    assert code == 1


def test_successful_run_prints_segments(tmp_path, monkeypatch, capsys):
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"x")
    seen = {}

    class FakeGenerator:
        def generate(self, media_path, output_dir):
            return TranscriptionResult(model="m", mode="line", segments=[SubtitleSegment(1.5, 3.25, "Hello")])

    def fake_build(config):
        seen.update(config)
        return FakeGenerator()

    monkeypatch.setattr(cli, "build_generator", fake_build)
    code = cli.CLIHandler().run([
        "-i", str(audio), "-o", str(tmp_path / "out"), "-c", write_config(tmp_path),
        "--model", "gemini-3-flash-preview", "--mode", "word", "--rollover-correction", "--show",
    ])

    assert code == 0
    assert seen["model"] == "gemini-3-flash-preview"
    assert seen["mode"] == "word"
    assert seen["rollover_correction"] is True
    assert "00:01.500 - 00:03.250  Hello" in capsys.readouterr().out


def test_unexpected_error_exits_2(tmp_path, monkeypatch):
    audio = tmp_path / "a.mp3"
    audio.write_bytes(b"x")

    def broken_build(config):
        raise RuntimeError("boom")

    monkeypatch.setattr(cli, "build_generator", broken_build)
    code = cli.CLIHandler().run(["-i", str(audio), "-o", str(tmp_path), "-c", write_config(tmp_path)])
    assert code == 2


def test_apply_overrides_leaves_config_when_flags_absent():
    args = argparse.Namespace(model=None, mode=None, temp_dir=None, rollover_correction=False)
    config = {"model": "gemini-2.5-flash", "rollover_correction": False}
    assert cli.apply_overrides(dict(config), args) == config
