"""
Tests for building Gemini transcription requests.
"""

import pytest
from google.genai import types

from lyricsync import prompts
from lyricsync.exceptions import ConfigurationError
from lyricsync.request_builder import (
    ModelProfile,
    RequestBuilder,
    TranscriptionMode,
    build_response_schema,
)


def test_line_mode_request_contents():
    request = RequestBuilder().build(b"ID3audio", "audio/mpeg", model="gemini-2.5-flash", mode="line")

    assert request.model == "gemini-2.5-flash"
    assert request.mode is TranscriptionMode.LINE
    (content,) = request.contents
    audio_part, prompt_part = content.parts
    assert audio_part.inline_data.data == b"ID3audio"
    assert audio_part.inline_data.mime_type == "audio/mpeg"
    assert prompts.INSTRUCTION_HEAVY_PROMPT in prompt_part.text
    assert prompts.TIMESTAMP_DIRECTIVE in prompt_part.text

    config = request.config
    assert config.response_mime_type == "application/json"
    assert config.system_instruction == prompts.SYSTEM_INSTRUCTION
    assert config.thinking_config is None


def test_thinking_model_gets_budget_and_logic_prompt():
    request = RequestBuilder().build(b"x", "audio/wav", model="gemini-3-flash-preview")
    assert request.config.thinking_config.thinking_budget == 4096
    assert prompts.LOGIC_HEAVY_PROMPT in request.contents[0].parts[1].text


def test_unknown_model_falls_back_to_default_profile():
    builder = RequestBuilder()
    profile = builder.profile_for("gemini-9-ultra")
    assert profile.prompt == prompts.INSTRUCTION_HEAVY_PROMPT
    assert profile.thinking_budget is None


def test_custom_profiles_are_used():
    builder = RequestBuilder(profiles={"m": ModelProfile("m", "custom prompt", thinking_budget=128)})
    request = builder.build(b"x", "audio/wav", model="m")
    assert request.contents[0].parts[1].text.startswith("custom prompt")
    assert request.config.thinking_config.thinking_budget == 128


def test_line_schema_shape():
    schema = build_response_schema(TranscriptionMode.LINE)
    assert schema.type == types.Type.ARRAY
    assert schema.items.type == types.Type.OBJECT
    assert set(schema.items.properties) == {"start", "end", "text"}
    assert schema.items.required == ["start", "end", "text"]


def test_word_schema_and_prompt():
    schema = build_response_schema(TranscriptionMode.WORD)
    words = schema.items.properties["words"]
    assert words.type == types.Type.ARRAY
    assert set(words.items.properties) == {"start", "end", "text"}
    assert "words" in schema.items.required

    request = RequestBuilder().build(b"x", "audio/wav", mode=TranscriptionMode.WORD)
    assert prompts.WORD_MODE_FORMAT in request.contents[0].parts[1].text


def test_invalid_mode_and_empty_audio():
    with pytest.raises(ConfigurationError):
        RequestBuilder().build(b"x", "audio/wav", mode="syllable")
    with pytest.raises(ValueError):
        RequestBuilder().build(b"", "audio/wav")
