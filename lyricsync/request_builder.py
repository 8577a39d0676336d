"""Builds the generate_content request sent to the Gemini model."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union

from google.genai import types

from . import prompts
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"


class TranscriptionMode(str, Enum):
    """Segmentation granularity requested from the model."""
    LINE = "line"
    WORD = "word"

    @classmethod
    def parse(cls, value: Union[str, "TranscriptionMode"]) -> "TranscriptionMode":
        try:
            return cls(value)
        except ValueError as e:
            choices = ", ".join(m.value for m in cls)
            raise ConfigurationError(f"Unsupported transcription mode '{value}'. Choose one of: {choices}.") from e


@dataclass(frozen=True)
class ModelProfile:
    """Request policy for one model: which prompt and how much thinking."""
    name: str
    prompt: str
    thinking_budget: Optional[int] = None


MODEL_PROFILES: Dict[str, ModelProfile] = {
    "gemini-2.5-flash": ModelProfile("gemini-2.5-flash", prompts.INSTRUCTION_HEAVY_PROMPT),
    "gemini-3-flash-preview": ModelProfile(
        "gemini-3-flash-preview", prompts.LOGIC_HEAVY_PROMPT, thinking_budget=4096
    ),
}


@dataclass
class TranscriptionRequest:
    """Everything needed for one client.models.generate_content call."""
    model: str
    mode: TranscriptionMode
    contents: List[types.Content]
    config: types.GenerateContentConfig


def _timestamp_schema(label: str) -> types.Schema:
    return types.Schema(
        type=types.Type.STRING,
        description=f"{label} time in 'MM:SS.mmm' format (ensure 3 decimal places)",
    )


def build_response_schema(mode: TranscriptionMode) -> types.Schema:
    """
    Output-shape constraint for the model: an array of segment objects.

    In word mode every segment also carries a 'words' array with the same
    start/end/text shape.
    """
    properties = {
        "start": _timestamp_schema("Start"),
        "end": _timestamp_schema("End"),
        "text": types.Schema(
            type=types.Type.STRING,
            description="Verbatim text. DO NOT summarize repetitions.",
        ),
    }
    required = ["start", "end", "text"]
    if mode is TranscriptionMode.WORD:
        properties["words"] = types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "start": _timestamp_schema("Word start"),
                    "end": _timestamp_schema("Word end"),
                    "text": types.Schema(type=types.Type.STRING, description="A single word or script unit."),
                },
                required=["start", "end", "text"],
            ),
        )
        required.append("words")
    return types.Schema(
        type=types.Type.ARRAY,
        items=types.Schema(type=types.Type.OBJECT, properties=properties, required=required),
    )


class RequestBuilder:
    """Assembles audio, instructions and output schema into a request."""

    def __init__(
        self,
        profiles: Optional[Dict[str, ModelProfile]] = None,
        system_instruction: str = prompts.SYSTEM_INSTRUCTION,
    ):
        self.profiles = dict(MODEL_PROFILES if profiles is None else profiles)
        self.system_instruction = system_instruction

    def profile_for(self, model: str) -> ModelProfile:
        """Returns the profile for a model id, or the instruction-heavy default."""
        profile = self.profiles.get(model)
        if profile is None:
            logger.warning(f"No request profile for model '{model}'. Using the default instruction-heavy prompt.")
            profile = ModelProfile(model, prompts.INSTRUCTION_HEAVY_PROMPT)
        return profile

    def build_prompt(self, profile: ModelProfile, mode: TranscriptionMode) -> str:
        output_format = prompts.WORD_MODE_FORMAT if mode is TranscriptionMode.WORD else prompts.LINE_MODE_FORMAT
        return "\n\n".join([profile.prompt, output_format, prompts.TIMESTAMP_DIRECTIVE])

    def build(
        self,
        audio: bytes,
        mime_type: str,
        model: str = DEFAULT_MODEL,
        mode: Union[str, TranscriptionMode] = TranscriptionMode.LINE,
    ) -> TranscriptionRequest:
        """
        Builds the request for one transcription call.

        Args:
            audio: Raw audio bytes (sent inline).
            mime_type: MIME type of the audio, e.g. 'audio/mpeg'.
            model: Gemini model id.
            mode: 'line' or 'word' segmentation.

        Returns:
            A TranscriptionRequest ready for generate_content.

        Raises:
            ValueError: If the audio payload is empty.
            ConfigurationError: If the mode is unknown.
        """
        if not audio:
            raise ValueError("Audio payload is empty.")
        mode = TranscriptionMode.parse(mode)
        profile = self.profile_for(model)

        thinking_config = None
        if profile.thinking_budget is not None:
            thinking_config = types.ThinkingConfig(thinking_budget=profile.thinking_budget)

        config = types.GenerateContentConfig(
            system_instruction=self.system_instruction,
            response_mime_type="application/json",
            response_schema=build_response_schema(mode),
            thinking_config=thinking_config,
        )
        contents = [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_bytes(data=audio, mime_type=mime_type),
                    types.Part(text=self.build_prompt(profile, mode)),
                ],
            )
        ]
        logger.debug(
            f"Built request for model '{model}' (mode={mode.value}, {len(audio)} bytes of {mime_type}, "
            f"thinking_budget={profile.thinking_budget})"
        )
        return TranscriptionRequest(model=model, mode=mode, contents=contents, config=config)
