"""Handles transcription of audio through a hosted Gemini model."""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Union

from google import genai

from .audio_extractor import read_audio_file
from .exceptions import ConfigurationError, EmptyResponseError
from .models import SubtitleSegment, TranscriptionResult
from .post_processor import post_process
from .request_builder import DEFAULT_MODEL, RequestBuilder, TranscriptionMode, TranscriptionRequest
from .response_repair import repair_response

logger = logging.getLogger(__name__)

class Transcriber(ABC):
    """Abstract base class for transcription services."""

    @abstractmethod
    def transcribe(
        self,
        audio: bytes,
        mime_type: str,
        model: str = DEFAULT_MODEL,
        mode: Union[str, TranscriptionMode] = TranscriptionMode.LINE,
    ) -> List[SubtitleSegment]:
        """
        Transcribes the given audio payload.

        Args:
            audio: Raw audio bytes.
            mime_type: MIME type of the audio.
            model: Model identifier.
            mode: 'line' or 'word' segmentation.

        Returns:
            Subtitle segments sorted by start time.

        Raises:
            TranscriptionError: If the response is empty or cannot be recovered.
        """
        pass

    def transcribe_file(
        self,
        audio_path: str,
        model: str = DEFAULT_MODEL,
        mode: Union[str, TranscriptionMode] = TranscriptionMode.LINE,
    ) -> TranscriptionResult:
        """Reads an audio file and transcribes it."""
        audio, mime_type = read_audio_file(audio_path)
        segments = self.transcribe(audio, mime_type, model=model, mode=mode)
        return TranscriptionResult(
            model=model,
            mode=TranscriptionMode.parse(mode).value,
            segments=segments,
            source_path=audio_path,
        )


class GeminiTranscriber(Transcriber):
    """Implements transcription using the Google Gen AI SDK."""

    def __init__(
        self,
        api_key: Optional[str],
        request_builder: Optional[RequestBuilder] = None,
        correct_rollovers: bool = False,
        client: Any = None,
    ):
        """
        Initializes the GeminiTranscriber.

        Args:
            api_key: Gemini API key. Required even when a client is injected,
                     so a missing credential always fails before any call.
            request_builder: Builder for prompts and schema. Defaults to the
                             built-in model profiles.
            correct_rollovers: Undo 60s clock wraps in the returned timestamps.
            client: Pre-built genai.Client (mainly for tests).

        Raises:
            ConfigurationError: If no API key is given.
        """
        if not api_key:
            raise ConfigurationError("API Key is missing. Please check your environment configuration.")
        self.request_builder = request_builder or RequestBuilder()
        self.correct_rollovers = correct_rollovers
        self.client = client if client is not None else genai.Client(api_key=api_key)
        logger.info(f"Initialized GeminiTranscriber (rollover correction: {self.correct_rollovers})")

    def _segments_from_response(self, response: Any, request: TranscriptionRequest) -> List[SubtitleSegment]:
        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise EmptyResponseError("AI returned an empty response.")
        logger.debug(f"Received {len(text)} characters from '{request.model}'.")
        parsed = repair_response(text)
        return post_process(parsed, correct_rollovers=self.correct_rollovers)

    def transcribe(
        self,
        audio: bytes,
        mime_type: str,
        model: str = DEFAULT_MODEL,
        mode: Union[str, TranscriptionMode] = TranscriptionMode.LINE,
    ) -> List[SubtitleSegment]:
        """
        Sends the audio to Gemini and returns the normalized segments.

        Transport errors raised by the SDK are logged and re-raised unchanged.

        Raises:
            EmptyResponseError: If the model returns no text.
            MalformedResponseError: If the JSON cannot be repaired.
        """
        request = self.request_builder.build(audio, mime_type, model=model, mode=mode)
        logger.info(f"Transcribing {len(audio)} bytes with '{model}' (mode: {request.mode.value})...")
        try:
            response = self.client.models.generate_content(
                model=request.model,
                contents=request.contents,
                config=request.config,
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise
        segments = self._segments_from_response(response, request)
        logger.info(f"Transcription completed with {len(segments)} segments.")
        return segments

    async def transcribe_async(
        self,
        audio: bytes,
        mime_type: str,
        model: str = DEFAULT_MODEL,
        mode: Union[str, TranscriptionMode] = TranscriptionMode.LINE,
    ) -> List[SubtitleSegment]:
        """Awaitable variant of transcribe using the SDK's async client."""
        request = self.request_builder.build(audio, mime_type, model=model, mode=mode)
        logger.info(f"Transcribing {len(audio)} bytes with '{model}' (async, mode: {request.mode.value})...")
        try:
            response = await self.client.aio.models.generate_content(
                model=request.model,
                contents=request.contents,
                config=request.config,
            )
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise
        segments = self._segments_from_response(response, request)
        logger.info(f"Transcription completed with {len(segments)} segments.")
        return segments
