"""Orchestrates the transcription-to-subtitle pipeline for one media file."""

import logging
import os
import time
from typing import Dict, List, Optional

from .audio_extractor import AudioExtractor, is_video_file, read_audio_file
from .transcriber import Transcriber
from .subtitle_formatter import SubtitleFormatter, create_formatters
from .models import TranscriptionResult
from .exceptions import LyricSyncError, FileSystemError, TranscriptionError
from .post_processor import summarize_timing
from .request_builder import TranscriptionMode
from .utils import ensure_dir_exists, format_duration, format_time_display

logger = logging.getLogger(__name__)

class SubtitleGenerator:
    """
    Manages the end-to-end process of generating subtitles for a media file:
    prepare audio, transcribe once, write every configured output format.
    """

    def __init__(
        self,
        config: dict,
        audio_extractor: AudioExtractor,
        transcriber: Transcriber,
        formatters: Optional[List[SubtitleFormatter]] = None,
    ):
        """
        Initializes the SubtitleGenerator.

        Args:
            config: A dictionary containing configuration settings.
            audio_extractor: Used when the input is a video container.
            transcriber: An instance of Transcriber.
            formatters: Output formatters. Defaults to config['output_formats'].

        Raises:
            LyricSyncError: If the configuration is incomplete or invalid.
        """
        self.config = config
        self.audio_extractor = audio_extractor
        self.transcriber = transcriber

        self.temp_dir = config.get('temp_dir')
        if not self.temp_dir:
            raise LyricSyncError("Configuration missing 'temp_dir'.")

        self.model = config.get('model', 'gemini-2.5-flash')
        self.mode = TranscriptionMode.parse(config.get('mode', 'line'))
        self.lrc_artist = config.get('lrc_artist')

        if formatters is None:
            formatters = create_formatters(config.get('output_formats', ['srt', 'lrc']))
        if not formatters:
            raise LyricSyncError("No output formats configured.")
        self.formatters = formatters

    def get_output_paths(self, media_path: str, output_dir: str) -> Dict[str, str]:
        """Maps each output extension to '<output_dir>/<media base name>.<ext>'."""
        base_name = os.path.splitext(os.path.basename(media_path))[0]
        return {
            formatter.extension: os.path.join(output_dir, f"{base_name}.{formatter.extension}")
            for formatter in self.formatters
        }

    def _cleanup_temp_files(self, *file_paths: Optional[str]) -> None:
        """Removes temporary files specified."""
        for file_path in file_paths:
            if file_path and os.path.exists(file_path):
                try:
                    os.remove(file_path)
                    logger.info(f"Cleaned up temporary file: {file_path}")
                except OSError as e:
                    logger.warning(f"Could not remove temporary file {file_path}: {e}")

    def _prepare_audio(self, media_path: str) -> Optional[str]:
        """Returns the path of an extracted temp audio file, or None for audio inputs."""
        if not is_video_file(media_path):
            return None
        ensure_dir_exists(self.temp_dir)
        base_name = os.path.splitext(os.path.basename(media_path))[0]
        temp_name = f"{base_name}_{int(time.time())}"
        return self.audio_extractor.extract_audio(media_path, self.temp_dir, temp_name)

    def generate(self, media_path: str, output_dir: str) -> TranscriptionResult:
        """
        Executes the full pipeline for a single audio or video file.

        Args:
            media_path: Path to the input audio or video file.
            output_dir: Directory to save the subtitle files.

        Returns:
            The TranscriptionResult that was written.

        Raises:
            LyricSyncError: For any configuration or processing errors in the pipeline.
            FileNotFoundError: If the input file is not found.
            Exception: Transport errors from the model client, unchanged.
        """
        start_time = time.time()
        logger.info(f"--- Starting LyricSync process for: {media_path} ---")
        if not os.path.isfile(media_path):
            raise FileNotFoundError(f"Input file not found: {media_path}")
        ensure_dir_exists(output_dir)

        output_paths = self.get_output_paths(media_path, output_dir)
        extracted_audio_path = None

        try:
            logger.info("Step 1: Preparing audio...")
            extracted_audio_path = self._prepare_audio(media_path)
            audio, mime_type = read_audio_file(extracted_audio_path or media_path)

            logger.info(f"Step 2: Transcribing with '{self.model}' ({self.mode.value} mode)...")
            segments = self.transcriber.transcribe(audio, mime_type, model=self.model, mode=self.mode)
            if not segments:
                raise TranscriptionError("Transcription produced no segments.")
            result = TranscriptionResult(
                model=self.model,
                mode=self.mode.value,
                segments=segments,
                source_path=media_path,
            )
            summary = summarize_timing(segments)
            logger.info(
                f"Transcription complete: {summary['count']} segments, "
                f"{format_time_display(summary['first_start'])} to {format_time_display(summary['last_end'])} "
                f"({format_duration(summary['last_end'])})."
            )
            if summary['inverted']:
                logger.warning(f"{summary['inverted']} segments have an end time before their start time.")

            logger.info("Step 3: Writing subtitle files...")
            title = os.path.splitext(os.path.basename(media_path))[0]
            for formatter in self.formatters:
                formatter.format_subtitles(
                    result,
                    output_paths[formatter.extension],
                    title=title,
                    artist=self.lrc_artist,
                )

            logger.info(f"--- LyricSync process completed successfully in {time.time() - start_time:.2f} seconds ---")
            return result

        except (LyricSyncError, FileNotFoundError, FileSystemError) as e:
            logger.error(f"LyricSync process failed: {e}")
            raise
        finally:
            self._cleanup_temp_files(extracted_audio_path)
