"""Command-Line Interface handler for LyricSync."""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from .config_loader import ConfigLoader, resolve_api_key
from .log_setup import level_from_name, setup_logging
from .audio_extractor import AudioExtractor
from .transcriber import GeminiTranscriber
from .subtitle_generator import SubtitleGenerator
from .models import TranscriptionResult
from .request_builder import MODEL_PROFILES, TranscriptionMode
from .exceptions import LyricSyncError, ConfigurationError
from .utils import format_time_display

logger = logging.getLogger(__name__)


def apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Copies CLI overrides (when given) onto the loaded config."""
    overrides = {
        'model': getattr(args, 'model', None),
        'mode': getattr(args, 'mode', None),
        'temp_dir': getattr(args, 'temp_dir', None),
    }
    for key, value in overrides.items():
        if value:
            logger.info(f"Overriding {key} from config with CLI argument: {value}")
            config[key] = value
    if getattr(args, 'rollover_correction', False):
        config['rollover_correction'] = True
    return config


def build_generator(config: dict) -> SubtitleGenerator:
    """
    Wires the components described by the config.

    Raises:
        ConfigurationError: If the API key is missing or a setting is invalid.
    """
    transcriber = GeminiTranscriber(
        api_key=resolve_api_key(config),
        correct_rollovers=bool(config.get('rollover_correction', False)),
    )
    return SubtitleGenerator(
        config=config,
        audio_extractor=AudioExtractor(ffmpeg_path=config.get('ffmpeg_path')),
        transcriber=transcriber,
    )


def print_segments(result: TranscriptionResult, stream=None) -> None:
    """Prints segments as 'MM:SS.mmm - MM:SS.mmm  text' lines."""
    stream = stream or sys.stdout
    for segment in result.segments:
        stream.write(
            f"{format_time_display(segment.start)} - {format_time_display(segment.end)}  {segment.text}\n"
        )


class CLIHandler:
    """Parses arguments and orchestrates the LyricSync process."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """Creates the argument parser for the CLI."""
        parser = argparse.ArgumentParser(
            description="LyricSync: Transcribe songs or speech with Gemini and export timed SRT/LRC subtitles.",
            formatter_class=argparse.ArgumentDefaultsHelpFormatter
        )
        parser.add_argument(
            "-i", "--input",
            required=True,
            help="Path to the input audio (or video) file."
        )
        parser.add_argument(
            "-o", "--output-dir",
            required=True,
            help="Directory to save the generated subtitle files."
        )
        parser.add_argument(
            "-c", "--config",
            default="config.yaml",
            help="Path to the configuration YAML file."
        )
        parser.add_argument(
            "--model",
            default=None, # Default taken from config
            help=f"Override the Gemini model. Known profiles: {', '.join(sorted(MODEL_PROFILES))}."
        )
        parser.add_argument(
            "--mode",
            default=None, # Default taken from config
            choices=[m.value for m in TranscriptionMode],
            help="Override the segmentation mode."
        )
        parser.add_argument(
            "--rollover-correction",
            action="store_true",
            help="Repair timestamps that wrap around at 60 seconds."
        )
        parser.add_argument(
            "--temp-dir",
            default=None, # Default taken from config
            help="Override the temporary directory used for extracted audio."
        )
        parser.add_argument(
            "--show",
            action="store_true",
            help="Print the transcribed segments to stdout."
        )
        parser.add_argument(
            "--log-level",
            default="INFO",
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Set the logging level for console and file output."
        )
        return parser

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """
        Parses arguments, sets up logging, loads config, and runs the generator.

        Returns:
            Process exit code: 0 on success, 1 on known errors, 2 on unexpected ones.
        """
        args = self.parser.parse_args(argv)
        log_level = level_from_name(args.log_level)
        setup_logging(log_level=log_level, log_dir=None)

        try:
            config = ConfigLoader().load_config(args.config)
        except (ConfigurationError, FileNotFoundError) as e:
            logger.critical(f"Failed to load configuration from {args.config}: {e}")
            return 1

        setup_logging(log_level=log_level, log_dir=config.get('log_dir'), log_file=config.get('log_file', 'lyricsync.log'))
        config = apply_overrides(config, args)

        if not os.path.isfile(args.input):
            logger.critical(f"Input file not found or is not a file: {args.input}")
            return 1

        try:
            generator = build_generator(config)
            result = generator.generate(args.input, args.output_dir)
            if args.show:
                print_segments(result)
            logger.info("LyricSync finished successfully.")
            return 0
        except LyricSyncError as e:
            logger.error(f"A LyricSync error occurred: {e}")
            return 1
        except KeyboardInterrupt:
            logger.warning("Process interrupted by user (Ctrl+C). Exiting.")
            return 1
        except Exception as e:
            logger.critical(f"An unexpected critical error occurred at the top level: {e}", exc_info=True)
            return 2


def main() -> None:
    sys.exit(CLIHandler().run())
