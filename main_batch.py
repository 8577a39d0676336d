#!/usr/bin/env python3
"""
LyricSync Batch Processing Entry Point

Transcribes every supported audio/video file in a directory, smallest
first, writing subtitles into a Subs/ subfolder.
"""

import argparse
import logging
import os
import sys
import time
from typing import List, Tuple

from tqdm import tqdm

from lyricsync.config_loader import ConfigLoader
from lyricsync.log_setup import level_from_name, setup_logging
from lyricsync.audio_extractor import is_supported_media
from lyricsync.cli import apply_overrides, build_generator
from lyricsync.request_builder import TranscriptionMode
from lyricsync.exceptions import LyricSyncError, ConfigurationError, FileSystemError
from lyricsync.utils import ensure_dir_exists

logger = logging.getLogger(__name__)

def find_and_sort_media(input_dir: str) -> List[Tuple[str, int]]:
    """
    Finds all supported media files in the input directory and sorts them by size.

    Args:
        input_dir: The directory to search.

    Returns:
        A list of (filepath, filesize) tuples, smallest first.

    Raises:
        FileNotFoundError: If the input directory doesn't exist.
        ValueError: If the input path is not a directory.
    """
    if not os.path.exists(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")
    if not os.path.isdir(input_dir):
        raise ValueError(f"Input path is not a directory: {input_dir}")

    media = []
    logger.info(f"Scanning directory for audio/video files: {input_dir}")
    for filename in os.listdir(input_dir):
        if not is_supported_media(filename):
            continue
        filepath = os.path.join(input_dir, filename)
        try:
            if os.path.isfile(filepath):
                media.append((filepath, os.path.getsize(filepath)))
        except OSError as e:
            logger.warning(f"Could not access file {filepath}: {e}. Skipping.")

    media.sort(key=lambda item: item[1])
    logger.info(f"Found {len(media)} media files. Sorted by size (smallest first).")
    return media


def run_batch_processing() -> int:
    """Parses arguments, sets up, and runs the batch transcription. Returns the exit code."""
    parser = argparse.ArgumentParser(
        description="LyricSync Batch: Generate SRT/LRC subtitles for every audio/video file in a directory.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("-i", "--input-dir", required=True, help="Directory containing the input media files.")
    parser.add_argument("-c", "--config", default="config.yaml", help="Path to the configuration YAML file.")
    parser.add_argument("--model", default=None, help="Override the Gemini model from the config file.")
    parser.add_argument("--mode", default=None, choices=[m.value for m in TranscriptionMode],
                        help="Override the segmentation mode.")
    parser.add_argument("--rollover-correction", action="store_true",
                        help="Repair timestamps that wrap around at 60 seconds.")
    parser.add_argument("--temp-dir", default=None, help="Override the temporary directory from the config file.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Set the logging level for console and file output.")
    args = parser.parse_args()

    log_level = level_from_name(args.log_level)
    setup_logging(log_level=log_level, log_dir=None)

    try:
        config = ConfigLoader().load_config(args.config)
    except (ConfigurationError, FileNotFoundError) as e:
        logger.critical(f"Failed to load configuration: {e}")
        return 1

    setup_logging(log_level=log_level, log_dir=config.get('log_dir'), log_file='lyricsync_batch.log')
    config = apply_overrides(config, args)

    try:
        media_files = [path for path, _ in find_and_sort_media(args.input_dir)]
    except (FileNotFoundError, ValueError) as e:
        logger.critical(f"Input directory error: {e}")
        return 1
    if not media_files:
        logger.warning(f"No supported media files found in {args.input_dir}. Exiting.")
        return 0

    subs_dir = os.path.join(args.input_dir, "Subs")
    try:
        ensure_dir_exists(subs_dir)
    except FileSystemError as e:
        logger.critical(f"Could not create output directory: {e}")
        return 1

    # Components are built once and reused for every file.
    try:
        generator = build_generator(config)
    except LyricSyncError as e:
        logger.critical(f"Failed to initialize LyricSync components: {e}")
        return 1

    total_files = len(media_files)
    files_processed = 0
    files_failed = 0
    batch_start_time = time.time()
    logger.info(f"--- Starting Batch Transcription for {total_files} files ---")

    with tqdm(total=total_files, unit="file", desc="Starting Batch") as pbar:
        for media_path in media_files:
            filename = os.path.basename(media_path)
            pbar.set_description(f"Processing: {filename[:30]}")
            try:
                generator.generate(media_path, subs_dir)
                files_processed += 1
            except LyricSyncError as e:
                logger.error(f"LyricSync failed for '{filename}': {e}")
                files_failed += 1
            except KeyboardInterrupt:
                logger.warning("Batch process interrupted by user (Ctrl+C). Exiting.")
                return 1
            except Exception as e:
                logger.error(f"An unexpected error occurred processing '{filename}': {e}", exc_info=True)
                files_failed += 1
            finally:
                pbar.update(1)

    logger.info("--- Batch Transcription Finished ---")
    logger.info(f"Total time: {time.time() - batch_start_time:.2f} seconds")
    logger.info(f"Successfully processed: {files_processed}/{total_files} files")
    logger.info(f"Failed: {files_failed}/{total_files} files")
    return 1 if files_failed else 0


if __name__ == "__main__":
    sys.exit(run_batch_processing())
