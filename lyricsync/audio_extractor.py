"""Prepares audio payloads: reads audio files and extracts audio from videos with ffmpeg."""

import ffmpeg
import mimetypes
import os
import logging
from .exceptions import AudioExtractionError, FileSystemError
from typing import Optional, Tuple
from .utils import ensure_dir_exists

logger = logging.getLogger(__name__)

AUDIO_MIME_TYPES = {
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".opus": "audio/ogg",
    ".webm": "audio/webm",
    ".aiff": "audio/aiff",
}
VIDEO_EXTENSIONS = {".mp4", ".mkv", ".mov", ".avi"}
DEFAULT_MIME_TYPE = "audio/mpeg"


def is_video_file(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in VIDEO_EXTENSIONS


def is_supported_media(path: str) -> bool:
    ext = os.path.splitext(path)[1].lower()
    return ext in AUDIO_MIME_TYPES or ext in VIDEO_EXTENSIONS


def guess_mime_type(path: str) -> str:
    """Returns the audio MIME type for a file name, defaulting to audio/mpeg."""
    ext = os.path.splitext(path)[1].lower()
    if ext in AUDIO_MIME_TYPES:
        return AUDIO_MIME_TYPES[ext]
    guessed, _ = mimetypes.guess_type(path)
    if guessed and guessed.startswith("audio/"):
        return guessed
    return DEFAULT_MIME_TYPE


def read_audio_file(audio_path: str) -> Tuple[bytes, str]:
    """
    Reads an audio file into memory.

    Args:
        audio_path: Path to the audio file.

    Returns:
        A (bytes, mime_type) tuple.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        AudioExtractionError: If the file is empty or unreadable.
    """
    if not os.path.isfile(audio_path):
        raise FileNotFoundError(f"Audio file not found: {audio_path}")
    try:
        with open(audio_path, "rb") as f:
            data = f.read()
    except OSError as e:
        logger.error(f"Could not read audio file {audio_path}: {e}", exc_info=True)
        raise AudioExtractionError(f"Could not read audio file {audio_path}: {e}") from e
    if not data:
        raise AudioExtractionError(f"Audio file is empty: {audio_path}")
    mime_type = guess_mime_type(audio_path)
    logger.debug(f"Read {len(data)} bytes from {audio_path} ({mime_type})")
    return data, mime_type


class AudioExtractor:
    """Extracts the audio track from video files."""

    def __init__(self, ffmpeg_path: Optional[str] = None):
        """
        Initializes the AudioExtractor.

        Args:
            ffmpeg_path: Optional path to the ffmpeg executable.
                         If None, assumes ffmpeg is in the system PATH.
        """
        self.ffmpeg_cmd = ffmpeg_path or 'ffmpeg'
        logger.info(f"Using ffmpeg command: {self.ffmpeg_cmd}")

    def extract_audio(self, video_filepath: str, output_audio_dir: str, output_filename: Optional[str] = None) -> str:
        """
        Extracts the audio stream of a video into a compact MP3 for upload.

        Args:
            video_filepath: Path to the input video file.
            output_audio_dir: Directory to save the extracted audio file.
            output_filename: Optional base name for the output file. If None,
                             uses the video filename.

        Returns:
            The full path to the extracted MP3 file.

        Raises:
            FileNotFoundError: If the input video file does not exist.
            AudioExtractionError: If ffmpeg fails to extract the audio.
            FileSystemError: If the output directory cannot be created/accessed.
        """
        logger.info(f"Starting audio extraction for: {video_filepath}")
        if not os.path.exists(video_filepath):
            raise FileNotFoundError(f"Input video file not found: {video_filepath}")

        ensure_dir_exists(output_audio_dir)

        if output_filename is None:
            base_name = os.path.splitext(os.path.basename(video_filepath))[0]
        else:
            base_name = os.path.splitext(output_filename)[0]

        output_audio_path = os.path.join(output_audio_dir, f"{base_name}.mp3")

        if os.path.exists(output_audio_path):
            logger.warning(f"Output audio file already exists, overwriting: {output_audio_path}")
            try:
                os.remove(output_audio_path)
            except OSError as e:
                raise FileSystemError(f"Could not remove existing audio file {output_audio_path}: {e}") from e

        try:
            logger.info(f"Running ffmpeg to extract audio to {output_audio_path}...")
            # Mono 16 kHz keeps inline payloads small; speech models don't need more.
            (
                ffmpeg
                .input(video_filepath)
                .output(output_audio_path, acodec='libmp3lame', ar=16000, ac=1, vn=None)
                .overwrite_output()
                .run(cmd=self.ffmpeg_cmd, capture_stdout=True, capture_stderr=True)
            )
            logger.info(f"Successfully extracted audio to: {output_audio_path}")
            return output_audio_path
        except ffmpeg.Error as e:
            stderr_output = e.stderr.decode('utf-8', errors='replace') if e.stderr else "No stderr output"
            logger.error(f"ffmpeg error during audio extraction for {video_filepath}: {stderr_output}")
            if os.path.exists(output_audio_path):
                try:
                    os.remove(output_audio_path)
                except OSError:
                    logger.warning(f"Could not clean up partially created audio file: {output_audio_path}")
            raise AudioExtractionError(f"ffmpeg failed: {stderr_output}") from e
        except FileNotFoundError as e:
            # Raised by subprocess when the ffmpeg binary itself is missing.
            logger.error(f"ffmpeg executable not found: {self.ffmpeg_cmd}")
            raise AudioExtractionError(f"ffmpeg executable not found: {self.ffmpeg_cmd}") from e
