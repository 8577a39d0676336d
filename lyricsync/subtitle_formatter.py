"""Handles formatting transcription results into subtitle files (SRT, LRC)."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Sequence, Type

from .models import TranscriptionResult, SubtitleSegment
from .exceptions import FormattingError
from .utils import format_time_lrc, format_time_srt

logger = logging.getLogger(__name__)

class SubtitleFormatter(ABC):
    """Abstract base class for subtitle formatters."""

    extension: str = ""

    @abstractmethod
    def render(self, segments: Sequence[SubtitleSegment], **metadata: Optional[str]) -> str:
        """
        Renders segments into the text of a subtitle file.

        Args:
            segments: Ordered subtitle segments.
            **metadata: Format specific extras (e.g. title, artist).

        Returns:
            The complete file content.
        """
        pass

    def format_subtitles(
        self,
        transcription_result: TranscriptionResult,
        output_path: str,
        **metadata: Optional[str]
    ) -> None:
        """
        Renders the transcription result and writes it to a file.

        Args:
            transcription_result: The result from the transcription process.
            output_path: The path to save the subtitle file.
            **metadata: Passed through to render.

        Raises:
            FormattingError: If rendering or writing fails.
        """
        logger.info(f"Formatting {len(transcription_result.segments)} segments to {self.extension.upper()}: {output_path}")
        content = self.render(transcription_result.segments, **metadata)
        try:
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Failed to write {self.extension.upper()} file to {output_path}: {e}", exc_info=True)
            raise FormattingError(f"Could not write {self.extension.upper()} file: {e}") from e
        logger.info(f"Successfully wrote {len(transcription_result.segments)} entries to {output_path}")


class SRTFormatter(SubtitleFormatter):
    """Formats subtitles into the SRT (SubRip Text) format."""

    extension = "srt"

    def render(self, segments: Sequence[SubtitleSegment], **metadata: Optional[str]) -> str:
        blocks = []
        for index, segment in enumerate(segments, 1):
            if not segment.has_valid_timing:
                logger.warning(
                    f"Segment {index} ends before it starts "
                    f"({format_time_srt(segment.start)} -> {format_time_srt(segment.end)}). Writing as-is."
                )
            blocks.append(
                f"{index}\n{format_time_srt(segment.start)} --> {format_time_srt(segment.end)}\n{segment.text}\n"
            )
        return "\n".join(blocks)


class LRCFormatter(SubtitleFormatter):
    """Formats lyrics into the LRC format (one [MM:SS.cc] tagged line per segment)."""

    extension = "lrc"

    def render(self, segments: Sequence[SubtitleSegment], **metadata: Optional[str]) -> str:
        header = ""
        if metadata.get("title"):
            header += f"[ti:{metadata['title']}]\n"
        if metadata.get("artist"):
            header += f"[ar:{metadata['artist']}]\n"
        # LRC lines are single line; fold any embedded breaks.
        lines = [f"{format_time_lrc(s.start)}{' '.join(s.text.splitlines())}" for s in segments]
        return header + "\n".join(lines)


FORMATTERS: Dict[str, Type[SubtitleFormatter]] = {
    SRTFormatter.extension: SRTFormatter,
    LRCFormatter.extension: LRCFormatter,
}


def get_formatter(output_format: str) -> SubtitleFormatter:
    """Returns a formatter instance for 'srt' or 'lrc'."""
    formatter_cls = FORMATTERS.get(output_format.lower())
    if formatter_cls is None:
        raise FormattingError(
            f"Unsupported output format '{output_format}'. Choose from: {', '.join(sorted(FORMATTERS))}."
        )
    return formatter_cls()


def create_formatters(output_formats: List[str]) -> List[SubtitleFormatter]:
    return [get_formatter(fmt) for fmt in output_formats]
