#!/usr/bin/env python3
"""
LyricSync Entry Point Script

Transcribes one audio/video file and writes SRT and LRC subtitles.
"""

from lyricsync.cli import main

if __name__ == "__main__":
    main()
