"""Shared constants and logger used across subtitle modules."""

from __future__ import annotations

import re

from subgloss import logging_manager as log_mgr

logger = log_mgr.get_logger().getChild("subtitles")

SRT_TIMESTAMP_PATTERN = re.compile(
    r"^\s*(?P<start>\d{1,2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*(?P<end>\d{1,2}:\d{2}:\d{2}[,.]\d{3})"
)

SRT_EXTENSION = ".srt"
ASS_EXTENSION = ".ass"
SUPPORTED_EXTENSIONS = (SRT_EXTENSION, ASS_EXTENSION)

# Written into [Script Info] so our own output is never annotated twice.
ANNOTATION_SIGNATURE = "ANNOTATED-BY-SUBGLOSS"

DEFAULT_STYLE_NAME = "Default"
DEFINITION_STYLE_NAME = "Definition"

DEFAULT_CAPTION_FONT_SIZE = 28
DEFAULT_DEFINITION_FONT_SIZE = 8
MIN_ASS_FONT_SIZE = 4
MAX_ASS_FONT_SIZE = 120

__all__ = [
    "ANNOTATION_SIGNATURE",
    "ASS_EXTENSION",
    "DEFAULT_CAPTION_FONT_SIZE",
    "DEFAULT_DEFINITION_FONT_SIZE",
    "DEFAULT_STYLE_NAME",
    "DEFINITION_STYLE_NAME",
    "MAX_ASS_FONT_SIZE",
    "MIN_ASS_FONT_SIZE",
    "SRT_EXTENSION",
    "SRT_TIMESTAMP_PATTERN",
    "SUPPORTED_EXTENSIONS",
    "logger",
]
