"""Subtitle reading and writing."""

from .errors import AnnotationCancelled, SubtitleProcessingError
from .io import is_annotated_file, load_subtitle_document
from .models import SubtitleCue, SubtitleDocument, SubtitleStyles, normalise_hex_color
from .render import ass_color_token, write_ass

__all__ = [
    "AnnotationCancelled",
    "SubtitleCue",
    "SubtitleDocument",
    "SubtitleProcessingError",
    "SubtitleStyles",
    "ass_color_token",
    "is_annotated_file",
    "load_subtitle_document",
    "normalise_hex_color",
    "write_ass",
]
