"""ASS serialization for annotated subtitle documents."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from .common import (
    ANNOTATION_SIGNATURE,
    DEFAULT_CAPTION_FONT_SIZE,
    DEFAULT_DEFINITION_FONT_SIZE,
    DEFAULT_STYLE_NAME,
    DEFINITION_STYLE_NAME,
    MAX_ASS_FONT_SIZE,
    MIN_ASS_FONT_SIZE,
    logger,
)
from .errors import SubtitleProcessingError
from .models import SubtitleCue, SubtitleDocument, SubtitleStyles


def ass_color_token(color: str) -> str:
    hex_value = color.lstrip("#")
    red = hex_value[0:2]
    green = hex_value[2:4]
    blue = hex_value[4:6]
    return f"&H{blue}{green}{red}&"


def _ass_style_color(color: str) -> str:
    return "&H00" + ass_color_token(color)[2:-1]


def _resolve_ass_font_size(value: Optional[int], default: int) -> int:
    try:
        numeric = int(value) if value is not None else default
    except (TypeError, ValueError):
        numeric = default
    return max(MIN_ASS_FONT_SIZE, min(MAX_ASS_FONT_SIZE, numeric))


def _seconds_to_ass_timestamp(value: float) -> str:
    total_cs = int(round(value * 100))
    hours, remainder = divmod(total_cs, 360_000)
    minutes, remainder = divmod(remainder, 6_000)
    seconds, centiseconds = divmod(remainder, 100)
    return f"{hours}:{minutes:02d}:{seconds:02d}.{centiseconds:02d}"


class _AssFileWriter:
    """Serialize subtitle events with the caption and definition styles."""

    __slots__ = ("handle", "styles", "_count")

    def __init__(self, handle: TextIO, styles: SubtitleStyles) -> None:
        self.handle = handle
        self.styles = styles
        self._count = 0
        self._write_header()

    @property
    def count(self) -> int:
        return self._count

    def write(self, cues: Sequence[SubtitleCue]) -> int:
        for cue in cues:
            start_ts = _seconds_to_ass_timestamp(cue.start)
            end_ts = _seconds_to_ass_timestamp(cue.end)
            text = self._format_ass_lines(cue.lines)
            self.handle.write(
                f"Dialogue: 0,{start_ts},{end_ts},{cue.style},,0,0,0,,{text}\n"
            )
        self._count += len(cues)
        return self._count

    def _write_header(self) -> None:
        styles = self.styles
        primary = _ass_style_color(styles.primary_color)
        caption_size = _resolve_ass_font_size(
            styles.caption_font_size, DEFAULT_CAPTION_FONT_SIZE
        )
        definition_size = _resolve_ass_font_size(
            styles.definition_font_size, DEFAULT_DEFINITION_FONT_SIZE
        )
        header = (
            "[Script Info]\n"
            f"Title: {ANNOTATION_SIGNATURE}\n"
            "ScriptType: v4.00+\n"
            "Collisions: Normal\n"
            "WrapStyle: 0\n"
            "ScaledBorderAndShadow: yes\n"
            "\n"
            "[V4+ Styles]\n"
            "Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, "
            "OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, "
            "ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding\n"
            f"Style: {DEFINITION_STYLE_NAME},{styles.font_name},{definition_size},{primary},{primary},"
            "&H00000000,&H80000000,0,0,0,0,100,100,0,0,1,1,1,7,3,0,2,0\n"
            f"Style: {DEFAULT_STYLE_NAME},{styles.font_name},{caption_size},{primary},{primary},"
            "&H00000000,&H80000000,0,0,0,0,100,100,0,0,1,2,2,2,20,20,15,0\n"
            "\n"
            "[Events]\n"
            "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text\n"
        )
        self.handle.write(header)

    @staticmethod
    def _format_ass_lines(lines: Sequence[str]) -> str:
        buffer: List[str] = []
        for line in lines:
            candidate = line.replace("\r\n", "\n").replace("\r", "\n")
            buffer.append(candidate.replace("\n", r"\N"))
        return r"\N".join(buffer)


def write_ass(
    path: Path,
    document: SubtitleDocument,
    styles: Optional[SubtitleStyles] = None,
) -> int:
    """Write every caption and annotation of ``document`` to ``path``."""

    resolved_styles = styles or SubtitleStyles()
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with path.open("w", encoding="utf-8") as handle:
            writer = _AssFileWriter(handle, resolved_styles)
            written = writer.write(document.events())
    except OSError as exc:
        raise SubtitleProcessingError(f"Unable to write subtitle file '{path}': {exc}") from exc
    logger.debug("Wrote %d events to %s", written, path)
    return written


__all__ = [
    "ass_color_token",
    "_seconds_to_ass_timestamp",
    "write_ass",
]
