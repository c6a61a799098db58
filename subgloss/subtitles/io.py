"""Subtitle file parsing helpers."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Sequence

from .common import (
    ANNOTATION_SIGNATURE,
    ASS_EXTENSION,
    SRT_EXTENSION,
    SRT_TIMESTAMP_PATTERN,
    logger,
)
from .errors import SubtitleProcessingError
from .models import SubtitleCue, SubtitleDocument

_ASS_DEFAULT_EVENT_FORMAT = (
    "Layer",
    "Start",
    "End",
    "Style",
    "Name",
    "MarginL",
    "MarginR",
    "MarginV",
    "Effect",
    "Text",
)
_SECTION_PATTERN = re.compile(r"^\s*\[(?P<name>[^\]]+)\]\s*$")


def load_subtitle_document(path: Path) -> SubtitleDocument:
    """Parse ``path`` as an SRT or ASS file and return its captions."""

    payload = _read_subtitle_text(path)
    suffix = path.suffix.lower()
    if suffix == ASS_EXTENSION:
        cues = _parse_ass(payload)
    elif suffix == SRT_EXTENSION:
        cues = _parse_srt(payload)
    else:
        raise SubtitleProcessingError(f"Unsupported subtitle format: {path.name}")
    signature = ANNOTATION_SIGNATURE if is_annotated_file(payload) else None
    logger.debug("Parsed %d captions from %s", len(cues), path)
    return SubtitleDocument(cues, signature=signature)


def is_annotated_file(payload: str) -> bool:
    """Return True when ``payload`` was written by this tool."""

    return ANNOTATION_SIGNATURE in payload


def _read_subtitle_text(path: Path) -> str:
    """Return subtitle text with BOM handling and binary detection."""

    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SubtitleProcessingError(f"Unable to read subtitle file '{path}': {exc}") from exc

    if b"\x00" in raw[:1024]:
        raise SubtitleProcessingError(
            f"Subtitle file '{path}' looks binary. Please provide a text SRT or ASS file."
        )

    for encoding in ("utf-8-sig", "latin-1"):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue

    raise SubtitleProcessingError(  # pragma: no cover - latin-1 decodes any byte string
        f"Unable to decode subtitle file '{path}'."
    )


def _parse_srt(payload: str) -> List[SubtitleCue]:
    blocks = _split_blocks(payload.replace("\r\n", "\n").replace("\r", "\n"))
    cues: List[SubtitleCue] = []
    for raw_block in blocks:
        lines = [line.strip("\ufeff") for line in raw_block.splitlines() if line.strip() != ""]
        if len(lines) < 2:
            continue
        index_line = lines[0]
        try:
            index = int(index_line)
            time_line_index = 1
        except ValueError:
            index = len(cues) + 1
            time_line_index = 0
        if time_line_index >= len(lines):
            continue
        time_line = lines[time_line_index]
        match = SRT_TIMESTAMP_PATTERN.match(time_line)
        if not match:
            logger.warning("Skipping SRT block without timing line: %r", time_line)
            continue
        text_lines = lines[time_line_index + 1 :]
        if not text_lines:
            continue
        cues.append(
            SubtitleCue(
                index=index,
                start=_timestamp_to_seconds(match.group("start")),
                end=_timestamp_to_seconds(match.group("end")),
                lines=text_lines,
            )
        )
    return cues


def _parse_ass(payload: str) -> List[SubtitleCue]:
    section: Optional[str] = None
    event_format: Sequence[str] = _ASS_DEFAULT_EVENT_FORMAT
    cues: List[SubtitleCue] = []
    for raw_line in payload.splitlines():
        line = raw_line.strip()
        if not line or line.startswith(";"):
            continue
        header = _SECTION_PATTERN.match(line)
        if header:
            section = header.group("name").strip().lower()
            continue
        if section != "events":
            continue
        key, _, value = line.partition(":")
        key = key.strip().lower()
        if key == "format":
            event_format = [name.strip() for name in value.split(",")]
            continue
        if key != "dialogue":
            continue
        fields = [part.strip() for part in value.split(",", len(event_format) - 1)]
        if len(fields) != len(event_format):
            logger.warning("Skipping malformed ASS dialogue line: %r", raw_line)
            continue
        record = dict(zip(event_format, fields))
        text = record.get("Text", "")
        if not text:
            continue
        cues.append(
            SubtitleCue(
                index=len(cues) + 1,
                start=_timestamp_to_seconds(record.get("Start", "")),
                end=_timestamp_to_seconds(record.get("End", "")),
                lines=[text],
            )
        )
    return cues


def _timestamp_to_seconds(value: str) -> float:
    sanitized = value.strip().replace(",", ".")
    parts = sanitized.split(":")
    if len(parts) != 3:
        raise SubtitleProcessingError(f"Invalid timestamp: {value!r}")
    hours, minutes, seconds = parts
    try:
        return int(hours) * 3600 + int(minutes) * 60 + float(seconds)
    except ValueError as exc:
        raise SubtitleProcessingError(f"Invalid timestamp: {value!r}") from exc


def _split_blocks(payload: str) -> List[str]:
    sanitized = payload.strip()
    if not sanitized:
        return []
    return re.split(r"\n{2,}", sanitized)


__all__ = [
    "_parse_ass",
    "_parse_srt",
    "_read_subtitle_text",
    "_split_blocks",
    "_timestamp_to_seconds",
    "is_annotated_file",
    "load_subtitle_document",
]
