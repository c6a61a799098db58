"""Typed containers for subtitle documents."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .common import (
    DEFAULT_CAPTION_FONT_SIZE,
    DEFAULT_DEFINITION_FONT_SIZE,
    DEFAULT_STYLE_NAME,
    DEFINITION_STYLE_NAME,
)
from .errors import SubtitleProcessingError


_HEX_COLOR_PATTERN = re.compile(r"^#?(?P<value>[0-9A-Fa-f]{6})$")


def normalise_hex_color(name: str, value: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a hex colour string in RRGGBB format")
    match = _HEX_COLOR_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f"{name} must be a hex colour string in RRGGBB format")
    return f"#{match.group('value').upper()}"


@dataclass(slots=True)
class SubtitleStyles:
    """Font sizes and colours written into the ASS style table."""

    caption_font_size: int = DEFAULT_CAPTION_FONT_SIZE
    definition_font_size: int = DEFAULT_DEFINITION_FONT_SIZE
    primary_color: str = "#FFFFFF"
    font_name: str = "Arial"

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "primary_color", normalise_hex_color("primary_color", self.primary_color)
        )
        for name in ("caption_font_size", "definition_font_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer")


@dataclass(slots=True)
class SubtitleCue:
    """Normalized representation of a subtitle cue."""

    index: int
    start: float
    end: float
    lines: List[str] = field(default_factory=list)
    style: str = DEFAULT_STYLE_NAME

    @property
    def duration(self) -> float:
        return max(0.0, self.end - self.start)

    @property
    def start_ms(self) -> int:
        return int(round(self.start * 1000))

    def as_text(self) -> str:
        return "\n".join(self.lines).strip()

    def replace_text(self, text: str) -> None:
        self.lines = text.split("\n")


class SubtitleDocument:
    """Captions of one subtitle file plus the annotation events added to it.

    Every event lives in a slot keyed by milliseconds. Captions take the slot
    of their start time (bumped to the next free millisecond on collision) and
    annotations take the first free slot after their source caption, so
    sorting by slot keeps each annotation right after its caption.
    """

    def __init__(self, cues: List[SubtitleCue], *, signature: Optional[str] = None) -> None:
        self.signature = signature
        self._captions: Dict[int, SubtitleCue] = {}
        self._annotations: Dict[int, SubtitleCue] = {}
        for cue in sorted(cues, key=lambda item: (item.start, item.index)):
            self._captions[self._free_slot(cue.start_ms)] = cue

    def __len__(self) -> int:
        return len(self._captions)

    def _free_slot(self, candidate: int) -> int:
        while candidate in self._captions or candidate in self._annotations:
            candidate += 1
        return candidate

    def captions(self) -> Iterator[Tuple[int, SubtitleCue]]:
        """Yield ``(slot_key, cue)`` for the original captions in time order."""

        return iter(list(self._captions.items()))

    @property
    def annotation_count(self) -> int:
        return len(self._annotations)

    def insert_annotation(
        self,
        source_key: int,
        text: str,
        *,
        style: str = DEFINITION_STYLE_NAME,
    ) -> int:
        """Add ``text`` as a new event shown alongside the caption at ``source_key``."""

        source = self._captions.get(source_key)
        if source is None:
            raise SubtitleProcessingError(f"No caption at slot {source_key}")
        key = self._free_slot(source_key + 1)
        self._annotations[key] = SubtitleCue(
            index=source.index,
            start=source.start,
            end=source.end,
            lines=[text],
            style=style,
        )
        return key

    def add_credit(self, text: str, *, duration: float = 6.0) -> bool:
        """Show ``text`` at slot zero until the first caption starts.

        Returns False when a caption already starts at zero.
        """

        if not self._captions:
            return False
        first_key = min(self._captions)
        if first_key == 0 or 0 in self._annotations:
            return False
        first = self._captions[first_key]
        self._annotations[0] = SubtitleCue(
            index=0,
            start=0.0,
            end=min(duration, first.start),
            lines=[text],
            style=DEFINITION_STYLE_NAME,
        )
        return True

    def events(self) -> List[SubtitleCue]:
        """Captions and annotations ordered by slot key."""

        merged = {**self._captions, **self._annotations}
        return [merged[key] for key in sorted(merged)]


__all__ = [
    "SubtitleCue",
    "SubtitleDocument",
    "SubtitleStyles",
    "normalise_hex_color",
]
