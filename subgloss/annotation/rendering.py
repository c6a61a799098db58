"""Turn filtered matches into annotation lines and highlight instructions."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional, Sequence, Set

from subgloss.subtitles import ass_color_token, normalise_hex_color

from .common import (
    ANNOTATION_BULLET,
    ANNOTATION_LINE_BREAK,
    CIRCLED_DIGIT_ONE,
    FREQUENCY_GLYPH_OFFSET,
    LEMMA_JOINER,
    MAX_CIRCLED_FREQUENCY,
    MIN_CIRCLED_FREQUENCY,
    PRONUNCIATION_JOINER,
    SENSE_JOINER,
    logger,
)
from .errors import FrequencyGlyphError
from .models import DictionaryEntry, DictionaryMatch


def frequency_glyph(frequency: int) -> str:
    """Return the circled digit for frequency rank ``frequency`` (① for 1)."""

    if isinstance(frequency, bool) or not isinstance(frequency, int):
        raise FrequencyGlyphError(f"Frequency must be an integer, got {frequency!r}")
    if not MIN_CIRCLED_FREQUENCY <= frequency <= MAX_CIRCLED_FREQUENCY:
        raise FrequencyGlyphError(
            f"Frequency {frequency} has no circled glyph "
            f"(supported range {MIN_CIRCLED_FREQUENCY}..{MAX_CIRCLED_FREQUENCY})"
        )
    return chr(CIRCLED_DIGIT_ONE + frequency - FREQUENCY_GLYPH_OFFSET)


class AssStyler:
    """Inline ASS override tags (http://docs.aegisub.org/3.2/ASS_Tags/)."""

    def color(self, text: str, color: str) -> str:
        return f"{{\\c{ass_color_token(color)}}}{text}{{\\r}}"

    def bold(self, text: str) -> str:
        return f"{{\\b1}}{text}{{\\r}}"


class CaptionColorState:
    """Rotating highlight colours and already-annotated words of one caption."""

    __slots__ = ("_colors", "_annotated")

    def __init__(self, palette: Iterable[str]) -> None:
        colors = [normalise_hex_color("highlight_colors", value) for value in palette]
        if not colors:
            raise ValueError("highlight_colors must contain at least one colour")
        self._colors: Deque[str] = deque(colors)
        self._annotated: Set[str] = set()

    @property
    def current_color(self) -> str:
        return self._colors[0]

    def is_annotated(self, text: str) -> bool:
        return text in self._annotated

    def commit(self, text: str) -> None:
        """Mark ``text`` annotated and move on to the next colour."""

        self._annotated.add(text)
        self._colors.rotate(-1)


@dataclass(frozen=True, slots=True)
class HighlightInstruction:
    text: str
    color: str


@dataclass(slots=True)
class RenderedCaption:
    lines: List[str] = field(default_factory=list)
    highlights: List[HighlightInstruction] = field(default_factory=list)

    @property
    def annotation(self) -> str:
        return ANNOTATION_LINE_BREAK.join(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)


class AnnotationRenderer:
    """Format dictionary entries as ``★ lemmas [pronunciation] ① senses`` lines."""

    def __init__(self, show_other_lemmas: bool = False, styler: Optional[AssStyler] = None) -> None:
        self.show_other_lemmas = show_other_lemmas
        self.styler = styler or AssStyler()

    def render(self, matches: Sequence[DictionaryMatch], state: CaptionColorState) -> RenderedCaption:
        rendered = RenderedCaption()
        for match in matches:
            text = match.text_form
            if state.is_annotated(text):
                continue
            color = state.current_color
            lines = self.render_match(match, color)
            if not lines:
                continue
            rendered.lines.extend(lines)
            rendered.highlights.append(HighlightInstruction(text=text, color=color))
            state.commit(text)
        return rendered

    def render_match(self, match: DictionaryMatch, color: str) -> List[str]:
        return [self.render_entry(match, entry, color) for entry in match.entries]

    def render_entry(self, match: DictionaryMatch, entry: DictionaryEntry, color: str) -> str:
        forms = match.forms
        lemma_parts: List[str] = []
        for lemma in entry.lemmas:
            if lemma in forms:
                lemma_parts.append(self.styler.color(lemma, color))
            elif self.show_other_lemmas:
                lemma_parts.append(lemma)
        lemmas = LEMMA_JOINER.join(lemma_parts)

        return (
            ANNOTATION_BULLET
            + lemmas
            + self._pronunciation(match, entry, lemmas, color)
            + self._frequency_slot(entry)
            + SENSE_JOINER.join(entry.senses)
        )

    def _pronunciation(
        self,
        match: DictionaryMatch,
        entry: DictionaryEntry,
        lemmas: str,
        color: str,
    ) -> str:
        if not entry.pronunciations:
            return ""
        if any(pronunciation in lemmas for pronunciation in entry.pronunciations):
            return ""
        rendered = f" [{PRONUNCIATION_JOINER.join(entry.pronunciations)}] "
        # The match came through the pronunciation index.
        if not any(form in lemmas for form in match.forms):
            rendered = self.styler.color(rendered, color)
        return rendered

    def _frequency_slot(self, entry: DictionaryEntry) -> str:
        if entry.frequency is None:
            return " "
        try:
            glyph = frequency_glyph(entry.frequency)
        except FrequencyGlyphError:
            logger.warning(
                "No circled glyph for frequency %s of %s; using the number.",
                entry.frequency,
                LEMMA_JOINER.join(entry.lemmas),
            )
            glyph = str(entry.frequency)
        return " " + self.styler.bold(glyph) + " "


__all__ = [
    "AnnotationRenderer",
    "AssStyler",
    "CaptionColorState",
    "HighlightInstruction",
    "RenderedCaption",
    "frequency_glyph",
]
