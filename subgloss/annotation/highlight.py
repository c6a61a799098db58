"""Locate an annotated word inside the raw caption and colour it.

Captions keep their original markup, so a word may be split by a line break
marker (``\\N``, ``\\n``, ``<br>`` or a newline). Occurrences that fall inside
markup are not counted. A word found zero times or more than once is left
alone: with several candidates there is no telling which one was annotated.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

import regex

from .common import logger
from .errors import UnsupportedWordSeparator
from .rendering import AssStyler, HighlightInstruction

_LINE_BREAK = r"(?:\\N|\\n|\r?\n|<br\s*/?>)"
_MARKUP_PATTERN = regex.compile(r"\{[^}]*\}|<[^>]+>|\\[Nnh]")
# An ASS break marker ends in a letter, so it never forms a word boundary.
_WORD_START = r"(?:(?<=\\[Nnh])|\b)"
_WORD_END = r"(?:(?=\\[Nnh])|\b)"


def highlight_pattern(text: str, word_separator: str) -> "regex.Pattern[str]":
    """Build the pattern finding ``text`` across line breaks."""

    if not text:
        raise ValueError("Cannot highlight an empty string")
    if word_separator == "":
        body = f"{_LINE_BREAK}*".join(regex.escape(char) for char in text)
        return regex.compile(body)
    if word_separator == " ":
        words = [regex.escape(word) for word in text.split(" ") if word]
        body = rf"(?:\s|{_LINE_BREAK})*".join(words)
        return regex.compile(f"{_WORD_START}{body}{_WORD_END}")
    raise UnsupportedWordSeparator(
        f"Highlighting is not implemented for word separator {word_separator!r}"
    )


def _markup_spans(caption_text: str) -> List[Tuple[int, int]]:
    return [match.span() for match in _MARKUP_PATTERN.finditer(caption_text)]


def _inside_markup(start: int, end: int, spans: List[Tuple[int, int]]) -> bool:
    # Markup fully enclosed by the match (a line break) is fine; a partial overlap is not.
    for span_start, span_end in spans:
        overlaps = start < span_end and span_start < end
        enclosed = start <= span_start and span_end <= end
        if overlaps and not enclosed:
            return True
    return False


def find_unique_occurrence(
    caption_text: str, text: str, word_separator: str
) -> Optional[Tuple[int, int]]:
    """Return the span of the single occurrence of ``text`` or ``None``."""

    pattern = highlight_pattern(text, word_separator)
    spans = _markup_spans(caption_text)
    found = [
        match.span()
        for match in pattern.finditer(caption_text)
        if not _inside_markup(match.start(), match.end(), spans)
    ]
    if not found:
        logger.debug("Couldn't colorize word %s because it wasn't found in %s", text, caption_text)
        return None
    if len(found) > 1:
        logger.debug(
            "Couldn't colorize word %s because there are several matches in %s", text, caption_text
        )
        return None
    return found[0]


def apply_highlight(
    caption_text: str,
    instruction: HighlightInstruction,
    word_separator: str,
    styler: Optional[AssStyler] = None,
) -> Tuple[str, bool]:
    """Wrap the unique occurrence of ``instruction.text`` in colour tags."""

    span = find_unique_occurrence(caption_text, instruction.text, word_separator)
    if span is None:
        return caption_text, False
    start, end = span
    styler = styler or AssStyler()
    coloured = styler.color(caption_text[start:end], instruction.color)
    return caption_text[:start] + coloured + caption_text[end:], True


__all__ = ["apply_highlight", "find_unique_occurrence", "highlight_pattern"]
