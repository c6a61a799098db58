"""Text normalization helpers for subtitle captions."""

from __future__ import annotations

import html
import re

_WHITESPACE_PATTERN = re.compile(r"[ \t　]+")
_HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
_ASS_TAG_PATTERN = re.compile(r"\{[^}]*\}")
_LINE_BREAK_PATTERN = re.compile(r"\\N|\\n|<br\s*/?>|\r\n|\r|\n", re.IGNORECASE)
_DOT_RUN_PATTERN = re.compile(r"\.{2,}")


def replace_line_breaks(value: str, replacement: str) -> str:
    """Swap every ASS, HTML or plain line break for ``replacement``."""

    return _LINE_BREAK_PATTERN.sub(replacement, value)


def strip_markup(value: str) -> str:
    without_ass = _ASS_TAG_PATTERN.sub("", value)
    without_html = _HTML_TAG_PATTERN.sub("", without_ass)
    return html.unescape(without_html)


def collapse_dots(value: str) -> str:
    return _DOT_RUN_PATTERN.sub(".", value)


def collapse_whitespace(value: str) -> str:
    return _WHITESPACE_PATTERN.sub(" ", value).strip()


__all__ = [
    "collapse_dots",
    "collapse_whitespace",
    "replace_line_breaks",
    "strip_markup",
]
