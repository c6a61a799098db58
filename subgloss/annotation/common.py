"""Shared constants and logger used across annotation modules."""

from __future__ import annotations

from subgloss import logging_manager as log_mgr

from .models import PosTag

logger = log_mgr.get_logger().getChild("annotation")

# Tokens that never take part in a dictionary match.
NOT_A_WORD_POS: frozenset[PosTag] = frozenset(
    {PosTag.PUNCT, PosTag.SYM, PosTag.NUM, PosTag.X}
)

# A match made only of these is pure grammar and is never annotated.
IGNORABLE_GRAMMAR_POS: frozenset[PosTag] = frozenset(
    {PosTag.PART, PosTag.DET, PosTag.CCONJ, PosTag.SCONJ, PosTag.AUX}
)

ANNOTATION_BULLET = "★ "
LEMMA_JOINER = ", "
SENSE_JOINER = " --- "
PRONUNCIATION_JOINER = ", "
ANNOTATION_LINE_BREAK = "\\N"

# Frequency rank N is shown as chr(CIRCLED_DIGIT_ONE + N - FREQUENCY_GLYPH_OFFSET).
CIRCLED_DIGIT_ONE = 0x2460
FREQUENCY_GLYPH_OFFSET = 1
MIN_CIRCLED_FREQUENCY = 1
MAX_CIRCLED_FREQUENCY = 20

__all__ = [
    "ANNOTATION_BULLET",
    "ANNOTATION_LINE_BREAK",
    "CIRCLED_DIGIT_ONE",
    "FREQUENCY_GLYPH_OFFSET",
    "IGNORABLE_GRAMMAR_POS",
    "LEMMA_JOINER",
    "MAX_CIRCLED_FREQUENCY",
    "MIN_CIRCLED_FREQUENCY",
    "NOT_A_WORD_POS",
    "PRONUNCIATION_JOINER",
    "SENSE_JOINER",
    "logger",
]
