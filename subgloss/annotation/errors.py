"""Exceptions raised by the annotation engine and its collaborators."""

from __future__ import annotations


class AnnotationError(RuntimeError):
    """Raised when a caption or subtitle file cannot be annotated."""


class TokenContractError(ValueError):
    """Raised when a tokenizer hands over a token that breaks its contract."""


class FrequencyGlyphError(ValueError):
    """Raised when a frequency rank has no circled-digit glyph."""


class UnsupportedWordSeparator(AnnotationError):
    """Raised when highlighting is asked for an unknown word separator."""


class DictionaryLoadError(AnnotationError):
    """Raised when a dictionary file cannot be read or indexed."""


class TokenizerUnavailable(AnnotationError):
    """Raised when the tokenizer for a language cannot be instantiated."""


__all__ = [
    "AnnotationError",
    "DictionaryLoadError",
    "FrequencyGlyphError",
    "TokenContractError",
    "TokenizerUnavailable",
    "UnsupportedWordSeparator",
]
