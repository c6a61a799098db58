"""Dictionary-match annotation engine."""

from .dictionary import DictionaryIndex, load_jiji_dictionary, load_language_tags
from .errors import (
    AnnotationError,
    DictionaryLoadError,
    FrequencyGlyphError,
    TokenContractError,
    TokenizerUnavailable,
    UnsupportedWordSeparator,
)
from .filtering import FilterPolicy, filter_matches
from .highlight import apply_highlight, highlight_pattern
from .langrules import DefaultLangRules, JapaneseLangRules, LangRules, rules_for_language
from .matcher import DictionaryMatcher, LookupOptions
from .models import DictionaryEntry, DictionaryMatch, PosTag, TextToken
from .orchestrator import (
    AnnotationService,
    AnnotationSummary,
    CaptionAnnotation,
    CaptionAnnotator,
    CaptionStage,
    clean_caption_text,
)
from .rendering import (
    AnnotationRenderer,
    AssStyler,
    CaptionColorState,
    HighlightInstruction,
    RenderedCaption,
    frequency_glyph,
)
from .tokenizers import FugashiTokenizer, RegexTokenizer, Tokenizer, tokenizer_for_language

__all__ = [
    "AnnotationError",
    "AnnotationRenderer",
    "AnnotationService",
    "AnnotationSummary",
    "AssStyler",
    "CaptionAnnotation",
    "CaptionAnnotator",
    "CaptionColorState",
    "CaptionStage",
    "DefaultLangRules",
    "DictionaryEntry",
    "DictionaryIndex",
    "DictionaryLoadError",
    "DictionaryMatch",
    "DictionaryMatcher",
    "FilterPolicy",
    "FrequencyGlyphError",
    "FugashiTokenizer",
    "HighlightInstruction",
    "JapaneseLangRules",
    "LangRules",
    "LookupOptions",
    "PosTag",
    "RegexTokenizer",
    "RenderedCaption",
    "TextToken",
    "TokenContractError",
    "Tokenizer",
    "TokenizerUnavailable",
    "UnsupportedWordSeparator",
    "apply_highlight",
    "clean_caption_text",
    "filter_matches",
    "frequency_glyph",
    "highlight_pattern",
    "load_jiji_dictionary",
    "load_language_tags",
    "rules_for_language",
    "tokenizer_for_language",
]
