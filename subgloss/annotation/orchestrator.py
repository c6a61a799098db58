"""Drive one caption, then one subtitle document, through the annotation stages.

A caption moves through ``Raw -> Cleaned -> Tokenized -> Merged -> Matched ->
Filtered -> Rendered -> Highlighted -> Committed`` without going back. Any
exception raised on the way aborts that caption only; the document keeps going.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from subgloss import logging_manager as log_mgr
from subgloss.config.settings import AnnotationConfig
from subgloss.language import Language, word_separator
from subgloss.subtitles.models import SubtitleDocument
from subgloss.subtitles.text import (
    collapse_dots,
    collapse_whitespace,
    replace_line_breaks,
    strip_markup,
)

from .common import logger
from .filtering import FilterPolicy, filter_matches
from .highlight import apply_highlight
from .langrules import LangRules, rules_for_language
from .matcher import DictionaryLookup, DictionaryMatcher, LookupOptions
from .models import DictionaryMatch
from .rendering import AnnotationRenderer, AssStyler, CaptionColorState, HighlightInstruction
from .tokenizers import Tokenizer


class CaptionStage(str, Enum):
    RAW = "raw"
    CLEANED = "cleaned"
    TOKENIZED = "tokenized"
    MERGED = "merged"
    MATCHED = "matched"
    FILTERED = "filtered"
    RENDERED = "rendered"
    HIGHLIGHTED = "highlighted"
    COMMITTED = "committed"


def clean_caption_text(text: str, separator: str) -> str:
    """Prepare raw caption text for the tokenizer."""

    cleaned = replace_line_breaks(text.strip(), separator)
    cleaned = strip_markup(cleaned)
    cleaned = collapse_dots(cleaned)
    return collapse_whitespace(cleaned)


@dataclass(slots=True)
class CaptionAnnotation:
    """Outcome of annotating one caption."""

    annotation: str
    highlighted_text: str
    matches: List[DictionaryMatch] = field(default_factory=list)
    highlights: List[HighlightInstruction] = field(default_factory=list)
    stage: CaptionStage = CaptionStage.RAW

    @property
    def has_annotation(self) -> bool:
        return bool(self.annotation)


class CaptionAnnotator:
    """Annotate single captions with a tokenizer and a dictionary."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        index: DictionaryLookup,
        language: Language,
        config: Optional[AnnotationConfig] = None,
        *,
        rules: Optional[LangRules] = None,
        styler: Optional[AssStyler] = None,
    ) -> None:
        self.config = config or AnnotationConfig()
        self.tokenizer = tokenizer
        self.language = language
        self.word_separator = word_separator(language)
        self.rules = rules or rules_for_language(language)
        self.styler = styler or AssStyler()
        self.matcher = DictionaryMatcher(
            index,
            self.word_separator,
            lookup=LookupOptions(
                pronunciation_fallback=self.config.pronunciation_fallback,
                pronunciation_min_length=self.config.pronunciation_min_length,
            ),
            rules=self.rules,
        )
        self.policy = FilterPolicy.build(
            ignore_words=self.config.ignore_words,
            ignore_tags=self.config.ignore_tags,
            ignore_frequencies=self.config.ignore_frequencies,
            part_of_speech_to_annotate=self.config.part_of_speech_to_annotate,
            rules=self.rules,
        )
        self.renderer = AnnotationRenderer(
            show_other_lemmas=self.config.display_other_lemma, styler=self.styler
        )

    def annotate(self, text: str) -> CaptionAnnotation:
        result = CaptionAnnotation(annotation="", highlighted_text=text)

        cleaned = clean_caption_text(text, self.word_separator)
        result.stage = CaptionStage.CLEANED
        if not cleaned:
            return result

        tokens = self.tokenizer.parse(cleaned)
        result.stage = CaptionStage.TOKENIZED

        tokens = self.rules.filter_tokens(tokens)
        result.stage = CaptionStage.MERGED

        matches = self.matcher.match(tokens)
        result.stage = CaptionStage.MATCHED

        result.matches = filter_matches(matches, self.policy)
        result.stage = CaptionStage.FILTERED
        if result.matches:
            logger.debug(
                "dictionary matches: %s", ", ".join(match.text_form for match in result.matches)
            )
        else:
            logger.debug("No dictionary match.")

        state = CaptionColorState(self.config.highlight_colors)
        rendered = self.renderer.render(result.matches, state)
        result.annotation = rendered.annotation
        result.highlights = list(rendered.highlights)
        result.stage = CaptionStage.RENDERED

        highlighted = text
        for instruction in rendered.highlights:
            highlighted, _ = apply_highlight(
                highlighted, instruction, self.word_separator, self.styler
            )
        result.highlighted_text = highlighted
        result.stage = CaptionStage.HIGHLIGHTED
        return result


@dataclass(slots=True)
class AnnotationSummary:
    captions: int = 0
    annotated: int = 0
    failed: int = 0

    def merge(self, other: "AnnotationSummary") -> None:
        self.captions += other.captions
        self.annotated += other.annotated
        self.failed += other.failed


class AnnotationService:
    """Annotate every caption of a :class:`SubtitleDocument` in place."""

    def __init__(self, annotator: CaptionAnnotator, *, dictionary_title: str = "") -> None:
        self.annotator = annotator
        self.dictionary_title = dictionary_title

    @property
    def config(self) -> AnnotationConfig:
        return self.annotator.config

    def annotate_document(self, document: SubtitleDocument) -> AnnotationSummary:
        summary = AnnotationSummary()
        for key, cue in document.captions():
            summary.captions += 1
            with log_mgr.log_context(caption_index=cue.index):
                try:
                    result = self.annotator.annotate(cue.as_text())
                except Exception:
                    summary.failed += 1
                    logger.exception(
                        "Caption %s could not be annotated; leaving it as is.",
                        cue.index,
                        extra={"event": "caption.failed"},
                    )
                    continue
                if not result.has_annotation:
                    continue
                document.insert_annotation(key, result.annotation)
                cue.replace_text(result.highlighted_text)
                result.stage = CaptionStage.COMMITTED
                summary.annotated += 1
        if summary.annotated and self.dictionary_title:
            document.add_credit(self.credit_text())
        return summary

    def credit_text(self) -> str:
        styler = self.annotator.styler
        return (
            "★ Definitions by "
            + styler.color(styler.bold("SUBGLOSS"), "#FFAAAA")
            + " using "
            + styler.color(self.dictionary_title, "#AAAAFF")
        )


__all__ = [
    "AnnotationService",
    "AnnotationSummary",
    "CaptionAnnotation",
    "CaptionAnnotator",
    "CaptionStage",
    "clean_caption_text",
]
