"""User and language policy applied to the raw match list."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import AbstractSet, FrozenSet, Iterable, List, Optional, Sequence

from .common import IGNORABLE_GRAMMAR_POS, logger
from .langrules import DefaultLangRules, LangRules
from .models import DictionaryMatch, PosTag


@dataclass(frozen=True)
class FilterPolicy:
    """Which matches stay out of the annotation."""

    ignore_words: FrozenSet[str] = frozenset()
    ignore_tags: FrozenSet[str] = frozenset()
    ignore_frequencies: FrozenSet[int] = frozenset()
    part_of_speech_to_annotate: Optional[FrozenSet[PosTag]] = None
    rules: LangRules = field(default_factory=DefaultLangRules)

    @classmethod
    def build(
        cls,
        *,
        ignore_words: Iterable[str] = (),
        ignore_tags: Iterable[str] = (),
        ignore_frequencies: Iterable[int] = (),
        part_of_speech_to_annotate: Optional[Iterable[str | PosTag]] = None,
        rules: Optional[LangRules] = None,
    ) -> "FilterPolicy":
        pos_filter = None
        if part_of_speech_to_annotate is not None:
            pos_filter = frozenset(PosTag.parse(value) for value in part_of_speech_to_annotate)
        return cls(
            ignore_words=frozenset(word for word in ignore_words if word),
            ignore_tags=frozenset(ignore_tags),
            ignore_frequencies=frozenset(int(value) for value in ignore_frequencies),
            part_of_speech_to_annotate=pos_filter,
            rules=rules or DefaultLangRules(),
        )


def _ignored_tag(match: DictionaryMatch, ignore_tags: AbstractSet[str]) -> Optional[str]:
    hits = sorted(match.tags & ignore_tags)
    return hits[0] if hits else None


def _is_pure_grammar(match: DictionaryMatch) -> bool:
    return all(token.part_of_speech in IGNORABLE_GRAMMAR_POS for token in match.tokens)


def _has_ignored_frequency(match: DictionaryMatch, ignore_frequencies: AbstractSet[int]) -> bool:
    frequencies = match.frequencies
    if not frequencies or not ignore_frequencies:
        return False
    return all(value is not None and value in ignore_frequencies for value in frequencies)


def drop_reason(match: DictionaryMatch, policy: FilterPolicy) -> Optional[str]:
    """Return why ``match`` is filtered out, or ``None`` when it survives."""

    tag = _ignored_tag(match, policy.ignore_tags)
    if tag is not None:
        logger.debug(
            "%s ignored because tag %s is present in ignoreTags config", match.text_form, tag
        )
        return f"tag:{tag}"
    if _is_pure_grammar(match):
        return "grammar"
    if policy.part_of_speech_to_annotate is not None and not any(
        token.part_of_speech in policy.part_of_speech_to_annotate for token in match.tokens
    ):
        return "part_of_speech"
    if any(form in policy.ignore_words for form in match.forms):
        logger.debug("%s ignored because it is present in ignoreWords config", match.text_form)
        return "ignore_word"
    if _has_ignored_frequency(match, policy.ignore_frequencies):
        return "frequency"
    if not policy.rules.is_valid_match(match):
        return "invalid"
    if policy.rules.is_ignored_match(match, policy.ignore_tags):
        return "language_rules"
    return None


def filter_matches(matches: Sequence[DictionaryMatch], policy: FilterPolicy) -> List[DictionaryMatch]:
    """Keep, in order, the matches no policy rule drops."""

    return [match for match in matches if drop_reason(match, policy) is None]


__all__ = ["FilterPolicy", "drop_reason", "filter_matches"]
