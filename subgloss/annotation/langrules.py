"""Per-language annotation policies.

Each policy can rewrite the token stream before matching, veto a candidate
match and hide a match from the annotation. :func:`rules_for_language` is the
one place mapping a language to its policy.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, List, Protocol, Sequence, runtime_checkable

import regex

from subgloss.language import Language

from .common import logger
from .models import DictionaryMatch, PosTag, TextToken


@runtime_checkable
class LangRules(Protocol):
    """Capabilities a language policy provides to the engine."""

    def filter_tokens(self, tokens: Sequence[TextToken]) -> List[TextToken]:
        """Rewrite tokens before searching for dictionary matches."""

    def is_valid_match(self, match: DictionaryMatch) -> bool:
        """Return False to reject a candidate match outright."""

    def is_ignored_match(self, match: DictionaryMatch, ignore_tags: AbstractSet[str]) -> bool:
        """Return True to keep a match out of the annotation."""


class DefaultLangRules:
    """Identity token filter, every match valid, nothing ignored."""

    key = "default"

    def filter_tokens(self, tokens: Sequence[TextToken]) -> List[TextToken]:
        return list(tokens)

    def is_valid_match(self, match: DictionaryMatch) -> bool:
        return True

    def is_ignored_match(self, match: DictionaryMatch, ignore_tags: AbstractSet[str]) -> bool:
        return False


KANA_ONLY_TAG = "kana"

_HIRAGANA_PATTERN = regex.compile(r"^[\p{Hiragana}ー]+$")
_KATAKANA_PATTERN = regex.compile(r"^[\p{Katakana}ー]+$")


class JapaneseLangRules(DefaultLangRules):
    """Japanese grammar tweaks on top of the default policy."""

    key = "japanese"

    # Conjunctive particles that belong to the verb they follow (見つけ-て).
    VERB_CONJUNCTIONS: frozenset[str] = frozenset({"て", "で", "ちゃ"})
    SHORT_HIRAGANA_LENGTH = 3

    def filter_tokens(self, tokens: Sequence[TextToken]) -> List[TextToken]:
        merged: List[TextToken] = []
        for token in tokens:
            previous = merged[-1] if merged else None
            if (
                previous is not None
                and previous.part_of_speech in (PosTag.AUX, PosTag.VERB)
                and token.part_of_speech is PosTag.SCONJ
                and token.text_form in self.VERB_CONJUNCTIONS
            ):
                merged[-1] = TextToken(
                    text_form=previous.text_form + token.text_form,
                    part_of_speech=previous.part_of_speech,
                    first_canonical_form=previous.first_canonical_form,
                    second_canonical_form=previous.second_canonical_form,
                )
                continue
            merged.append(token)
        return merged

    def is_valid_match(self, match: DictionaryMatch) -> bool:
        # Short hiragana runs are usually mis-grouped grammar, not vocabulary.
        text = match.text_form
        return not (
            len(text) <= self.SHORT_HIRAGANA_LENGTH
            and _HIRAGANA_PATTERN.match(text)
            and not match.has_verb
        )

    def is_ignored_match(self, match: DictionaryMatch, ignore_tags: AbstractSet[str]) -> bool:
        if KANA_ONLY_TAG not in ignore_tags or match.has_verb:
            return False
        text = match.text_form
        return bool(_HIRAGANA_PATTERN.match(text) or _KATAKANA_PATTERN.match(text))


_DEFAULT_RULES = DefaultLangRules()

_LANG_RULES: Dict[Language, LangRules] = {
    Language.JAPANESE: JapaneseLangRules(),
}


def rules_for_language(language: Language) -> LangRules:
    """Return the annotation policy registered for ``language``."""

    rules = _LANG_RULES.get(language)
    if rules is None:
        logger.debug("No specific annotation rules found for language %s", language.value)
        return _DEFAULT_RULES
    logger.debug("Using %s specific annotation rules", language.value)
    return rules


__all__ = [
    "DefaultLangRules",
    "JapaneseLangRules",
    "KANA_ONLY_TAG",
    "LangRules",
    "rules_for_language",
]
