"""Greedy longest-span covering of a caption's tokens by dictionary entries."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence, Tuple

from .common import NOT_A_WORD_POS, logger
from .langrules import LangRules
from .models import DictionaryEntry, DictionaryMatch, TextToken


class DictionaryLookup(Protocol):
    def lookup_by_lemma(self, key: str) -> List[DictionaryEntry]: ...

    def lookup_by_pronunciation(self, key: str) -> List[DictionaryEntry]: ...


@dataclass(frozen=True, slots=True)
class LookupOptions:
    """Optional lookup steps tried after the three lemma-index keys.

    The pronunciation step searches the first-canonical join against the
    pronunciation index. It only runs when that join has at least
    ``pronunciation_min_length`` characters, so single kana do not collide
    with every word read the same way.
    """

    pronunciation_fallback: bool = False
    pronunciation_min_length: int = 2

    def __post_init__(self) -> None:
        if self.pronunciation_min_length < 1:
            raise ValueError("pronunciation_min_length must be at least 1")


class DictionaryMatcher:
    """Turn a token sequence into ordered, non-overlapping dictionary matches.

    At every position the longest prefix that resolves to dictionary entries
    wins and is never reconsidered.
    """

    def __init__(
        self,
        index: DictionaryLookup,
        word_separator: str,
        *,
        lookup: Optional[LookupOptions] = None,
        rules: Optional[LangRules] = None,
    ) -> None:
        self.index = index
        self.word_separator = word_separator
        self.lookup = lookup or LookupOptions()
        self.rules = rules

    def lookup_span(self, tokens: Sequence[TextToken]) -> Optional[DictionaryMatch]:
        """Return a match for exactly ``tokens`` or ``None``."""

        if not tokens:
            return None
        sep = self.word_separator
        first_canonical = sep.join(token.first_canonical_form for token in tokens)
        candidates: List[Tuple[str, str]] = [
            ("lemma", first_canonical),
            ("lemma", sep.join(token.text_form.lower() for token in tokens)),
            ("lemma", sep.join(token.second_canonical_form for token in tokens)),
        ]
        if (
            self.lookup.pronunciation_fallback
            and len(first_canonical) >= self.lookup.pronunciation_min_length
        ):
            candidates.append(("pronunciation", first_canonical))

        for index_name, key in candidates:
            if index_name == "lemma":
                entries = self.index.lookup_by_lemma(key)
            else:
                entries = self.index.lookup_by_pronunciation(key)
            if entries:
                return DictionaryMatch(tuple(tokens), tuple(entries), sep)
        return None

    def longest_match(self, tokens: Sequence[TextToken]) -> Optional[DictionaryMatch]:
        """Shrink the candidate from the right until a lookup succeeds."""

        for end in range(len(tokens), 0, -1):
            match = self.lookup_span(tokens[:end])
            if match is not None:
                return match
        return None

    def match(self, tokens: Sequence[TextToken]) -> List[DictionaryMatch]:
        matches: List[DictionaryMatch] = []
        position = 0
        total = len(tokens)
        while position < total:
            remaining = tokens[position:]
            if remaining[0].part_of_speech in NOT_A_WORD_POS:
                position += 1
                continue

            match = self.longest_match(remaining)
            if match is not None and self.rules is not None and not self.rules.is_valid_match(match):
                logger.debug("Match %s rejected by language rules", match.text_form)
                match = None
            if match is None:
                position += 1
                continue

            matches.append(match)
            position += len(match.tokens)
        return matches


__all__ = ["DictionaryLookup", "DictionaryMatcher", "LookupOptions"]
